"""
Single-flight token refresh.

When a request comes back 401 the API client parks it here. The first parked
request starts one refresh; everything that 401s while that refresh is
running just waits for its outcome. On success each waiter gets the new pair
and replays its own request. On failure the session is cleared and every
waiter fails with SessionExpiredError. If the stored pair changes while the
refresh is running (logout, new login) the renewed tokens are dropped and the
waiters fail the same way.

Only the coordinator touches the waiter queue.
"""
import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from ..errors import ApiError, SessionExpiredError
from ..models import CredentialPair
from .credentials import CredentialStore

logger = logging.getLogger(__name__)

RefreshCall = Callable[[str], Awaitable[CredentialPair]]


class RefreshState(Enum):
    IDLE = 'idle'
    REFRESHING = 'refreshing'


class RefreshCoordinator:
    """Serializes token refreshes and releases queued requests together"""

    def __init__(self, credential_store: CredentialStore, refresh_call: RefreshCall):
        """
        Args:
            credential_store: Store holding the current pair.
            refresh_call: Coroutine function exchanging a refresh token for a
                new pair. Must raise ApiError on failure.
        """
        self.credential_store = credential_store
        self.refresh_call = refresh_call
        self.state = RefreshState.IDLE
        self.refresh_count = 0
        self._waiters: List[asyncio.Future] = []
        self._task: Optional[asyncio.Task] = None
        self._expired_listeners: List[Callable[[SessionExpiredError], None]] = []

    @property
    def pending_count(self) -> int:
        return len(self._waiters)

    def on_session_expired(self, listener: Callable[[SessionExpiredError], None]) -> None:
        """Register a callback run once per failed refresh (e.g. to show the login screen)."""
        self._expired_listeners.append(listener)

    async def wait_for_credentials(self) -> CredentialPair:
        """
        Queue the caller until the current (or a new) refresh settles.

        Returns:
            The renewed credential pair.

        Raises:
            SessionExpiredError: If the refresh failed.
        """
        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)

        if self.state is RefreshState.IDLE:
            self.state = RefreshState.REFRESHING
            self._task = asyncio.ensure_future(self._run_refresh())
        else:
            logger.debug(f"[Auth] Refresh in progress, {len(self._waiters)} request(s) queued")

        return await waiter

    async def _run_refresh(self):
        pair = self.credential_store.get()
        try:
            if pair is None or not pair.refresh:
                raise SessionExpiredError("No refresh token available")
            logger.info("[Auth] Access token rejected (401), refreshing")
            self.refresh_count += 1
            new_pair = await self.refresh_call(pair.refresh)
        except ApiError as e:
            logger.warning(f"[Auth] Token refresh failed: {e}")
            self._fail(e, pair)
            return
        except Exception as e:
            # Not a session problem; hand the bug to every queued caller
            logger.error(f"[Auth] Unexpected error during token refresh: {e}", exc_info=True)
            for waiter in self._drain():
                if not waiter.done():
                    waiter.set_exception(e)
            return

        if self.credential_store.get() != pair:
            # Logged out (or in again) while the refresh was running
            logger.info("[Auth] Session changed during token refresh, discarding new tokens")
            self._abandon()
            return

        self.credential_store.set(new_pair)
        logger.info(f"[Auth] Refreshed access token, replaying {len(self._waiters)} request(s)")
        self._release(new_pair)

    def _drain(self) -> List[asyncio.Future]:
        # Back to IDLE before any waiter resumes
        waiters, self._waiters = self._waiters, []
        self.state = RefreshState.IDLE
        self._task = None
        return waiters

    def _release(self, pair: CredentialPair):
        for waiter in self._drain():
            if not waiter.done():
                waiter.set_result(pair)

    def _abandon(self):
        for waiter in self._drain():
            if not waiter.done():
                waiter.set_exception(SessionExpiredError("Session ended during token refresh"))

    def _fail(self, cause: ApiError, pair: Optional[CredentialPair]):
        # A session started during the refresh is not ours to clear
        if self.credential_store.get() == pair:
            self.credential_store.clear()
        waiters = self._drain()

        for waiter in waiters:
            if waiter.done():
                continue
            error = SessionExpiredError(detail=cause.detail)
            error.__cause__ = cause
            waiter.set_exception(error)

        expired = SessionExpiredError(detail=cause.detail)
        expired.__cause__ = cause
        for listener in self._expired_listeners:
            listener(expired)
