"""
Application container.

Builds the data layer once at boot: one CredentialStore, one ApiClient (the
shared request pipeline), one ActionBus and the caches bound to it. The
container is created explicitly and passed to whoever needs it; nothing here
is a module level global, so tests build their own with a fake transport.
"""
import logging
from typing import Optional

from .api import ApiClient, AuthenticationApi, GameEntriesApi, GamesApi, Transport, UsersApi
from .auth.credentials import CredentialStore
from .cache import GameEntryCache, ValueCache
from .controllers import (
    ActionBus,
    GameEntryActions,
    UserActions,
    bind_game_entry_cache,
    bind_user_caches,
)
from .errors import SessionExpiredError
from .models import User, UserStatistics
from .utils.settings import get_api_base_url

logger = logging.getLogger(__name__)


class GameLogApp:
    """Owns the request pipeline, the caches and the action dispatchers"""

    def __init__(self, client: ApiClient, bus: Optional[ActionBus] = None):
        self.client = client
        self.bus = bus or ActionBus()

        self.game_entries = GameEntryCache()
        self.current_user: ValueCache[User] = ValueCache()
        self.statistics: ValueCache[UserStatistics] = ValueCache()

        self.auth_api = AuthenticationApi(client)
        self.game_entries_api = GameEntriesApi(client)
        self.games_api = GamesApi(client)
        self.users_api = UsersApi(client)

        self.entry_actions = GameEntryActions(self.game_entries_api, self.bus)
        self.user_actions = UserActions(self.auth_api, self.users_api, self.games_api, self.bus)

        bind_game_entry_cache(self.bus, self.game_entries)
        bind_user_caches(self.bus, self.current_user, self.statistics)
        client.refresh_coordinator.on_session_expired(self._on_session_expired)

    @property
    def credential_store(self) -> CredentialStore:
        return self.client.credential_store

    @property
    def is_authenticated(self) -> bool:
        return self.credential_store.is_authenticated

    def _on_session_expired(self, error: SessionExpiredError):
        logger.warning(f"[Auth] {error.message}")
        self.current_user.clear()
        self.statistics.clear()

    async def close(self) -> None:
        await self.client.close()


def create_app(base_url: Optional[str] = None, token_file: Optional[str] = None,
               transport: Optional[Transport] = None) -> GameLogApp:
    """
    Boot the data layer.

    Args:
        base_url: API base URL. Resolved from env/settings when omitted.
        token_file: Where to persist credentials. Defaults to TOKEN_JSON.
        transport: HTTP transport; aiohttp when omitted.
    """
    resolved_url = base_url or get_api_base_url()
    credential_store = CredentialStore(token_file)
    client = ApiClient(resolved_url, credential_store, transport)
    logger.info(f"[App] API client ready for {resolved_url}")
    return GameLogApp(client)
