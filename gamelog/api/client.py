"""
Shared API client for the gamelog REST backend.

One ApiClient is created at boot (see gamelog.app) and lives for the whole
process. It attaches the bearer token to every non-public request and, when
the server answers 401, parks the request on the RefreshCoordinator and
replays it once with the renewed token.
"""
import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from ..auth.credentials import CredentialStore
from ..auth.refresh import RefreshCoordinator
from ..errors import ServerError, SessionExpiredError, error_from_response
from ..models import CredentialPair
from .endpoints import REFRESH_PATH, is_public_path
from .transport import AiohttpTransport, ApiRequest, ApiResponse, Transport

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER = 'Authorization'


def _has_authorization(headers: Dict[str, str]) -> bool:
    return any(key.lower() == AUTHORIZATION_HEADER.lower() for key in headers)


class ApiClient:
    """Authenticated request pipeline"""

    def __init__(self, base_url: str, credential_store: CredentialStore, transport: Optional[Transport] = None):
        self.base_url = base_url.rstrip('/')
        self.credential_store = credential_store
        self.transport = transport or AiohttpTransport()
        self.refresh_coordinator = RefreshCoordinator(credential_store, self._refresh_tokens)

    def get_full_url(self, path: str) -> str:
        return self.base_url + path

    def is_public(self, request: ApiRequest) -> bool:
        return request.public or is_public_path(request.path)

    def should_attach_token(self, request: ApiRequest, pair: Optional[CredentialPair]) -> bool:
        return pair is not None and not self.is_public(request) and not _has_authorization(request.headers)

    def _authorize(self, request: ApiRequest, pair: Optional[CredentialPair]) -> ApiRequest:
        """Copy of request with the bearer header attached where allowed."""
        headers = dict(request.headers)
        if self.should_attach_token(request, pair):
            headers[AUTHORIZATION_HEADER] = f"Bearer {pair.access}"
        return replace(request, headers=headers)

    async def request(self, request: ApiRequest) -> ApiResponse:
        """
        Send a request through the pipeline.

        Returns:
            The 2xx response (after a transparent refresh and replay if needed).

        Raises:
            NetworkError: No response was received.
            SessionExpiredError: The request needed a refresh and the refresh failed.
            AuthenticationError: 401 that a refresh cannot fix.
            ValidationError: Any other 4xx.
            ServerError: 5xx.
        """
        pair = self.credential_store.get()
        outgoing = self._authorize(request, pair)
        url = self.get_full_url(request.path)

        response = await self.transport.send(outgoing, url)
        logger.debug(f"[API] {request.method} {request.path} -> {response.status}")

        # Only requests we attached our own token to can be fixed by a refresh
        if response.status == 401 and self.should_attach_token(request, pair):
            response = await self._replay_after_refresh(request, url, pair.access)

        if not response.ok:
            raise error_from_response(response)
        return response

    async def _replay_after_refresh(self, request: ApiRequest, url: str, sent_access: str) -> ApiResponse:
        current = self.credential_store.get()
        if current is None:
            # Logged out, or an earlier refresh already failed
            raise SessionExpiredError()
        if current.access != sent_access:
            # Tokens were rotated while this request was in flight
            logger.debug(f"[API] {request.path} used a stale token, replaying without refresh")
            pair = current
        else:
            pair = await self.refresh_coordinator.wait_for_credentials()

        response = await self.transport.send(self._authorize(request, pair), url)
        logger.debug(f"[API] replay {request.method} {request.path} -> {response.status}")
        return response

    async def _refresh_tokens(self, refresh_token: str) -> CredentialPair:
        response = await self.post(REFRESH_PATH, json={'refresh': refresh_token})
        data = response.data
        if not isinstance(data, dict) or not data.get('access'):
            raise ServerError("Malformed token refresh response", status=response.status, detail=data)
        # Servers without token rotation only return a new access token
        return CredentialPair(access=data['access'], refresh=data.get('refresh') or refresh_token)

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> ApiResponse:
        return await self.request(ApiRequest('GET', path, params=params, **kwargs))

    async def post(self, path: str, json: Any = None, **kwargs) -> ApiResponse:
        return await self.request(ApiRequest('POST', path, json=json, **kwargs))

    async def put(self, path: str, json: Any = None, **kwargs) -> ApiResponse:
        return await self.request(ApiRequest('PUT', path, json=json, **kwargs))

    async def delete(self, path: str, **kwargs) -> ApiResponse:
        return await self.request(ApiRequest('DELETE', path, **kwargs))

    async def close(self) -> None:
        await self.transport.close()
