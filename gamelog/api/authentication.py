"""Authentication endpoints: register, login, logout."""
import logging
from typing import Any, Dict

from ..models import CredentialPair
from .client import ApiClient
from .endpoints import LOGIN_PATH, REGISTER_PATH

logger = logging.getLogger(__name__)


class AuthenticationApi:
    """Login/registration calls. Login stores the returned pair."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def register(self, email: str, username: str, password: str) -> Dict[str, Any]:
        """Create an account. Does not log in."""
        response = await self.client.post(REGISTER_PATH, json={
            'email': email,
            'username': username,
            'password': password,
        })
        logger.info(f"[Auth] Registered account {username}")
        return response.data

    async def login(self, email: str, password: str) -> CredentialPair:
        response = await self.client.post(LOGIN_PATH, json={'email': email, 'password': password})
        pair = CredentialPair.from_dict(response.data)
        self.client.credential_store.set(pair)
        logger.info("[Auth] Logged in")
        return pair

    def logout(self) -> None:
        """Forget the session. There is no server call."""
        self.client.credential_store.clear()
        logger.info("[Auth] Logged out")
