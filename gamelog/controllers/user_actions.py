"""Session, profile and catalog actions."""
import asyncio
import logging

from ..api.authentication import AuthenticationApi
from ..api.games import GamesApi
from ..api.users import UsersApi
from ..cache.values import ValueCache
from ..models import CredentialPair, Game, User, UserStatistics
from .actions import ActionBus, ActionEvent, ActionPhase, ActionResult, run_action

logger = logging.getLogger(__name__)

LOGIN = 'user/login'
REGISTER = 'user/register'
LOGOUT = 'user/logout'
GET_SELF_USER = 'user/getSelfUser'
GET_SELF_STATISTICS = 'userStatistics/getSelfUserStatistics'
GET_GAME = 'game/getGame'


class UserActions:

    def __init__(self, auth_api: AuthenticationApi, users_api: UsersApi, games_api: GamesApi, bus: ActionBus):
        self.auth_api = auth_api
        self.users_api = users_api
        self.games_api = games_api
        self.bus = bus

    def login(self, email: str, password: str) -> 'asyncio.Task[ActionResult[CredentialPair]]':
        return run_action(self.bus, LOGIN, email, lambda: self.auth_api.login(email, password))

    def register(self, email: str, username: str, password: str) -> 'asyncio.Task[ActionResult[CredentialPair]]':
        """Register, then log in with the same credentials."""
        async def register_and_login():
            await self.auth_api.register(email, username, password)
            return await self.auth_api.login(email, password)

        return run_action(self.bus, REGISTER, email, register_and_login)

    def logout(self) -> None:
        """Clear the session. Synchronous; only a FULFILLED event is emitted."""
        self.auth_api.logout()
        self.bus.emit(ActionEvent(LOGOUT, ActionPhase.FULFILLED))

    def get_self_user(self) -> 'asyncio.Task[ActionResult[User]]':
        return run_action(self.bus, GET_SELF_USER, None, self.users_api.get_self_user)

    def get_self_statistics(self) -> 'asyncio.Task[ActionResult[UserStatistics]]':
        return run_action(self.bus, GET_SELF_STATISTICS, None, self.users_api.get_self_statistics)

    def get_game(self, game_id: int) -> 'asyncio.Task[ActionResult[Game]]':
        """Catalog lookup; nothing is cached."""
        return run_action(self.bus, GET_GAME, game_id, lambda: self.games_api.get_game(game_id))


def bind_user_caches(bus: ActionBus, user_cache: ValueCache, statistics_cache: ValueCache) -> None:
    bus.subscribe(GET_SELF_USER, ActionPhase.FULFILLED, lambda event: user_cache.set(event.payload))
    bus.subscribe(GET_SELF_STATISTICS, ActionPhase.FULFILLED, lambda event: statistics_cache.set(event.payload))

    def clear_session(event: ActionEvent):
        user_cache.clear()
        statistics_cache.clear()
        logger.debug("[Actions] Cleared user caches")

    bus.subscribe(LOGOUT, ActionPhase.FULFILLED, clear_session)
