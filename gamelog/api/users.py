"""Endpoints for the logged in user."""
from ..models import User, UserStatistics
from .client import ApiClient
from .endpoints import SELF_STATISTICS_PATH, SELF_USER_PATH


class UsersApi:

    def __init__(self, client: ApiClient):
        self.client = client

    async def get_self_user(self) -> User:
        response = await self.client.get(SELF_USER_PATH)
        return User.from_dict(response.data)

    async def get_self_statistics(self) -> UserStatistics:
        response = await self.client.get(SELF_STATISTICS_PATH)
        return UserStatistics.from_dict(response.data or {})
