"""Game catalog endpoints."""
from ..models import Game
from .client import ApiClient
from .endpoints import game_path


class GamesApi:

    def __init__(self, client: ApiClient):
        self.client = client

    async def get_game(self, game_id: int) -> Game:
        """Fetch catalog metadata (platforms, genres, cover) for a game."""
        response = await self.client.get(game_path(game_id))
        return Game.from_dict(response.data)
