"""Game entry CRUD endpoints."""
from typing import List, Optional

from ..models import GameEntry, entries_from_list
from .client import ApiClient
from .endpoints import GAME_ENTRIES_PATH, game_entry_path


class GameEntriesApi:

    def __init__(self, client: ApiClient):
        self.client = client

    async def list_entries(self, page: Optional[int] = None, query: Optional[str] = None,
                           user_id: Optional[int] = None, game_id: Optional[int] = None) -> List[GameEntry]:
        """
        Fetch game entries, optionally filtered.

        Args:
            page: Page number for paginated listings.
            query: Free text search.
            user_id: Only entries of this user.
            game_id: Only entries for this game.

        Returns:
            Entries in server order.
        """
        params = {
            key: value
            for key, value in (('page', page), ('query', query), ('user_id', user_id), ('game_id', game_id))
            if value is not None
        }
        response = await self.client.get(GAME_ENTRIES_PATH, params=params or None)
        data = response.data
        # Paginated listings wrap the entries in "results"
        if isinstance(data, dict):
            data = data.get('results', [])
        return entries_from_list(data or [])

    async def create_entry(self, entry: GameEntry) -> GameEntry:
        response = await self.client.post(GAME_ENTRIES_PATH, json=entry.to_payload(include_id=False))
        return GameEntry.from_dict(response.data)

    async def update_entry(self, entry: GameEntry) -> None:
        # The response body is not used; callers keep the entry they sent
        await self.client.put(game_entry_path(entry.id), json=entry.to_payload())

    async def delete_entry(self, entry_id: int) -> None:
        await self.client.delete(game_entry_path(entry_id))
