"""Game entry actions and their reconciliation into the entry cache."""
import asyncio
from typing import List, Optional

from ..api.game_entries import GameEntriesApi
from ..cache.game_entries import GameEntryCache
from ..models import GameEntry
from .actions import ActionBus, ActionPhase, ActionResult, run_action

GET_GAME_ENTRIES = 'gameEntry/getGameEntries'
CREATE_GAME_ENTRY = 'gameEntry/createGameEntry'
UPDATE_GAME_ENTRY = 'gameEntry/updateGameEntry'
DELETE_GAME_ENTRY = 'gameEntry/deleteGameEntry'


class GameEntryActions:
    """Dispatchers for the game entry CRUD actions"""

    def __init__(self, api: GameEntriesApi, bus: ActionBus):
        self.api = api
        self.bus = bus

    def get_game_entries(self, page: Optional[int] = None, query: Optional[str] = None,
                         user_id: Optional[int] = None,
                         game_id: Optional[int] = None) -> 'asyncio.Task[ActionResult[List[GameEntry]]]':
        arg = {'page': page, 'query': query, 'user_id': user_id, 'game_id': game_id}
        return run_action(self.bus, GET_GAME_ENTRIES, arg,
                          lambda: self.api.list_entries(page=page, query=query, user_id=user_id, game_id=game_id))

    def create_game_entry(self, entry: GameEntry) -> 'asyncio.Task[ActionResult[GameEntry]]':
        return run_action(self.bus, CREATE_GAME_ENTRY, entry, lambda: self.api.create_entry(entry))

    def update_game_entry(self, entry: GameEntry) -> 'asyncio.Task[ActionResult[None]]':
        return run_action(self.bus, UPDATE_GAME_ENTRY, entry, lambda: self.api.update_entry(entry))

    def delete_game_entry(self, entry_id: int) -> 'asyncio.Task[ActionResult[None]]':
        return run_action(self.bus, DELETE_GAME_ENTRY, entry_id, lambda: self.api.delete_entry(entry_id))


def bind_game_entry_cache(bus: ActionBus, cache: GameEntryCache) -> None:
    """Apply fulfilled game entry actions to the cache, in arrival order."""
    bus.subscribe(GET_GAME_ENTRIES, ActionPhase.FULFILLED,
                  lambda event: cache.replace_all(event.payload))
    bus.subscribe(CREATE_GAME_ENTRY, ActionPhase.FULFILLED,
                  lambda event: cache.upsert(event.payload))
    # Update has no response body; the submitted entry is what gets cached
    bus.subscribe(UPDATE_GAME_ENTRY, ActionPhase.FULFILLED,
                  lambda event: cache.overwrite(event.arg.id, event.arg))
    bus.subscribe(DELETE_GAME_ENTRY, ActionPhase.FULFILLED,
                  lambda event: cache.evict(event.arg))
