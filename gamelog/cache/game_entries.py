"""
Normalized game entry cache.

Maps entry id -> GameEntry. Every mutation builds a new dict and publishes it
as a read-only snapshot, so a snapshot a consumer is holding never changes
underneath it and removed keys are really gone.

The four reconciliation operations map onto the fulfilled game entry actions:

    replace_all  <- list fetch
    upsert       <- create
    overwrite    <- update (with the entry that was sent)
    evict        <- delete
"""
import logging
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping

from ..models import GameEntry

logger = logging.getLogger(__name__)

Snapshot = Mapping[int, GameEntry]
Listener = Callable[[Snapshot], None]


class GameEntryCache:
    """In-memory store of game entries keyed by id"""

    def __init__(self):
        self._snapshot: Snapshot = MappingProxyType({})
        self._listeners: List[Listener] = []

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    def __len__(self) -> int:
        return len(self._snapshot)

    def __contains__(self, entry_id: int) -> bool:
        return entry_id in self._snapshot

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener with every new snapshot. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, entries: Dict[int, GameEntry]):
        self._snapshot = MappingProxyType(entries)
        for listener in list(self._listeners):
            listener(self._snapshot)

    def replace_all(self, entries: Iterable[GameEntry]) -> None:
        """Make the cache exactly the given entries. Entries not listed are dropped."""
        new_entries = {}
        for entry in entries:
            _require_id(entry)
            new_entries[entry.id] = entry
        dropped = len(set(self._snapshot) - set(new_entries))
        logger.debug(f"[Cache] Replaced all entries: {len(new_entries)} kept, {dropped} dropped")
        self._publish(new_entries)

    def upsert(self, entry: GameEntry) -> None:
        """Insert entry under its id, replacing any existing value."""
        _require_id(entry)
        self._publish({**self._snapshot, entry.id: entry})

    def overwrite(self, entry_id: int, entry: GameEntry) -> None:
        """Write entry under entry_id whether or not the id is already cached."""
        self._publish({**self._snapshot, entry_id: entry})

    def evict(self, entry_id: int) -> None:
        """Remove entry_id. Removing an absent id does nothing."""
        if entry_id not in self._snapshot:
            return
        new_entries = dict(self._snapshot)
        del new_entries[entry_id]
        self._publish(new_entries)


def _require_id(entry: GameEntry):
    if entry.id is None:
        raise ValueError(f"Cannot cache a game entry without an id (game_id={entry.game_id})")
