"""Pure read functions over a game entry cache snapshot."""
from typing import Dict, List, Mapping, Optional

from ..models import GameEntry, GameEntryStatus

Snapshot = Mapping[int, GameEntry]


def select_all_game_entries(snapshot: Snapshot) -> List[GameEntry]:
    return list(snapshot.values())


def select_game_entry(snapshot: Snapshot, entry_id: int) -> Optional[GameEntry]:
    return snapshot.get(entry_id)


def select_entries_for_game(snapshot: Snapshot, game_id: int) -> List[GameEntry]:
    return [entry for entry in snapshot.values() if entry.game_id == game_id]


def select_entries_for_user(snapshot: Snapshot, user_id: int) -> List[GameEntry]:
    return [entry for entry in snapshot.values() if entry.user_id == user_id]


def select_entries_by_status(snapshot: Snapshot, status: GameEntryStatus) -> List[GameEntry]:
    return [entry for entry in snapshot.values() if entry.status == status]


def select_status_counts(snapshot: Snapshot) -> Dict[GameEntryStatus, int]:
    """Count entries per status. Statuses with no entries are absent."""
    counts: Dict[GameEntryStatus, int] = {}
    for entry in snapshot.values():
        counts[entry.status] = counts.get(entry.status, 0) + 1
    return counts
