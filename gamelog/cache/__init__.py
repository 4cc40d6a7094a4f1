"""Client-side caches."""

from .game_entries import GameEntryCache
from .selectors import (
    select_all_game_entries,
    select_game_entry,
    select_entries_for_game,
    select_entries_for_user,
    select_entries_by_status,
    select_status_counts,
)
from .values import ValueCache

__all__ = [
    "GameEntryCache",
    "ValueCache",
    "select_all_game_entries",
    "select_game_entry",
    "select_entries_for_game",
    "select_entries_for_user",
    "select_entries_by_status",
    "select_status_counts",
]
