"""Asynchronous actions and their wiring to the caches."""

from .actions import ActionBus, ActionEvent, ActionPhase, ActionResult, run_action
from .game_entry_actions import GameEntryActions, bind_game_entry_cache
from .user_actions import UserActions, bind_user_caches

__all__ = [
    'ActionBus',
    'ActionEvent',
    'ActionPhase',
    'ActionResult',
    'run_action',
    'GameEntryActions',
    'bind_game_entry_cache',
    'UserActions',
    'bind_user_caches',
]
