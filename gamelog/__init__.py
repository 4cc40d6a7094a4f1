# gamelog package
# Client-side data layer for the game library tracker: request pipeline,
# token refresh, entity cache and asynchronous actions.

from .app import GameLogApp, create_app
from .models import CredentialPair, GameEntry, GameEntryStatus, Game, User, UserStatistics

__all__ = [
    'GameLogApp',
    'create_app',
    'CredentialPair',
    'GameEntry',
    'GameEntryStatus',
    'Game',
    'User',
    'UserStatistics',
]
