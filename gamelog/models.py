"""
Domain objects shared by the request pipeline, the cache and the actions.

All of these are plain value objects. Game entries are frozen so that a
snapshot handed out by the cache can never be edited in place; edits go
through dataclasses.replace() and are applied by dispatching an update.
"""
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, TypeVar


class GameEntryStatus(IntEnum):
    """Library status of a game entry. The wire format is the integer value."""
    WISHLIST = 0
    BACKLOG = 1
    PLAYING = 2
    COMPLETED = 3
    DROPPED = 4

    @property
    def label(self) -> str:
        # WISHLIST -> Wishlist
        return self.name.capitalize()


MIN_RATING = 0
MAX_RATING = 10


@dataclass(frozen=True)
class CredentialPair:
    """Access/refresh token pair. Tokens are opaque."""
    access: str
    refresh: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CredentialPair':
        return cls(access=data['access'], refresh=data['refresh'])


@dataclass(frozen=True)
class GameEntry:
    """A game in the user's library"""
    id: Optional[int]  # None until the server assigns one
    game_id: int
    user_id: Optional[int]
    status: GameEntryStatus
    rating: Optional[int] = None
    platforms: FrozenSet[str] = field(default_factory=frozenset)
    review: Optional[str] = None
    # Display fields echoed by the server, never sent back
    game_name: Optional[str] = None
    game_cover: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'status', GameEntryStatus(self.status))
        object.__setattr__(self, 'platforms', frozenset(self.platforms or ()))
        if self.rating is not None and not MIN_RATING <= self.rating <= MAX_RATING:
            raise ValueError(f"rating must be between {MIN_RATING} and {MAX_RATING}, got {self.rating}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameEntry':
        return cls(
            id=data.get('id'),
            game_id=data['game_id'],
            user_id=data.get('user_id'),
            status=data['status'],
            rating=data.get('rating'),
            platforms=data.get('platforms') or (),
            review=data.get('review'),
            game_name=data.get('game_name'),
            game_cover=data.get('game_cover'),
        )

    def to_payload(self, include_id: bool = True) -> Dict[str, Any]:
        """Serialize for a create (include_id=False) or update request body."""
        payload = {
            'game_id': self.game_id,
            'user_id': self.user_id,
            'status': int(self.status),
            'rating': self.rating,
            'platforms': sorted(self.platforms),
            'review': self.review,
        }
        if include_id:
            payload = {'id': self.id, **payload}
        return payload

    def edit(self, **changes) -> 'GameEntry':
        """Return a copy with the given fields changed."""
        return replace(self, **changes)


@dataclass(frozen=True)
class Game:
    """Catalog metadata for a game (not a library entry)"""
    id: int
    name: str
    cover: Optional[str] = None
    platforms: List[str] = field(default_factory=list)
    genres: List[str] = field(default_factory=list)
    release_date: Optional[str] = None
    summary: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Game':
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            cover=data.get('cover'),
            platforms=list(data.get('platforms') or []),
            genres=list(data.get('genres') or []),
            release_date=data.get('release_date'),
            summary=data.get('summary'),
        )


@dataclass(frozen=True)
class User:
    id: int
    username: str
    email: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        return cls(id=data['id'], username=data.get('username', ''), email=data.get('email'))


K = TypeVar('K')


def _int_keys(data: Optional[Dict[str, Any]]) -> Dict[int, int]:
    return {int(k): int(v) for k, v in (data or {}).items()}


@dataclass(frozen=True)
class UserStatistics:
    """
    Aggregate statistics for the logged in user.

    Distributions are sparse: a key that is not present has a count of zero.
    Use count() instead of indexing to get that behaviour.
    """
    average_rating: float = 0.0
    game_status_distribution: Dict[GameEntryStatus, int] = field(default_factory=dict)
    game_genre_distribution: Dict[str, int] = field(default_factory=dict)
    platform_distribution: Dict[str, int] = field(default_factory=dict)
    play_year_distribution: Dict[int, int] = field(default_factory=dict)
    release_year_distribution: Dict[int, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UserStatistics':
        # JSON object keys are always strings; restore enum and int keys
        status_distribution = {
            GameEntryStatus(int(k)): int(v)
            for k, v in (data.get('game_status_distribution') or {}).items()
        }
        return cls(
            average_rating=float(data.get('average_rating') or 0.0),
            game_status_distribution=status_distribution,
            game_genre_distribution={str(k): int(v) for k, v in (data.get('game_genre_distribution') or {}).items()},
            platform_distribution={str(k): int(v) for k, v in (data.get('platform_distribution') or {}).items()},
            play_year_distribution=_int_keys(data.get('play_year_distribution')),
            release_year_distribution=_int_keys(data.get('release_year_distribution')),
        )

    @staticmethod
    def count(distribution: Dict[K, int], key: K) -> int:
        return distribution.get(key, 0)

    def status_count(self, status: GameEntryStatus) -> int:
        return self.count(self.game_status_distribution, status)

    def total_entries(self) -> int:
        return sum(self.game_status_distribution.values())


def entries_from_list(items: Iterable[Dict[str, Any]]) -> List[GameEntry]:
    return [GameEntry.from_dict(item) for item in items]
