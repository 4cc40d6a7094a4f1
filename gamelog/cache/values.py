"""Single value cache for per-session data (current user, statistics)."""
from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar('T')


class ValueCache(Generic[T]):
    """Holds at most one value and notifies listeners when it changes"""

    def __init__(self):
        self._value: Optional[T] = None
        self._listeners: List[Callable[[Optional[T]], None]] = []

    @property
    def value(self) -> Optional[T]:
        return self._value

    def subscribe(self, listener: Callable[[Optional[T]], None]) -> None:
        self._listeners.append(listener)

    def set(self, value: Optional[T]) -> None:
        self._value = value
        for listener in list(self._listeners):
            listener(value)

    def clear(self) -> None:
        self.set(None)
