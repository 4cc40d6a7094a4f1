"""
Asynchronous action lifecycle.

Every action goes through three phases, each published on an ActionBus:

    REQUESTED  emitted synchronously when the action is dispatched
    FULFILLED  the network call succeeded; payload is its result
    REJECTED   the network call failed; error is the ApiError

Caches subscribe to FULFILLED events of the actions they care about. The
caller gets an ActionResult from the task returned by run_action().
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, Tuple, TypeVar

from ..errors import ApiError

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ActionPhase(Enum):
    REQUESTED = 'requested'
    FULFILLED = 'fulfilled'
    REJECTED = 'rejected'


@dataclass(frozen=True)
class ActionEvent:
    type: str
    phase: ActionPhase
    arg: Any = None
    payload: Any = None
    error: Optional[ApiError] = None


@dataclass(frozen=True)
class ActionResult(Generic[T]):
    """Outcome of an action: a value or an ApiError, never both"""
    value: Optional[T] = None
    error: Optional[ApiError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the error."""
        if self.error is not None:
            raise self.error
        return self.value


Listener = Callable[[ActionEvent], None]


class ActionBus:
    """Delivers action events to subscribed listeners, in subscription order"""

    def __init__(self):
        self._listeners: Dict[Tuple[str, ActionPhase], List[Listener]] = {}
        self._global_listeners: List[Listener] = []

    def subscribe(self, action_type: str, phase: ActionPhase, listener: Listener) -> None:
        self._listeners.setdefault((action_type, phase), []).append(listener)

    def subscribe_all(self, listener: Listener) -> None:
        """Listen to every event (logging, devtools, tests)."""
        self._global_listeners.append(listener)

    def emit(self, event: ActionEvent) -> None:
        for listener in list(self._listeners.get((event.type, event.phase), [])):
            listener(event)
        for listener in list(self._global_listeners):
            listener(event)


def run_action(bus: ActionBus, action_type: str, arg: Any,
               call: Callable[[], Awaitable[T]]) -> 'asyncio.Task[ActionResult[T]]':
    """
    Dispatch an action.

    Emits REQUESTED before returning, then runs call() in a task and emits
    FULFILLED or REJECTED when it settles. Only ApiError becomes a rejection;
    anything else is a bug and propagates out of the task.

    Args:
        bus: Bus to publish lifecycle events on.
        action_type: Action name, e.g. 'gameEntry/updateGameEntry'.
        arg: The argument the action was dispatched with.
        call: Zero-argument coroutine function doing the network call.

    Returns:
        Task resolving to the ActionResult. Must be called with a running loop.
    """
    bus.emit(ActionEvent(action_type, ActionPhase.REQUESTED, arg=arg))

    async def settle() -> ActionResult[T]:
        try:
            payload = await call()
        except ApiError as e:
            logger.debug(f"[Actions] {action_type} rejected: {e.error_type}: {e}")
            bus.emit(ActionEvent(action_type, ActionPhase.REJECTED, arg=arg, error=e))
            return ActionResult(error=e)
        bus.emit(ActionEvent(action_type, ActionPhase.FULFILLED, arg=arg, payload=payload))
        return ActionResult(value=payload)

    return asyncio.ensure_future(settle())
