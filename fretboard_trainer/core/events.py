"""Event system for fretboard trainer components."""

from typing import Dict, List, Callable, Any
from enum import Enum, auto

from ..logger import get_logger

logger = get_logger(__name__)


class RoundEventType(Enum):
    """Event types emitted by the round controller."""

    ROUND_STARTED = auto()
    GUESS_EVALUATED = auto()
    SESSION_RESET = auto()
    ERROR = auto()


class EventEmitter:
    """Event emitter for fretboard trainer components."""

    def __init__(self):
        """Initialize the event emitter."""
        self._listeners: Dict[Any, List[Callable]] = {}

    def on(self, event_type: Any, callback: Callable) -> None:
        """Register a callback for an event type.

        Args:
            event_type: Event type to listen for
            callback: Function to call when the event occurs
        """
        if event_type not in self._listeners:
            self._listeners[event_type] = []

        if callback not in self._listeners[event_type]:
            self._listeners[event_type].append(callback)
            logger.debug(f"Added listener for event {event_type}")

    def off(self, event_type: Any, callback: Callable) -> None:
        """Unregister a callback. Unknown callbacks are ignored."""
        listeners = self._listeners.get(event_type, [])
        if callback in listeners:
            listeners.remove(callback)

    def emit(self, event_type: Any, *args, **kwargs) -> None:
        """Emit an event.

        A failing listener is logged and does not stop the others.

        Args:
            event_type: Event type to emit
            *args: Positional arguments to pass to listeners
            **kwargs: Keyword arguments to pass to listeners
        """
        if event_type not in self._listeners:
            return

        for callback in list(self._listeners[event_type]):
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in event listener for {event_type}: {e}")


class RoundEvents:
    """Event emitter specifically for quiz round notifications."""

    def __init__(self):
        self._emitter = EventEmitter()

    def on_round_started(self, callback: Callable) -> None:
        """Register callback(state) for every new round."""
        self._emitter.on(RoundEventType.ROUND_STARTED, callback)

    def on_guess_evaluated(self, callback: Callable) -> None:
        """Register callback(state, result) for every accepted guess."""
        self._emitter.on(RoundEventType.GUESS_EVALUATED, callback)

    def on_session_reset(self, callback: Callable) -> None:
        """Register callback(counters) for session counter resets."""
        self._emitter.on(RoundEventType.SESSION_RESET, callback)

    def on_error(self, callback: Callable) -> None:
        """Register callback(exception) for failures with no caller to raise to."""
        self._emitter.on(RoundEventType.ERROR, callback)

    def off(self, event_type: RoundEventType, callback: Callable) -> None:
        """Unregister a callback added with one of the on_* methods."""
        self._emitter.off(event_type, callback)

    def emit(self, event_type: RoundEventType, *args) -> None:
        self._emitter.emit(event_type, *args)
