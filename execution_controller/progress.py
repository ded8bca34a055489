"""Append-only run log fed to any number of subscribers."""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from .states import CreationState, ProgressEvent

logger = logging.getLogger(__name__)

Listener = Callable[[ProgressEvent], None]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RunLog:
    """Observational only: nothing in a run reads its own log to decide anything."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or _utc_now
        self._events: List[ProgressEvent] = []
        self._listeners: List[Listener] = []
        self._state = CreationState.IDLE

    @property
    def state(self) -> CreationState:
        return self._state

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def enter(self, state: CreationState) -> None:
        self._state = state

    def emit(self, message: str) -> ProgressEvent:
        event = ProgressEvent(timestamp=self._clock(), state=self._state, message=message)
        self._events.append(event)
        logger.debug("[%s] %s", event.state.value, message)
        for listener in self._listeners:
            listener(event)
        return event

    @property
    def events(self) -> Tuple[ProgressEvent, ...]:
        return tuple(self._events)

    def lines(self) -> Tuple[str, ...]:
        return tuple(event.format() for event in self._events)
