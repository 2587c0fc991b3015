"""Append-only publish transcript with one-way subscription.

The orchestrator is the only writer. Readers get immutable snapshots or
subscribe to be called with each event as it is appended; nothing outside
the log can reorder or change an entry.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from brewpublish.models.events import EventSeverity, PublishEvent
from brewpublish.models.states import PublishState

logger = logging.getLogger(__name__)

EventListener = Callable[[PublishEvent], None]

_LOG_LEVELS: dict[EventSeverity, int] = {
    EventSeverity.INFO: logging.INFO,
    EventSeverity.SUCCESS: logging.INFO,
    EventSeverity.WARNING: logging.WARNING,
    EventSeverity.ERROR: logging.ERROR,
}


class PublishEventLog:
    """Ordered, append-only sequence of ``PublishEvent`` for one run."""

    def __init__(self) -> None:
        self._events: list[PublishEvent] = []
        self._listeners: list[EventListener] = []

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        """Call ``listener`` for every future event. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def append(
        self, severity: EventSeverity, message: str, state: PublishState
    ) -> PublishEvent:
        event = PublishEvent(
            sequence=len(self._events),
            severity=severity,
            message=message,
            state=state,
        )
        self._events.append(event)
        logger.log(_LOG_LEVELS[severity], "[%s] %s", state.value, message)

        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                # A broken display must not abort the publish.
                logger.exception("Event listener %r failed", listener)
        return event

    @property
    def events(self) -> tuple[PublishEvent, ...]:
        return tuple(self._events)

    def __len__(self) -> int:
        return len(self._events)
