"""
Event Recorder

Collects observability events, logs them, and fans them out to subscribers.
Used by RootRegistry and ClaimCoordinator.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Any, Callable, Optional

from .models import Event, EventKind


logger = logging.getLogger(__name__)

EventSubscriber = Callable[[Event], None]


def generate_event_id(kind: EventKind, payload: dict[str, Any]) -> str:
    """
    Generate a deterministic event ID from kind and payload.

    Format: ev_{kind}_{hash_prefix}
    """
    stable_str = f"{kind}|{sorted(payload.items())}"
    hash_hex = hashlib.sha256(stable_str.encode()).hexdigest()[:12]
    return f"ev_{kind}_{hash_hex}"


class EventRecorder:
    """
    Records events emitted by the engine.

    Usage:
        recorder = EventRecorder()
        recorder.subscribe(print)

        coordinator = ClaimCoordinator(..., events=recorder)
        coordinator.claim(...)

        events = recorder.get_events(kind="redeemed")
    """

    def __init__(self, subscribers: Optional[list[EventSubscriber]] = None) -> None:
        self._events: list[Event] = []
        self._subscribers: list[EventSubscriber] = list(subscribers or [])

    def subscribe(self, subscriber: EventSubscriber) -> None:
        """Register a callback invoked with every emitted event."""
        self._subscribers.append(subscriber)

    def emit(self, event: Event) -> Event:
        """
        Record an event and deliver it to subscribers.

        The event is recorded before delivery. A failing subscriber is logged
        and skipped so the caller still gets the event back, since the state
        change it describes has already been committed.
        """
        if not event.event_id:
            payload = event.model_dump(mode="json", exclude={"event_id", "emitted_at"})
            event.event_id = generate_event_id(event.kind, payload)

        self._events.append(event)
        logger.info(f"Event {event.kind} v{event.version}: {event.event_id}")

        for subscriber in self._subscribers:
            try:
                subscriber(event)
            except Exception:
                logger.exception(f"Subscriber failed for event {event.event_id}")
        return event

    def get_events(self, kind: Optional[EventKind] = None) -> list[Event]:
        """Get recorded events, optionally filtered by kind."""
        if kind is None:
            return list(self._events)
        return [e for e in self._events if e.kind == kind]

    def clear(self) -> None:
        """Clear all events."""
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)

    def to_dict_list(self) -> list[dict[str, Any]]:
        """Convert all events to JSON-serializable dicts."""
        return [e.model_dump(mode="json", exclude_none=True) for e in self._events]
