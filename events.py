"""
events.py

Synchronous notification bus for editor events.

Handlers run in subscription order on the caller's thread. A handler must
not add or delete connectors while the store is iterating in
``redraw_all()`` or ``delete_all()``; re-entrant mutation of that kind is
undefined behaviour and is not guarded against.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from debug_trace import trace

log = logging.getLogger(__name__)


class EventType:
    """Notification types delivered to subscribers."""
    DRAG_BEGIN = "DRAG_BEGIN"
    DRAG = "DRAG"
    DRAG_END = "DRAG_END"
    CONNECTOR_CREATED = "CONNECTOR_CREATED"
    DELETE = "DELETE"
    CLEAR_ALL = "CLEAR_ALL"


@dataclass(frozen=True)
class JointEvent:
    """A notification: a type plus its payload dict."""
    type: str
    payload: Dict[str, Any] = field(default_factory=dict)


Handler = Callable[[JointEvent], None]


class EventBus:
    """Delivers ``JointEvent``s to subscribed handlers."""

    def __init__(self):
        self._handlers: List[Handler] = []

    def subscribe(self, handler: Handler) -> None:
        self._handlers.append(handler)

    def unsubscribe(self, handler: Handler) -> None:
        """Remove a handler; unknown handlers are ignored."""
        try:
            self._handlers.remove(handler)
        except ValueError:
            pass

    def __len__(self) -> int:
        return len(self._handlers)

    def emit(self, event_type: str, **payload) -> JointEvent:
        """Build and publish an event, returning it."""
        event = JointEvent(event_type, payload)
        self.publish(event)
        return event

    def publish(self, event: JointEvent) -> None:
        """Deliver ``event`` to every handler.

        A failing handler is logged and skipped; the remaining handlers
        still run and nothing propagates to the emitting controller.
        """
        trace(f"emit {event.type} {event.payload}", "EVENT")
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception:
                log.exception("Event handler %r failed on %s", handler, event.type)
