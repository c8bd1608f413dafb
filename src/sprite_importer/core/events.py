"""EventBus — decoupled Observer for import progress, status, and error events."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

EventHandler = Callable[..., None]


class EventBus:
    """Simple publish/subscribe event bus shared by one import session.

    Importers and the pipeline emit ``progress``, ``log``, ``completed`` and
    ``failed`` events through this bus.  The CLI subscribes to print them.
    """

    def __init__(self) -> None:
        """Initialise an empty event bus."""
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event: str, handler: EventHandler) -> None:
        """Register a handler for a given event type.

        Args:
            event: The event name to subscribe to (e.g. ``"progress"``).
            handler: A callable invoked with the event's keyword arguments.
        """
        self._handlers[event].append(handler)

    def unsubscribe(self, event: str, handler: EventHandler) -> None:
        """Remove a previously registered handler.

        Args:
            event: The event name.
            handler: The handler to remove.
        """
        try:
            self._handlers[event].remove(handler)
        except ValueError:
            logger.warning("Handler %r was not subscribed to event %r", handler, event)

    def emit(self, event: str, **kwargs: Any) -> None:
        """Fire an event, calling all subscribed handlers.

        A failing handler is logged and does not stop the remaining handlers
        or the import job that emitted the event.

        Args:
            event: The event name to fire.
            **kwargs: Arbitrary data passed to each handler.
        """
        for handler in list(self._handlers.get(event, [])):
            try:
                handler(**kwargs)
            except Exception:
                logger.exception("Error in handler %r for event %r", handler, event)
