"""Synchronous event bus for supervisor notifications."""

import logging
from collections.abc import Callable
from typing import Any

from livecode.events.types import EventType, SupervisorEvent

logger = logging.getLogger(__name__)


class EventBus:
    """Delivers supervisor events to callbacks, in registration order.

    Callbacks run inside the tick that produced the event. A failing
    callback is logged and skipped; it never affects the frame loop.
    """

    def __init__(self) -> None:
        self._callbacks: list[tuple[Callable[[SupervisorEvent], Any], frozenset[EventType] | None]] = []

    def add_callback(
        self,
        callback: Callable[[SupervisorEvent], Any],
        types: set[EventType] | None = None,
    ) -> None:
        """Add a callback for every event, or only for ``types``."""
        self._callbacks.append((callback, frozenset(types) if types else None))

    def remove_callback(self, callback: Callable[[SupervisorEvent], Any]) -> None:
        """Remove the earliest registration of a callback."""
        for index, (registered, _) in enumerate(self._callbacks):
            if registered == callback:
                del self._callbacks[index]
                return

    def publish(self, event: SupervisorEvent) -> None:
        """Publish an event to all interested callbacks."""
        logger.debug(f"Publishing event: {event.type.value}")

        for callback, wanted in list(self._callbacks):
            if wanted is not None and event.type not in wanted:
                continue
            try:
                callback(event)
            except Exception as e:
                logger.error(f"Callback error: {e}")

    def emit(self, event_type: EventType, data: dict[str, Any] | None = None) -> SupervisorEvent:
        """Convenience method to create and publish an event.

        Args:
            event_type: The type of event
            data: Event payload data

        Returns:
            The created event
        """
        event = SupervisorEvent(type=event_type, data=data or {})
        self.publish(event)
        return event

    @property
    def callback_count(self) -> int:
        """Get the number of registered callbacks."""
        return len(self._callbacks)
