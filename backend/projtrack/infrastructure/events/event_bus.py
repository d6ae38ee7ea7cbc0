"""
Event bus for domain event publishing and subscription.

Handlers run synchronously in subscription order, inside the publishing
call. A failing handler aborts the publish and its exception propagates
to the caller.
"""

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Callable

from ...domain.progress.events.domain_events import DomainEvent

logger = logging.getLogger(__name__)

Handler = Callable[[DomainEvent], None]


class EventBusInterface(ABC):
    """Contract for publishing events and subscribing to event types."""

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """
        Publish a domain event to all registered handlers.

        Args:
            event: Domain event to publish
        """
        pass

    @abstractmethod
    def subscribe(self, event_type: type, handler: Handler) -> None:
        """
        Subscribe a handler to a specific event type.

        Args:
            event_type: Type of event to subscribe to
            handler: Handler function to call when event is published
        """
        pass

    @abstractmethod
    def unsubscribe(self, event_type: type, handler: Handler) -> None:
        pass

    @abstractmethod
    def clear_handlers(self, event_type: type | None = None) -> None:
        """
        Clear event handlers.

        Args:
            event_type: Optional event type to clear handlers for. If None, clears all.
        """
        pass


class InMemoryEventBus(EventBusInterface):
    """
    In-memory, synchronous implementation of the event bus.

    Keeps a bounded history of published events for inspection.
    """

    def __init__(self, max_history_size: int = 1000):
        self._handlers: dict[type, list[Handler]] = defaultdict(list)
        self._event_history: list[DomainEvent] = []
        self._max_history_size = max_history_size

    def publish(self, event: DomainEvent) -> None:
        self._add_to_history(event)

        event_type = type(event)
        handlers = list(self._handlers.get(event_type, []))

        if not handlers:
            logger.debug("No handlers registered for event type: %s", event_type.__name__)
            return

        logger.debug(
            "Publishing event %s to %d handlers", event_type.__name__, len(handlers)
        )

        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Error handling event %s with %r", event_type.__name__, handler
                )
                raise

    def subscribe(self, event_type: type, handler: Handler) -> None:
        if handler not in self._handlers[event_type]:
            self._handlers[event_type].append(handler)
            logger.debug(
                "Subscribed handler %r to event type %s", handler, event_type.__name__
            )
        else:
            logger.warning(
                "Handler %r already subscribed to event type %s",
                handler,
                event_type.__name__,
            )

    def unsubscribe(self, event_type: type, handler: Handler) -> None:
        if handler in self._handlers[event_type]:
            self._handlers[event_type].remove(handler)
            logger.debug(
                "Unsubscribed handler %r from event type %s",
                handler,
                event_type.__name__,
            )
        else:
            logger.warning(
                "Handler %r not found for event type %s", handler, event_type.__name__
            )

    def clear_handlers(self, event_type: type | None = None) -> None:
        if event_type:
            self._handlers.pop(event_type, None)
        else:
            self._handlers.clear()

    def get_handler_count(self, event_type: type) -> int:
        return len(self._handlers.get(event_type, []))

    def get_event_history(self, event_type: type | None = None) -> list[DomainEvent]:
        """
        Get history of published events.

        Args:
            event_type: Optional event type to filter by

        Returns:
            List of published events, oldest first
        """
        if event_type:
            return [e for e in self._event_history if type(e) is event_type]
        return self._event_history.copy()

    def clear_event_history(self) -> None:
        self._event_history.clear()

    def _add_to_history(self, event: DomainEvent) -> None:
        """Add event to history, maintaining size limit."""
        self._event_history.append(event)
        if len(self._event_history) > self._max_history_size:
            self._event_history.pop(0)
