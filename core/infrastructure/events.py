"""
In-process event bus.

License and team handlers publish after their write has committed;
subscribers (audit log, business counters) run concurrently and can
never fail the request that published.
"""

import asyncio
import logging
from typing import Dict, List, Tuple, Type

from core.domain.events import DomainEvent, EventBus, EventHandler

logger = logging.getLogger(__name__)


class InMemoryEventBus(EventBus):
    """
    Event bus dispatching to subscribers inside the current process.

    A handler class is subscribed at most once per event type, so
    calling ``register_event_handlers`` twice is harmless.
    """

    def __init__(self):
        self._handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        handlers = self._handlers.setdefault(event_type, [])
        if any(type(existing) is type(handler) for existing in handlers):
            return
        handlers.append(handler)
        logger.debug(
            "Event handler subscribed",
            extra={"event_type": event_type.__name__, "handler": type(handler).__name__},
        )

    def subscriptions(self, event_type: Type[DomainEvent]) -> Tuple[EventHandler, ...]:
        """Handlers currently subscribed to an event type."""
        return tuple(self._handlers.get(event_type, ()))

    def clear(self) -> None:
        """Drop every subscription."""
        self._handlers.clear()

    async def publish(self, event: DomainEvent) -> None:
        """
        Publish a domain event to its subscribers.

        Args:
            event: The domain event to publish
        """
        handlers = self.subscriptions(type(event))
        if not handlers:
            return
        await asyncio.gather(
            *[self._deliver(handler, event) for handler in handlers], return_exceptions=True
        )

    async def _deliver(self, handler: EventHandler, event: DomainEvent) -> None:
        try:
            await handler.handle(event)
        except Exception as e:
            logger.error(
                "Event handler failed",
                extra={
                    "event_type": event.event_type,
                    "event_id": str(event.event_id),
                    "handler": type(handler).__name__,
                    "error": str(e),
                },
                exc_info=True,
            )
            raise


# Global event bus instance
event_bus = InMemoryEventBus()
