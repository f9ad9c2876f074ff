"""
Domain event base classes.

Licenses and teams publish events after a committed change; the audit
log and Prometheus counters subscribe to them.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4


class DomainEvent(ABC):
    """
    Base class for all domain events.

    Subclasses set their own payload attributes after calling
    ``super().__init__`` and expose them through ``payload()``.
    """

    def __init__(self, aggregate_id: str, occurred_at: Optional[datetime] = None):
        self.event_id = uuid4()
        self.occurred_at = occurred_at or datetime.now(timezone.utc)
        self.aggregate_id = aggregate_id

    @property
    def event_type(self) -> str:
        return type(self).__name__

    def payload(self) -> Dict[str, Any]:
        """Event-specific data for logging and serialization."""
        return {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": str(self.event_id),
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "occurred_at": self.occurred_at.isoformat(),
            "data": self.payload(),
        }


class EventHandler(ABC):
    """Subscriber reacting to published domain events."""

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        """React to one event."""


class EventBus(ABC):
    """Publish/subscribe port used by application handlers."""

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        """Deliver an event to every subscriber of its type."""

    @abstractmethod
    def subscribe(self, event_type: type, handler: EventHandler) -> None:
        """Register a handler for an event type."""
