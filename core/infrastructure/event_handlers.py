"""
Event handlers for domain events.

These handlers process domain events for side effects: structured
audit logging and Prometheus business counters.
"""

import logging

from core.domain.events import DomainEvent, EventHandler
from core.metrics import (
    license_seats_purchased_total,
    licenses_activated_total,
    licenses_added_total,
    licenses_removed_total,
    team_invitations_total,
)
from licenses.domain.events import (
    LicenseActivated,
    LicenseAdded,
    LicenseEmailUpdated,
    LicenseRemoved,
    SeatsPurchased,
)
from teams.domain.events import (
    MemberInvited,
    MemberJoined,
    MemberRemoved,
    MemberRoleChanged,
    TeamCreated,
)

logger = logging.getLogger(__name__)

AUDITED_EVENTS = (
    LicenseAdded,
    LicenseRemoved,
    LicenseActivated,
    LicenseEmailUpdated,
    SeatsPurchased,
    TeamCreated,
    MemberInvited,
    MemberJoined,
    MemberRoleChanged,
    MemberRemoved,
)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Every domain event becomes one structured log record.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={
                "event_id": str(event.event_id),
                "event_type": event.event_type,
                "aggregate_id": event.aggregate_id,
                "occurred_at": event.occurred_at.isoformat(),
                "data": event.payload(),
            },
        )


class MetricsEventHandler(EventHandler):
    """Event handler feeding business counters."""

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for metrics.

        Args:
            event: Domain event
        """
        if isinstance(event, LicenseAdded):
            licenses_added_total.labels(scope=event.scope_kind, source=event.source).inc()
        elif isinstance(event, LicenseActivated):
            licenses_activated_total.labels(business_type=event.business_type or "unknown").inc()
        elif isinstance(event, LicenseRemoved):
            licenses_removed_total.inc()
        elif isinstance(event, SeatsPurchased):
            license_seats_purchased_total.labels(scope=event.scope_kind).inc(event.count)
        elif isinstance(event, MemberInvited):
            team_invitations_total.labels(role=event.role).inc()


# Register event handlers
def register_event_handlers():
    """Register all event handlers with the event bus."""
    from core.infrastructure.events import event_bus

    audit_handler = AuditLogEventHandler()
    metrics_handler = MetricsEventHandler()

    for event_type in AUDITED_EVENTS:
        event_bus.subscribe(event_type, audit_handler)

    for event_type in (LicenseAdded, LicenseActivated, LicenseRemoved, SeatsPurchased, MemberInvited):
        event_bus.subscribe(event_type, metrics_handler)

    logger.info("Event handlers registered")
