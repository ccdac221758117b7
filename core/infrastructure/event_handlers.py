"""
Event handlers for domain events.

These handlers process domain events for side effects
like audit logging and customer notifications.
"""

import logging

from asgiref.sync import sync_to_async

from activations.domain.events import DeviceActivated, DeviceDeactivated
from core.domain.events import DomainEvent, EventHandler
from licenses.domain.events import (
    LicenseExpired,
    LicenseIssued,
    LicenseLapsed,
    LicenseRenewed,
    LicenseRevoked,
)

logger = logging.getLogger(__name__)

AUDITED_EVENTS = (
    LicenseIssued,
    LicenseRenewed,
    LicenseLapsed,
    LicenseRevoked,
    LicenseExpired,
    DeviceActivated,
    DeviceDeactivated,
)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Logs all domain events as structured records.
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
            },
        )


class LicenseNotificationHandler(EventHandler):
    """
    Event handler for customer emails.

    Enqueues Celery tasks; delivery and retries happen outside the
    request that changed the license.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event by enqueueing the matching email.

        Args:
            event: Domain event
        """
        from core.tasks import send_license_email, send_refund_email

        if not getattr(event, "notify_customer", False) or not getattr(event, "email", None):
            return

        if isinstance(event, LicenseIssued):
            await sync_to_async(send_license_email.delay)(
                event.email, event.license_key, event.tier, event.max_activations
            )
        elif isinstance(event, LicenseRevoked):
            await sync_to_async(send_refund_email.delay)(event.email, event.license_key)
        else:
            return

        logger.info(
            "Queued notification for %s",
            event.event_type,
            extra={"aggregate_id": event.aggregate_id},
        )


# Register event handlers
def register_event_handlers(bus=None):
    """
    Register all event handlers with the event bus.

    Safe to call more than once.

    Args:
        bus: Event bus to register on (defaults to the global bus)
    """
    from core.infrastructure.events import event_bus

    bus = bus or event_bus
    audit_handler = AuditLogEventHandler()
    notification_handler = LicenseNotificationHandler()

    for event_type in AUDITED_EVENTS:
        bus.subscribe(event_type, audit_handler)

    bus.subscribe(LicenseIssued, notification_handler)
    bus.subscribe(LicenseRevoked, notification_handler)

    logger.info("Event handlers registered")
