"""
IssueLicenseHandler.

Handler for creating licenses from purchases or by hand.
"""

import logging

from core.domain.events import EventBus
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import licenses_issued_total
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.domain.events import LicenseIssued
from licenses.domain.license import License
from licenses.domain.license_key import generate_license_key
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class IssueLicenseHandler:
    """Handler for IssueLicenseCommand."""

    def __init__(self, license_repository: LicenseRepository, event_bus: EventBus = None):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.event_bus = event_bus or default_event_bus

    async def handle(self, command: IssueLicenseCommand) -> License:
        """
        Handle issue license command.

        The license is stored first; the LicenseIssued event (and with it
        the customer email) only goes out once the row exists.

        Args:
            command: IssueLicenseCommand

        Returns:
            The stored License entity

        Raises:
            DuplicateLicenseError: If the key or order reference exists
        """
        license = License.create(
            license_key=command.license_key or generate_license_key(command.tier),
            tier=command.tier,
            email=command.email,
            customer_id=command.customer_id,
            order_id=command.order_id,
            subscription_id=command.subscription_id,
            max_activations=command.max_activations,
            expires_at=command.expires_at,
        )
        license = await self.license_repository.create(license)

        licenses_issued_total.labels(tier=license.tier.value, source=command.source).inc()
        logger.info(
            "Issued license",
            extra={
                "license_id": str(license.id),
                "tier": license.tier.value,
                "source": command.source,
                "order_id": license.order_id,
                "subscription_id": license.subscription_id,
            },
        )

        await self.event_bus.publish(
            LicenseIssued(
                license_id=license.id,
                license_key=license.license_key,
                tier=license.tier.value,
                email=license.email,
                customer_name=command.customer_name,
                max_activations=license.max_activations,
                notify_customer=command.notify_customer,
            )
        )
        return license
