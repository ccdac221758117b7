"""
ExpireLapsedLicensesHandler.

Marks active licenses whose expiry passed as expired. Validation already
treats them as expired; this keeps the stored status in step.
"""

import logging
from datetime import datetime
from typing import List

from core.domain.events import EventBus
from core.domain.value_objects import LicenseStatus
from core.infrastructure.events import event_bus as default_event_bus
from licenses.domain.events import LicenseExpired
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class ExpireLapsedLicensesHandler:
    """Handler for the periodic expiration sweep."""

    def __init__(self, license_repository: LicenseRepository, event_bus: EventBus = None):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.event_bus = event_bus or default_event_bus

    async def find(self, current_time: datetime) -> List[License]:
        """Find licenses the sweep would expire."""
        return await self.license_repository.find_lapsed(current_time)

    async def handle(self, current_time: datetime) -> int:
        """
        Expire every lapsed license.

        Args:
            current_time: Reference time

        Returns:
            Number of licenses marked expired
        """
        updated = 0
        for license in await self.find(current_time):
            await self.license_repository.set_status(license.id, LicenseStatus.EXPIRED)
            await self.event_bus.publish(
                LicenseExpired(license_id=license.id, expires_at=license.expires_at)
            )
            logger.info("Marked license %s as expired", license.id)
            updated += 1
        return updated
