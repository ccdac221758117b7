"""
RevokeLicenseHandler.

Handler for revoking a license, used by refunds and by administrators.
"""

import logging

from activations.ports.activation_repository import ActivationRepository
from core.domain.events import EventBus
from core.domain.exceptions import LicenseNotFoundError
from core.domain.value_objects import LicenseStatus
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import licenses_revoked_total
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.dto.license_dto import RevokeLicenseResultDTO
from licenses.domain.events import LicenseRevoked
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class RevokeLicenseHandler:
    """Handler for RevokeLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
        event_bus: EventBus = None,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.activation_repository = activation_repository
        self.event_bus = event_bus or default_event_bus

    async def handle(self, command: RevokeLicenseCommand) -> RevokeLicenseResultDTO:
        """
        Handle revoke license command.

        The status is set before activations are removed, so an activation
        racing with the revoke is either removed here or refused.

        Args:
            command: RevokeLicenseCommand

        Returns:
            RevokeLicenseResultDTO

        Raises:
            LicenseNotFoundError: If the license does not exist
        """
        license = await self.license_repository.find_by_id(command.license_id)
        if not license:
            raise LicenseNotFoundError()

        await self.license_repository.set_status(license.id, LicenseStatus.REVOKED)
        removed = await self.activation_repository.revoke_all(license.id)

        licenses_revoked_total.labels(reason=command.reason).inc()
        logger.info(
            "Revoked license",
            extra={
                "license_id": str(license.id),
                "reason": command.reason,
                "activations_removed": removed,
            },
        )

        await self.event_bus.publish(
            LicenseRevoked(
                license_id=license.id,
                license_key=license.license_key,
                email=license.email,
                activations_removed=removed,
                notify_customer=command.notify_customer,
            )
        )
        return RevokeLicenseResultDTO(
            license_id=license.id,
            license_key=license.license_key,
            activations_removed=removed,
        )
