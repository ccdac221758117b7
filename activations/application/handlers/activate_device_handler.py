"""
ActivateDeviceHandler.

Handler for activating a device on a license.
"""

import logging

from activations.application.commands.activate_device import ActivateDeviceCommand
from activations.application.dto.device_dto import ActivateDeviceResultDTO
from activations.domain.events import DeviceActivated
from activations.ports.activation_repository import ActivationRepository
from core.domain.events import EventBus
from core.domain.exceptions import (
    ActivationLimitReachedError,
    LicenseExpiredError,
    LicenseNotFoundError,
    LicenseRevokedError,
)
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import activations_total
from licenses.domain.services import REASON_REVOKED, LicenseValidator, utc_now
from licenses.domain.tiers import limits_for
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class ActivateDeviceHandler:
    """Handler for ActivateDeviceCommand."""

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

    async def handle(self, command: ActivateDeviceCommand) -> ActivateDeviceResultDTO:
        """
        Handle activate device command.

        Args:
            command: ActivateDeviceCommand

        Returns:
            ActivateDeviceResultDTO with the license's slot usage

        Raises:
            LicenseNotFoundError: If the key is unknown
            LicenseRevokedError: If the license is revoked
            LicenseExpiredError: If the license has expired
            ActivationLimitReachedError: If every slot is taken by other devices
        """
        license = await self.license_repository.find_by_key(command.license_key)
        if not license:
            activations_total.labels(outcome="not_found").inc()
            raise LicenseNotFoundError()

        validity = LicenseValidator.validity(license, utc_now())
        if not validity.valid:
            activations_total.labels(outcome=validity.reason).inc()
            if validity.reason == REASON_REVOKED:
                raise LicenseRevokedError()
            raise LicenseExpiredError()

        outcome = await self.activation_repository.try_activate(
            license, command.device_id, command.device_name
        )
        if outcome.limit_reached:
            activations_total.labels(outcome="limit_reached").inc()
            logger.info(
                "Activation refused, limit reached",
                extra={"license_id": str(license.id), "max_activations": outcome.max_activations},
            )
            raise ActivationLimitReachedError(outcome.max_activations, outcome.count)

        if outcome.already_activated:
            activations_total.labels(outcome="refreshed").inc()
        else:
            activations_total.labels(outcome="activated").inc()
            await self.event_bus.publish(
                DeviceActivated(
                    license_id=license.id,
                    device_id=command.device_id,
                    activation_count=outcome.count,
                )
            )

        return ActivateDeviceResultDTO(
            tier=license.tier.value,
            limits=limits_for(license.tier).to_dict(),
            count=outcome.count,
            max_activations=outcome.max_activations,
            already_activated=outcome.already_activated,
        )
