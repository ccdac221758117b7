"""
DeactivateDeviceHandler.

Handler for releasing a device's slot.
"""

from activations.application.commands.deactivate_device import DeactivateDeviceCommand
from activations.application.dto.device_dto import DeactivateDeviceResultDTO
from activations.domain.events import DeviceDeactivated
from activations.ports.activation_repository import ActivationRepository
from core.domain.events import EventBus
from core.domain.exceptions import LicenseNotFoundError
from core.infrastructure.events import event_bus as default_event_bus
from licenses.ports.license_repository import LicenseRepository


class DeactivateDeviceHandler:
    """Handler for DeactivateDeviceCommand."""

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

    async def handle(self, command: DeactivateDeviceCommand) -> DeactivateDeviceResultDTO:
        """
        Handle deactivate device command.

        Deactivating a device that holds no slot is a no-op.

        Args:
            command: DeactivateDeviceCommand

        Returns:
            DeactivateDeviceResultDTO with the remaining slot usage

        Raises:
            LicenseNotFoundError: If the key is unknown
        """
        license = await self.license_repository.find_by_key(command.license_key)
        if not license:
            raise LicenseNotFoundError()

        removed = await self.activation_repository.deactivate(license.id, command.device_id)
        if removed:
            await self.event_bus.publish(
                DeviceDeactivated(license_id=license.id, device_id=command.device_id)
            )

        count = await self.activation_repository.count_by_license(license.id)
        return DeactivateDeviceResultDTO(
            count=count,
            max_activations=license.max_activations,
            removed=removed,
        )
