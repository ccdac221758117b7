"""
Activation domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from activations.ports.activation_repository import ActivationRepository
from licenses.domain.license import License
from licenses.domain.services import LicenseValidator


@dataclass(frozen=True)
class DeviceStatus:
    """
    Slot usage of a license as seen from one device.

    ``is_activated`` and ``can_activate`` stay separate so a client can
    tell "already has a slot" from "could take a free slot".
    """

    count: int
    max_activations: int
    is_activated: bool
    can_activate: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert status to the wire representation."""
        return {
            "count": self.count,
            "max": self.max_activations,
            "is_activated": self.is_activated,
            "can_activate": self.can_activate,
        }


class ActivationLedger:
    """Domain service for reading a license's device slots."""

    @staticmethod
    async def device_status(
        license: License,
        device_id: Optional[str],
        repository: ActivationRepository,
    ) -> DeviceStatus:
        """
        Describe slot usage for a device.

        Args:
            license: License entity
            device_id: Device identifier, or None when the caller has none
            repository: Activation repository

        Returns:
            DeviceStatus for the device
        """
        count = await repository.count_by_license(license.id)
        is_activated = False
        if device_id:
            is_activated = await repository.find(license.id, device_id) is not None
        return DeviceStatus(
            count=count,
            max_activations=license.max_activations,
            is_activated=is_activated,
            can_activate=LicenseValidator.can_activate(license, is_activated, count),
        )
