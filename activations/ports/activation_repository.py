"""
Activation repository port (interface).

This defines the contract for activation persistence operations.
Implementations are in the infrastructure layer.
"""
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from activations.domain.activation import Activation, ActivationOutcome
from licenses.domain.license import License


class ActivationRepository(ABC):
    """
    Abstract repository for Activation entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def list_by_license(self, license_id: uuid.UUID) -> List[Activation]:
        """
        List a license's activations, most recent first.

        Args:
            license_id: License UUID

        Returns:
            List of Activation entities
        """
        pass

    @abstractmethod
    async def count_by_license(self, license_id: uuid.UUID) -> int:
        """
        Count a license's activations.

        Args:
            license_id: License UUID

        Returns:
            Number of activations
        """
        pass

    @abstractmethod
    async def find(self, license_id: uuid.UUID, device_id: str) -> Optional[Activation]:
        """
        Find the activation of a device on a license.

        Args:
            license_id: License UUID
            device_id: Device identifier

        Returns:
            Activation entity or None if the device holds no slot
        """
        pass

    @abstractmethod
    async def try_activate(
        self, license: License, device_id: str, device_name: Optional[str] = None
    ) -> ActivationOutcome:
        """
        Activate a device on a license if a slot is available.

        A device that already holds a slot has its timestamp refreshed and
        does not consume another. Otherwise the capacity check and insert
        happen as one atomic operation, so concurrent first-time
        activations never exceed ``max_activations``.

        Args:
            license: License entity
            device_id: Device identifier
            device_name: Optional display name of the device

        Returns:
            ActivationOutcome describing the result

        Raises:
            LicenseNotFoundError: If the license row no longer exists
            LicenseRevokedError: If the license is revoked
        """
        pass

    @abstractmethod
    async def deactivate(self, license_id: uuid.UUID, device_id: str) -> bool:
        """
        Remove a device's activation. Unknown devices are a no-op.

        Args:
            license_id: License UUID
            device_id: Device identifier

        Returns:
            True if an activation was removed
        """
        pass

    @abstractmethod
    async def revoke_all(self, license_id: uuid.UUID) -> int:
        """
        Remove every activation of a license.

        Args:
            license_id: License UUID

        Returns:
            Number of activations removed
        """
        pass
