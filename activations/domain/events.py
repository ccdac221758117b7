"""
Activation domain events.

Domain events represent something that happened in the activation domain.
"""
import uuid
from datetime import datetime
from typing import Optional

from core.domain.events import DomainEvent


class DeviceActivated(DomainEvent):
    """Event raised when a device takes a new slot on a license."""

    def __init__(
        self,
        license_id: uuid.UUID,
        device_id: str,
        activation_count: int,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize DeviceActivated event.

        Args:
            license_id: License UUID
            device_id: Device identifier
            activation_count: Slots taken after this activation
            occurred_at: When the event occurred
        """
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.license_id = license_id
        self.device_id = device_id
        self.activation_count = activation_count


class DeviceDeactivated(DomainEvent):
    """Event raised when a device gives up its slot."""

    def __init__(
        self,
        license_id: uuid.UUID,
        device_id: str,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.license_id = license_id
        self.device_id = device_id
