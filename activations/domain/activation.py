"""
Activation domain entity.

This is the core domain entity representing one device bound to a license.
It contains business logic and is independent of infrastructure.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Activation:
    """
    Activation domain entity.

    One device's claim on one of a license's usage slots. A device holds
    at most one activation per license.
    """

    id: uuid.UUID
    license_id: uuid.UUID
    device_id: str
    device_name: Optional[str]
    activated_at: datetime

    def __post_init__(self):
        """Validate activation entity."""
        if not self.license_id:
            raise ValueError("License ID is required")
        if not self.device_id:
            raise ValueError("Device ID is required")

    def to_dict(self) -> Dict[str, Any]:
        """Convert activation to the wire representation."""
        return {
            "device_id": self.device_id,
            "device_name": self.device_name,
            "activated_at": self.activated_at.isoformat(),
        }


@dataclass(frozen=True)
class ActivationOutcome:
    """
    Result of an activation attempt.

    ``count`` and ``max_activations`` describe the license after the
    attempt, so callers can present remaining capacity.
    """

    activated: bool
    already_activated: bool
    count: int
    max_activations: int

    @property
    def limit_reached(self) -> bool:
        """True when the device was refused because every slot is taken."""
        return not self.activated
