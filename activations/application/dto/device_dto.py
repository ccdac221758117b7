"""
Device activation DTOs for API responses.
"""
from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class ActivateDeviceResultDTO:
    """DTO for a successful activation."""

    tier: str
    limits: Dict[str, Any]
    count: int
    max_activations: int
    already_activated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert DTO to the wire representation."""
        return {
            "success": True,
            "tier": self.tier,
            "limits": self.limits,
            "activation": {"count": self.count, "max": self.max_activations},
        }


@dataclass
class DeactivateDeviceResultDTO:
    """DTO for a deactivation."""

    count: int
    max_activations: int
    removed: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert DTO to the wire representation."""
        return {
            "success": True,
            "message": "Device deactivated",
            "activation": {"count": self.count, "max": self.max_activations},
        }
