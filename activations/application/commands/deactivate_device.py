"""
DeactivateDeviceCommand.

Command to release a device's license slot.
"""

from dataclasses import dataclass


@dataclass
class DeactivateDeviceCommand:
    """Command to deactivate a device on a license."""

    license_key: str
    device_id: str
