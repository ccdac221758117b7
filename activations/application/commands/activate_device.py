"""
ActivateDeviceCommand.

Command to bind a device to a license slot.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ActivateDeviceCommand:
    """Command to activate a device on a license."""

    license_key: str
    device_id: str
    device_name: Optional[str] = None
