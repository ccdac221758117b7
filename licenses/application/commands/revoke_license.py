"""
RevokeLicenseCommand.

Command to revoke a license and release all of its device slots.
"""
import uuid
from dataclasses import dataclass


@dataclass
class RevokeLicenseCommand:
    """Command to revoke a license."""

    license_id: uuid.UUID
    reason: str
    notify_customer: bool = True
