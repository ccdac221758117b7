"""
ValidateLicenseQuery.

Query a client runs at startup to learn its entitlements.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class ValidateLicenseQuery:
    """Query to validate a license key, optionally for one device."""

    license_key: str
    device_id: Optional[str] = None
