"""
IssueLicenseCommand.

Command to create a new license, from a purchase or by hand.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.value_objects import LicenseTier
from licenses.domain.license import DEFAULT_MAX_ACTIVATIONS


@dataclass
class IssueLicenseCommand:
    """Command to issue a license."""

    tier: LicenseTier
    source: str
    email: Optional[str] = None
    customer_name: Optional[str] = None
    customer_id: Optional[str] = None
    order_id: Optional[str] = None
    subscription_id: Optional[str] = None
    expires_at: Optional[datetime] = None
    max_activations: int = DEFAULT_MAX_ACTIVATIONS
    # Generated from the tier when not given
    license_key: Optional[str] = None
    notify_customer: bool = True
