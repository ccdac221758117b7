"""
License domain events.

Domain events represent something that happened in the license domain.
"""

import uuid
from datetime import datetime
from typing import Optional

from core.domain.events import DomainEvent


class LicenseIssued(DomainEvent):
    """Event raised when a purchase creates a new license."""

    def __init__(
        self,
        license_id: uuid.UUID,
        license_key: str,
        tier: str,
        email: Optional[str],
        customer_name: Optional[str] = None,
        max_activations: int = 3,
        notify_customer: bool = True,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseIssued event.

        Args:
            license_id: License UUID
            license_key: The issued license key
            tier: License tier value
            email: Customer email the key is sent to
            customer_name: Customer display name
            max_activations: Number of device slots
            notify_customer: Whether the key is emailed to the customer
            occurred_at: When the event occurred
        """
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.license_id = license_id
        self.license_key = license_key
        self.tier = tier
        self.email = email
        self.customer_name = customer_name
        self.max_activations = max_activations
        self.notify_customer = notify_customer


class LicenseRenewed(DomainEvent):
    """Event raised when a subscription payment extends a license."""

    def __init__(
        self,
        license_id: uuid.UUID,
        expires_at: Optional[datetime],
        reactivated: bool,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.license_id = license_id
        self.expires_at = expires_at
        self.reactivated = reactivated


class LicenseLapsed(DomainEvent):
    """Event raised when a subscription is cancelled or a payment fails."""

    def __init__(
        self,
        license_id: uuid.UUID,
        expires_at: Optional[datetime],
        expired_now: bool,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.license_id = license_id
        self.expires_at = expires_at
        self.expired_now = expired_now


class LicenseRevoked(DomainEvent):
    """Event raised when a license is revoked by refund or by an admin."""

    def __init__(
        self,
        license_id: uuid.UUID,
        license_key: str,
        email: Optional[str],
        activations_removed: int,
        notify_customer: bool = True,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseRevoked event.

        Args:
            license_id: License UUID
            license_key: The revoked license key
            email: Customer email
            activations_removed: Number of device slots released
            notify_customer: Whether the customer gets a refund notice
            occurred_at: When the event occurred
        """
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.license_id = license_id
        self.license_key = license_key
        self.email = email
        self.activations_removed = activations_removed
        self.notify_customer = notify_customer


class LicenseExpired(DomainEvent):
    """Event raised when the expiration sweep marks a license expired."""

    def __init__(
        self,
        license_id: uuid.UUID,
        expires_at: Optional[datetime],
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.license_id = license_id
        self.expires_at = expires_at
