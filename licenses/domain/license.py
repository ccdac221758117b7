"""
License domain entity.

This is the core domain entity representing a license.
It contains business logic and is independent of infrastructure.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from core.domain.value_objects import LicenseStatus, LicenseTier

DEFAULT_MAX_ACTIVATIONS = 3


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    An entitlement bound to a tier. ``expires_at`` of ``None`` means the
    license never expires (lifetime licenses, or a subscription before its
    first renewal date is known).
    """

    id: uuid.UUID
    license_key: str
    tier: LicenseTier
    status: LicenseStatus
    max_activations: int
    expires_at: Optional[datetime]
    email: Optional[str]
    customer_id: Optional[str]
    order_id: Optional[str]
    subscription_id: Optional[str]
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate license entity."""
        if not self.license_key or len(self.license_key.strip()) == 0:
            raise ValueError("License key cannot be empty")
        if self.max_activations < 1:
            raise ValueError("Max activations must be at least 1")

    @classmethod
    def create(
        cls,
        license_key: str,
        tier: LicenseTier,
        email: Optional[str] = None,
        customer_id: Optional[str] = None,
        order_id: Optional[str] = None,
        subscription_id: Optional[str] = None,
        max_activations: int = DEFAULT_MAX_ACTIVATIONS,
        expires_at: Optional[datetime] = None,
        license_id: Optional[uuid.UUID] = None,
    ) -> "License":
        """
        Create a new active License entity.

        Args:
            license_key: Human-presentable license key
            tier: Subscription tier
            email: Customer email
            customer_id: Payment provider customer reference
            order_id: Payment provider order reference
            subscription_id: Payment provider subscription reference
            max_activations: Number of device slots
            expires_at: Optional expiration datetime
            license_id: Optional UUID (generated if not provided)

        Returns:
            License entity instance
        """
        now = datetime.now(timezone.utc)
        return cls(
            id=license_id or uuid.uuid4(),
            license_key=license_key,
            tier=tier,
            status=LicenseStatus.ACTIVE,
            max_activations=max_activations,
            expires_at=expires_at,
            email=email,
            customer_id=customer_id,
            order_id=order_id,
            subscription_id=subscription_id,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_revoked(self) -> bool:
        """A revoked license can never become valid again."""
        return self.status == LicenseStatus.REVOKED

    def has_lapsed(self, current_time: Optional[datetime] = None) -> bool:
        """
        Check whether the expiry timestamp has passed.

        Args:
            current_time: Current time (defaults to now)

        Returns:
            True if an expiry is set and lies in the past
        """
        if self.expires_at is None:
            return False
        check_time = current_time or datetime.now(timezone.utc)
        return self.expires_at < check_time
