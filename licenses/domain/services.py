"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from core.domain.value_objects import LicenseStatus, LicenseTier
from licenses.domain.license import License

# Covers payment processing delay after a subscription's renewal date
RENEWAL_GRACE_PERIOD = timedelta(days=3)

REASON_REVOKED = "revoked"
REASON_EXPIRED = "expired"


@dataclass(frozen=True)
class Validity:
    """Outcome of a license validity check."""

    valid: bool
    reason: Optional[str] = None

    @property
    def message(self) -> Optional[str]:
        """Human-readable explanation of an invalid outcome."""
        if self.reason == REASON_REVOKED:
            return "License has been revoked"
        if self.reason == REASON_EXPIRED:
            return "License has expired"
        return None


class LicenseValidator:
    """Domain service for license validation."""

    @staticmethod
    def validity(license: License, current_time: Optional[datetime] = None) -> Validity:
        """
        Decide whether a license currently grants access.

        The expiry timestamp wins over a stale ``active`` status, since
        webhook delivery can lag behind the real end of a subscription.

        Args:
            license: License entity to validate
            current_time: Current time (defaults to now)

        Returns:
            Validity outcome with the reason when invalid
        """
        if license.status == LicenseStatus.REVOKED:
            return Validity(valid=False, reason=REASON_REVOKED)
        if license.status == LicenseStatus.EXPIRED:
            return Validity(valid=False, reason=REASON_EXPIRED)
        if license.has_lapsed(current_time):
            return Validity(valid=False, reason=REASON_EXPIRED)
        return Validity(valid=True)

    @staticmethod
    def can_activate(license: License, is_activated: bool, activation_count: int) -> bool:
        """
        Check if a device may hold a slot on the license.

        Args:
            license: License entity
            is_activated: Whether the device already holds a slot
            activation_count: Number of slots currently taken

        Returns:
            True if the device has a slot or a free slot remains
        """
        return is_activated or activation_count < license.max_activations


def calculate_expiry(
    renews_at: Optional[datetime], ends_at: Optional[datetime]
) -> Optional[datetime]:
    """
    Compute a subscription license's expiry from provider dates.

    Args:
        renews_at: Next renewal date of the subscription
        ends_at: Date the subscription ends, when it is ending

    Returns:
        ``ends_at`` when present, else ``renews_at`` plus the grace
        period, else ``None`` (no expiry)
    """
    if ends_at is not None:
        return ends_at
    if renews_at is not None:
        return renews_at + RENEWAL_GRACE_PERIOD
    return None


def parse_tier_from_product(
    product_name: Optional[str], variant_name: Optional[str] = None
) -> LicenseTier:
    """
    Derive the license tier from the purchased product.

    Args:
        product_name: Product name from the order
        variant_name: Variant name from the order

    Returns:
        LIFETIME if the variant name, or the product name when there is
        no variant, mentions "lifetime", else PRO
    """
    name = variant_name or product_name or ""
    if "lifetime" in name.lower():
        return LicenseTier.LIFETIME
    return LicenseTier.PRO


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)
