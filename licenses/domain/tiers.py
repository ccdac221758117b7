"""
Tier feature limits.

Maps each subscription tier to the features the desktop client unlocks.
``None`` means unlimited.
"""
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from core.domain.value_objects import LicenseTier


@dataclass(frozen=True)
class FeatureLimits:
    """Feature limits granted by a tier."""

    max_session_types: Optional[int]
    max_goals: Optional[int]
    analytics_days: Optional[int]
    has_invoices: bool
    has_ai_advisor: bool
    has_voice_input: bool
    has_simulator: bool
    has_pdf_export: bool
    advisor_daily_quota: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert limits to the wire representation."""
        return asdict(self)


FREE_LIMITS = FeatureLimits(
    max_session_types=2,
    max_goals=3,
    analytics_days=7,
    has_invoices=False,
    has_ai_advisor=True,
    has_voice_input=False,
    has_simulator=False,
    has_pdf_export=False,
    advisor_daily_quota=10,
)

PAID_LIMITS = FeatureLimits(
    max_session_types=None,
    max_goals=None,
    analytics_days=None,
    has_invoices=True,
    has_ai_advisor=True,
    has_voice_input=True,
    has_simulator=True,
    has_pdf_export=True,
    advisor_daily_quota=100,
)

TIER_LIMITS = {
    LicenseTier.FREE: FREE_LIMITS,
    LicenseTier.PRO: PAID_LIMITS,
    LicenseTier.LIFETIME: PAID_LIMITS,
}


def limits_for(tier: LicenseTier) -> FeatureLimits:
    """
    Get the feature limits for a tier.

    Args:
        tier: Subscription tier

    Returns:
        FeatureLimits for the tier
    """
    return TIER_LIMITS[tier]
