"""
License key generation.

Keys look like ``PRO-7KQ2-M9XD-4HTA``: a tier prefix followed by three
groups drawn from an alphabet without look-alike characters
(no 0/O, 1/I/L), so users can type them from an email.
"""

import re
import secrets

from core.domain.value_objects import LicenseTier

KEY_ALPHABET = "23456789ABCDEFGHJKMNPQRSTUVWXYZ"
GROUP_COUNT = 3
GROUP_LENGTH = 4

TIER_PREFIXES = {
    LicenseTier.PRO: "PRO",
    LicenseTier.LIFETIME: "LIFE",
}

LICENSE_KEY_PATTERN = re.compile(
    r"^(PRO|LIFE)(-[%s]{%d}){%d}$" % (KEY_ALPHABET, GROUP_LENGTH, GROUP_COUNT)
)


def generate_license_key(tier: LicenseTier) -> str:
    """
    Generate a license key in format: PREFIX-XXXX-XXXX-XXXX.

    Args:
        tier: Paid tier the key is issued for

    Returns:
        Generated license key string

    Raises:
        ValueError: If the tier has no key prefix (free tier)
    """
    if tier not in TIER_PREFIXES:
        raise ValueError(f"No license key prefix for tier: {tier}")
    groups = [
        "".join(secrets.choice(KEY_ALPHABET) for _ in range(GROUP_LENGTH))
        for _ in range(GROUP_COUNT)
    ]
    return f"{TIER_PREFIXES[tier]}-{'-'.join(groups)}"


def is_well_formed(key: str) -> bool:
    """Check whether a key matches the generated key format."""
    return bool(LICENSE_KEY_PATTERN.match(key or ""))
