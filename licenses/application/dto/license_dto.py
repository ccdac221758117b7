"""
License DTOs for API responses.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from licenses.domain.license import License


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class LicenseDTO:
    """DTO for license information."""

    id: uuid.UUID
    license_key: str
    tier: str
    status: str
    email: Optional[str]
    customer_id: Optional[str]
    order_id: Optional[str]
    subscription_id: Optional[str]
    max_activations: int
    expires_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, license: License) -> "LicenseDTO":
        """
        Build the DTO from a License entity.

        Args:
            license: License entity

        Returns:
            LicenseDTO
        """
        return cls(
            id=license.id,
            license_key=license.license_key,
            tier=license.tier.value,
            status=license.status.value,
            email=license.email,
            customer_id=license.customer_id,
            order_id=license.order_id,
            subscription_id=license.subscription_id,
            max_activations=license.max_activations,
            expires_at=license.expires_at,
            created_at=license.created_at,
            updated_at=license.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "license_key": self.license_key,
            "tier": self.tier,
            "status": self.status,
            "email": self.email,
            "customer_id": self.customer_id,
            "order_id": self.order_id,
            "subscription_id": self.subscription_id,
            "max_activations": self.max_activations,
            "expires_at": _isoformat(self.expires_at),
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
        }


@dataclass
class LicenseValidationDTO:
    """
    DTO for validate response.

    Unknown and invalid licenses carry ``valid=False``, an error message
    and the free tier limits; they are answers, not errors.
    """

    valid: bool
    limits: Dict[str, Any]
    tier: Optional[str] = None
    status: Optional[str] = None
    expires_at: Optional[datetime] = None
    activation: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"valid": self.valid, "limits": self.limits}
        if self.tier is not None:
            data["tier"] = self.tier
        if self.status is not None:
            data["status"] = self.status
        if self.valid:
            data["expires_at"] = _isoformat(self.expires_at)
        if self.activation is not None:
            data["activation"] = self.activation
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class RevokeLicenseResultDTO:
    """DTO for revoke response."""

    license_id: uuid.UUID
    license_key: str
    activations_removed: int


@dataclass
class LicenseListDTO:
    """DTO for admin license listing."""

    licenses: List[LicenseDTO]
    limit: int
    offset: int
    search: Optional[str] = None


@dataclass
class LicenseDetailDTO:
    """DTO for admin license detail."""

    license: LicenseDTO
    activations: List[Dict[str, Any]] = field(default_factory=list)
