"""
ValidateLicenseHandler.

Handler for the client validate query.
"""

from activations.domain.services import ActivationLedger
from activations.ports.activation_repository import ActivationRepository
from core.domain.value_objects import LicenseTier
from licenses.application.dto.license_dto import LicenseValidationDTO
from licenses.application.queries.validate_license import ValidateLicenseQuery
from licenses.domain.services import LicenseValidator, utc_now
from licenses.domain.tiers import limits_for
from licenses.ports.license_repository import LicenseRepository


class ValidateLicenseHandler:
    """Handler for ValidateLicenseQuery."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.activation_repository = activation_repository

    async def handle(self, query: ValidateLicenseQuery) -> LicenseValidationDTO:
        """
        Handle validate license query.

        Never raises for business invalidity: unknown, revoked and expired
        licenses are reported with ``valid=False`` and free tier limits.

        Args:
            query: ValidateLicenseQuery

        Returns:
            LicenseValidationDTO
        """
        free_limits = limits_for(LicenseTier.FREE).to_dict()

        license = await self.license_repository.find_by_key(query.license_key)
        if not license:
            return LicenseValidationDTO(
                valid=False,
                limits=free_limits,
                error="License not found",
            )

        validity = LicenseValidator.validity(license, utc_now())
        if not validity.valid:
            return LicenseValidationDTO(
                valid=False,
                limits=free_limits,
                tier=LicenseTier.FREE.value,
                status=license.status.value,
                error=validity.message,
            )

        device_status = await ActivationLedger.device_status(
            license, query.device_id, self.activation_repository
        )
        return LicenseValidationDTO(
            valid=True,
            limits=limits_for(license.tier).to_dict(),
            tier=license.tier.value,
            status=license.status.value,
            expires_at=license.expires_at,
            activation=device_status.to_dict(),
        )
