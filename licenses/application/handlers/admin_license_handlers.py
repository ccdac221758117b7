"""
Administrative license query handlers.
"""

from activations.ports.activation_repository import ActivationRepository
from core.domain.exceptions import LicenseNotFoundError
from licenses.application.dto.license_dto import LicenseDetailDTO, LicenseDTO, LicenseListDTO
from licenses.application.queries.list_licenses import GetLicenseDetailQuery, ListLicensesQuery
from licenses.ports.license_repository import LicenseRepository


class ListLicensesHandler:
    """Handler for ListLicensesQuery."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repositories."""
        self.license_repository = license_repository

    async def handle(self, query: ListLicensesQuery) -> LicenseListDTO:
        """
        Search licenses when a search term is given, else page through all.

        Args:
            query: ListLicensesQuery

        Returns:
            LicenseListDTO, newest first
        """
        if query.search:
            licenses = await self.license_repository.search(query.search, limit=query.limit)
            offset = 0
        else:
            licenses = await self.license_repository.list(limit=query.limit, offset=query.offset)
            offset = query.offset
        return LicenseListDTO(
            licenses=[LicenseDTO.from_entity(license) for license in licenses],
            limit=query.limit,
            offset=offset,
            search=query.search,
        )


class GetLicenseDetailHandler:
    """Handler for GetLicenseDetailQuery."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.activation_repository = activation_repository

    async def handle(self, query: GetLicenseDetailQuery) -> LicenseDetailDTO:
        """
        Load a license and its activations, most recent first.

        Args:
            query: GetLicenseDetailQuery

        Returns:
            LicenseDetailDTO

        Raises:
            LicenseNotFoundError: If the license does not exist
        """
        license = await self.license_repository.find_by_id(query.license_id)
        if not license:
            raise LicenseNotFoundError()
        activations = await self.activation_repository.list_by_license(license.id)
        return LicenseDetailDTO(
            license=LicenseDTO.from_entity(license),
            activations=[activation.to_dict() for activation in activations],
        )
