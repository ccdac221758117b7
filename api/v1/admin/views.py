"""
Admin API views.

These endpoints are used by operators to:
- Search and list licenses
- Inspect a license and its devices
- Revoke a license

Requests are authenticated by the admin token middleware.
"""

import uuid

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from api.exceptions import validation_error_response
from api.v1.admin.serializers import (
    LicenseDetailResponseSerializer,
    LicenseListQuerySerializer,
    LicenseListResponseSerializer,
    RevokeLicenseResponseSerializer,
)
from core.domain.exceptions import DomainException
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.handlers.admin_license_handlers import (
    GetLicenseDetailHandler,
    ListLicensesHandler,
)
from licenses.application.handlers.revoke_license_handler import RevokeLicenseHandler
from licenses.application.queries.list_licenses import GetLicenseDetailQuery, ListLicensesQuery
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

# Initialize repositories (in production, use DI container)
_license_repo = DjangoLicenseRepository()
_activation_repo = DjangoActivationRepository()

tracer = get_tracer(__name__)

ADMIN_TOKEN_PARAMETER = OpenApiParameter(
    name="X-Admin-Token",
    type=str,
    location=OpenApiParameter.HEADER,
    required=True,
    description="Static administrator token",
)


class LicenseListView(APIView):
    """View for searching and listing licenses."""

    @extend_schema(
        operation_id="admin_list_licenses",
        summary="List Licenses",
        description=(
            "Search licenses by key or email with q, or page through all licenses "
            "newest first with limit and offset."
        ),
        tags=["Admin API"],
        parameters=[
            ADMIN_TOKEN_PARAMETER,
            OpenApiParameter(name="q", type=str, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(
                name="limit", type=int, location=OpenApiParameter.QUERY, required=False
            ),
            OpenApiParameter(
                name="offset", type=int, location=OpenApiParameter.QUERY, required=False
            ),
        ],
        responses={
            200: LicenseListResponseSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Unauthorized - Missing or invalid admin token"},
        },
    )
    def get(self, request: Request) -> Response:
        """List licenses."""
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        """Async handler for list licenses."""
        with tracer.start_as_current_span("admin_list_licenses") as span:
            serializer = LicenseListQuerySerializer(data=request.query_params)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            data = serializer.validated_data
            handler = ListLicensesHandler(license_repository=_license_repo)
            result = await handler.handle(
                ListLicensesQuery(
                    search=data["search"],
                    limit=data["limit"],
                    offset=data["offset"],
                )
            )

            span.set_attribute("licenses.count", len(result.licenses))
            span.set_status(Status(StatusCode.OK))
            return Response(
                {
                    "licenses": [dto.to_dict() for dto in result.licenses],
                    "count": len(result.licenses),
                    "limit": result.limit,
                    "offset": result.offset,
                },
                status=status.HTTP_200_OK,
            )


class LicenseDetailView(APIView):
    """View for one license and its activations."""

    @extend_schema(
        operation_id="admin_get_license",
        summary="Get License",
        description="Get a license with its device activations, most recent first.",
        tags=["Admin API"],
        parameters=[ADMIN_TOKEN_PARAMETER],
        responses={
            200: LicenseDetailResponseSerializer,
            401: {"description": "Unauthorized - Missing or invalid admin token"},
            404: {"description": "License not found"},
        },
    )
    def get(self, request: Request, license_id: uuid.UUID) -> Response:
        """Get a license."""
        return async_to_sync(self._handle_detail)(request, license_id)

    async def _handle_detail(self, request: Request, license_id: uuid.UUID) -> Response:
        """Async handler for license detail."""
        with tracer.start_as_current_span("admin_get_license") as span:
            span.set_attribute("license.id", str(license_id))

            handler = GetLicenseDetailHandler(
                license_repository=_license_repo,
                activation_repository=_activation_repo,
            )
            result = await handler.handle(GetLicenseDetailQuery(license_id=license_id))

            span.set_status(Status(StatusCode.OK))
            return Response(
                {"license": result.license.to_dict(), "activations": result.activations},
                status=status.HTTP_200_OK,
            )


class RevokeLicenseView(APIView):
    """View for revoking a license."""

    @extend_schema(
        operation_id="admin_revoke_license",
        summary="Revoke License",
        description=(
            "Revoke a license and remove all of its device activations. "
            "Revocation is permanent."
        ),
        tags=["Admin API"],
        parameters=[ADMIN_TOKEN_PARAMETER],
        request=None,
        responses={
            200: RevokeLicenseResponseSerializer,
            401: {"description": "Unauthorized - Missing or invalid admin token"},
            404: {"description": "License not found"},
        },
    )
    def post(self, request: Request, license_id: uuid.UUID) -> Response:
        """Revoke a license."""
        return async_to_sync(self._handle_revoke)(request, license_id)

    async def _handle_revoke(self, request: Request, license_id: uuid.UUID) -> Response:
        """Async handler for revoke license."""
        with tracer.start_as_current_span("admin_revoke_license") as span:
            span.set_attribute("license.id", str(license_id))

            handler = RevokeLicenseHandler(
                license_repository=_license_repo,
                activation_repository=_activation_repo,
            )
            try:
                result = await handler.handle(
                    RevokeLicenseCommand(
                        license_id=license_id, reason="admin", notify_customer=False
                    )
                )
            except DomainException as e:
                span.set_attribute("error", e.code)
                span.set_status(Status(StatusCode.ERROR, e.message))
                raise

            span.set_attribute("activations.removed", result.activations_removed)
            span.set_status(Status(StatusCode.OK))
            return Response(
                {
                    "success": True,
                    "message": "License revoked",
                    "license_key": result.license_key,
                },
                status=status.HTTP_200_OK,
            )
