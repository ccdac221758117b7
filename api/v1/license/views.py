"""
License API views.

These endpoints are called by installed desktop clients to:
- Activate a device
- Deactivate a device
- Validate a license
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activations.application.commands.activate_device import ActivateDeviceCommand
from activations.application.commands.deactivate_device import DeactivateDeviceCommand
from activations.application.handlers.activate_device_handler import ActivateDeviceHandler
from activations.application.handlers.deactivate_device_handler import DeactivateDeviceHandler
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from api.exceptions import validation_error_response
from api.v1.license.serializers import (
    ActivateRequestSerializer,
    ActivateResponseSerializer,
    DeactivateRequestSerializer,
    DeactivateResponseSerializer,
    ValidateRequestSerializer,
    ValidateResponseSerializer,
)
from core.domain.exceptions import DomainException
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.handlers.validate_license_handler import ValidateLicenseHandler
from licenses.application.queries.validate_license import ValidateLicenseQuery
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

# Initialize repositories (in production, use DI container)
_license_repo = DjangoLicenseRepository()
_activation_repo = DjangoActivationRepository()

tracer = get_tracer(__name__)


class ActivateView(APIView):
    """View for activating a device."""

    @extend_schema(
        operation_id="activate_device",
        summary="Activate Device",
        description=(
            "Bind a device to one of the license's activation slots. "
            "Re-activating an already activated device refreshes it without using a slot."
        ),
        tags=["License API"],
        request=ActivateRequestSerializer,
        responses={
            200: ActivateResponseSerializer,
            400: {"description": "Bad Request"},
            403: {"description": "License revoked, expired, or activation limit reached"},
            404: {"description": "License not found"},
        },
    )
    def post(self, request: Request) -> Response:
        """Activate a device."""
        return async_to_sync(self._handle_activate)(request)

    async def _handle_activate(self, request: Request) -> Response:
        """Async handler for activate."""
        with tracer.start_as_current_span("activate_device") as span:
            span.set_attribute("operation", "activate_device")

            serializer = ActivateRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_attribute("error", "validation_failed")
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            data = serializer.validated_data
            span.set_attribute("device_id", data["device_id"])

            handler = ActivateDeviceHandler(
                license_repository=_license_repo,
                activation_repository=_activation_repo,
            )
            command = ActivateDeviceCommand(
                license_key=data["license_key"],
                device_id=data["device_id"],
                device_name=data.get("device_name") or None,
            )

            try:
                result = await handler.handle(command)
            except DomainException as e:
                span.set_attribute("error", e.code)
                span.set_status(Status(StatusCode.ERROR, e.message))
                raise

            span.set_attribute("activation.count", result.count)
            span.set_status(Status(StatusCode.OK))
            return Response(result.to_dict(), status=status.HTTP_200_OK)


class DeactivateView(APIView):
    """View for deactivating a device."""

    @extend_schema(
        operation_id="deactivate_device",
        summary="Deactivate Device",
        description=(
            "Release the device's activation slot. Deactivating a device that is "
            "not activated is a no-op."
        ),
        tags=["License API"],
        request=DeactivateRequestSerializer,
        responses={
            200: DeactivateResponseSerializer,
            400: {"description": "Bad Request"},
            404: {"description": "License not found"},
        },
    )
    def post(self, request: Request) -> Response:
        """Deactivate a device."""
        return async_to_sync(self._handle_deactivate)(request)

    async def _handle_deactivate(self, request: Request) -> Response:
        """Async handler for deactivate."""
        with tracer.start_as_current_span("deactivate_device") as span:
            span.set_attribute("operation", "deactivate_device")

            serializer = DeactivateRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            data = serializer.validated_data
            handler = DeactivateDeviceHandler(
                license_repository=_license_repo,
                activation_repository=_activation_repo,
            )
            result = await handler.handle(
                DeactivateDeviceCommand(license_key=data["license_key"], device_id=data["device_id"])
            )

            span.set_attribute("device.removed", result.removed)
            span.set_status(Status(StatusCode.OK))
            return Response(result.to_dict(), status=status.HTTP_200_OK)


class ValidateView(APIView):
    """View for validating a license."""

    @extend_schema(
        operation_id="validate_license",
        summary="Validate License",
        description=(
            "Report whether a license currently grants access, with the tier's feature "
            "limits and the device's slot status. Unknown, revoked and expired licenses "
            "are reported with valid=false and free tier limits."
        ),
        tags=["License API"],
        request=ValidateRequestSerializer,
        responses={
            200: ValidateResponseSerializer,
            400: {"description": "Bad Request"},
        },
    )
    def post(self, request: Request) -> Response:
        """Validate a license."""
        return async_to_sync(self._handle_validate)(request)

    async def _handle_validate(self, request: Request) -> Response:
        """Async handler for validate."""
        with tracer.start_as_current_span("validate_license") as span:
            span.set_attribute("operation", "validate_license")

            serializer = ValidateRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            data = serializer.validated_data
            handler = ValidateLicenseHandler(
                license_repository=_license_repo,
                activation_repository=_activation_repo,
            )
            result = await handler.handle(
                ValidateLicenseQuery(
                    license_key=data["license_key"],
                    device_id=data.get("device_id") or None,
                )
            )

            span.set_attribute("license.valid", result.valid)
            span.set_status(Status(StatusCode.OK))
            return Response(result.to_dict(), status=status.HTTP_200_OK)
