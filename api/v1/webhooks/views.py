"""
Payment provider webhook views.
"""

from asgiref.sync import async_to_sync
from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from webhooks.application.handlers.webhook_processor import WebhookProcessor
from webhooks.infrastructure.repositories.django_webhook_event_repository import (
    DjangoWebhookEventRepository,
)

_license_repo = DjangoLicenseRepository()
_activation_repo = DjangoActivationRepository()
_webhook_event_repo = DjangoWebhookEventRepository()

SIGNATURE_HEADER = "X-Signature"

tracer = get_tracer(__name__)


class LemonSqueezyWebhookView(APIView):
    """Receiver for LemonSqueezy webhook deliveries."""

    @extend_schema(
        operation_id="lemonsqueezy_webhook",
        summary="LemonSqueezy Webhook",
        description=(
            "Receive a signed payment provider event and apply the matching license "
            "transition. Redeliveries of a processed event are acknowledged without effect."
        ),
        tags=["Webhooks"],
        parameters=[
            OpenApiParameter(
                name=SIGNATURE_HEADER,
                type=str,
                location=OpenApiParameter.HEADER,
                required=True,
                description="HMAC-SHA256 hex digest of the raw body",
            ),
        ],
        request={"application/json": {"type": "object"}},
        responses={
            200: {"description": "Webhook processed or already processed"},
            400: {"description": "Malformed payload"},
            401: {"description": "Invalid signature"},
        },
    )
    def post(self, request: Request) -> Response:
        """Process a webhook delivery."""
        return async_to_sync(self._handle_webhook)(request)

    async def _handle_webhook(self, request: Request) -> Response:
        """Async handler for webhook delivery."""
        with tracer.start_as_current_span("process_webhook") as span:
            span.set_attribute("operation", "process_webhook")

            processor = WebhookProcessor(
                secret=settings.LEMONSQUEEZY_WEBHOOK_SECRET,
                webhook_event_repository=_webhook_event_repo,
                license_repository=_license_repo,
                activation_repository=_activation_repo,
            )
            result = await processor.process(request.body, request.headers.get(SIGNATURE_HEADER))

            span.set_attribute("webhook.event_id", result.event_id)
            span.set_attribute("webhook.outcome", result.outcome.value)
            span.set_status(Status(StatusCode.OK))
            return Response({"message": result.message}, status=status.HTTP_200_OK)
