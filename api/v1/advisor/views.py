"""
Advisor API views.
"""

from zoneinfo import ZoneInfo

from asgiref.sync import async_to_sync
from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from advisor.application.commands.ask_advisor import AskAdvisorCommand
from advisor.application.handlers.ask_advisor_handler import AskAdvisorHandler
from advisor.domain.rate_limiter import DailyRateLimiter
from advisor.infrastructure.openai_completion_client import OpenAICompletionClient
from api.exceptions import validation_error_response
from api.v1.advisor.serializers import ChatRequestSerializer, ChatResponseSerializer
from core.domain.exceptions import DomainException
from core.infrastructure.counter_store_adapters import get_counter_store
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.domain.services import utc_now
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

_license_repo = DjangoLicenseRepository()
_activation_repo = DjangoActivationRepository()

tracer = get_tracer(__name__)


def get_completion_client() -> OpenAICompletionClient:
    """Build the completion client from settings."""
    return OpenAICompletionClient()


def get_rate_limiter() -> DailyRateLimiter:
    """Build the advisor rate limiter from settings."""
    return DailyRateLimiter(
        store=get_counter_store(),
        clock=utc_now,
        tz=ZoneInfo(settings.TIME_ZONE),
    )


class ChatView(APIView):
    """View for advisor questions."""

    @extend_schema(
        operation_id="advisor_chat",
        summary="Ask Advisor",
        description=(
            "Ask the AI advisor a question about the user's tracked work and goals. "
            "Requires a valid license and an activated device; each device has a "
            "daily quota set by the license tier."
        ),
        tags=["Advisor API"],
        request=ChatRequestSerializer,
        responses={
            200: ChatResponseSerializer,
            400: {"description": "Bad Request"},
            403: {"description": "License invalid or device not activated"},
            429: {"description": "Daily limit reached"},
            502: {"description": "AI service error"},
        },
    )
    def post(self, request: Request) -> Response:
        """Ask the advisor."""
        return async_to_sync(self._handle_chat)(request)

    async def _handle_chat(self, request: Request) -> Response:
        """Async handler for advisor chat."""
        with tracer.start_as_current_span("advisor_chat") as span:
            span.set_attribute("operation", "advisor_chat")

            serializer = ChatRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return validation_error_response(serializer.errors)

            data = serializer.validated_data
            handler = AskAdvisorHandler(
                license_repository=_license_repo,
                activation_repository=_activation_repo,
                rate_limiter=get_rate_limiter(),
                completion_client=get_completion_client(),
            )
            try:
                result = await handler.handle(
                    AskAdvisorCommand(
                        license_key=data["license_key"],
                        device_id=data["device_id"],
                        question=data["question"],
                        context=data["context"],
                    )
                )
            except DomainException as e:
                span.set_attribute("error", e.code)
                span.set_status(Status(StatusCode.ERROR, e.message))
                raise

            span.set_attribute("advisor.remaining", result.usage.remaining)
            span.set_status(Status(StatusCode.OK))
            return Response(result.to_dict(), status=status.HTTP_200_OK)
