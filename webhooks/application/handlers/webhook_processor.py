"""
WebhookProcessor.

Verifies, de-duplicates and dispatches payment provider deliveries.
"""

import logging
from typing import Dict, Optional, Type

from activations.ports.activation_repository import ActivationRepository
from core.domain.events import EventBus
from core.domain.exceptions import (
    InvalidWebhookSignatureError,
    WebhookConfigurationError,
)
from core.metrics import webhook_events_total
from licenses.ports.license_repository import LicenseRepository
from webhooks.application.dto.webhook_dto import TransitionOutcome, WebhookResultDTO
from webhooks.application.handlers.transitions import (
    TRANSITION_HANDLERS,
    TransitionHandler,
)
from webhooks.domain.signature import verify_signature
from webhooks.domain.webhook_event import WebhookEventType, parse_payload
from webhooks.ports.webhook_event_repository import WebhookEventRepository

logger = logging.getLogger(__name__)


class WebhookProcessor:
    """
    Processes one webhook delivery.

    The signature is checked against the raw body before anything is
    parsed. A delivery is claimed under its idempotency key before its
    transition runs; a redelivery of a claimed key is acknowledged
    without effect. If a transition fails unexpectedly the claim is
    released so the provider's retry is processed.
    """

    def __init__(
        self,
        secret: Optional[str],
        webhook_event_repository: WebhookEventRepository,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
        event_bus: EventBus = None,
        transitions: Dict[WebhookEventType, Type[TransitionHandler]] = None,
    ):
        """
        Initialize processor.

        Args:
            secret: Webhook signing secret
            webhook_event_repository: Idempotency marker repository
            license_repository: License repository
            activation_repository: Activation repository
            event_bus: Event bus passed to transitions
            transitions: Event type to transition table
        """
        self.secret = secret
        self.webhook_event_repository = webhook_event_repository
        self.license_repository = license_repository
        self.activation_repository = activation_repository
        self.event_bus = event_bus
        self.transitions = transitions or TRANSITION_HANDLERS

    async def process(self, raw_body: bytes, signature: Optional[str]) -> WebhookResultDTO:
        """
        Process a delivery.

        Args:
            raw_body: Request body exactly as received
            signature: Value of the signature header

        Returns:
            WebhookResultDTO

        Raises:
            WebhookConfigurationError: If no signing secret is configured
            InvalidWebhookSignatureError: If the signature does not match
            InvalidWebhookPayloadError: If the signed body is not a provider event
        """
        if not self.secret:
            logger.error("Webhook signing secret is not configured")
            raise WebhookConfigurationError()

        if not verify_signature(raw_body, signature or "", self.secret):
            webhook_events_total.labels(event_type="unknown", outcome="invalid_signature").inc()
            logger.warning("Rejected webhook with invalid signature")
            raise InvalidWebhookSignatureError()

        payload = parse_payload(raw_body)
        event_id = payload.idempotency_key

        claimed = await self.webhook_event_repository.claim(event_id, payload.event_name)
        if not claimed:
            webhook_events_total.labels(event_type=payload.event_name, outcome="duplicate").inc()
            logger.info("Webhook already processed", extra={"event_id": event_id})
            return WebhookResultDTO(
                message="Already processed",
                event_id=event_id,
                outcome=TransitionOutcome.DUPLICATE,
                event_name=payload.event_name,
            )

        event_type = payload.event_type
        if event_type is None:
            webhook_events_total.labels(event_type="unhandled", outcome="ignored").inc()
            logger.info(
                "Ignoring unhandled webhook event",
                extra={"event_name": payload.event_name, "event_id": event_id},
            )
            return WebhookResultDTO(
                message="Webhook processed",
                event_id=event_id,
                outcome=TransitionOutcome.IGNORED,
                event_name=payload.event_name,
            )

        transition = self.transitions[event_type](
            license_repository=self.license_repository,
            activation_repository=self.activation_repository,
            event_bus=self.event_bus,
        )
        try:
            outcome = await transition.apply(payload)
        except Exception:
            await self.webhook_event_repository.release(event_id)
            webhook_events_total.labels(event_type=event_type.value, outcome="error").inc()
            logger.exception(
                "Webhook transition failed, claim released",
                extra={"event_name": payload.event_name, "event_id": event_id},
            )
            raise

        webhook_events_total.labels(event_type=event_type.value, outcome=outcome.value).inc()
        logger.info(
            "Processed webhook",
            extra={
                "event_name": payload.event_name,
                "event_id": event_id,
                "outcome": outcome.value,
            },
        )
        return WebhookResultDTO(
            message="Webhook processed",
            event_id=event_id,
            outcome=outcome,
            event_name=payload.event_name,
        )
