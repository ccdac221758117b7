"""
Django implementation of WebhookEventRepository port.
"""
import logging

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from webhooks.infrastructure.models import WebhookEvent as WebhookEventModel
from webhooks.ports.webhook_event_repository import WebhookEventRepository

logger = logging.getLogger(__name__)


class DjangoWebhookEventRepository(WebhookEventRepository):
    """
    Django ORM implementation of WebhookEventRepository.

    Claims rely on the unique constraint on ``event_id``: of two concurrent
    inserts for the same key exactly one succeeds.
    """

    @sync_to_async
    def claim(self, event_id: str, event_type: str) -> bool:
        """
        Atomically record an event as processed if it is not yet recorded.

        Args:
            event_id: Idempotency key of the delivery
            event_type: Provider event name

        Returns:
            True if this call recorded the event, False if it already was
        """
        try:
            with transaction.atomic():
                WebhookEventModel.objects.create(event_id=event_id, event_type=event_type)
        except IntegrityError:
            logger.info("Webhook event already claimed", extra={"event_id": event_id})
            return False
        return True

    @sync_to_async
    def release(self, event_id: str) -> None:
        WebhookEventModel.objects.filter(event_id=event_id).delete()
