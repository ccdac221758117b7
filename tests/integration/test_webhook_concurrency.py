"""
Concurrency tests for webhook delivery.

Provider retries can arrive in parallel. Each worker thread opens its own
database connection, so these tests need real transactions.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest
from asgiref.sync import async_to_sync
from django.conf import settings
from django.db import connection

from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from licenses.domain.events import LicenseIssued
from licenses.infrastructure.models import License as LicenseModel
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from webhooks.application.dto.webhook_dto import TransitionOutcome
from webhooks.application.handlers.webhook_processor import WebhookProcessor
from webhooks.infrastructure.models import WebhookEvent as WebhookEventModel
from webhooks.infrastructure.repositories.django_webhook_event_repository import (
    DjangoWebhookEventRepository,
)


def _deliver_in_thread(body, signature, event_bus):
    processor = WebhookProcessor(
        secret=settings.LEMONSQUEEZY_WEBHOOK_SECRET,
        webhook_event_repository=DjangoWebhookEventRepository(),
        license_repository=DjangoLicenseRepository(),
        activation_repository=DjangoActivationRepository(),
        event_bus=event_bus,
    )
    try:
        return async_to_sync(processor.process)(body, signature)
    finally:
        connection.close()


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
class TestConcurrentDelivery:
    """Parallel deliveries of one event must apply it exactly once."""

    @pytest.mark.parametrize("workers", [2, 6])
    def test_same_order_delivered_in_parallel(self, webhook_body, sign, recording_bus, workers):
        body = webhook_body(
            "order_created",
            4001,
            user_email="buyer@example.com",
            first_order_item={"product_name": "Chrono Pro", "variant_name": None},
        )
        signature = sign(body)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(
                pool.map(
                    lambda _: _deliver_in_thread(body, signature, recording_bus),
                    range(workers),
                )
            )

        messages = sorted(result.message for result in results)
        assert messages == ["Already processed"] * (workers - 1) + ["Webhook processed"]
        applied = [r for r in results if r.outcome == TransitionOutcome.APPLIED]
        assert len(applied) == 1
        assert all(r.event_id == "order_created-4001" for r in results)
        assert LicenseModel.objects.count() == 1
        assert WebhookEventModel.objects.count() == 1
        assert len(recording_bus.of_type(LicenseIssued)) == 1
