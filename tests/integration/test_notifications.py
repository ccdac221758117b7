"""
Integration tests for customer notification emails.

Celery runs eagerly and Django's locmem backend collects the mail.
"""

from io import StringIO

import pytest
from asgiref.sync import async_to_sync
from django.conf import settings
from django.core import mail
from django.core.management import call_command

from webhooks.application.handlers.webhook_processor import WebhookProcessor


@pytest.fixture
def deliver(license_repository, activation_repository, webhook_event_repository, sign):
    """Send a signed body through a processor on the global event bus."""
    processor = WebhookProcessor(
        secret=settings.LEMONSQUEEZY_WEBHOOK_SECRET,
        webhook_event_repository=webhook_event_repository,
        license_repository=license_repository,
        activation_repository=activation_repository,
    )

    def _deliver(body):
        return async_to_sync(processor.process)(body, sign(body))

    return _deliver


def _order_body(webhook_body, order_id, variant="Pro"):
    return webhook_body(
        "order_created",
        order_id,
        user_email="buyer@example.com",
        first_order_item={"product_name": "Chrono", "variant_name": variant},
    )


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseNotifications:
    """Emails follow license issue and refund."""

    def test_order_sends_license_key(self, deliver, webhook_body, license_repository):
        deliver(_order_body(webhook_body, 3001))

        license = async_to_sync(license_repository.find_by_order_id)("3001")
        assert len(mail.outbox) == 1
        message = mail.outbox[0]
        assert message.subject == "Your Chrono Pro License Key"
        assert message.to == ["buyer@example.com"]
        assert license.license_key in message.body
        assert "up to 3 devices" in message.body

    def test_lifetime_order_subject(self, deliver, webhook_body):
        deliver(_order_body(webhook_body, 3002, variant="Lifetime"))

        assert mail.outbox[0].subject == "Your Chrono Lifetime License Key"

    def test_refund_sends_deactivation_notice(self, deliver, webhook_body, license_repository):
        deliver(_order_body(webhook_body, 3003))
        license = async_to_sync(license_repository.find_by_order_id)("3003")

        deliver(webhook_body("order_refunded", 3003))

        assert len(mail.outbox) == 2
        notice = mail.outbox[1]
        assert notice.subject == "Chrono License Deactivated"
        assert license.license_key in notice.body

    def test_order_without_email_sends_nothing(self, deliver, webhook_body):
        deliver(
            webhook_body(
                "order_created",
                3004,
                first_order_item={"product_name": "Chrono Pro"},
            )
        )

        assert mail.outbox == []

    def test_manual_license_sends_nothing(self):
        call_command("add_license", "--email", "support@example.com", stdout=StringIO())

        assert mail.outbox == []
