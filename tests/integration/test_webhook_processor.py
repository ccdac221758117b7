"""
Integration tests for webhook processing against the database.
"""

from datetime import datetime, timedelta, timezone

import pytest
from asgiref.sync import async_to_sync
from django.conf import settings

from core.domain.exceptions import (
    InvalidWebhookPayloadError,
    InvalidWebhookSignatureError,
    WebhookConfigurationError,
)
from core.domain.value_objects import LicenseStatus, LicenseTier
from licenses.application.handlers.validate_license_handler import ValidateLicenseHandler
from licenses.application.queries.validate_license import ValidateLicenseQuery
from licenses.domain.events import LicenseIssued, LicenseLapsed, LicenseRenewed, LicenseRevoked
from licenses.infrastructure.models import License as LicenseModel
from webhooks.application.dto.webhook_dto import TransitionOutcome
from webhooks.application.handlers.transitions import TRANSITION_HANDLERS, TransitionHandler
from webhooks.application.handlers.webhook_processor import WebhookProcessor
from webhooks.domain.webhook_event import WebhookEventType
from webhooks.infrastructure.models import WebhookEvent as WebhookEventModel

WEBHOOK_SECRET = settings.LEMONSQUEEZY_WEBHOOK_SECRET


@pytest.fixture
def processor(
    license_repository, activation_repository, webhook_event_repository, recording_bus
):
    """Fixture for a WebhookProcessor publishing to the recording bus."""
    return WebhookProcessor(
        secret=WEBHOOK_SECRET,
        webhook_event_repository=webhook_event_repository,
        license_repository=license_repository,
        activation_repository=activation_repository,
        event_bus=recording_bus,
    )


@pytest.fixture
def deliver(processor, sign):
    """Send a signed body through the processor."""

    def _deliver(body, signature=None):
        return async_to_sync(processor.process)(body, signature or sign(body))

    return _deliver


def _order(webhook_body, order_id, product="Chrono Pro", variant=None, **attributes):
    return webhook_body(
        "order_created",
        order_id,
        user_email="buyer@example.com",
        user_name="Buyer",
        customer_id=77,
        first_order_item={"product_name": product, "variant_name": variant},
        **attributes,
    )


@pytest.mark.django_db
@pytest.mark.integration
class TestOrderWebhooks:
    """Tests for one-off purchases."""

    def test_order_issues_pro_license(
        self, deliver, webhook_body, license_repository, recording_bus
    ):
        result = deliver(_order(webhook_body, 1001))

        assert result.message == "Webhook processed"
        assert result.outcome == TransitionOutcome.APPLIED
        license = async_to_sync(license_repository.find_by_order_id)("1001")
        assert license.tier == LicenseTier.PRO
        assert license.status == LicenseStatus.ACTIVE
        assert license.email == "buyer@example.com"
        assert license.customer_id == "77"
        assert license.expires_at is None
        assert license.license_key.startswith("PRO-")

        issued = recording_bus.of_type(LicenseIssued)
        assert len(issued) == 1
        assert issued[0].license_key == license.license_key

    def test_lifetime_variant_issues_lifetime_license(
        self, deliver, webhook_body, license_repository
    ):
        deliver(_order(webhook_body, 1002, product="Chrono", variant="Lifetime"))

        license = async_to_sync(license_repository.find_by_order_id)("1002")
        assert license.tier == LicenseTier.LIFETIME

    def test_order_without_item_is_skipped_but_claimed(self, deliver, webhook_body):
        result = deliver(webhook_body("order_created", 1003, user_email="buyer@example.com"))

        assert result.outcome == TransitionOutcome.SKIPPED
        assert LicenseModel.objects.count() == 0
        assert WebhookEventModel.objects.filter(event_id="order_created-1003").exists()

    def test_replay_is_already_processed(self, deliver, webhook_body):
        body = _order(webhook_body, 1004)
        deliver(body)

        result = deliver(body)

        assert result.message == "Already processed"
        assert result.duplicate
        assert LicenseModel.objects.filter(order_id="1004").count() == 1

    def test_refund_revokes_and_releases_devices(
        self,
        deliver,
        webhook_body,
        license_repository,
        activation_repository,
        activate,
        recording_bus,
    ):
        deliver(_order(webhook_body, 1005))
        license = async_to_sync(license_repository.find_by_order_id)("1005")
        activate(license, "device-1")
        activate(license, "device-2")

        result = deliver(webhook_body("order_refunded", 1005))

        assert result.outcome == TransitionOutcome.APPLIED
        revoked = async_to_sync(license_repository.find_by_id)(license.id)
        assert revoked.status == LicenseStatus.REVOKED
        assert async_to_sync(activation_repository.count_by_license)(license.id) == 0
        assert recording_bus.of_type(LicenseRevoked)[0].activations_removed == 2

        validation = async_to_sync(
            ValidateLicenseHandler(license_repository, activation_repository).handle
        )(ValidateLicenseQuery(license_key=license.license_key, device_id="device-1"))
        assert validation.valid is False
        assert validation.tier == LicenseTier.FREE.value

    def test_refund_for_unknown_order_is_skipped(self, deliver, webhook_body):
        result = deliver(webhook_body("order_refunded", 9999))

        assert result.outcome == TransitionOutcome.SKIPPED


@pytest.mark.django_db
@pytest.mark.integration
class TestSubscriptionWebhooks:
    """Tests for subscription lifecycle events."""

    def test_subscription_created_uses_renewal_with_grace(
        self, deliver, webhook_body, license_repository
    ):
        renews_at = datetime(2030, 1, 1, tzinfo=timezone.utc)
        deliver(
            webhook_body(
                "subscription_created",
                501,
                user_email="sub@example.com",
                renews_at=renews_at.isoformat(),
            )
        )

        license = async_to_sync(license_repository.find_by_subscription_id)("501")
        assert license.tier == LicenseTier.PRO
        assert license.expires_at == renews_at + timedelta(days=3)

    def test_subscription_created_prefers_ends_at(
        self, deliver, webhook_body, license_repository
    ):
        ends_at = datetime(2030, 6, 1, tzinfo=timezone.utc)
        deliver(
            webhook_body(
                "subscription_created",
                502,
                renews_at="2030-01-01T00:00:00+00:00",
                ends_at=ends_at.isoformat(),
            )
        )

        license = async_to_sync(license_repository.find_by_subscription_id)("502")
        assert license.expires_at == ends_at

    def test_update_extends_and_reactivates_expired(
        self, deliver, webhook_body, make_license, license_repository, past, recording_bus
    ):
        license = make_license(subscription_id="503", expires_at=past)
        async_to_sync(license_repository.set_status)(license.id, LicenseStatus.EXPIRED)
        renews_at = datetime(2031, 1, 1, tzinfo=timezone.utc)

        deliver(webhook_body("subscription_updated", 503, renews_at=renews_at.isoformat()))

        renewed = async_to_sync(license_repository.find_by_id)(license.id)
        assert renewed.status == LicenseStatus.ACTIVE
        assert renewed.expires_at == renews_at + timedelta(days=3)
        assert recording_bus.of_type(LicenseRenewed)[0].reactivated is True

    def test_payment_success_does_not_revive_revoked(
        self, deliver, webhook_body, make_license, license_repository
    ):
        license = make_license(subscription_id="504")
        async_to_sync(license_repository.set_status)(license.id, LicenseStatus.REVOKED)

        deliver(
            webhook_body(
                "subscription_payment_success", 504, renews_at="2031-01-01T00:00:00+00:00"
            )
        )

        found = async_to_sync(license_repository.find_by_id)(license.id)
        assert found.status == LicenseStatus.REVOKED

    def test_cancel_with_future_end_keeps_access(
        self, deliver, webhook_body, make_license, license_repository, future, recording_bus
    ):
        license = make_license(subscription_id="505")

        deliver(webhook_body("subscription_cancelled", 505, ends_at=future.isoformat()))

        found = async_to_sync(license_repository.find_by_id)(license.id)
        assert found.status == LicenseStatus.ACTIVE
        assert found.expires_at == future
        assert recording_bus.of_type(LicenseLapsed)[0].expired_now is False

    def test_cancel_with_past_end_expires(
        self, deliver, webhook_body, make_license, license_repository, past
    ):
        license = make_license(subscription_id="506")

        deliver(webhook_body("subscription_cancelled", 506, ends_at=past.isoformat()))

        found = async_to_sync(license_repository.find_by_id)(license.id)
        assert found.status == LicenseStatus.EXPIRED
        assert found.expires_at == past

    def test_payment_failed_without_end_expires_immediately(
        self, deliver, webhook_body, make_license, license_repository
    ):
        license = make_license(subscription_id="507")

        deliver(webhook_body("subscription_payment_failed", 507))

        found = async_to_sync(license_repository.find_by_id)(license.id)
        assert found.status == LicenseStatus.EXPIRED

    def test_lapse_never_downgrades_revoked(
        self, deliver, webhook_body, make_license, license_repository
    ):
        license = make_license(subscription_id="508")
        async_to_sync(license_repository.set_status)(license.id, LicenseStatus.REVOKED)

        deliver(webhook_body("subscription_payment_failed", 508))

        found = async_to_sync(license_repository.find_by_id)(license.id)
        assert found.status == LicenseStatus.REVOKED


@pytest.mark.django_db
@pytest.mark.integration
class TestWebhookRejections:
    """Tests for deliveries that must not change state."""

    def test_bad_signature_writes_nothing(self, deliver, webhook_body):
        with pytest.raises(InvalidWebhookSignatureError):
            deliver(_order(webhook_body, 2001), signature="deadbeef")

        assert LicenseModel.objects.count() == 0
        assert WebhookEventModel.objects.count() == 0

    def test_missing_signature_is_rejected(self, processor, webhook_body):
        with pytest.raises(InvalidWebhookSignatureError):
            async_to_sync(processor.process)(_order(webhook_body, 2002), None)

    def test_missing_secret_is_configuration_error(
        self, license_repository, activation_repository, webhook_event_repository, webhook_body
    ):
        processor = WebhookProcessor(
            secret="",
            webhook_event_repository=webhook_event_repository,
            license_repository=license_repository,
            activation_repository=activation_repository,
        )
        with pytest.raises(WebhookConfigurationError):
            async_to_sync(processor.process)(_order(webhook_body, 2003), "anything")

    def test_signed_garbage_is_invalid_payload(self, deliver):
        with pytest.raises(InvalidWebhookPayloadError):
            deliver(b"not json")

        assert WebhookEventModel.objects.count() == 0

    def test_unknown_event_is_claimed_and_ignored(self, deliver, webhook_body):
        result = deliver(webhook_body("license_key_created", 2004))

        assert result.message == "Webhook processed"
        assert result.outcome == TransitionOutcome.IGNORED
        assert WebhookEventModel.objects.filter(event_id="license_key_created-2004").exists()

    def test_failed_transition_releases_claim(
        self,
        license_repository,
        activation_repository,
        webhook_event_repository,
        recording_bus,
        webhook_body,
        sign,
    ):
        class ExplodingTransition(TransitionHandler):
            async def apply(self, payload):
                raise RuntimeError("boom")

        transitions = dict(TRANSITION_HANDLERS)
        transitions[WebhookEventType.ORDER_CREATED] = ExplodingTransition
        processor = WebhookProcessor(
            secret=WEBHOOK_SECRET,
            webhook_event_repository=webhook_event_repository,
            license_repository=license_repository,
            activation_repository=activation_repository,
            event_bus=recording_bus,
            transitions=transitions,
        )
        body = _order(webhook_body, 2005)

        with pytest.raises(RuntimeError):
            async_to_sync(processor.process)(body, sign(body))

        assert not WebhookEventModel.objects.filter(event_id="order_created-2005").exists()
