"""
Integration tests for the payment provider webhook endpoint.
"""

import pytest
from django.test import override_settings

from licenses.infrastructure.models import License as LicenseModel
from webhooks.infrastructure.models import WebhookEvent as WebhookEventModel

WEBHOOK_URL = "/api/v1/webhooks/lemonsqueezy"


def _post(client, body, signature):
    headers = {"HTTP_X_SIGNATURE": signature} if signature is not None else {}
    return client.post(WEBHOOK_URL, data=body, content_type="application/json", **headers)


@pytest.fixture
def order_body(webhook_body):
    return webhook_body(
        "order_created",
        4001,
        user_email="buyer@example.com",
        first_order_item={"product_name": "Chrono Pro", "variant_name": "Default"},
    )


@pytest.mark.django_db
@pytest.mark.integration
class TestLemonSqueezyWebhook:
    """Tests for POST /api/v1/webhooks/lemonsqueezy."""

    def test_signed_order_issues_license(self, api_client, order_body, sign):
        response = _post(api_client, order_body, sign(order_body))

        assert response.status_code == 200
        assert response.json() == {"message": "Webhook processed"}
        assert LicenseModel.objects.filter(order_id="4001").count() == 1

    def test_replay(self, api_client, order_body, sign):
        _post(api_client, order_body, sign(order_body))

        response = _post(api_client, order_body, sign(order_body))

        assert response.status_code == 200
        assert response.json() == {"message": "Already processed"}
        assert LicenseModel.objects.count() == 1

    def test_bad_signature(self, api_client, order_body, sign):
        response = _post(api_client, order_body, sign(order_body, secret="other-secret"))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_SIGNATURE"
        assert LicenseModel.objects.count() == 0
        assert WebhookEventModel.objects.count() == 0

    def test_missing_signature(self, api_client, order_body):
        response = _post(api_client, order_body, None)

        assert response.status_code == 401

    def test_signature_over_exact_bytes(self, api_client, order_body, sign):
        signature = sign(order_body)

        response = _post(api_client, order_body + b" ", signature)

        assert response.status_code == 401

    def test_signed_invalid_payload(self, api_client, sign):
        body = b'{"meta": {}}'

        response = _post(api_client, body, sign(body))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_PAYLOAD"

    @override_settings(LEMONSQUEEZY_WEBHOOK_SECRET="")
    def test_unconfigured_secret(self, api_client, order_body, sign):
        response = _post(api_client, order_body, sign(order_body))

        assert response.status_code == 500
        assert LicenseModel.objects.count() == 0

    def test_unhandled_event(self, api_client, webhook_body, sign):
        body = webhook_body("customer_updated", 4002)

        response = _post(api_client, body, sign(body))

        assert response.status_code == 200
        assert response.json() == {"message": "Webhook processed"}
