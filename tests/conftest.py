"""
Pytest configuration and shared fixtures.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest
from asgiref.sync import async_to_sync

from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from core.domain.value_objects import LicenseTier
from core.infrastructure.counter_store_adapters import memory_counter_store
from licenses.domain.license import License
from licenses.domain.license_key import generate_license_key
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from webhooks.domain.signature import generate_signature
from webhooks.infrastructure.repositories.django_webhook_event_repository import (
    DjangoWebhookEventRepository,
)

WEBHOOK_SECRET = "test-webhook-secret"
ADMIN_TOKEN = "test-admin-token"


class RecordingEventBus:
    """Event bus that keeps published events for assertions."""

    def __init__(self):
        self.events = []

    def subscribe(self, event_type, handler):
        pass

    async def publish(self, event):
        self.events.append(event)

    def of_type(self, event_type):
        return [event for event in self.events if isinstance(event, event_type)]


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    """Start every test with empty in-memory counters."""
    memory_counter_store.clear()
    yield
    memory_counter_store.clear()


@pytest.fixture
def license_repository():
    """Fixture for LicenseRepository."""
    return DjangoLicenseRepository()


@pytest.fixture
def activation_repository():
    """Fixture for ActivationRepository."""
    return DjangoActivationRepository()


@pytest.fixture
def webhook_event_repository():
    """Fixture for WebhookEventRepository."""
    return DjangoWebhookEventRepository()


@pytest.fixture
def recording_bus():
    """Fixture for an event bus that records instead of dispatching."""
    return RecordingEventBus()


@pytest.fixture
def sample_license():
    """Fixture for an unsaved pro License entity."""
    return License.create(
        license_key=generate_license_key(LicenseTier.PRO),
        tier=LicenseTier.PRO,
        email="customer@example.com",
    )


@pytest.fixture
def make_license(db, license_repository):
    """Factory fixture that saves a License and returns the stored entity."""

    def _make(
        tier=LicenseTier.PRO,
        max_activations=3,
        expires_at=None,
        email="customer@example.com",
        order_id=None,
        subscription_id=None,
        license_key=None,
    ):
        license = License.create(
            license_key=license_key or generate_license_key(tier),
            tier=tier,
            email=email,
            order_id=order_id,
            subscription_id=subscription_id,
            max_activations=max_activations,
            expires_at=expires_at,
        )
        return async_to_sync(license_repository.create)(license)

    return _make


@pytest.fixture
def db_license(make_license):
    """Fixture for a pro License saved in database."""
    return make_license()


@pytest.fixture
def activate(activation_repository):
    """Helper fixture that activates a device directly through the repository."""

    def _activate(license, device_id, device_name=None):
        return async_to_sync(activation_repository.try_activate)(license, device_id, device_name)

    return _activate


@pytest.fixture
def webhook_body():
    """Factory fixture building raw provider webhook bodies."""

    def _build(event_name, object_id, **attributes):
        document = {
            "meta": {"event_name": event_name},
            "data": {"id": str(object_id), "type": "orders", "attributes": attributes},
        }
        return json.dumps(document).encode()

    return _build


@pytest.fixture
def sign():
    """Fixture signing a raw body with the test webhook secret."""

    def _sign(body, secret=WEBHOOK_SECRET):
        return generate_signature(body, secret)

    return _sign


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def admin_client():
    """Fixture for DRF API client carrying the admin token."""
    from rest_framework.test import APIClient

    client = APIClient()
    client.credentials(HTTP_X_ADMIN_TOKEN=ADMIN_TOKEN)
    return client


@pytest.fixture
def future():
    """An aware datetime 30 days from now."""
    return datetime.now(timezone.utc) + timedelta(days=30)


@pytest.fixture
def past():
    """An aware datetime 1 day ago."""
    return datetime.now(timezone.utc) - timedelta(days=1)
