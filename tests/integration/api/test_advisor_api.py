"""
Integration tests for the Advisor API.

The completion provider is replaced by a fake; everything else runs for real.
"""

from dataclasses import replace

import pytest
from asgiref.sync import async_to_sync

from advisor.ports.completion_client import CompletionClient
from core.domain.exceptions import UpstreamUnavailableError
from core.domain.value_objects import LicenseStatus
from licenses.domain.tiers import PAID_LIMITS

CHAT_URL = "/api/v1/advisor/chat"


class FakeCompletionClient(CompletionClient):
    """Completion client returning a canned answer."""

    def __init__(self, answer="Take Friday afternoons off.", error=None):
        self.answer = answer
        self.error = error
        self.calls = []

    async def complete(self, system_prompt, question):
        self.calls.append((system_prompt, question))
        if self.error:
            raise self.error
        return self.answer


@pytest.fixture
def completion_client(monkeypatch):
    client = FakeCompletionClient()
    monkeypatch.setattr("api.v1.advisor.views.get_completion_client", lambda: client)
    return client


@pytest.fixture
def activated_license(db_license, activate):
    activate(db_license, "device-1")
    return db_license


def _ask(client, license_key, device_id="device-1", **overrides):
    payload = {
        "license_key": license_key,
        "device_id": device_id,
        "question": "How can I earn more?",
        "context": {"today_hours": 6.5, "goals_count": 2, "best_weekday": "Tuesday"},
    }
    payload.update(overrides)
    return client.post(CHAT_URL, payload, format="json")


@pytest.mark.django_db
@pytest.mark.integration
class TestAdvisorChat:
    """Tests for POST /api/v1/advisor/chat."""

    def test_answer_with_usage(self, api_client, activated_license, completion_client):
        response = _ask(api_client, activated_license.license_key)

        assert response.status_code == 200
        data = response.json()
        assert data["response"] == "Take Friday afternoons off."
        assert data["usage"]["limit"] == 100
        assert data["usage"]["remaining"] == 99
        assert data["usage"]["reset_at"]

        system_prompt, question = completion_client.calls[0]
        assert question == "How can I earn more?"
        assert "Hours worked: 6.5h" in system_prompt
        assert "FINANCIAL GOALS (2 active)" in system_prompt
        assert "Best day: Tuesday" in system_prompt

    def test_unknown_license(self, api_client, db, completion_client):
        response = _ask(api_client, "PRO-NOPE-NOPE-NOPE")

        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Invalid or expired license"
        assert completion_client.calls == []

    def test_revoked_license(
        self, api_client, activated_license, license_repository, completion_client
    ):
        async_to_sync(license_repository.set_status)(activated_license.id, LicenseStatus.REVOKED)

        response = _ask(api_client, activated_license.license_key)

        assert response.status_code == 403

    def test_device_not_activated(self, api_client, activated_license, completion_client):
        response = _ask(api_client, activated_license.license_key, device_id="device-2")

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "DEVICE_NOT_ACTIVATED"

    def test_daily_quota(self, api_client, activated_license, completion_client, monkeypatch):
        monkeypatch.setattr(
            "advisor.application.handlers.ask_advisor_handler.limits_for",
            lambda tier: replace(PAID_LIMITS, advisor_daily_quota=2),
        )
        assert _ask(api_client, activated_license.license_key).json()["usage"]["remaining"] == 1
        assert _ask(api_client, activated_license.license_key).json()["usage"]["remaining"] == 0

        response = _ask(api_client, activated_license.license_key)

        assert response.status_code == 429
        error = response.json()["error"]
        assert error["message"] == "Daily limit reached (2 queries/day). Resets at midnight."
        assert error["remaining"] == 0
        assert error["limit"] == 2
        assert error["reset_at"]
        assert len(completion_client.calls) == 2

    def test_quota_is_per_device(
        self, api_client, activated_license, activate, completion_client, monkeypatch
    ):
        monkeypatch.setattr(
            "advisor.application.handlers.ask_advisor_handler.limits_for",
            lambda tier: replace(PAID_LIMITS, advisor_daily_quota=1),
        )
        activate(activated_license, "device-2")

        assert _ask(api_client, activated_license.license_key).status_code == 200
        assert _ask(api_client, activated_license.license_key).status_code == 429
        other_device = _ask(api_client, activated_license.license_key, device_id="device-2")
        assert other_device.status_code == 200

    def test_upstream_failure(self, api_client, activated_license, completion_client):
        completion_client.error = UpstreamUnavailableError("AI service error: timeout")

        response = _ask(api_client, activated_license.license_key)

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "UPSTREAM_UNAVAILABLE"

    def test_missing_context(self, api_client, activated_license, completion_client):
        payload = {
            "license_key": activated_license.license_key,
            "device_id": "device-1",
            "question": "Hi",
        }

        response = api_client.post(CHAT_URL, payload, format="json")

        assert response.status_code == 400
        assert "context" in response.json()["error"]["fields"]

    def test_malformed_context(self, api_client, activated_license, completion_client):
        response = _ask(
            api_client, activated_license.license_key, context={"today_hours": "lots"}
        )

        assert response.status_code == 400
