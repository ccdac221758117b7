"""
Unit tests for request classification in the observability middleware.
"""
import pytest

from core.middleware.observability import api_surface


@pytest.mark.parametrize(
    "path,surface",
    [
        ("/api/v1/license/activate", "client"),
        ("/api/v1/advisor/chat", "advisor"),
        ("/api/v1/webhooks/lemonsqueezy", "webhook"),
        ("/api/v1/admin/licenses", "admin"),
        ("/health/db/", "probe"),
        ("/metrics/", "probe"),
        ("/api/docs/", "other"),
    ],
)
def test_api_surface(path, surface):
    """Test request paths map to their API surface."""
    assert api_surface(path) == surface


def test_normalize_endpoint_collapses_ids():
    """Test license ids do not create one metric series per license."""
    from core.middleware.metrics import normalize_endpoint

    path = "/api/v1/admin/licenses/6f1c2a9e-1b7d-4d3a-9c55-0d7e4b2f8a11/revoke"
    assert normalize_endpoint(path) == "/api/v1/admin/licenses/{id}/revoke"
