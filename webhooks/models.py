"""
Model registry entry point for the webhooks app.
"""
from webhooks.infrastructure.models import WebhookEvent  # noqa: F401
