"""
Django admin configuration for webhooks app.
"""
from django.contrib import admin

from webhooks.infrastructure.models import WebhookEvent


@admin.register(WebhookEvent)
class WebhookEventAdmin(admin.ModelAdmin):
    """Admin interface for processed webhook deliveries."""

    list_display = ["event_id", "event_type", "processed_at"]
    list_filter = ["event_type", "processed_at"]
    search_fields = ["event_id"]
    readonly_fields = ["id", "event_id", "event_type", "processed_at"]

    def has_add_permission(self, request):
        """Deliveries are recorded by the webhook receiver only."""
        return False
