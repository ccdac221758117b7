"""
Django admin configuration for activations app.
"""

from django.contrib import admin
from django.utils.html import format_html

from activations.infrastructure.models import Activation


@admin.register(Activation)
class ActivationAdmin(admin.ModelAdmin):
    """Admin interface for Activation model."""

    list_display = [
        "license",
        "device_id_display",
        "device_name",
        "activated_at",
    ]
    list_filter = ["activated_at", "license__tier"]
    search_fields = ["device_id", "device_name", "license__license_key", "license__email"]
    readonly_fields = ["id", "activated_at"]

    def device_id_display(self, obj):
        """Display device id with truncation."""
        if len(obj.device_id) > 40:
            return format_html(
                '<span title="{}">{}</span>',
                obj.device_id,
                obj.device_id[:37] + "...",
            )
        return obj.device_id

    device_id_display.short_description = "Device"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("license")
