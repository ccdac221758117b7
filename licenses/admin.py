"""
Django admin configuration for licenses app.
"""
from django.contrib import admin
from django.utils.html import format_html

from licenses.infrastructure.models import License


@admin.register(License)
class LicenseAdmin(admin.ModelAdmin):
    """Admin interface for License model."""

    list_display = [
        "license_key",
        "tier",
        "status_display",
        "email",
        "activation_count",
        "max_activations",
        "expires_at",
        "created_at",
    ]
    list_filter = ["status", "tier", "expires_at", "created_at"]
    search_fields = ["license_key", "email", "order_id", "subscription_id"]
    readonly_fields = ["id", "created_at", "updated_at", "activation_count"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "license_key", "tier", "status"),
            },
        ),
        (
            "Customer",
            {
                "fields": ("email", "customer_id", "order_id", "subscription_id"),
            },
        ),
        (
            "Activations",
            {
                "fields": ("max_activations", "activation_count"),
            },
        ),
        (
            "Expiration",
            {
                "fields": ("expires_at",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def status_display(self, obj):
        """Display status with color coding."""
        colors = {
            "active": "green",
            "expired": "gray",
            "revoked": "red",
        }
        color = colors.get(obj.status, "black")
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            color,
            obj.status.upper(),
        )

    status_display.short_description = "Status"

    def activation_count(self, obj):
        """Display number of activated devices."""
        return obj.activations.count()

    activation_count.short_description = "Devices"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).prefetch_related("activations")
