"""
License Django ORM model.

This is the infrastructure layer model for licenses.
Domain entities are in licenses.domain.license.
"""
import uuid

from django.db import models


class License(models.Model):
    """
    An entitlement bound to a tier, with a status and optional expiry.
    Licenses are never deleted, only their status and expiry change.
    """

    STATUS_CHOICES = [
        ("active", "Active"),
        ("expired", "Expired"),
        ("revoked", "Revoked"),
    ]

    TIER_CHOICES = [
        ("free", "Free"),
        ("pro", "Pro"),
        ("lifetime", "Lifetime"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    license_key = models.CharField(max_length=100, unique=True)
    tier = models.CharField(max_length=20, choices=TIER_CHOICES)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")
    email = models.EmailField(null=True, blank=True, db_index=True)
    customer_id = models.CharField(max_length=100, null=True, blank=True)
    order_id = models.CharField(max_length=100, null=True, blank=True, unique=True)
    subscription_id = models.CharField(max_length=100, null=True, blank=True, db_index=True)
    max_activations = models.PositiveIntegerField(default=3, help_text="Maximum number of devices")
    expires_at = models.DateTimeField(null=True, blank=True, help_text="Empty means never expires")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "expires_at"], name="licenses_status_expires_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(max_activations__gte=1),
                name="licenses_max_activations_gte_1",
            ),
        ]

    def __str__(self):
        return f"{self.license_key} ({self.tier})"
