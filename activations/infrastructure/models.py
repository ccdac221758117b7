"""
Activation Django ORM model.

This is the infrastructure layer model for activations.
Domain entities are in activations.domain.activation.
"""
import uuid

from django.db import models
from django.utils import timezone


class Activation(models.Model):
    """
    One device bound to one license. Consumes a slot from the license.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    license = models.ForeignKey(
        "licenses.License",
        on_delete=models.CASCADE,
        related_name="activations",
    )
    device_id = models.CharField(max_length=255, help_text="Opaque client device identifier")
    device_name = models.CharField(max_length=255, null=True, blank=True)
    activated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "license_activations"
        unique_together = [["license", "device_id"]]
        ordering = ["-activated_at"]
        indexes = [
            models.Index(fields=["license", "activated_at"], name="activations_license_time_idx"),
        ]

    def __str__(self):
        return f"{self.license.license_key} @ {self.device_id}"
