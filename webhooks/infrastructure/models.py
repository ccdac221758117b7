"""
Webhook event Django ORM model.
"""
from django.db import models


class WebhookEvent(models.Model):
    """
    Idempotency marker for a processed provider delivery.
    Created once per event and never updated.
    """

    event_id = models.CharField(max_length=255, unique=True)
    event_type = models.CharField(max_length=100)
    processed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "webhook_events"
        ordering = ["-processed_at"]

    def __str__(self):
        return self.event_id
