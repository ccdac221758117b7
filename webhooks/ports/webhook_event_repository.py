"""
Webhook event repository port (interface).

Processed deliveries are recorded under their idempotency key so a
redelivery of the same event has no further effect.
"""
from abc import ABC, abstractmethod


class WebhookEventRepository(ABC):
    """Abstract repository for webhook idempotency markers."""

    @abstractmethod
    async def claim(self, event_id: str, event_type: str) -> bool:
        """
        Atomically record an event as processed if it is not yet recorded.

        Args:
            event_id: Idempotency key of the delivery
            event_type: Provider event name

        Returns:
            True if this call recorded the event, False if it already was
        """
        pass

    @abstractmethod
    async def release(self, event_id: str) -> None:
        """
        Remove a claim so a redelivery is processed again.

        Args:
            event_id: Idempotency key of the delivery
        """
        pass
