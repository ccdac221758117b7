"""
Webhook event types and payloads.

Provider deliveries are parsed into a ``WebhookPayload`` before dispatch.
Only the fields the license lifecycle needs are kept.
"""
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from core.domain.exceptions import InvalidWebhookPayloadError


class WebhookEventType(Enum):
    """Provider events that drive license transitions."""

    ORDER_CREATED = "order_created"
    SUBSCRIPTION_CREATED = "subscription_created"
    SUBSCRIPTION_UPDATED = "subscription_updated"
    SUBSCRIPTION_PAYMENT_SUCCESS = "subscription_payment_success"
    SUBSCRIPTION_CANCELLED = "subscription_cancelled"
    SUBSCRIPTION_PAYMENT_FAILED = "subscription_payment_failed"
    ORDER_REFUNDED = "order_refunded"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, event_name: str) -> Optional["WebhookEventType"]:
        """
        Look up an event type by provider event name.

        Args:
            event_name: Provider event name

        Returns:
            The event type, or None for events the service does not handle
        """
        try:
            return cls(event_name)
        except ValueError:
            return None


@dataclass(frozen=True)
class OrderItem:
    """First line item of an order."""

    product_name: Optional[str]
    variant_name: Optional[str]


@dataclass(frozen=True)
class WebhookPayload:
    """
    A parsed provider delivery.

    ``object_id`` is the id of the order or subscription the event is
    about; together with the event name it identifies the delivery.
    """

    event_name: str
    object_id: str
    email: Optional[str] = None
    customer_name: Optional[str] = None
    customer_id: Optional[str] = None
    first_order_item: Optional[OrderItem] = None
    product_name: Optional[str] = None
    variant_name: Optional[str] = None
    renews_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None

    @property
    def event_type(self) -> Optional[WebhookEventType]:
        return WebhookEventType.parse(self.event_name)

    @property
    def idempotency_key(self) -> str:
        """Key under which the delivery is claimed."""
        return f"{self.event_name}-{self.object_id}"


def _parse_timestamp(value: Any, field: str) -> Optional[datetime]:
    """
    Parse an ISO 8601 provider timestamp.

    Args:
        value: Raw attribute value
        field: Attribute name, for error messages

    Returns:
        Aware datetime (naive values are taken as UTC), or None if empty

    Raises:
        InvalidWebhookPayloadError: If the value is not a timestamp
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value))
    except ValueError as e:
        raise InvalidWebhookPayloadError(f"Invalid timestamp in {field}: {value}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def parse_payload(raw_body: bytes) -> WebhookPayload:
    """
    Parse a raw webhook body.

    Args:
        raw_body: Request body as received

    Returns:
        WebhookPayload

    Raises:
        InvalidWebhookPayloadError: If the body is not a provider event
    """
    try:
        document = json.loads(raw_body)
    except (TypeError, ValueError) as e:
        raise InvalidWebhookPayloadError("Webhook body is not valid JSON") from e

    if not isinstance(document, dict):
        raise InvalidWebhookPayloadError()

    meta = document.get("meta") or {}
    data = document.get("data") or {}
    event_name = meta.get("event_name") if isinstance(meta, dict) else None
    object_id = data.get("id") if isinstance(data, dict) else None
    if not event_name or object_id in (None, ""):
        raise InvalidWebhookPayloadError("Webhook payload is missing meta.event_name or data.id")

    attributes: Dict[str, Any] = data.get("attributes") or {}
    item = attributes.get("first_order_item")
    first_order_item = None
    if isinstance(item, dict):
        first_order_item = OrderItem(
            product_name=_optional_str(item.get("product_name")),
            variant_name=_optional_str(item.get("variant_name")),
        )

    return WebhookPayload(
        event_name=str(event_name),
        object_id=str(object_id),
        email=_optional_str(attributes.get("user_email")),
        customer_name=_optional_str(attributes.get("user_name")),
        customer_id=_optional_str(attributes.get("customer_id")),
        first_order_item=first_order_item,
        product_name=_optional_str(attributes.get("product_name")),
        variant_name=_optional_str(attributes.get("variant_name")),
        renews_at=_parse_timestamp(attributes.get("renews_at"), "renews_at"),
        ends_at=_parse_timestamp(attributes.get("ends_at"), "ends_at"),
    )
