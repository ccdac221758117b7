"""
License lifecycle transitions driven by webhook events.

Each provider event type maps to exactly one transition handler. The
table is checked at import time, so adding an event type without
deciding how it changes licenses fails loudly instead of being ignored.

Transitions are safe to run again for the same delivery: creation is
keyed by order or subscription reference and every other transition
sets fields from its own payload.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Dict, Type

from activations.ports.activation_repository import ActivationRepository
from core.domain.events import EventBus
from core.domain.exceptions import DuplicateLicenseError
from core.domain.value_objects import LicenseStatus, LicenseTier
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import license_transitions_total
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.application.handlers.revoke_license_handler import RevokeLicenseHandler
from licenses.domain.events import LicenseLapsed, LicenseRenewed
from licenses.domain.services import calculate_expiry, parse_tier_from_product, utc_now
from licenses.ports.license_repository import LicenseRepository
from webhooks.application.dto.webhook_dto import TransitionOutcome
from webhooks.domain.webhook_event import WebhookEventType, WebhookPayload

logger = logging.getLogger(__name__)


class TransitionHandler(ABC):
    """Base class for webhook-driven license transitions."""

    name = "transition"

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
        event_bus: EventBus = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize transition with repositories.

        Args:
            license_repository: License repository
            activation_repository: Activation repository
            event_bus: Event bus for notifications
            clock: Returns the current aware datetime
        """
        self.license_repository = license_repository
        self.activation_repository = activation_repository
        self.event_bus = event_bus or default_event_bus
        self.clock = clock

    @abstractmethod
    async def apply(self, payload: WebhookPayload) -> TransitionOutcome:
        """
        Apply the transition for a delivery.

        Args:
            payload: Parsed webhook payload

        Returns:
            APPLIED, or SKIPPED for soft failures
        """
        pass

    def _skip(self, reason: str, payload: WebhookPayload) -> TransitionOutcome:
        logger.warning(
            "Skipped %s: %s",
            self.name,
            reason,
            extra={"event_name": payload.event_name, "object_id": payload.object_id},
        )
        license_transitions_total.labels(transition=f"{self.name}_skipped").inc()
        return TransitionOutcome.SKIPPED

    def _applied(self) -> TransitionOutcome:
        license_transitions_total.labels(transition=self.name).inc()
        return TransitionOutcome.APPLIED


class IssueOrderLicense(TransitionHandler):
    """order_created: issue a license for a one-off purchase."""

    name = "issue_order"

    async def apply(self, payload: WebhookPayload) -> TransitionOutcome:
        item = payload.first_order_item
        if item is None:
            return self._skip("order has no line item", payload)

        existing = await self.license_repository.find_by_order_id(payload.object_id)
        if existing:
            return self._skip("license already issued for order", payload)

        command = IssueLicenseCommand(
            tier=parse_tier_from_product(item.product_name, item.variant_name),
            source="order",
            email=payload.email,
            customer_name=payload.customer_name,
            customer_id=payload.customer_id,
            order_id=payload.object_id,
        )
        try:
            await IssueLicenseHandler(self.license_repository, self.event_bus).handle(command)
        except DuplicateLicenseError:
            # A concurrent run for the same order won the insert
            if await self.license_repository.find_by_order_id(payload.object_id):
                return self._skip("license already issued for order", payload)
            raise
        return self._applied()


class IssueSubscriptionLicense(TransitionHandler):
    """subscription_created: issue a pro license with the subscription's expiry."""

    name = "issue_subscription"

    async def apply(self, payload: WebhookPayload) -> TransitionOutcome:
        existing = await self.license_repository.find_by_subscription_id(payload.object_id)
        if existing:
            return self._skip("license already issued for subscription", payload)

        command = IssueLicenseCommand(
            tier=LicenseTier.PRO,
            source="subscription",
            email=payload.email,
            customer_name=payload.customer_name,
            customer_id=payload.customer_id,
            subscription_id=payload.object_id,
            expires_at=calculate_expiry(payload.renews_at, payload.ends_at),
        )
        await IssueLicenseHandler(self.license_repository, self.event_bus).handle(command)
        return self._applied()


class RenewSubscriptionLicense(TransitionHandler):
    """subscription_updated / subscription_payment_success: extend, reactivate if expired."""

    name = "renew_subscription"

    async def apply(self, payload: WebhookPayload) -> TransitionOutcome:
        license = await self.license_repository.find_by_subscription_id(payload.object_id)
        if not license:
            return self._skip("no license for subscription", payload)

        expires_at = calculate_expiry(payload.renews_at, payload.ends_at)
        await self.license_repository.set_expiry(license.id, expires_at)

        reactivated = license.status == LicenseStatus.EXPIRED
        if reactivated:
            await self.license_repository.set_status(license.id, LicenseStatus.ACTIVE)

        await self.event_bus.publish(
            LicenseRenewed(license_id=license.id, expires_at=expires_at, reactivated=reactivated)
        )
        return self._applied()


class LapseSubscriptionLicense(TransitionHandler):
    """subscription_cancelled / subscription_payment_failed: schedule or force expiry."""

    name = "lapse_subscription"

    async def apply(self, payload: WebhookPayload) -> TransitionOutcome:
        license = await self.license_repository.find_by_subscription_id(payload.object_id)
        if not license:
            return self._skip("no license for subscription", payload)

        ends_at = payload.ends_at
        if ends_at is not None:
            # Access continues until the end of the paid period
            await self.license_repository.set_expiry(license.id, ends_at)
            expired_now = ends_at < self.clock()
        else:
            expired_now = True

        # Never downgrade a revoked license to expired
        if expired_now and license.status != LicenseStatus.REVOKED:
            await self.license_repository.set_status(license.id, LicenseStatus.EXPIRED)

        await self.event_bus.publish(
            LicenseLapsed(
                license_id=license.id,
                expires_at=ends_at if ends_at is not None else license.expires_at,
                expired_now=expired_now,
            )
        )
        return self._applied()


class RevokeRefundedLicense(TransitionHandler):
    """order_refunded: revoke the order's license and release its devices."""

    name = "revoke_refund"

    async def apply(self, payload: WebhookPayload) -> TransitionOutcome:
        license = await self.license_repository.find_by_order_id(payload.object_id)
        if not license:
            return self._skip("no license for order", payload)

        await RevokeLicenseHandler(
            self.license_repository, self.activation_repository, self.event_bus
        ).handle(RevokeLicenseCommand(license_id=license.id, reason="refund"))
        return self._applied()


TRANSITION_HANDLERS: Dict[WebhookEventType, Type[TransitionHandler]] = {
    WebhookEventType.ORDER_CREATED: IssueOrderLicense,
    WebhookEventType.SUBSCRIPTION_CREATED: IssueSubscriptionLicense,
    WebhookEventType.SUBSCRIPTION_UPDATED: RenewSubscriptionLicense,
    WebhookEventType.SUBSCRIPTION_PAYMENT_SUCCESS: RenewSubscriptionLicense,
    WebhookEventType.SUBSCRIPTION_CANCELLED: LapseSubscriptionLicense,
    WebhookEventType.SUBSCRIPTION_PAYMENT_FAILED: LapseSubscriptionLicense,
    WebhookEventType.ORDER_REFUNDED: RevokeRefundedLicense,
}


def check_exhaustive(table: Dict[WebhookEventType, Type[TransitionHandler]]) -> None:
    """
    Ensure every webhook event type has a transition.

    Args:
        table: Event type to transition handler class

    Raises:
        RuntimeError: If an event type has no transition
    """
    missing = [event_type.value for event_type in WebhookEventType if event_type not in table]
    if missing:
        raise RuntimeError(f"No license transition for webhook events: {', '.join(missing)}")


check_exhaustive(TRANSITION_HANDLERS)
