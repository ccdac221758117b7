"""
Webhook processing DTOs.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TransitionOutcome(Enum):
    """What a transition did with a delivery."""

    APPLIED = "applied"
    # Referenced license missing or payload incomplete; logged and recorded
    SKIPPED = "skipped"
    # Event type the service does not handle
    IGNORED = "ignored"
    DUPLICATE = "duplicate"


@dataclass
class WebhookResultDTO:
    """Result of processing one delivery."""

    message: str
    event_id: str
    outcome: TransitionOutcome
    event_name: Optional[str] = None

    @property
    def duplicate(self) -> bool:
        return self.outcome == TransitionOutcome.DUPLICATE
