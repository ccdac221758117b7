"""
Advisor DTOs for API responses.
"""
from dataclasses import dataclass
from typing import Any, Dict

from advisor.domain.rate_limiter import RateLimitDecision


@dataclass
class AdvisorAnswerDTO:
    """DTO for an advisor answer and the caller's remaining quota."""

    response: str
    usage: RateLimitDecision

    def to_dict(self) -> Dict[str, Any]:
        """Convert DTO to the wire representation."""
        return {"response": self.response, "usage": self.usage.to_dict()}
