"""
AskAdvisorHandler.

Handler for metered advisor questions.
"""

import logging
from datetime import datetime
from typing import Callable

from activations.ports.activation_repository import ActivationRepository
from advisor.application.commands.ask_advisor import AskAdvisorCommand
from advisor.application.dto.advisor_dto import AdvisorAnswerDTO
from advisor.domain.prompt import AdvisorContext, build_system_prompt
from advisor.domain.rate_limiter import DailyRateLimiter
from advisor.ports.completion_client import CompletionClient
from core.domain.exceptions import (
    DeviceNotActivatedError,
    ForbiddenError,
    RateLimitExceededError,
    UpstreamUnavailableError,
)
from core.metrics import advisor_requests_total
from licenses.domain.services import LicenseValidator, utc_now
from licenses.domain.tiers import limits_for
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class AskAdvisorHandler:
    """Handler for AskAdvisorCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
        rate_limiter: DailyRateLimiter,
        completion_client: CompletionClient,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize handler.

        Args:
            license_repository: License repository
            activation_repository: Activation repository
            rate_limiter: Per-device daily quota
            completion_client: Completion provider
            clock: Returns the current aware datetime
        """
        self.license_repository = license_repository
        self.activation_repository = activation_repository
        self.rate_limiter = rate_limiter
        self.completion_client = completion_client
        self.clock = clock

    async def handle(self, command: AskAdvisorCommand) -> AdvisorAnswerDTO:
        """
        Handle an advisor question.

        Quota is consumed before the provider call; a provider failure
        does not refund it.

        Args:
            command: AskAdvisorCommand

        Returns:
            AdvisorAnswerDTO

        Raises:
            ForbiddenError: If the license is unknown or not valid
            DeviceNotActivatedError: If the device holds no slot
            RateLimitExceededError: If the daily quota is used up
            UpstreamUnavailableError: If the provider fails
        """
        license = await self.license_repository.find_by_key(command.license_key)
        if not license or not LicenseValidator.validity(license, self.clock()).valid:
            advisor_requests_total.labels(tier="none", outcome="invalid_license").inc()
            raise ForbiddenError("Invalid or expired license", code="LICENSE_INVALID")

        tier = license.tier.value
        activation = await self.activation_repository.find(license.id, command.device_id)
        if activation is None:
            advisor_requests_total.labels(tier=tier, outcome="not_activated").inc()
            raise DeviceNotActivatedError()

        quota = limits_for(license.tier).advisor_daily_quota
        decision = await self.rate_limiter.check_and_consume(
            command.license_key, command.device_id, quota
        )
        if not decision.allowed:
            advisor_requests_total.labels(tier=tier, outcome="rate_limited").inc()
            raise RateLimitExceededError(
                remaining=decision.remaining,
                reset_at=decision.reset_at.isoformat(),
                limit=decision.limit,
            )

        system_prompt = build_system_prompt(AdvisorContext.from_dict(command.context))
        try:
            answer = await self.completion_client.complete(system_prompt, command.question)
        except UpstreamUnavailableError:
            advisor_requests_total.labels(tier=tier, outcome="upstream_error").inc()
            raise

        advisor_requests_total.labels(tier=tier, outcome="answered").inc()
        logger.info(
            "Advisor answered",
            extra={"license_id": str(license.id), "remaining": decision.remaining},
        )
        return AdvisorAnswerDTO(response=answer, usage=decision)
