"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions. Each base class maps to one
category of failure the API layer knows how to present.
"""
from typing import Any, Dict, Optional


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(
        self,
        message: str,
        code: str = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
            details: Extra fields to present alongside the error
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}


class NotFoundError(DomainException):
    """Base exception for unknown resources."""

    pass


class ConflictError(DomainException):
    """Base exception for uniqueness violations."""

    pass


class ForbiddenError(DomainException):
    """Base exception for requests the license does not permit."""

    pass


class UnauthorizedError(DomainException):
    """Base exception for failed authenticity checks."""

    pass


class RateLimitedError(DomainException):
    """Base exception for exhausted quotas."""

    pass


class UpstreamUnavailableError(DomainException):
    """Raised when a third-party service call fails."""

    def __init__(self, message: str = "Upstream service unavailable"):
        super().__init__(message, code="UPSTREAM_UNAVAILABLE")


class LicenseNotFoundError(NotFoundError):
    """Raised when a license is not found."""

    def __init__(self, message: str = "License not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class DuplicateLicenseError(ConflictError):
    """Raised when a license key or order reference already exists."""

    def __init__(self, message: str = "License already exists"):
        super().__init__(message, code="DUPLICATE_LICENSE")


class LicenseRevokedError(ForbiddenError):
    """Raised when a revoked license is used."""

    def __init__(self, message: str = "License has been revoked"):
        super().__init__(message, code="LICENSE_REVOKED")


class LicenseExpiredError(ForbiddenError):
    """Raised when a license has expired."""

    def __init__(self, message: str = "License has expired"):
        super().__init__(message, code="LICENSE_EXPIRED")


class ActivationLimitReachedError(ForbiddenError):
    """Raised when every activation slot of a license is taken."""

    def __init__(self, max_activations: int, count: int = None):
        super().__init__(
            f"Maximum activations reached ({max_activations}). "
            "Deactivate another device first.",
            code="ACTIVATION_LIMIT_REACHED",
            details={
                "max": max_activations,
                "count": max_activations if count is None else count,
            },
        )
        self.max_activations = max_activations


class DeviceNotActivatedError(ForbiddenError):
    """Raised when a feature is requested from a device without a slot."""

    def __init__(self, message: str = "Device is not activated for this license"):
        super().__init__(message, code="DEVICE_NOT_ACTIVATED")


class InvalidWebhookSignatureError(UnauthorizedError):
    """Raised when a webhook signature does not match the body."""

    def __init__(self, message: str = "Invalid signature"):
        super().__init__(message, code="INVALID_SIGNATURE")


class InvalidAdminTokenError(UnauthorizedError):
    """Raised when the admin token header is missing or wrong."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="UNAUTHORIZED")


class RateLimitExceededError(RateLimitedError):
    """Raised when a device has used up its daily quota."""

    def __init__(self, remaining: int, reset_at: str, limit: int):
        super().__init__(
            f"Daily limit reached ({limit} queries/day). Resets at midnight.",
            code="RATE_LIMIT_EXCEEDED",
            details={"remaining": remaining, "reset_at": reset_at, "limit": limit},
        )


class WebhookConfigurationError(DomainException):
    """Raised when the webhook signing secret is not configured."""

    def __init__(self, message: str = "Webhook secret not configured"):
        super().__init__(message, code="WEBHOOK_NOT_CONFIGURED")


class InvalidWebhookPayloadError(DomainException):
    """Raised when a webhook body is not a provider event."""

    def __init__(self, message: str = "Invalid webhook payload"):
        super().__init__(message, code="INVALID_PAYLOAD")
