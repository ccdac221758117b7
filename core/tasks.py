"""
Celery tasks for background processing.

Customer notification emails sent after license lifecycle changes.
"""
import logging

from django.conf import settings
from django.core.mail import send_mail

from ChronoLicenseService.celery import app

logger = logging.getLogger(__name__)

TIER_LABELS = {"pro": "Pro", "lifetime": "Lifetime"}


def license_email_body(license_key: str, tier_label: str, max_activations: int) -> str:
    return (
        f"Welcome to Chrono {tier_label}!\n\n"
        f"Your license key:\n\n    {license_key}\n\n"
        "To activate:\n"
        "  1. Open Chrono\n"
        "  2. Go to Tools > Settings\n"
        "  3. Paste your license key and click Activate\n\n"
        f"Keep this email safe. You can use this key on up to {max_activations} devices.\n\n"
        f"Questions? Reply to this email or visit {settings.APP_URL}\n"
    )


def refund_email_body(license_key: str) -> str:
    return (
        f"Your Chrono license {license_key} has been deactivated due to a refund.\n\n"
        "The app will continue to work in Free mode with limited features.\n\n"
        "If you believe this is an error, please reply to this email.\n\n"
        "The Chrono Team\n"
    )


@app.task(bind=True, max_retries=3)
def send_license_email(
    self, email: str, license_key: str, tier: str, max_activations: int = 3
):
    """
    Celery task for the license key email.

    Args:
        email: Recipient address
        license_key: Issued license key
        tier: License tier value
        max_activations: Number of device slots
    """
    tier_label = TIER_LABELS.get(tier, tier.title())
    try:
        send_mail(
            subject=f"Your Chrono {tier_label} License Key",
            message=license_email_body(license_key, tier_label, max_activations),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[email],
        )
        logger.info("License email sent", extra={"tier": tier})
    except Exception as exc:
        logger.error(f"License email failed: {exc}", exc_info=True)
        raise self.retry(exc=exc, countdown=2 ** self.request.retries)


@app.task(bind=True, max_retries=3)
def send_refund_email(self, email: str, license_key: str):
    """
    Celery task for the refund notice.

    Args:
        email: Recipient address
        license_key: Revoked license key
    """
    try:
        send_mail(
            subject="Chrono License Deactivated",
            message=refund_email_body(license_key),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[email],
        )
        logger.info("Refund email sent")
    except Exception as exc:
        logger.error(f"Refund email failed: {exc}", exc_info=True)
        raise self.retry(exc=exc, countdown=2 ** self.request.retries)
