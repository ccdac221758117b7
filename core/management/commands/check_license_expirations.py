"""
Django management command to check and mark expired licenses.

Licenses whose expiry passed while still marked active are set to
expired. Validation already treats them as expired; this keeps the stored
status in line for reporting. Run periodically (e.g., via cron).
"""

import logging

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand

from licenses.application.handlers.expire_lapsed_licenses_handler import (
    ExpireLapsedLicensesHandler,
)
from licenses.domain.services import utc_now
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to check and mark expired licenses."""

    help = "Check and mark expired licenses"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Dry run mode - don't actually update licenses",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        dry_run = options["dry_run"]
        handler = ExpireLapsedLicensesHandler(license_repository=DjangoLicenseRepository())
        now = utc_now()

        lapsed = async_to_sync(handler.find)(now)
        self.stdout.write(f"Found {len(lapsed)} expired license(s)")

        if dry_run:
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING("DRY RUN - No changes will be made"))
            for license in lapsed[:10]:  # Show first 10
                self.stdout.write(f"  - License {license.license_key} expired at {license.expires_at}")
            return

        if not lapsed:
            # pylint: disable=no-member
            self.stdout.write(self.style.SUCCESS("No expired licenses to update"))
            return

        updated = async_to_sync(handler.handle)(now)
        self.stdout.write(
            # pylint: disable=no-member
            self.style.SUCCESS(f"Successfully marked {updated} license(s) as expired")
        )
