"""
Django management command to add a license by hand.

Used for support cases and comp licenses. No email is sent.
"""

import logging

from asgiref.sync import async_to_sync
from django.core.management.base import BaseCommand, CommandError

from core.domain.exceptions import DuplicateLicenseError
from core.domain.value_objects import LicenseTier
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.domain.license import DEFAULT_MAX_ACTIVATIONS
from licenses.domain.license_key import generate_license_key, is_well_formed
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to add a license."""

    help = "Add a license manually"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "license_key",
            nargs="?",
            default=None,
            help="License key (default: generated for the tier)",
        )
        parser.add_argument(
            "--tier",
            choices=[LicenseTier.PRO.value, LicenseTier.LIFETIME.value],
            default=LicenseTier.PRO.value,
            help="License tier (default: pro)",
        )
        parser.add_argument("--email", type=str, default=None, help="Customer email")
        parser.add_argument(
            "--max-activations",
            type=int,
            default=DEFAULT_MAX_ACTIVATIONS,
            help=f"Device slots (default: {DEFAULT_MAX_ACTIVATIONS})",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        tier = LicenseTier(options["tier"])
        license_key = options["license_key"] or generate_license_key(tier)
        if options["max_activations"] < 1:
            raise CommandError("--max-activations must be at least 1")

        if not is_well_formed(license_key):
            # pylint: disable=no-member
            self.stdout.write(
                self.style.WARNING(f"{license_key} does not look like a generated key")
            )

        handler = IssueLicenseHandler(license_repository=DjangoLicenseRepository())
        command = IssueLicenseCommand(
            tier=tier,
            source="manual",
            email=options["email"],
            max_activations=options["max_activations"],
            license_key=license_key,
            notify_customer=False,
        )
        try:
            license = async_to_sync(handler.handle)(command)
        except DuplicateLicenseError as e:
            raise CommandError(f"License {license_key} already exists") from e

        self.stdout.write(f"Tier: {license.tier.value}")
        self.stdout.write(f"Email: {license.email or '-'}")
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(f"License created: {license.license_key}"))
