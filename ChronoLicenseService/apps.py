"""
App configuration for Chrono License Service.
"""

import logging
import sys

from django.apps import AppConfig

logger = logging.getLogger(__name__)

# Commands that never serve traffic and should not start exporters
SKIP_OBSERVABILITY_COMMANDS = [
    "migrate",
    "makemigrations",
    "collectstatic",
    "shell",
    "check",
    "createsuperuser",
]


class ChronoLicenseServiceConfig(AppConfig):
    """App configuration for ChronoLicenseService."""

    name = "ChronoLicenseService"
    verbose_name = "Chrono License Service"

    def ready(self):
        """Called when Django starts."""
        self.register_event_handlers()

        if len(sys.argv) > 1 and sys.argv[1] in SKIP_OBSERVABILITY_COMMANDS:
            return
        self.setup_observability()

    def setup_observability(self):
        """Setup tracing exporters after apps are ready."""
        from core.instrumentation import setup_opentelemetry

        try:
            setup_opentelemetry()
        except Exception as e:
            # Tracing is optional; the service must still start
            logger.warning(f"Failed to setup OpenTelemetry: {e}")

    def register_event_handlers(self):
        """Register domain event handlers after apps are ready."""
        from core.infrastructure.event_handlers import register_event_handlers

        register_event_handlers()
