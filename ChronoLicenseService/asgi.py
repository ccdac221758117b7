"""
ASGI config for ChronoLicenseService.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "ChronoLicenseService.settings.prod")

application = get_asgi_application()
