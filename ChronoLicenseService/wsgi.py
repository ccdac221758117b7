"""
WSGI config for ChronoLicenseService.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "ChronoLicenseService.settings.prod")

application = get_wsgi_application()
