"""
Development settings for ChronoLicenseService.
"""
import os

from .base import *  # noqa: F403, F401
from .logging import get_logging_config

DEBUG = True

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "0.0.0.0"]

# Override with environment variable DB_ENGINE=sqlite for SQLite
if os.environ.get("DB_ENGINE") == "sqlite":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",  # noqa: F405
            "OPTIONS": {
                "transaction_mode": "IMMEDIATE",
                "timeout": 20,
            },
        }
    }

# Single developer process, keep rate limit counters in memory
RATE_LIMIT_BACKEND = os.environ.get("RATE_LIMIT_BACKEND", "memory")

# Print emails instead of sending them
EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"

# Run celery tasks inline unless a broker is configured
CELERY_TASK_ALWAYS_EAGER = "CELERY_BROKER_URL" not in os.environ

LOGGING = get_logging_config("development")
