"""
Development settings for LicensePortal.
"""

import os

from .base import *  # noqa: F403, F401

DEBUG = True

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "0.0.0.0"]

# Database - Use PostgreSQL in Docker, SQLite for local development
# Override with environment variable DB_ENGINE=sqlite for SQLite
if os.environ.get("DB_ENGINE") == "sqlite":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",  # noqa: F405
        }
    }

# Emails are printed instead of sent unless a provider is chosen explicitly
EMAIL_PROVIDER = os.environ.get("EMAIL_PROVIDER", "django")
EMAIL_BACKEND = "django.core.mail.backends.console.EmailBackend"

# The dashboard runs on its own dev server
APP_URL = os.environ.get("APP_URL", "http://localhost:3000")
INVITE_URL = os.environ.get("INVITE_URL", "http://localhost:3000")
