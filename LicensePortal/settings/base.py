"""
Base Django settings for LicensePortal.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from pathlib import Path

from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "SECRET_KEY", "django-insecure-3m!x7q$portal#k2v9w(r0z8d@l4h^e6t1y5u&b-n+f)c*j"
)

# Application definition
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Third party
    "rest_framework",
    "drf_spectacular",
    # Local apps
    "LicensePortal.apps.LicensePortalConfig",
    "core",
    "accounts",
    "licenses",
    "teams",
    "activity",
    "notifications",
    "api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Custom middleware
    "core.middleware.auth.ServiceKeyMiddleware",
    "core.middleware.observability.ObservabilityMiddleware",
    "core.middleware.metrics.MetricsMiddleware",
]

ROOT_URLCONF = "LicensePortal.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "LicensePortal.wsgi.application"
ASGI_APPLICATION = "LicensePortal.asgi.application"

# Database
# https://docs.djangoproject.com/en/4.2/ref/settings/#databases
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("DB_NAME", "license_portal"),
        "USER": os.environ.get("DB_USER", "postgres"),
        "PASSWORD": os.environ.get("DB_PASSWORD", "postgres"),
        "HOST": os.environ.get("DB_HOST", "localhost"),
        "PORT": os.environ.get("DB_PORT", "5432"),
        "OPTIONS": {
            "connect_timeout": 10,
        },
    }
}

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {
        "NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.MinimumLengthValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.CommonPasswordValidator",
    },
    {
        "NAME": "django.contrib.auth.password_validation.NumericPasswordValidator",
    },
]

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Static files (CSS, JavaScript, Images)
STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# REST Framework
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    # Handlers resolve the admin themselves; DRF only restores the session user
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.SessionAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [],
    "EXCEPTION_HANDLER": "api.exceptions.custom_exception_handler",
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

# drf-spectacular settings
SPECTACULAR_SETTINGS = {
    "TITLE": "License Portal API",
    "DESCRIPTION": (
        "License seat management for partner-program administrators. "
        "Provides endpoints for the admin dashboard (licenses, teams, activity) "
        "and service endpoints for license activation and seat top-ups."
    ),
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
    "COMPONENT_SPLIT_REQUEST": True,
    "SCHEMA_PATH_PREFIX": "/api",
    "TAGS": [
        {"name": "Licenses", "description": "Admin license ledger"},
        {"name": "Team", "description": "Teams, members, invitations and activity"},
        {"name": "Service", "description": "Endpoints called by the consumer application"},
        {"name": "Health", "description": "Health check endpoints"},
    ],
}

# Redis Cache
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": os.environ.get("REDIS_URL", "redis://127.0.0.1:6379/1"),
        "OPTIONS": {
            "socket_connect_timeout": 5,
            "socket_timeout": 5,
        },
    }
}

# Celery
CELERY_BROKER_URL = os.environ.get("CELERY_BROKER_URL", "redis://127.0.0.1:6379/0")
CELERY_TASK_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]

# Links embedded in emails and redirects
APP_URL = os.environ.get("APP_URL", "https://business.moilapp.com").rstrip("/")
INVITE_URL = os.environ.get("INVITE_URL", "https://queencreek.moilapp.com").rstrip("/")

# Email
EMAIL_PROVIDER = os.environ.get("EMAIL_PROVIDER", "resend")
RESEND_API_KEY = os.environ.get("RESEND_API_KEY", "")
RESEND_API_URL = os.environ.get("RESEND_API_URL", "https://api.resend.com")
FROM_EMAIL = os.environ.get("FROM_EMAIL", "Moil <noreply@moilapp.com>")
EMAIL_STATUS_REQUESTS_PER_SECOND = float(
    os.environ.get("EMAIL_STATUS_REQUESTS_PER_SECOND", "2")
)

# Purchases and service access
PAYMENT_CALLBACK_SECRET = os.environ.get("PAYMENT_CALLBACK_SECRET") or None
SERVICE_API_KEY = os.environ.get("SERVICE_API_KEY") or None

# Teams
TEAM_ALLOWED_DOMAINS = [
    domain.strip().lower()
    for domain in os.environ.get(
        "TEAM_ALLOWED_DOMAINS", "queencreekchamber.com,moilapp.com"
    ).split(",")
    if domain.strip()
]
INVITATION_TTL_DAYS = int(os.environ.get("INVITATION_TTL_DAYS", "7"))

# Partner programs; the first entry is the default
PARTNER_PROGRAMS = [
    {
        "id": "queenCreekChamber",
        "name": "Queen Creek Chamber",
        "full_name": "Queen Creek Chamber of Commerce",
        "program_name": "Queen Creek Chamber Business Program",
        "domain": "queencreekchamber.com",
        "ref": "queenCreekChamber",
        "slug": "queen-creek-chamber",
        "logo_initial": "Q",
        "primary_color": "#0073B5",
        "support_email": "support@moilapp.com",
        "license_duration": "1 year",
        "job_posts": 3,
    },
]

# Observability
OTEL_ENABLED = os.environ.get("OTEL_ENABLED", "False") == "True"

LOGGING = get_logging_config(os.environ.get("ENVIRONMENT", "development"))
