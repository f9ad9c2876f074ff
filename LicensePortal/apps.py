"""
App configuration for the License Portal project.
"""

import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class LicensePortalConfig(AppConfig):
    """App configuration for LicensePortal."""

    name = "LicensePortal"
    verbose_name = "License Portal"

    def ready(self):
        """Wire telemetry and domain event subscribers once apps are loaded."""
        from core.infrastructure.event_handlers import register_event_handlers

        if getattr(settings, "OTEL_ENABLED", False):
            from core.instrumentation import setup_opentelemetry

            setup_opentelemetry()
            logger.info("OpenTelemetry configured")

        register_event_handlers()
