"""
Email provider selection.
"""
from django.conf import settings

from notifications.infrastructure.providers.django_mail_provider import DjangoMailEmailProvider
from notifications.infrastructure.providers.resend_provider import ResendEmailProvider
from notifications.ports.email_provider import EmailProvider


def build_email_provider() -> EmailProvider:
    """Instantiate the provider named by ``EMAIL_PROVIDER``."""
    provider = getattr(settings, "EMAIL_PROVIDER", "resend")
    if provider == "django":
        return DjangoMailEmailProvider(from_email=settings.FROM_EMAIL)
    if provider == "resend":
        return ResendEmailProvider(
            api_key=settings.RESEND_API_KEY,
            from_email=settings.FROM_EMAIL,
            api_url=settings.RESEND_API_URL,
        )
    raise ValueError(f"Unknown EMAIL_PROVIDER: {provider}")
