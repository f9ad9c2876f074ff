"""
Handler collaborators shared by the API views.

Repositories are stateless and shared at module level; anything that
reads settings is built per request so test overrides apply.
"""
from django.conf import settings

from accounts.application.services.identity_gate import IdentityGate
from accounts.infrastructure.repositories.django_admin_repository import DjangoAdminRepository
from activity.application.services.activity_journal import ActivityJournal
from activity.infrastructure.repositories.django_activity_log_repository import (
    DjangoActivityLogRepository,
)
from licenses.application.services.seat_ledger import SeatLedger
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from licenses.infrastructure.repositories.django_purchase_receipt_repository import (
    DjangoPurchaseReceiptRepository,
)
from notifications.application.services.dispatcher import NotificationDispatcher
from notifications.domain.partner_program import PartnerProgramRegistry
from notifications.infrastructure.providers.factory import build_email_provider
from teams.domain.services import TeamEligibility
from teams.infrastructure.repositories.django_team_invitation_repository import (
    DjangoTeamInvitationRepository,
)
from teams.infrastructure.repositories.django_team_member_repository import (
    DjangoTeamMemberRepository,
)
from teams.infrastructure.repositories.django_team_repository import DjangoTeamRepository

# Initialize repositories (in production, use DI container)
admin_repo = DjangoAdminRepository()
license_repo = DjangoLicenseRepository()
receipt_repo = DjangoPurchaseReceiptRepository()
team_repo = DjangoTeamRepository()
member_repo = DjangoTeamMemberRepository()
invitation_repo = DjangoTeamInvitationRepository()
activity_repo = DjangoActivityLogRepository()


def identity_gate() -> IdentityGate:
    return IdentityGate(admin_repository=admin_repo, membership_lookup=member_repo)


def seat_ledger() -> SeatLedger:
    return SeatLedger(
        license_repository=license_repo, admin_repository=admin_repo, team_repository=team_repo
    )


def journal() -> ActivityJournal:
    return ActivityJournal(activity_repo)


def partner_programs() -> PartnerProgramRegistry:
    return PartnerProgramRegistry.from_settings(settings.PARTNER_PROGRAMS)


def dispatcher() -> NotificationDispatcher:
    return NotificationDispatcher.from_settings(build_email_provider())


def session_user_id(request):
    """Primary key of the session user, None when anonymous."""
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None
    return user.pk


def team_eligibility() -> TeamEligibility:
    return TeamEligibility(settings.TEAM_ALLOWED_DOMAINS)
