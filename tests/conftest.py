"""
Pytest configuration and shared fixtures.

Unit tests run handlers against the in-memory repositories below;
integration tests use the Django repositories and the HTTP API.
"""

import uuid
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Set, Tuple

import pytest

from accounts.application.services.identity_gate import IdentityGate
from accounts.domain.admin import Admin
from accounts.ports.admin_repository import AdminRepository
from activity.application.services.activity_journal import ActivityJournal
from activity.domain.activity_log import ActivityLog
from activity.ports.activity_log_repository import ActivityLogRepository
from core.domain.exceptions import AlreadyTeamMemberError
from core.domain.value_objects import ActivityType, Email, Scope, TeamRole
from core.infrastructure.events import event_bus
from licenses.application.services.seat_ledger import SeatLedger
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository
from licenses.ports.purchase_receipt_repository import PurchaseReceiptRepository
from notifications.application.services.batching import RateLimitedQueue
from notifications.application.services.dispatcher import NotificationDispatcher
from notifications.domain.delivery import DeliveryResult, OutgoingEmail
from notifications.domain.partner_program import PartnerProgramRegistry
from notifications.ports.email_provider import EmailProvider, EmailProviderError
from teams.domain.team import Team
from teams.domain.team_invitation import TeamInvitation
from teams.domain.team_member import TeamMember
from teams.ports.team_invitation_repository import TeamInvitationRepository
from teams.ports.team_member_repository import TeamMemberRepository
from teams.ports.team_repository import TeamRepository

PROGRAMS = [
    {
        "id": "queenCreekChamber",
        "name": "Queen Creek Chamber",
        "full_name": "Queen Creek Chamber of Commerce",
        "program_name": "Queen Creek Chamber Business Program",
        "domain": "queencreekchamber.com",
        "ref": "queenCreekChamber",
        "slug": "queen-creek-chamber",
    },
    {
        "id": "mesaEdc",
        "name": "Mesa EDC",
        "full_name": "Mesa Economic Development",
        "program_name": "Mesa Business Program",
        "domain": "mesaedc.org",
        "ref": "mesaEdc",
        "slug": "mesa-edc",
    },
]


# In-memory adapters


class InMemoryAdminRepository(AdminRepository):
    def __init__(self):
        self.admins: Dict[uuid.UUID, Admin] = {}

    async def save(self, admin: Admin) -> Admin:
        self.admins[admin.id] = admin
        return admin

    async def find_by_id(self, admin_id: uuid.UUID) -> Optional[Admin]:
        return self.admins.get(admin_id)

    async def find_by_user_id(self, user_id: int) -> Optional[Admin]:
        return next((a for a in self.admins.values() if a.user_id == user_id), None)

    async def find_by_email(self, email: str) -> Optional[Admin]:
        return next((a for a in self.admins.values() if a.email.value == email), None)

    async def find_many(self, admin_ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, Admin]:
        return {i: self.admins[i] for i in admin_ids if i in self.admins}

    async def add_purchased_seats(self, admin_id: uuid.UUID, count: int) -> int:
        admin = self.admins[admin_id]
        self.admins[admin_id] = admin.with_purchased(admin.purchased_license_count + count)
        return self.admins[admin_id].purchased_license_count


class InMemoryLicenseRepository(LicenseRepository):
    def __init__(self):
        self.licenses: Dict[uuid.UUID, License] = {}

    def _scoped(self, scope: Scope) -> List[License]:
        return [license for license in self.licenses.values() if license.belongs_to(scope)]

    async def save(self, license: License) -> License:
        self.licenses[license.id] = license
        return license

    async def save_many(self, licenses: List[License]) -> List[License]:
        for license in licenses:
            self.licenses[license.id] = license
        return list(licenses)

    async def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        return self.licenses.get(license_id)

    async def find_in_scope(self, license_id: uuid.UUID, scope: Scope) -> Optional[License]:
        license = self.licenses.get(license_id)
        return license if license and license.belongs_to(scope) else None

    async def list_by_scope(self, scope: Scope) -> List[License]:
        return sorted(self._scoped(scope), key=lambda license: license.created_at, reverse=True)

    async def list_with_message_id(self, scope: Scope) -> List[License]:
        return [license for license in self._scoped(scope) if license.message_id]

    async def scopes_with_message_id(self) -> List[Scope]:
        return list({license.scope for license in self.licenses.values() if license.message_id})

    async def existing_emails(self, scope: Scope, emails: Iterable[str]) -> Set[str]:
        wanted = set(emails)
        return {license.email.value for license in self._scoped(scope)} & wanted

    async def exists_in_scope(
        self, scope: Scope, email: str, exclude_id: Optional[uuid.UUID] = None
    ) -> bool:
        return any(
            license.email.value == email and license.id != exclude_id
            for license in self._scoped(scope)
        )

    async def count_by_scope(self, scope: Scope) -> tuple:
        licenses = self._scoped(scope)
        return len(licenses), sum(1 for license in licenses if license.is_activated)

    async def delete(self, license_id: uuid.UUID) -> None:
        self.licenses.pop(license_id, None)

    async def update_email_status(self, license_id: uuid.UUID, email_status: str) -> None:
        self.licenses[license_id] = self.licenses[license_id].with_email_status(email_status)


class InMemoryTeamMemberRepository(TeamMemberRepository):
    def __init__(self):
        self.members: Dict[uuid.UUID, TeamMember] = {}

    async def save(self, member: TeamMember) -> TeamMember:
        for existing in self.members.values():
            if existing.admin_id == member.admin_id and existing.id != member.id:
                raise AlreadyTeamMemberError()
        self.members[member.id] = member
        return member

    async def find_by_id(self, member_id: uuid.UUID) -> Optional[TeamMember]:
        return self.members.get(member_id)

    async def find_by_admin(self, admin_id: uuid.UUID) -> Optional[TeamMember]:
        return next((m for m in self.members.values() if m.admin_id == admin_id), None)

    async def list_by_team(self, team_id: uuid.UUID) -> List[TeamMember]:
        members = [m for m in self.members.values() if m.team_id == team_id]
        return sorted(members, key=lambda member: member.joined_at)

    async def delete(self, member_id: uuid.UUID) -> None:
        self.members.pop(member_id, None)


class InMemoryTeamRepository(TeamRepository):
    def __init__(self, admins, members, licenses):
        self.teams: Dict[uuid.UUID, Team] = {}
        self.admin_repository = admins
        self.member_repository = members
        self.license_repository = licenses

    async def save(self, team: Team) -> Team:
        self.teams[team.id] = team
        return team

    async def find_by_id(self, team_id: uuid.UUID) -> Optional[Team]:
        return self.teams.get(team_id)

    async def found(self, team: Team, owner: TeamMember) -> int:
        await self.member_repository.save(owner)
        self.teams[team.id] = team
        moved = 0
        for license in list(self.license_repository.licenses.values()):
            if license.admin_id == owner.admin_id and license.team_id is None:
                self.license_repository.licenses[license.id] = replace(
                    license, team_id=team.id, performed_by=owner.admin_id
                )
                moved += 1
        admin = self.admin_repository.admins[owner.admin_id]
        self.admin_repository.admins[admin.id] = admin.with_purchased(0)
        return moved

    async def add_purchased_seats(self, team_id: uuid.UUID, count: int) -> int:
        team = self.teams[team_id]
        self.teams[team_id] = replace(
            team, purchased_license_count=team.purchased_license_count + count
        )
        return self.teams[team_id].purchased_license_count


class InMemoryInvitationRepository(TeamInvitationRepository):
    def __init__(self):
        self.invitations: Dict[uuid.UUID, TeamInvitation] = {}

    async def save(self, invitation: TeamInvitation) -> TeamInvitation:
        self.invitations[invitation.id] = invitation
        return invitation

    async def find_by_id(self, invitation_id: uuid.UUID) -> Optional[TeamInvitation]:
        return self.invitations.get(invitation_id)

    async def find_by_token(self, token: str) -> Optional[TeamInvitation]:
        return next((i for i in self.invitations.values() if i.token == token), None)

    async def find_pending(self, team_id: uuid.UUID, email: str) -> Optional[TeamInvitation]:
        return next(
            (
                i
                for i in self.invitations.values()
                if i.team_id == team_id and i.email.value == email and i.is_actionable()
            ),
            None,
        )

    async def list_pending(self, team_id: uuid.UUID) -> List[TeamInvitation]:
        pending = [
            i for i in self.invitations.values() if i.team_id == team_id and i.is_actionable()
        ]
        return sorted(pending, key=lambda invitation: invitation.created_at, reverse=True)


class InMemoryActivityLogRepository(ActivityLogRepository):
    def __init__(self):
        self.entries: List[ActivityLog] = []

    async def append(self, entry: ActivityLog) -> ActivityLog:
        self.entries.append(entry)
        return entry

    async def list_by_team(
        self,
        team_id: uuid.UUID,
        limit: int,
        offset: int,
        activity_type: Optional[ActivityType] = None,
    ) -> Tuple[List[ActivityLog], int]:
        matching = [
            entry
            for entry in reversed(self.entries)
            if entry.team_id == team_id
            and (activity_type is None or entry.activity_type == activity_type)
        ]
        return matching[offset:offset + limit], len(matching)

    def types(self) -> List[ActivityType]:
        return [entry.activity_type for entry in self.entries]


class InMemoryReceiptRepository(PurchaseReceiptRepository):
    def __init__(self):
        self.references: Dict[str, Tuple[Scope, int]] = {}

    async def record_if_new(self, reference: str, scope: Scope, license_count: int) -> bool:
        if reference in self.references:
            return False
        self.references[reference] = (scope, license_count)
        return True


class FakeEmailProvider(EmailProvider):
    """Records outgoing emails; recipients in ``fail_for`` are rejected."""

    def __init__(self):
        self.sent: List[OutgoingEmail] = []
        self.batches: List[int] = []
        self.fail_for: Set[str] = set()
        self.statuses: Dict[str, str] = {}
        self.status_lookups: List[str] = []

    def send(self, email: OutgoingEmail) -> DeliveryResult:
        if email.to in self.fail_for:
            return DeliveryResult.failed(email, "rejected")
        self.sent.append(email)
        return DeliveryResult.sent(email, f"msg-{len(self.sent)}")

    def send_batch(self, emails: List[OutgoingEmail]) -> List[DeliveryResult]:
        self.batches.append(len(emails))
        return [self.send(email) for email in emails]

    def get_status(self, message_id: str) -> str:
        self.status_lookups.append(message_id)
        if message_id not in self.statuses:
            raise EmailProviderError("not found")
        return self.statuses[message_id]


# Fixtures


@pytest.fixture(autouse=True)
def clear_event_bus():
    """Keep domain event subscribers from leaking between tests."""
    event_bus.clear()
    yield
    event_bus.clear()


@pytest.fixture
def admins():
    """Fixture for an in-memory AdminRepository."""
    return InMemoryAdminRepository()


@pytest.fixture
def licenses():
    """Fixture for an in-memory LicenseRepository."""
    return InMemoryLicenseRepository()


@pytest.fixture
def members():
    """Fixture for an in-memory TeamMemberRepository."""
    return InMemoryTeamMemberRepository()


@pytest.fixture
def teams(admins, members, licenses):
    """Fixture for an in-memory TeamRepository."""
    return InMemoryTeamRepository(admins, members, licenses)


@pytest.fixture
def invitations():
    """Fixture for an in-memory TeamInvitationRepository."""
    return InMemoryInvitationRepository()


@pytest.fixture
def activity():
    """Fixture for an in-memory ActivityLogRepository."""
    return InMemoryActivityLogRepository()


@pytest.fixture
def receipts():
    """Fixture for an in-memory PurchaseReceiptRepository."""
    return InMemoryReceiptRepository()


@pytest.fixture
def provider():
    """Fixture for a recording email provider."""
    return FakeEmailProvider()


@pytest.fixture
def programs():
    """Fixture for the partner program registry."""
    return PartnerProgramRegistry.from_settings(PROGRAMS)


@pytest.fixture
def dispatcher(provider, programs):
    """Fixture for a NotificationDispatcher over the fake provider."""
    return NotificationDispatcher(
        provider=provider,
        programs=programs,
        app_url="https://portal.example.com",
        invite_url="https://invite.example.com",
        status_queue=RateLimitedQueue(requests_per_second=1000),
    )


@pytest.fixture
def identity_gate(admins, members):
    """Fixture for the IdentityGate."""
    return IdentityGate(admin_repository=admins, membership_lookup=members)


@pytest.fixture
def seat_ledger(licenses, admins, teams):
    """Fixture for the SeatLedger."""
    return SeatLedger(license_repository=licenses, admin_repository=admins, team_repository=teams)


@pytest.fixture
def journal(activity):
    """Fixture for the ActivityJournal."""
    return ActivityJournal(activity)

@pytest.fixture
def make_admin(admins):
    """Factory fixture storing an admin bound to a session user id."""
    counter = {"user_id": 100}

    def _make(email="owner@queencreekchamber.com", seats=0, first_name="Ana", last_name="Lopez"):
        counter["user_id"] += 1
        admin = Admin.create(
            email=email,
            first_name=first_name,
            last_name=last_name,
            user_id=counter["user_id"],
            purchased_license_count=seats,
        )
        admins.admins[admin.id] = admin
        return admin

    return _make


@pytest.fixture
def make_team(teams, members):
    """Factory fixture creating a team owned by an admin."""

    def _make(owner: Admin, seats=10, name="Chamber Team"):
        team = Team.create(
            name=name,
            domain=owner.email.domain,
            owner_id=owner.id,
            purchased_license_count=seats,
        )
        teams.teams[team.id] = team
        owner_member = TeamMember.create(team_id=team.id, admin_id=owner.id, role=TeamRole.OWNER)
        members.members[owner_member.id] = owner_member
        return team

    return _make


@pytest.fixture
def add_member(members):
    """Factory fixture adding an admin to a team with a role."""

    def _add(team: Team, admin: Admin, role=TeamRole.MEMBER):
        member = TeamMember.create(team_id=team.id, admin_id=admin.id, role=role)
        members.members[member.id] = member
        return member

    return _add


@pytest.fixture
def make_license(licenses):
    """Factory fixture storing a license in a scope."""

    def _make(email: str, scope: Scope, admin_id: uuid.UUID, activated=False, message_id=None):
        license = License.create(email=Email.parse(email), scope=scope, admin_id=admin_id)
        if message_id:
            license = license.record_delivery(True, message_id)
        if activated:
            license = license.activate("Acme", "Retail")
        licenses.licenses[license.id] = license
        return license

    return _make


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()
