"""
Unit tests for IdentityGate and Admin.
"""
import pytest

from accounts.domain.admin import Admin
from core.domain.exceptions import AdminRequiredError, AuthenticationRequiredError
from core.domain.value_objects import SoloScope, TeamRole, TeamScope


class TestAdmin:
    """Tests for Admin entity."""

    def test_create_normalizes_email(self):
        admin = Admin.create(email=" Ana@Example.com ", first_name="Ana", last_name="Lopez")

        assert admin.email.value == "ana@example.com"
        assert admin.full_name == "Ana Lopez"
        assert admin.purchased_license_count == 0

    def test_full_name_falls_back_to_email(self):
        assert Admin.create(email="ana@example.com").full_name == "ana@example.com"

    def test_negative_seats_rejected(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            Admin.create(email="ana@example.com", purchased_license_count=-1)

    def test_with_purchased(self):
        admin = Admin.create(email="ana@example.com", purchased_license_count=2)
        assert admin.with_purchased(7).purchased_license_count == 7


@pytest.mark.asyncio
class TestIdentityGate:
    """Tests for IdentityGate."""

    async def test_anonymous_rejected(self, identity_gate):
        with pytest.raises(AuthenticationRequiredError):
            await identity_gate.require_admin(None)

    async def test_user_without_admin_rejected(self, identity_gate):
        with pytest.raises(AdminRequiredError, match="Admin account required"):
            await identity_gate.require_admin(424242)

    async def test_solo_actor(self, identity_gate, make_admin):
        admin = make_admin(email="solo@example.com")

        actor = await identity_gate.require_actor(admin.user_id)

        assert actor.admin == admin
        assert actor.has_team is False
        assert actor.role is None
        assert actor.scope == SoloScope(admin_id=admin.id)

    async def test_team_actor(self, identity_gate, make_admin, make_team, add_member):
        owner = make_admin()
        member_admin = make_admin(email="m@queencreekchamber.com")
        team = make_team(owner)
        member = add_member(team, member_admin, TeamRole.ADMIN)

        actor = await identity_gate.require_actor(member_admin.user_id)

        assert actor.has_team is True
        assert actor.role == TeamRole.ADMIN
        assert actor.member_id == member.id
        assert actor.scope == TeamScope(team_id=team.id)
