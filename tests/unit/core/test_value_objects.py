"""
Unit tests for core value objects.
"""
import uuid

import pytest

from core.domain.value_objects import (
    ActivityType,
    Email,
    SoloScope,
    TeamRole,
    TeamScope,
    scope_from,
)


class TestEmail:
    """Tests for Email value object."""

    def test_valid_email(self):
        """Test valid email creation."""
        email = Email("test@example.com")
        assert str(email) == "test@example.com"
        assert email.value == "test@example.com"

    def test_invalid_email_no_at(self):
        """Test invalid email without @."""
        with pytest.raises(ValueError, match="Invalid email"):
            Email("invalid-email")

    def test_invalid_email_empty(self):
        """Test invalid empty email."""
        with pytest.raises(ValueError, match="Invalid email"):
            Email("")

    def test_parse_normalizes(self):
        """Test parse trims and lower-cases."""
        assert Email.parse("  Jane.Doe@Example.COM ").value == "jane.doe@example.com"

    def test_parse_none(self):
        """Test parse rejects a missing value."""
        with pytest.raises(ValueError):
            Email.parse(None)

    def test_is_valid(self):
        assert Email.is_valid("a@b")
        assert not Email.is_valid("   ")
        assert not Email.is_valid("nobody")

    def test_domain(self):
        """Test domain is the part after the last @."""
        assert Email.parse("ana@QueenCreekChamber.com").domain == "queencreekchamber.com"

    def test_equality_by_value(self):
        assert Email.parse("A@x.com") == Email("a@x.com")
        assert len({Email("a@x.com"), Email.parse("A@X.COM")}) == 1


class TestScope:
    """Tests for owner scopes."""

    def test_solo_scope(self):
        admin_id = uuid.uuid4()
        scope = SoloScope(admin_id=admin_id)
        assert scope.kind == "solo"
        assert scope.owner_id == admin_id

    def test_team_scope(self):
        team_id = uuid.uuid4()
        scope = TeamScope(team_id=team_id)
        assert scope.kind == "team"
        assert scope.owner_id == team_id

    def test_scopes_are_hashable(self):
        owner = uuid.uuid4()
        assert len({TeamScope(team_id=owner), TeamScope(team_id=owner)}) == 1
        assert SoloScope(admin_id=owner) != TeamScope(team_id=owner)

    def test_scope_from(self):
        """Test rebuilding a scope from its serialized form."""
        owner = uuid.uuid4()
        assert scope_from("team", owner) == TeamScope(team_id=owner)
        assert scope_from("solo", owner) == SoloScope(admin_id=owner)

    def test_scope_from_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown scope kind"):
            scope_from("brand", uuid.uuid4())


class TestEnums:
    """Tests for role and activity enums."""

    def test_assignable_roles_exclude_owner(self):
        assert TeamRole.OWNER not in TeamRole.assignable()
        assert set(TeamRole.assignable()) == {TeamRole.ADMIN, TeamRole.MEMBER}

    def test_role_str(self):
        assert str(TeamRole.ADMIN) == "admin"

    def test_activity_type_values(self):
        assert ActivityType("license_resend") == ActivityType.LICENSE_RESEND
        assert str(ActivityType.MEMBER_JOINED) == "member_joined"
