"""
Unit tests for License entity.
"""
import uuid
from datetime import datetime, timezone

import pytest

from core.domain.value_objects import Email, EmailStatus, SoloScope, TeamScope
from licenses.domain.license import License


@pytest.fixture
def admin_id():
    return uuid.uuid4()


class TestLicense:
    """Tests for License entity."""

    def test_create_in_solo_scope(self, admin_id):
        """Test creating a license for an admin without a team."""
        license = License.create(
            email=Email.parse("user@example.com"),
            scope=SoloScope(admin_id=admin_id),
            admin_id=admin_id,
        )

        assert license.team_id is None
        assert license.admin_id == admin_id
        assert license.performed_by == admin_id
        assert license.is_activated is False
        assert license.email_status == EmailStatus.PENDING
        assert license.message_id is None
        assert license.scope == SoloScope(admin_id=admin_id)

    def test_create_in_team_scope(self, admin_id):
        """Test creating a license drawn from a team pool."""
        team_id = uuid.uuid4()
        performer = uuid.uuid4()
        license = License.create(
            email=Email.parse("user@example.com"),
            scope=TeamScope(team_id=team_id),
            admin_id=admin_id,
            performed_by=performer,
        )

        assert license.team_id == team_id
        assert license.performed_by == performer
        assert license.scope == TeamScope(team_id=team_id)

    def test_belongs_to(self, admin_id):
        team_id = uuid.uuid4()
        license = License.create(
            email=Email.parse("user@example.com"), scope=TeamScope(team_id=team_id), admin_id=admin_id
        )

        assert license.belongs_to(TeamScope(team_id=team_id))
        assert not license.belongs_to(SoloScope(admin_id=admin_id))
        assert not license.belongs_to(TeamScope(team_id=uuid.uuid4()))

    def test_activate(self, admin_id):
        """Test activation stores the business details."""
        license = License.create(
            email=Email.parse("user@example.com"), scope=SoloScope(admin_id=admin_id), admin_id=admin_id
        )
        now = datetime(2025, 3, 1, tzinfo=timezone.utc)

        activated = license.activate("Acme Bakery", "Restaurant", current_time=now)

        assert activated.is_activated is True
        assert activated.activated_at == now
        assert activated.business_name == "Acme Bakery"
        assert activated.business_type == "Restaurant"
        assert activated.status_label == "Active"
        assert license.is_activated is False

    def test_activate_twice_fails(self, admin_id):
        license = License.create(
            email=Email.parse("user@example.com"), scope=SoloScope(admin_id=admin_id), admin_id=admin_id
        ).activate("Acme", "Retail")

        with pytest.raises(ValueError, match="already activated"):
            license.activate("Acme", "Retail")

    def test_change_email_resets_delivery(self, admin_id):
        """Test a re-addressed license forgets the previous message."""
        license = License.create(
            email=Email.parse("old@example.com"), scope=SoloScope(admin_id=admin_id), admin_id=admin_id
        ).record_delivery(True, "msg-1")

        changed = license.change_email(Email.parse("new@example.com"))

        assert changed.email.value == "new@example.com"
        assert changed.message_id is None
        assert changed.email_status == EmailStatus.PENDING
        assert changed.id == license.id

    def test_change_email_when_activated_fails(self, admin_id):
        license = License.create(
            email=Email.parse("old@example.com"), scope=SoloScope(admin_id=admin_id), admin_id=admin_id
        ).activate("Acme", "Retail")

        with pytest.raises(ValueError, match="Cannot edit email"):
            license.change_email(Email.parse("new@example.com"))

    def test_record_delivery(self, admin_id):
        license = License.create(
            email=Email.parse("user@example.com"), scope=SoloScope(admin_id=admin_id), admin_id=admin_id
        )

        sent = license.record_delivery(True, "msg-9")
        failed = license.record_delivery(False)

        assert sent.message_id == "msg-9"
        assert sent.email_status == EmailStatus.SENT
        assert failed.message_id is None
        assert failed.email_status == EmailStatus.FAILED

    def test_activated_without_timestamp_rejected(self, admin_id):
        """Test the activation invariant."""
        license = License.create(
            email=Email.parse("user@example.com"), scope=SoloScope(admin_id=admin_id), admin_id=admin_id
        )

        with pytest.raises(ValueError, match="activation time"):
            License(**{**license.__dict__, "is_activated": True, "activated_at": None})
