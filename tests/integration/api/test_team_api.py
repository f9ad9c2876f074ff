"""
Integration tests for the team API endpoints.
"""
import uuid
from datetime import datetime, timezone

import pytest
from django.contrib.auth.models import User
from django.core import mail
from django.urls import reverse

from accounts.infrastructure.models import Admin
from activity.infrastructure.models import ActivityLog
from licenses.infrastructure.models import License
from teams.infrastructure.models import Team, TeamInvitation, TeamMember


def _admin(username, email, seats=0):
    user = User.objects.create_user(username=username, password="secret")
    admin = Admin.objects.create(
        user=user, email=email, first_name=username.title(), purchased_license_count=seats
    )
    return user, admin


@pytest.fixture
def owner(db):
    return _admin("ana", "owner@queencreekchamber.com", seats=4)


@pytest.fixture
def team(api_client, owner):
    """A team founded through the API by the logged-in owner."""
    user, _ = owner
    api_client.force_login(user)
    response = api_client.post(reverse("team:create-team"), {"name": "Chamber Team"}, format="json")
    assert response.status_code == 201
    return Team.objects.get(id=response.json()["team"]["id"])


@pytest.mark.django_db
@pytest.mark.integration
class TestTeamAPI:
    """Integration tests for creating and reading a team."""

    def test_create_team_moves_solo_ledger(self, api_client, owner):
        user, admin = owner
        License.objects.create(
            email="a@example.com", admin=admin, created_at=datetime.now(timezone.utc)
        )
        api_client.force_login(user)

        response = api_client.post(reverse("team:create-team"), {"name": "Chamber Team"}, format="json")

        assert response.status_code == 201
        team = Team.objects.get(id=response.json()["team"]["id"])
        assert team.name == "Chamber Team"
        assert team.domain == "queencreekchamber.com"
        assert team.purchased_license_count == 4
        assert License.objects.get(email="a@example.com").team_id == team.id
        assert Admin.objects.get(id=admin.id).purchased_license_count == 0
        assert TeamMember.objects.get(admin=admin).role == "owner"

    def test_create_team_twice(self, api_client, team):
        response = api_client.post(reverse("team:create-team"), {"name": "Again"}, format="json")

        assert response.status_code == 400
        assert Team.objects.count() == 1

    def test_create_team_ineligible_domain(self, api_client, db):
        user, _ = _admin("max", "max@gmail.com")
        api_client.force_login(user)

        response = api_client.post(reverse("team:create-team"), {"name": "Mine"}, format="json")

        assert response.status_code == 403
        assert Team.objects.count() == 0

    def test_get_team(self, api_client, team):
        response = api_client.get(reverse("team"))

        assert response.status_code == 200
        data = response.json()
        assert data["hasTeam"] is True
        assert data["isOwner"] is True
        assert data["userRole"] == "owner"
        assert data["team"]["name"] == "Chamber Team"
        assert [member["role"] for member in data["members"]] == ["owner"]
        assert data["pendingInvitations"] == []

    def test_get_team_without_team(self, api_client, owner):
        api_client.force_login(owner[0])

        response = api_client.get(reverse("team"))

        assert response.status_code == 200
        assert response.json()["hasTeam"] is False

    def test_rename_team(self, api_client, team):
        response = api_client.patch(reverse("team"), {"name": "Renamed"}, format="json")

        assert response.status_code == 200
        assert response.json()["team"]["name"] == "Renamed"
        assert Team.objects.get(id=team.id).name == "Renamed"

    def test_team_license_list_shared(self, api_client, team):
        response = api_client.post(
            reverse("licenses:add-license"), {"email": "new@example.com"}, format="json"
        )

        assert response.status_code == 201
        listing = api_client.get(reverse("licenses:list-licenses")).json()
        assert listing["hasTeam"] is True
        assert listing["statistics"]["purchased"] == 4
        assert listing["statistics"]["assigned"] == 1
        assert License.objects.get(email="new@example.com").team_id == team.id


@pytest.mark.django_db
@pytest.mark.integration
class TestInvitationAPI:
    """Integration tests for inviting and accepting members."""

    def test_invite_and_accept(self, api_client, team):
        response = api_client.post(
            reverse("team:team-invitations"),
            {"email": "new@queencreekchamber.com", "role": "admin"},
            format="json",
        )

        assert response.status_code == 200
        assert response.json()["emailSent"] is True
        invitation = TeamInvitation.objects.get(email="new@queencreekchamber.com")
        assert invitation.token in mail.outbox[0].body

        preview = api_client.get(reverse("team:accept-invitation"), {"token": invitation.token})
        assert preview.status_code == 200
        assert preview.json()["invitation"]["team"]["name"] == "Chamber Team"

        invitee, invitee_admin = _admin("new", "new@queencreekchamber.com")
        api_client.force_login(invitee)
        accepted = api_client.post(
            reverse("team:accept-invitation"), {"token": invitation.token}, format="json"
        )

        assert accepted.status_code == 200
        assert accepted.json()["role"] == "admin"
        assert TeamMember.objects.get(admin=invitee_admin).team_id == team.id
        assert TeamInvitation.objects.get(id=invitation.id).status == "accepted"

    def test_invite_outside_domain(self, api_client, team):
        response = api_client.post(
            reverse("team:team-invitations"), {"email": "x@gmail.com"}, format="json"
        )

        assert response.status_code == 400
        assert TeamInvitation.objects.count() == 0

    @pytest.mark.parametrize("url_name", ["team:team-invitations", "team:accept-invitation"])
    def test_non_object_body_rejected(self, api_client, team, url_name):
        response = api_client.post(reverse(url_name), ["new@queencreekchamber.com"], format="json")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        assert TeamInvitation.objects.count() == 0

    def test_list_and_cancel(self, api_client, team):
        api_client.post(
            reverse("team:team-invitations"), {"email": "a@queencreekchamber.com"}, format="json"
        )

        listed = api_client.get(reverse("team:team-invitations")).json()["invitations"]
        assert [invitation["email"] for invitation in listed] == ["a@queencreekchamber.com"]

        response = api_client.delete(
            reverse("team:team-invitations"), {"invitationId": listed[0]["id"]}, format="json"
        )

        assert response.status_code == 200
        assert TeamInvitation.objects.get(id=listed[0]["id"]).status == "revoked"
        assert api_client.get(reverse("team:team-invitations")).json()["invitations"] == []

    def test_preview_unknown_token(self, api_client, db):
        response = api_client.get(reverse("team:accept-invitation"), {"token": uuid.uuid4().hex})

        assert response.status_code == 404


@pytest.mark.django_db
@pytest.mark.integration
class TestMembersAPI:
    """Integration tests for member management and the activity feed."""

    @pytest.fixture
    def member(self, team):
        _, admin = _admin("max", "max@queencreekchamber.com")
        return TeamMember.objects.create(
            team=team, admin=admin, role="member", joined_at=datetime.now(timezone.utc)
        )

    def test_list_members(self, api_client, member):
        response = api_client.get(reverse("team:team-members"))

        assert response.status_code == 200
        data = response.json()
        assert data["currentUserRole"] == "owner"
        assert sorted(m["role"] for m in data["members"]) == ["member", "owner"]

    def test_change_role(self, api_client, member):
        response = api_client.patch(
            reverse("team:team-members"), {"memberId": str(member.id), "role": "admin"}, format="json"
        )

        assert response.status_code == 200
        assert TeamMember.objects.get(id=member.id).role == "admin"

    def test_remove_member(self, api_client, member):
        response = api_client.delete(
            reverse("team:team-members"), {"memberId": str(member.id)}, format="json"
        )

        assert response.status_code == 200
        assert not TeamMember.objects.filter(id=member.id).exists()

    def test_member_cannot_remove(self, api_client, member, team):
        _, other_admin = _admin("lee", "lee@queencreekchamber.com")
        other = TeamMember.objects.create(
            team=team, admin=other_admin, role="member", joined_at=datetime.now(timezone.utc)
        )
        api_client.force_login(member.admin.user)

        response = api_client.delete(
            reverse("team:team-members"), {"memberId": str(other.id)}, format="json"
        )

        assert response.status_code == 403
        assert TeamMember.objects.filter(id=other.id).exists()

    def test_owner_cannot_be_removed(self, api_client, member, owner):
        owner_member = TeamMember.objects.get(admin=owner[1])

        response = api_client.delete(
            reverse("team:team-members"), {"memberId": str(owner_member.id)}, format="json"
        )

        assert response.status_code == 400

    def test_activity_feed(self, api_client, team):
        api_client.post(reverse("licenses:add-license"), {"email": "a@example.com"}, format="json")

        response = api_client.get(reverse("team:team-activity"), {"limit": "10"})

        assert response.status_code == 200
        data = response.json()
        assert data["hasTeam"] is True
        assert data["limit"] == 10
        assert data["total"] == ActivityLog.objects.filter(team=team).count()
        assert data["activities"][0]["activityType"] == "license_added"
