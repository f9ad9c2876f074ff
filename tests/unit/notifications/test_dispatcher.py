"""
Unit tests for the notification dispatcher and email providers.
"""
import asyncio
import threading
import time
import uuid
from unittest.mock import MagicMock

import pytest
import requests

from accounts.domain.admin import Admin
from core.domain.value_objects import Email, EmailStatus, SoloScope, TeamRole
from licenses.domain.license import License
from notifications.application.services.dispatcher import NotificationDispatcher
from notifications.domain.delivery import OutgoingEmail
from notifications.infrastructure.providers.resend_provider import ResendEmailProvider
from notifications.ports.email_provider import EmailProvider, EmailProviderError
from teams.domain.team import Team
from teams.domain.team_invitation import TeamInvitation


@pytest.fixture
def admin():
    return Admin.create(email="ana@mesaedc.org", first_name="Ana", last_name="Lopez")


@pytest.fixture
def license(admin):
    return License.create(
        email=Email.parse("user@example.com"), scope=SoloScope(admin_id=admin.id), admin_id=admin.id
    )


class TestLinks:
    """Tests for dispatcher URLs."""

    def test_activation_url(self, dispatcher, programs):
        license_id = uuid.UUID("11111111-1111-1111-1111-111111111111")

        url = dispatcher.activation_url(license_id, programs.for_email("x@mesaedc.org"))

        assert url == (
            "https://portal.example.com/register"
            "?licenseId=11111111-1111-1111-1111-111111111111&ref=mesaEdc&org=mesa-edc"
        )

    def test_accept_url(self, dispatcher):
        assert dispatcher.accept_url("abc") == "https://invite.example.com/invite/accept?token=abc"

    def test_signup_url_encodes_team_name(self, dispatcher):
        team = Team.create(name="Ana's Team", domain="mesaedc.org", owner_id=uuid.uuid4())

        url = dispatcher.signup_url("tok", team)

        assert url.startswith("https://invite.example.com/signup?invite=tok&team=")
        assert url.endswith("&teamName=Ana%27s%20Team")


@pytest.mark.asyncio
class TestSending:
    """Tests for activation and invitation sends."""

    async def test_send_activation_uses_admin_program(self, dispatcher, provider, admin, license):
        result = await dispatcher.send_activation(license, admin)

        email = provider.sent[0]
        assert result.success is True
        assert email.to == "user@example.com"
        assert email.subject.startswith("Welcome to Mesa Business Program!")
        assert "ref=mesaEdc" in email.text
        assert "Ana Lopez" in email.text
        assert email.reference == str(license.id)

    async def test_send_activation_failure(self, dispatcher, provider, admin, license):
        provider.fail_for.add("user@example.com")

        result = await dispatcher.send_activation(license, admin)

        assert result.success is False
        assert result.error == "rejected"

    async def test_send_activations_keeps_order(self, provider, programs, admin):
        from notifications.application.services.dispatcher import NotificationDispatcher

        dispatcher = NotificationDispatcher(
            provider, programs, "https://portal.example.com", "https://invite.example.com", batch_size=2
        )
        licenses = [
            License.create(
                email=Email.parse(f"u{i}@example.com"), scope=SoloScope(admin_id=admin.id), admin_id=admin.id
            )
            for i in range(5)
        ]

        results = await dispatcher.send_activations(licenses, admin)

        assert [result.recipient for result in results] == [f"u{i}@example.com" for i in range(5)]
        assert sorted(provider.batches) == [1, 2, 2]

    async def test_send_activations_empty(self, dispatcher, provider, admin):
        assert await dispatcher.send_activations([], admin) == []
        assert provider.batches == []

    async def test_send_invitation(self, dispatcher, provider, admin):
        team = Team.create(name="Mesa Team", domain="mesaedc.org", owner_id=admin.id)
        invitation = TeamInvitation.create(
            team_id=team.id, email=Email.parse("new@mesaedc.org"), role=TeamRole.ADMIN, invited_by=admin.id
        )

        result = await dispatcher.send_invitation(invitation, team, admin)

        email = provider.sent[0]
        assert result.success is True
        assert email.subject.startswith("You've been invited to join Mesa Team on Mesa Business Program!")
        assert dispatcher.accept_url(invitation.token) in email.text
        assert email.reference == str(invitation.id)

    async def test_fetch_statuses(self, dispatcher, provider):
        provider.statuses.update({"m-1": "delivered", "m-2": "opened"})

        statuses = await dispatcher.fetch_statuses(["m-1", "m-2", "m-3"])

        assert statuses == {"m-1": "delivered", "m-2": "opened", "m-3": EmailStatus.UNKNOWN}

    async def test_dispatchers_share_status_pacing(self):
        slow = SlowStatusProvider()
        first = NotificationDispatcher.from_settings(slow)
        second = NotificationDispatcher.from_settings(slow)

        await asyncio.gather(
            first.fetch_statuses(["m-1", "m-2"]), second.fetch_statuses(["m-3", "m-4"])
        )

        assert first.status_queue is second.status_queue
        assert slow.peak == 1


class SlowStatusProvider(EmailProvider):
    """Status lookups that take a while and record overlap."""

    def __init__(self):
        self.in_flight = 0
        self.peak = 0
        self._lock = threading.Lock()

    def get_status(self, message_id):
        with self._lock:
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
        time.sleep(0.05)
        with self._lock:
            self.in_flight -= 1
        return "delivered"

    def send(self, email):
        raise NotImplementedError

    def send_batch(self, emails):
        raise NotImplementedError


def _response(payload, status_code=200):
    response = MagicMock()
    response.json.return_value = payload
    response.status_code = status_code
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(f"{status_code} error")
    return response


def _email(to="a@x.com"):
    return OutgoingEmail(to=to, subject="Hi", html="<p>Hi</p>", text="Hi", reference="ref-1")


class TestResendEmailProvider:
    """Tests for ResendEmailProvider."""

    def test_send(self):
        session = MagicMock()
        session.post.return_value = _response({"id": "re_123"})
        provider = ResendEmailProvider("key", "from@x.com", session=session)

        result = provider.send(_email())

        assert (result.success, result.message_id, result.reference) == (True, "re_123", "ref-1")
        url = session.post.call_args.args[0]
        kwargs = session.post.call_args.kwargs
        assert url == "https://api.resend.com/emails"
        assert kwargs["json"]["to"] == ["a@x.com"]
        assert kwargs["headers"]["Authorization"] == "Bearer key"

    def test_send_http_error(self):
        session = MagicMock()
        session.post.return_value = _response({}, status_code=422)
        provider = ResendEmailProvider("key", "from@x.com", session=session)

        result = provider.send(_email())

        assert result.success is False
        assert "422" in result.error

    def test_send_without_api_key(self):
        session = MagicMock()
        provider = ResendEmailProvider(None, "from@x.com", session=session)

        assert provider.send(_email()).success is False
        session.post.assert_not_called()

    def test_send_batch(self):
        session = MagicMock()
        session.post.return_value = _response({"data": [{"id": "re_1"}, {"id": "re_2"}]})
        provider = ResendEmailProvider("key", "from@x.com", session=session)

        results = provider.send_batch([_email("a@x.com"), _email("b@x.com")])

        assert [result.message_id for result in results] == ["re_1", "re_2"]
        assert session.post.call_args.args[0] == "https://api.resend.com/emails/batch"

    def test_send_batch_failure_fails_every_email(self):
        session = MagicMock()
        session.post.side_effect = requests.exceptions.ConnectionError("down")
        provider = ResendEmailProvider("key", "from@x.com", session=session)

        results = provider.send_batch([_email("a@x.com"), _email("b@x.com")])

        assert [result.success for result in results] == [False, False]

    def test_get_status(self):
        session = MagicMock()
        session.get.return_value = _response({"last_event": "delivered"})
        provider = ResendEmailProvider("key", "from@x.com", session=session)

        assert provider.get_status("re_1") == "delivered"
        assert session.get.call_args.args[0] == "https://api.resend.com/emails/re_1"

    def test_get_status_error(self):
        session = MagicMock()
        session.get.return_value = _response({}, status_code=404)
        provider = ResendEmailProvider("key", "from@x.com", session=session)

        with pytest.raises(EmailProviderError):
            provider.get_status("missing")
