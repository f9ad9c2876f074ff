"""
Unit tests for license domain services and CSV formats.
"""
import dataclasses
import uuid
from datetime import datetime, timezone

import pytest

from core.domain.exceptions import SeatLimitExceededError
from core.domain.value_objects import Email, SoloScope
from licenses.domain.csv_format import EXPORT_HEADER, parse_import, render_export
from licenses.domain.license import License
from licenses.domain.services import EmailBatchScreener, SeatAccount


class TestSeatAccount:
    """Tests for SeatAccount."""

    def test_counters(self):
        account = SeatAccount(purchased=10, assigned=4, activated=1)

        assert account.pending == 3
        assert account.available == 6
        assert account.to_dict() == {
            "purchased": 10,
            "assigned": 4,
            "activated": 1,
            "pending": 3,
            "available": 6,
            "total": 4,
        }

    def test_from_licenses(self):
        """Test counters are derived from the ledger."""
        admin_id = uuid.uuid4()
        scope = SoloScope(admin_id=admin_id)
        licenses = [
            License.create(email=Email.parse(f"u{i}@example.com"), scope=scope, admin_id=admin_id)
            for i in range(3)
        ]
        licenses[0] = licenses[0].activate("Acme", "Retail")

        account = SeatAccount.from_licenses(5, licenses)

        assert (account.assigned, account.activated, account.available) == (3, 1, 2)

    def test_available_can_go_negative(self):
        """Test an oversold account reports negative availability."""
        assert SeatAccount(purchased=1, assigned=3, activated=0).available == -2

    def test_ensure_capacity_allows_exact_fit(self):
        SeatAccount(purchased=3, assigned=1, activated=0).ensure_capacity(2)

    def test_ensure_capacity_message(self):
        """Test the rejection names the shortfall."""
        account = SeatAccount(purchased=3, assigned=1, activated=0)

        with pytest.raises(SeatLimitExceededError) as exc_info:
            account.ensure_capacity(5, verb="import")

        assert exc_info.value.message == (
            "Only 2 license(s) available. You're trying to import 5."
        )

    def test_ensure_capacity_floors_negative_availability(self):
        account = SeatAccount(purchased=0, assigned=2, activated=0)

        with pytest.raises(SeatLimitExceededError, match="Only 0 license"):
            account.ensure_capacity(1)

    def test_ensure_capacity_ignores_empty_request(self):
        SeatAccount(purchased=0, assigned=0, activated=0).ensure_capacity(0)

    def test_ensure_single_seat(self):
        with pytest.raises(SeatLimitExceededError, match="No available licenses"):
            SeatAccount(purchased=2, assigned=2, activated=0).ensure_single_seat()


class TestEmailBatchScreener:
    """Tests for EmailBatchScreener."""

    def test_candidates_normalize(self):
        candidates = EmailBatchScreener.candidates([" A@x.com", "bad", "b@x.com", None])
        assert candidates == {"a@x.com", "b@x.com"}

    def test_screen_accepts_in_order(self):
        screening = EmailBatchScreener.screen(["b@x.com", "A@x.com"], existing=set())

        assert [email.value for email in screening.accepted] == ["b@x.com", "a@x.com"]
        assert screening.failed == 0

    def test_screen_rejects_malformed(self):
        screening = EmailBatchScreener.screen(["nope", ""], existing=set())

        assert screening.accepted == []
        assert screening.errors == ["Invalid email format: nope", "Invalid email format: "]

    def test_screen_collapses_batch_duplicates(self):
        """Test repeated emails are accepted once and reported once."""
        screening = EmailBatchScreener.screen(
            ["a@x.com", "A@X.com", "a@x.com", "b@x.com"], existing=set()
        )

        assert [email.value for email in screening.accepted] == ["a@x.com", "b@x.com"]
        assert screening.errors == ["Duplicate email in batch: a@x.com"]

    def test_screen_skips_existing(self):
        screening = EmailBatchScreener.screen(["a@x.com", "b@x.com"], existing={"a@x.com"})

        assert [email.value for email in screening.accepted] == ["b@x.com"]
        assert screening.errors == ["License already exists for: a@x.com"]
        assert screening.failed == 1

    def test_screen_mixed_batch(self):
        """Test malformed and duplicate entries are reported before the seat check."""
        screening = EmailBatchScreener.screen(
            ["a@x.com", "A@X.COM", "bad-email", "a@x.com"], existing=set()
        )

        assert [email.value for email in screening.accepted] == ["a@x.com"]
        assert screening.errors == [
            "Invalid email format: bad-email",
            "Duplicate email in batch: a@x.com",
        ]


class TestCsvFormat:
    """Tests for CSV import and export."""

    def test_parse_import_skips_header_and_blank_lines(self):
        content = "Email,Name\n\nana@x.com,Ana\n  \n\"ben@x.com\",Ben\nCARL@x.com\n"

        assert parse_import(content) == ["ana@x.com", "ben@x.com", "CARL@x.com"]

    def test_parse_import_header_only(self):
        assert parse_import("email\n") == []

    def test_parse_import_first_line_is_always_header(self):
        """Test a headerless file loses its first row."""
        assert parse_import("ana@x.com\nben@x.com") == ["ben@x.com"]

    def test_render_export(self):
        admin_id = uuid.uuid4()
        scope = SoloScope(admin_id=admin_id)
        pending = License.create(email=Email.parse("ana@x.com"), scope=scope, admin_id=admin_id)
        pending = dataclasses.replace(pending, created_at=datetime(2025, 1, 5, tzinfo=timezone.utc))
        active = pending.activate("Acme", "Retail", current_time=datetime(2025, 2, 7, tzinfo=timezone.utc))

        lines = render_export([pending, active]).splitlines()

        assert lines[0] == ",".join(EXPORT_HEADER)
        assert lines[1] == "ana@x.com,Pending,01/05/2025,N/A"
        assert lines[2] == "ana@x.com,Active,01/05/2025,02/07/2025"

    def test_render_export_empty(self):
        assert render_export([]) == "Email,Status,Date Added,Activated At\n"
