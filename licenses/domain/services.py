"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity: seat arithmetic and the screening
pipeline shared by single, batch and CSV adds.
"""
from dataclasses import dataclass, field
from typing import Iterable, List, Set

from core.domain.exceptions import SeatLimitExceededError
from core.domain.value_objects import Email
from licenses.domain.license import License


@dataclass(frozen=True)
class SeatAccount:
    """Seat counters for one owner scope."""

    purchased: int
    assigned: int
    activated: int

    @property
    def pending(self) -> int:
        return self.assigned - self.activated

    @property
    def available(self) -> int:
        return self.purchased - self.assigned

    @classmethod
    def from_licenses(cls, purchased: int, licenses: Iterable[License]) -> "SeatAccount":
        """Derive counters from the ledger."""
        assigned = 0
        activated = 0
        for license in licenses:
            assigned += 1
            if license.is_activated:
                activated += 1
        return cls(purchased=purchased, assigned=assigned, activated=activated)

    def ensure_capacity(self, requested: int, verb: str = "add") -> None:
        """
        Reject an insert of ``requested`` licenses that would oversell.

        Args:
            requested: Number of licenses about to be inserted
            verb: Word used in the error, "add" or "import"

        Raises:
            SeatLimitExceededError: With a count-specific message
        """
        if requested <= 0 or requested <= self.available:
            return
        raise SeatLimitExceededError(
            f"Only {max(self.available, 0)} license(s) available. "
            f"You're trying to {verb} {requested}."
        )

    def ensure_single_seat(self) -> None:
        """Reject a single add when no seat is left."""
        if self.available <= 0:
            raise SeatLimitExceededError()

    def to_dict(self) -> dict:
        return {
            "purchased": self.purchased,
            "assigned": self.assigned,
            "activated": self.activated,
            "pending": self.pending,
            "available": self.available,
            "total": self.assigned,
        }


@dataclass
class EmailScreening:
    """Outcome of screening a batch of raw emails."""

    accepted: List[Email] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.errors)


class EmailBatchScreener:
    """
    Screen raw emails before a batch insert.

    Order: normalize, drop malformed, collapse duplicates inside the batch,
    drop emails already licensed in scope. The seat check runs afterwards
    against the unique remainder.
    """

    @staticmethod
    def candidates(raw_emails: Iterable[str]) -> Set[str]:
        """Normalized form of every well-formed entry, for the scope lookup."""
        return {
            Email.parse(raw).value
            for raw in raw_emails
            if isinstance(raw, str) and Email.is_valid(raw)
        }

    @staticmethod
    def screen(raw_emails: Iterable[str], existing: Set[str]) -> EmailScreening:
        """
        Args:
            raw_emails: Emails as submitted
            existing: Normalized emails already licensed in the scope

        Returns:
            EmailScreening with accepted emails in submission order
        """
        screening = EmailScreening()
        seen: Set[str] = set()
        duplicated: List[str] = []
        for raw in raw_emails:
            raw = raw if isinstance(raw, str) else ""
            try:
                email = Email.parse(raw)
            except ValueError:
                screening.errors.append(f"Invalid email format: {raw}")
                continue
            if email.value in seen:
                if email.value not in duplicated:
                    duplicated.append(email.value)
                continue
            seen.add(email.value)
            if email.value in existing:
                screening.errors.append(f"License already exists for: {email.value}")
                continue
            screening.accepted.append(email)
        screening.errors.extend(f"Duplicate email in batch: {email}" for email in duplicated)
        return screening
