"""
Team domain services.
"""
from typing import Iterable, Optional

from accounts.domain.admin import Admin


class TeamEligibility:
    """Rules about who may found a team."""

    def __init__(self, allowed_domains: Iterable[str]):
        self.allowed_domains = tuple(domain.lower() for domain in allowed_domains)

    def can_create_team(self, admin: Admin) -> bool:
        """Only admins from an allow-listed email domain may create a team."""
        return admin.email.domain in self.allowed_domains

    def rejection_message(self) -> str:
        """Message shown to admins outside the allow-list."""
        domains = " and ".join(f"@{domain}" for domain in self.allowed_domains)
        return f"Only {domains} accounts can create teams"


class TeamNaming:
    """Default team names."""

    @staticmethod
    def default_name(admin: Admin, program_short_name: Optional[str]) -> str:
        """
        Build a default team name such as "Ana's Queen Creek Chamber Team".

        Args:
            admin: Team founder
            program_short_name: Partner program name for the founder's domain

        Returns:
            Team name
        """
        label = program_short_name or "Moil"
        first_name = admin.first_name.strip() or str(admin.email).split("@")[0]
        return f"{first_name}'s {label} Team"
