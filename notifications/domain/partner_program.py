"""
Partner program (sponsoring chamber / EDC) branding.
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional


@dataclass(frozen=True)
class PartnerProgram:
    """Branding and links of one sponsoring organization."""

    id: str
    name: str
    full_name: str
    program_name: str
    domain: str
    ref: str
    slug: str
    logo_initial: str = ""
    logo: Optional[str] = None
    primary_color: str = "#0073B5"
    support_email: str = ""
    license_duration: str = "1 year"
    job_posts: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PartnerProgram":
        """Build a program from a settings entry, ignoring unknown keys."""
        known = {name for name in cls.__dataclass_fields__}
        return cls(**{key: value for key, value in data.items() if key in known})

    def as_context(self) -> Dict[str, Any]:
        """Template context for email bodies."""
        return {
            "program_name": self.program_name,
            "full_name": self.full_name,
            "logo": self.logo,
            "logo_initial": self.logo_initial,
            "primary_color": self.primary_color,
            "support_email": self.support_email,
            "license_duration": self.license_duration,
            "job_posts": self.job_posts,
        }


class PartnerProgramRegistry:
    """
    Lookup of partner programs by email domain.

    The first configured program is the default.
    """

    def __init__(self, programs: Iterable[PartnerProgram]):
        self._programs: List[PartnerProgram] = list(programs)
        if not self._programs:
            raise ValueError("At least one partner program must be configured")

    @classmethod
    def from_settings(cls, entries: Iterable[Dict[str, Any]]) -> "PartnerProgramRegistry":
        return cls(PartnerProgram.from_dict(entry) for entry in entries)

    @property
    def default(self) -> PartnerProgram:
        return self._programs[0]

    def by_domain(self, domain: str) -> Optional[PartnerProgram]:
        """Exact domain match, or None."""
        domain = (domain or "").lower()
        for program in self._programs:
            if program.domain == domain:
                return program
        return None

    def for_email(self, email: Optional[str]) -> PartnerProgram:
        """Program of an email's domain, falling back to the default."""
        if email and "@" in email:
            program = self.by_domain(email.rsplit("@", 1)[1])
            if program is not None:
                return program
        return self.default
