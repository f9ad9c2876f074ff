"""
Models of the teams app; defined in the infrastructure layer.
"""
from teams.infrastructure.models import Team, TeamInvitation, TeamMember  # noqa: F401
