"""
Identity gate.

Resolves the calling session user into an administrator and their
team context. Every admin-facing handler receives one of these.
"""
import logging
from typing import Optional

from accounts.domain.actor import Actor
from accounts.domain.admin import Admin
from accounts.ports.admin_repository import AdminRepository
from accounts.ports.team_membership_lookup import TeamMembershipLookup
from core.domain.exceptions import AdminRequiredError, AuthenticationRequiredError

logger = logging.getLogger(__name__)


class IdentityGate:
    """Classify a session user as an administrator or reject the request."""

    def __init__(
        self,
        admin_repository: AdminRepository,
        membership_lookup: TeamMembershipLookup,
    ):
        self.admin_repository = admin_repository
        self.membership_lookup = membership_lookup

    async def require_admin(self, user_id: Optional[int]) -> Admin:
        """
        Resolve an authenticated user into an admin.

        Args:
            user_id: Primary key of the session user, None when anonymous

        Returns:
            Admin entity

        Raises:
            AuthenticationRequiredError: No session user (401)
            AdminRequiredError: The user has no admin record (403)
        """
        if user_id is None:
            raise AuthenticationRequiredError()

        admin = await self.admin_repository.find_by_user_id(user_id)
        if admin is None:
            logger.warning("Session user without admin record", extra={"user_id": user_id})
            raise AdminRequiredError()
        return admin

    async def require_actor(self, user_id: Optional[int]) -> Actor:
        """Resolve an admin plus their team membership."""
        admin = await self.require_admin(user_id)
        membership = await self.membership_lookup.find_by_admin(admin.id)
        if membership is None:
            return Actor(admin=admin)
        return Actor(
            admin=admin,
            team_id=membership.team_id,
            role=membership.role,
            member_id=membership.id,
        )
