"""
Permission policy.

A single ``can(actor, action, resource)`` function holds every
owner/admin/member rule used by license and team operations.
"""
from enum import Enum
from typing import Union

from accounts.domain.actor import Actor
from core.domain.value_objects import TeamRole
from licenses.domain.license import License
from teams.domain.team import Team
from teams.domain.team_invitation import TeamInvitation
from teams.domain.team_member import TeamMember

Resource = Union[Team, TeamMember, TeamInvitation, License]

_MANAGER_ROLES = (TeamRole.OWNER, TeamRole.ADMIN)


class Action(Enum):
    """Operations gated by the policy."""

    VIEW_TEAM = "view_team"
    UPDATE_TEAM = "update_team"
    INVITE_MEMBER = "invite_member"
    CANCEL_INVITATION = "cancel_invitation"
    CHANGE_ROLE = "change_role"
    REMOVE_MEMBER = "remove_member"
    MANAGE_LICENSE = "manage_license"


def _team_id_of(resource: Resource):
    if isinstance(resource, Team):
        return resource.id
    return resource.team_id


def _is_team_member(actor: Actor, resource: Resource) -> bool:
    return actor.team_id is not None and actor.team_id == _team_id_of(resource)


def can(actor: Actor, action: Action, resource: Resource) -> bool:
    """
    Decide whether an actor may perform an action on a resource.

    Args:
        actor: Resolved caller
        action: Requested operation
        resource: Team, member, invitation or license being acted on

    Returns:
        True if allowed
    """
    if action == Action.MANAGE_LICENSE:
        if not isinstance(resource, License):
            return False
        if resource.team_id is not None:
            return actor.team_id == resource.team_id
        return resource.admin_id == actor.admin_id

    if not _is_team_member(actor, resource):
        return False

    if action == Action.VIEW_TEAM:
        return True
    if action in (Action.INVITE_MEMBER, Action.CANCEL_INVITATION):
        return actor.role in _MANAGER_ROLES
    if action == Action.UPDATE_TEAM:
        return actor.role == TeamRole.OWNER
    if action in (Action.CHANGE_ROLE, Action.REMOVE_MEMBER):
        if not isinstance(resource, TeamMember) or resource.is_owner:
            return False
        return actor.role == TeamRole.OWNER
    return False
