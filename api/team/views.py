"""
Team, membership, invitation and activity API views.
"""

import logging
from typing import Any

from asgiref.sync import async_to_sync
from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activity.application.handlers.list_activity_handler import ListActivityHandler
from activity.application.queries.list_activity import ListActivityQuery
from api import dependencies as deps
from api.exceptions import validated_request
from api.team.serializers import (
    AcceptedInvitationSerializer,
    ActivityFilterSerializer,
    ActivityPageSerializer,
    CancelInvitationRequestSerializer,
    ChangeMemberRoleRequestSerializer,
    CreateTeamRequestSerializer,
    InvitationCreatedSerializer,
    InvitationPreviewSerializer,
    InvitationSerializer,
    InvitationTokenSerializer,
    InviteMemberRequestSerializer,
    RemoveMemberRequestSerializer,
    TeamMembersSerializer,
    TeamOverviewSerializer,
    TeamRefSerializer,
    TeamSerializer,
    UpdateTeamRequestSerializer,
)
from core.instrumentation import Status, StatusCode, get_tracer
from teams.application.commands.invitation_commands import (
    AcceptInvitationCommand,
    CancelInvitationCommand,
    InviteMemberCommand,
)
from teams.application.commands.team_commands import (
    ChangeMemberRoleCommand,
    CreateTeamCommand,
    RemoveMemberCommand,
    UpdateTeamCommand,
)
from teams.application.handlers.invitation_handlers import (
    AcceptInvitationHandler,
    CancelInvitationHandler,
    InviteMemberHandler,
    ListInvitationsHandler,
    PreviewInvitationHandler,
)
from teams.application.handlers.team_handlers import (
    ChangeMemberRoleHandler,
    CreateTeamHandler,
    GetTeamHandler,
    ListMembersHandler,
    RemoveMemberHandler,
    UpdateTeamHandler,
)
from teams.application.queries.team_queries import (
    GetTeamQuery,
    ListInvitationsQuery,
    ListMembersQuery,
    PreviewInvitationQuery,
)

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


def _body_value(request: Request, serializer_class, key: str, param: str) -> Any:
    """Value from the request body, falling back to the query string."""
    data = validated_request(serializer_class, request.data)
    return data.get(key) or request.query_params.get(param)


class TeamView(APIView):
    """View for the caller's team overview and settings."""

    @extend_schema(
        operation_id="get_team",
        summary="Get Team",
        description="Team details, members and pending invitations; `hasTeam` is false for solo admins.",
        tags=["Team"],
        responses={200: TeamOverviewSerializer},
    )
    def get(self, request: Request) -> Response:
        """Get team overview."""
        return async_to_sync(self._handle_get)(request)

    async def _handle_get(self, request: Request) -> Response:
        with tracer.start_as_current_span("get_team") as span:
            handler = GetTeamHandler(
                identity_gate=deps.identity_gate(),
                team_repository=deps.team_repo,
                member_repository=deps.member_repo,
                invitation_repository=deps.invitation_repo,
                admin_repository=deps.admin_repo,
            )
            result = await handler.handle(GetTeamQuery(user_id=deps.session_user_id(request)))

            span.set_attribute("team.has_team", result.has_team)
            span.set_status(Status(StatusCode.OK))
            return Response(TeamOverviewSerializer(result).data)

    @extend_schema(
        operation_id="update_team",
        summary="Update Team",
        description="Rename the team. Owner only.",
        tags=["Team"],
        request=UpdateTeamRequestSerializer,
        responses={200: TeamSerializer, 403: {"description": "Caller is not the owner"}},
    )
    def patch(self, request: Request) -> Response:
        """Update team settings."""
        return async_to_sync(self._handle_update)(request)

    async def _handle_update(self, request: Request) -> Response:
        with tracer.start_as_current_span("update_team") as span:
            handler = UpdateTeamHandler(
                identity_gate=deps.identity_gate(),
                team_repository=deps.team_repo,
                journal=deps.journal(),
            )
            data = validated_request(UpdateTeamRequestSerializer, request.data)
            result = await handler.handle(
                UpdateTeamCommand(user_id=deps.session_user_id(request), name=data.get("name"))
            )

            span.set_attribute("team.id", str(result.id))
            span.set_status(Status(StatusCode.OK))
            return Response({"success": True, "team": TeamSerializer(result).data})


class CreateTeamView(APIView):
    """View for founding a team."""

    @extend_schema(
        operation_id="create_team",
        summary="Create Team",
        description=(
            "Found a team around the caller. Their seat counter and unscoped "
            "licenses move to the team."
        ),
        tags=["Team"],
        request=CreateTeamRequestSerializer,
        responses={
            201: TeamRefSerializer,
            400: {"description": "Caller already belongs to a team"},
            403: {"description": "Email domain may not create teams"},
        },
    )
    def post(self, request: Request) -> Response:
        """Create a team."""
        return async_to_sync(self._handle_create)(request)

    async def _handle_create(self, request: Request) -> Response:
        with tracer.start_as_current_span("create_team") as span:
            handler = CreateTeamHandler(
                identity_gate=deps.identity_gate(),
                team_repository=deps.team_repo,
                journal=deps.journal(),
                eligibility=deps.team_eligibility(),
                programs=deps.partner_programs(),
            )
            data = validated_request(CreateTeamRequestSerializer, request.data)
            result = await handler.handle(
                CreateTeamCommand(user_id=deps.session_user_id(request), name=data.get("name"))
            )

            span.set_attribute("team.id", str(result.id))
            span.set_status(Status(StatusCode.OK))
            return Response(
                {"success": True, "team": TeamRefSerializer(result).data},
                status=status.HTTP_201_CREATED,
            )


class InvitationsView(APIView):
    """View for listing, sending and cancelling invitations."""

    @extend_schema(
        operation_id="list_invitations",
        summary="List Invitations",
        tags=["Team"],
        responses={200: InvitationSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        """List pending invitations."""
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_invitations") as span:
            handler = ListInvitationsHandler(
                identity_gate=deps.identity_gate(),
                team_repository=deps.team_repo,
                invitation_repository=deps.invitation_repo,
            )
            result = await handler.handle(
                ListInvitationsQuery(user_id=deps.session_user_id(request))
            )

            span.set_attribute("invitations.count", len(result))
            span.set_status(Status(StatusCode.OK))
            return Response({"invitations": InvitationSerializer(result, many=True).data})

    @extend_schema(
        operation_id="invite_member",
        summary="Invite Member",
        description="Invite an email from the team's domain and send the invitation email.",
        tags=["Team"],
        request=InviteMemberRequestSerializer,
        responses={
            200: InvitationCreatedSerializer,
            400: {"description": "Invalid email, role or duplicate invitation"},
            403: {"description": "Caller may not invite"},
            404: {"description": "Caller has no team"},
        },
    )
    def post(self, request: Request) -> Response:
        """Invite a member."""
        return async_to_sync(self._handle_invite)(request)

    async def _handle_invite(self, request: Request) -> Response:
        with tracer.start_as_current_span("invite_member") as span:
            handler = InviteMemberHandler(
                identity_gate=deps.identity_gate(),
                team_repository=deps.team_repo,
                member_repository=deps.member_repo,
                invitation_repository=deps.invitation_repo,
                admin_repository=deps.admin_repo,
                dispatcher=deps.dispatcher(),
                journal=deps.journal(),
                ttl_days=settings.INVITATION_TTL_DAYS,
            )
            data = validated_request(InviteMemberRequestSerializer, request.data)
            result = await handler.handle(
                InviteMemberCommand(
                    user_id=deps.session_user_id(request),
                    email=data.get("email"),
                    role=data.get("role"),
                )
            )

            span.set_attribute("invitation.id", str(result.invitation.id))
            span.set_attribute("email.sent", result.email_sent)
            span.set_status(Status(StatusCode.OK))
            return Response({"success": True, **InvitationCreatedSerializer(result).data})

    @extend_schema(
        operation_id="cancel_invitation",
        summary="Cancel Invitation",
        tags=["Team"],
        request=CancelInvitationRequestSerializer,
        responses={200: {"description": "Invitation revoked"}, 404: {"description": "Not pending"}},
    )
    def delete(self, request: Request) -> Response:
        """Cancel an invitation."""
        return async_to_sync(self._handle_cancel)(request)

    async def _handle_cancel(self, request: Request) -> Response:
        with tracer.start_as_current_span("cancel_invitation") as span:
            invitation_id = _body_value(
                request, CancelInvitationRequestSerializer, "invitation_id", "invitationId"
            )
            span.set_attribute("invitation.id", str(invitation_id))

            handler = CancelInvitationHandler(
                identity_gate=deps.identity_gate(),
                team_repository=deps.team_repo,
                invitation_repository=deps.invitation_repo,
                journal=deps.journal(),
            )
            await handler.handle(
                CancelInvitationCommand(
                    user_id=deps.session_user_id(request), invitation_id=invitation_id
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response({"success": True})


class AcceptInvitationView(APIView):
    """View for previewing and accepting an invitation by token."""

    @extend_schema(
        operation_id="preview_invitation",
        summary="Preview Invitation",
        description="Public lookup of an invitation by token.",
        tags=["Team"],
        parameters=[InvitationTokenSerializer],
        responses={
            200: InvitationPreviewSerializer,
            400: {"description": "Missing token, expired or no longer pending"},
            404: {"description": "Invitation not found"},
        },
    )
    def get(self, request: Request) -> Response:
        """Preview an invitation."""
        return async_to_sync(self._handle_preview)(request)

    async def _handle_preview(self, request: Request) -> Response:
        with tracer.start_as_current_span("preview_invitation") as span:
            handler = PreviewInvitationHandler(
                team_repository=deps.team_repo,
                invitation_repository=deps.invitation_repo,
                admin_repository=deps.admin_repo,
            )
            result = await handler.handle(
                PreviewInvitationQuery(token=request.query_params.get("token"))
            )

            span.set_attribute("invitation.id", str(result.id))
            span.set_status(Status(StatusCode.OK))
            return Response({"invitation": InvitationPreviewSerializer(result).data})

    @extend_schema(
        operation_id="accept_invitation",
        summary="Accept Invitation",
        tags=["Team"],
        request=InvitationTokenSerializer,
        responses={
            200: AcceptedInvitationSerializer,
            400: {"description": "Invalid invitation or caller already in a team"},
            403: {"description": "Invitation addressed to another email"},
        },
    )
    def post(self, request: Request) -> Response:
        """Accept an invitation."""
        return async_to_sync(self._handle_accept)(request)

    async def _handle_accept(self, request: Request) -> Response:
        with tracer.start_as_current_span("accept_invitation") as span:
            handler = AcceptInvitationHandler(
                identity_gate=deps.identity_gate(),
                team_repository=deps.team_repo,
                member_repository=deps.member_repo,
                invitation_repository=deps.invitation_repo,
                journal=deps.journal(),
            )
            data = validated_request(InvitationTokenSerializer, request.data)
            result = await handler.handle(
                AcceptInvitationCommand(
                    user_id=deps.session_user_id(request), token=data.get("token")
                )
            )

            span.set_attribute("team.id", str(result.team.id))
            span.set_status(Status(StatusCode.OK))
            return Response({"success": True, **AcceptedInvitationSerializer(result).data})


class MembersView(APIView):
    """View for listing and managing team members."""

    @extend_schema(
        operation_id="list_members",
        summary="List Members",
        tags=["Team"],
        responses={200: TeamMembersSerializer},
    )
    def get(self, request: Request) -> Response:
        """List members."""
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_members") as span:
            handler = ListMembersHandler(
                identity_gate=deps.identity_gate(),
                team_repository=deps.team_repo,
                member_repository=deps.member_repo,
                admin_repository=deps.admin_repo,
            )
            result = await handler.handle(ListMembersQuery(user_id=deps.session_user_id(request)))

            span.set_attribute("members.count", len(result.members))
            span.set_status(Status(StatusCode.OK))
            return Response(TeamMembersSerializer(result).data)

    @extend_schema(
        operation_id="change_member_role",
        summary="Change Member Role",
        description="Promote or demote a member. Owner only; the owner's role is fixed.",
        tags=["Team"],
        request=ChangeMemberRoleRequestSerializer,
        responses={200: {"description": "Role changed"}, 403: {"description": "Caller is not the owner"}},
    )
    def patch(self, request: Request) -> Response:
        """Change a member's role."""
        return async_to_sync(self._handle_change_role)(request)

    async def _handle_change_role(self, request: Request) -> Response:
        with tracer.start_as_current_span("change_member_role") as span:
            handler = ChangeMemberRoleHandler(
                identity_gate=deps.identity_gate(),
                team_repository=deps.team_repo,
                member_repository=deps.member_repo,
                admin_repository=deps.admin_repo,
                journal=deps.journal(),
            )
            data = validated_request(ChangeMemberRoleRequestSerializer, request.data)
            await handler.handle(
                ChangeMemberRoleCommand(
                    user_id=deps.session_user_id(request),
                    member_id=data.get("member_id"),
                    role=data.get("role"),
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response({"success": True})

    @extend_schema(
        operation_id="remove_member",
        summary="Remove Member",
        tags=["Team"],
        request=RemoveMemberRequestSerializer,
        responses={200: {"description": "Member removed"}, 403: {"description": "Caller is not the owner"}},
    )
    def delete(self, request: Request) -> Response:
        """Remove a member."""
        return async_to_sync(self._handle_remove)(request)

    async def _handle_remove(self, request: Request) -> Response:
        with tracer.start_as_current_span("remove_member") as span:
            member_id = _body_value(request, RemoveMemberRequestSerializer, "member_id", "memberId")
            span.set_attribute("member.id", str(member_id))

            handler = RemoveMemberHandler(
                identity_gate=deps.identity_gate(),
                team_repository=deps.team_repo,
                member_repository=deps.member_repo,
                admin_repository=deps.admin_repo,
                journal=deps.journal(),
            )
            await handler.handle(
                RemoveMemberCommand(user_id=deps.session_user_id(request), member_id=member_id)
            )

            span.set_status(Status(StatusCode.OK))
            return Response({"success": True})


class ActivityView(APIView):
    """View for the team activity journal."""

    @extend_schema(
        operation_id="list_activity",
        summary="List Activity",
        description="Newest first. `limit` is clamped to 1..100.",
        tags=["Team"],
        parameters=[ActivityFilterSerializer],
        responses={200: ActivityPageSerializer},
    )
    def get(self, request: Request) -> Response:
        """List activity."""
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_activity") as span:
            params = request.query_params
            handler = ListActivityHandler(
                identity_gate=deps.identity_gate(),
                activity_repository=deps.activity_repo,
                admin_repository=deps.admin_repo,
            )
            result = await handler.handle(
                ListActivityQuery(
                    user_id=deps.session_user_id(request),
                    limit=params.get("limit"),
                    offset=params.get("offset"),
                    activity_type=params.get("type") or None,
                )
            )

            span.set_attribute("activity.total", result.total)
            span.set_status(Status(StatusCode.OK))
            return Response(ActivityPageSerializer(result).data)
