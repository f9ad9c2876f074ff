"""
License ledger API views.

Admin endpoints run for the session admin's scope; activate, verify and
the purchase top-up are called by the consumer application.
"""

import logging
import uuid
from typing import Any
from urllib.parse import urlencode

from asgiref.sync import async_to_sync
from django.conf import settings
from django.http import HttpResponse, HttpResponseRedirect
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api import dependencies as deps
from api.exceptions import validated_request
from api.licenses.serializers import (
    ActivatedLicenseSerializer,
    ActivateLicenseRequestSerializer,
    AddLicenseRequestSerializer,
    AddLicenseResponseSerializer,
    AddLicensesRequestSerializer,
    AddLicensesResponseSerializer,
    EmailStatusSyncResponseSerializer,
    ImportLicensesRequestSerializer,
    LicenseIdRequestSerializer,
    LicenseListResponseSerializer,
    LicenseStatsSerializer,
    PurchaseCallbackRequestSerializer,
    PurchaseResultSerializer,
    TopUpLicensesRequestSerializer,
    UpdateLicenseEmailRequestSerializer,
    VerifyLicenseRequestSerializer,
    VerifyLicenseResponseSerializer,
)
from core.domain.exceptions import (
    AdminNotFoundError,
    AdminRequiredError,
    AuthenticationRequiredError,
    InvalidLicenseCountError,
    PaymentFailedError,
    PaymentVerificationError,
    TeamNotFoundError,
    ValidationFailedError,
)
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.activate_license import ActivateLicenseCommand
from licenses.application.commands.add_license import AddLicenseCommand
from licenses.application.commands.add_licenses import AddLicensesCommand, ImportLicensesCommand
from licenses.application.commands.manage_license import (
    RemoveLicenseCommand,
    ResendLicenseEmailCommand,
    UpdateLicenseEmailCommand,
)
from licenses.application.commands.purchase_licenses import (
    CompletePurchaseCommand,
    TopUpLicensesCommand,
)
from licenses.application.commands.sync_email_statuses import SyncEmailStatusesCommand
from licenses.application.handlers.activate_license_handlers import (
    ActivateLicenseHandler,
    VerifyLicenseHandler,
)
from licenses.application.handlers.add_license_handlers import (
    AddLicenseHandler,
    AddLicensesHandler,
    ImportLicensesHandler,
)
from licenses.application.handlers.email_status_handler import SyncEmailStatusesHandler
from licenses.application.handlers.license_query_handlers import (
    ExportLicensesHandler,
    GetLicenseStatsHandler,
    ListLicensesHandler,
)
from licenses.application.handlers.manage_license_handlers import (
    RemoveLicenseHandler,
    ResendLicenseEmailHandler,
    UpdateLicenseEmailHandler,
)
from licenses.application.handlers.purchase_handlers import (
    CompletePurchaseHandler,
    TopUpLicensesHandler,
)
from licenses.application.queries.license_queries import (
    ExportLicensesQuery,
    GetLicenseStatsQuery,
    ListLicensesQuery,
    VerifyLicenseQuery,
)

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

DASHBOARD_PATH = "/admin/dashboard"
LOGIN_REDIRECT_PATH = "/login?error=unauthorized&redirect=/admin/dashboard"

# Checked in order; subclasses map like their parent
PURCHASE_ERROR_CODES = (
    (PaymentFailedError, "payment_failed"),
    (InvalidLicenseCountError, "invalid_license_count"),
    (PaymentVerificationError, "invalid_signature"),
    (AdminRequiredError, "admin_not_found"),
    (AdminNotFoundError, "admin_not_found"),
    (TeamNotFoundError, "team_not_found"),
)
UNEXPECTED_PURCHASE_ERROR = "unexpected_error"


def _parse_license_id(raw: Any, required_message: str = "License ID is required") -> uuid.UUID:
    if not raw:
        raise ValidationFailedError(required_message)
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        raise ValidationFailedError("Invalid license ID")


def _license_id_from(request: Request) -> Any:
    """licenseId from the JSON body, falling back to the query string."""
    data = validated_request(LicenseIdRequestSerializer, request.data)
    return data.get("license_id") or request.query_params.get("licenseId")


class ListLicensesView(APIView):
    """View for listing the caller's licenses."""

    @extend_schema(
        operation_id="list_licenses",
        summary="List Licenses",
        description="Licenses of the caller's scope, newest first, with seat statistics.",
        tags=["Licenses"],
        responses={200: LicenseListResponseSerializer},
    )
    def get(self, request: Request) -> Response:
        """List licenses."""
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_licenses") as span:
            handler = ListLicensesHandler(
                identity_gate=deps.identity_gate(),
                license_repository=deps.license_repo,
                admin_repository=deps.admin_repo,
                seat_ledger=deps.seat_ledger(),
            )
            result = await handler.handle(ListLicensesQuery(user_id=deps.session_user_id(request)))

            span.set_attribute("licenses.count", len(result.licenses))
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseListResponseSerializer(result).data)


class LicenseStatsView(APIView):
    """View for seat statistics."""

    @extend_schema(
        operation_id="license_stats",
        summary="License Statistics",
        description="Seat counters of the caller's scope, including legacy key names.",
        tags=["Licenses"],
        responses={200: LicenseStatsSerializer},
    )
    def get(self, request: Request) -> Response:
        """Get seat statistics."""
        return async_to_sync(self._handle_stats)(request)

    async def _handle_stats(self, request: Request) -> Response:
        with tracer.start_as_current_span("license_stats") as span:
            handler = GetLicenseStatsHandler(
                identity_gate=deps.identity_gate(), seat_ledger=deps.seat_ledger()
            )
            result = await handler.handle(GetLicenseStatsQuery(user_id=deps.session_user_id(request)))

            span.set_attribute("seats.available", result.available)
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseStatsSerializer(result).data)


class AddLicenseView(APIView):
    """View for adding one license."""

    @extend_schema(
        operation_id="add_license",
        summary="Add License",
        description="Assign a seat to one email and send the activation email.",
        tags=["Licenses"],
        request=AddLicenseRequestSerializer,
        responses={
            201: AddLicenseResponseSerializer,
            400: {"description": "Invalid email, duplicate, or no seat available"},
            401: {"description": "Not logged in"},
            403: {"description": "Not an admin"},
        },
    )
    def post(self, request: Request) -> Response:
        """Add a license."""
        return async_to_sync(self._handle_add)(request)

    async def _handle_add(self, request: Request) -> Response:
        with tracer.start_as_current_span("add_license") as span:
            handler = AddLicenseHandler(
                identity_gate=deps.identity_gate(),
                license_repository=deps.license_repo,
                seat_ledger=deps.seat_ledger(),
                dispatcher=deps.dispatcher(),
                journal=deps.journal(),
            )
            data = validated_request(AddLicenseRequestSerializer, request.data)
            command = AddLicenseCommand(
                user_id=deps.session_user_id(request), email=data.get("email")
            )
            result = await handler.handle(command)

            span.set_attribute("license.id", str(result.license.id))
            span.set_attribute("email.sent", result.email_sent)
            span.set_status(Status(StatusCode.OK))
            return Response(AddLicenseResponseSerializer(result).data, status=status.HTTP_201_CREATED)


class AddLicensesView(APIView):
    """View for adding licenses in bulk."""

    @extend_schema(
        operation_id="add_licenses",
        summary="Add Multiple Licenses",
        description=(
            "Assign seats to a list of emails. The whole request is rejected when "
            "the valid, new emails exceed the available seats."
        ),
        tags=["Licenses"],
        request=AddLicensesRequestSerializer,
        responses={200: AddLicensesResponseSerializer},
    )
    def post(self, request: Request) -> Response:
        """Add licenses."""
        return async_to_sync(self._handle_add_many)(request)

    async def _handle_add_many(self, request: Request) -> Response:
        with tracer.start_as_current_span("add_licenses") as span:
            handler = AddLicensesHandler(
                identity_gate=deps.identity_gate(),
                license_repository=deps.license_repo,
                seat_ledger=deps.seat_ledger(),
                dispatcher=deps.dispatcher(),
                journal=deps.journal(),
            )
            data = validated_request(AddLicensesRequestSerializer, request.data)
            command = AddLicensesCommand(
                user_id=deps.session_user_id(request), emails=data.get("emails")
            )
            result = await handler.handle(command)

            span.set_attribute("licenses.added", result.results.success)
            span.set_attribute("licenses.failed", result.results.failed)
            span.set_status(Status(StatusCode.OK))
            return Response(AddLicensesResponseSerializer(result).data)


class ImportLicensesView(APIView):
    """View for importing licenses from CSV."""

    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        operation_id="import_licenses",
        summary="Import Licenses",
        description="Import emails from the first column of a CSV file; the first row is a header.",
        tags=["Licenses"],
        request={"multipart/form-data": ImportLicensesRequestSerializer},
        responses={200: AddLicensesResponseSerializer},
    )
    def post(self, request: Request) -> Response:
        """Import licenses."""
        return async_to_sync(self._handle_import)(request)

    async def _handle_import(self, request: Request) -> Response:
        with tracer.start_as_current_span("import_licenses") as span:
            upload = request.FILES.get("file")
            content = upload.read().decode("utf-8-sig", errors="replace") if upload else None

            handler = ImportLicensesHandler(
                identity_gate=deps.identity_gate(),
                license_repository=deps.license_repo,
                seat_ledger=deps.seat_ledger(),
                dispatcher=deps.dispatcher(),
                journal=deps.journal(),
            )
            command = ImportLicensesCommand(user_id=deps.session_user_id(request), content=content)
            result = await handler.handle(command)

            span.set_attribute("licenses.added", result.results.success)
            span.set_attribute("licenses.failed", result.results.failed)
            span.set_status(Status(StatusCode.OK))
            return Response(AddLicensesResponseSerializer(result).data)


class RemoveLicenseView(APIView):
    """View for deleting a license."""

    @extend_schema(
        operation_id="remove_license",
        summary="Remove License",
        description="Delete a license. `licenseId` may be sent in the body or query string.",
        tags=["Licenses"],
        request=LicenseIdRequestSerializer,
        parameters=[OpenApiParameter("licenseId", str, required=False)],
        responses={
            200: {"description": "License removed"},
            403: {"description": "License belongs to another scope"},
            404: {"description": "License not found"},
        },
    )
    def delete(self, request: Request) -> Response:
        """Remove a license."""
        return async_to_sync(self._handle_remove)(request)

    async def _handle_remove(self, request: Request) -> Response:
        with tracer.start_as_current_span("remove_license") as span:
            license_id = _parse_license_id(_license_id_from(request))
            span.set_attribute("license.id", str(license_id))

            handler = RemoveLicenseHandler(
                identity_gate=deps.identity_gate(),
                license_repository=deps.license_repo,
                journal=deps.journal(),
            )
            await handler.handle(
                RemoveLicenseCommand(user_id=deps.session_user_id(request), license_id=license_id)
            )

            span.set_status(Status(StatusCode.OK))
            return Response({"success": True, "message": "License removed successfully"})


class ResendLicenseEmailView(APIView):
    """View for re-sending an activation email."""

    @extend_schema(
        operation_id="resend_license_email",
        summary="Resend Activation Email",
        tags=["Licenses"],
        request=LicenseIdRequestSerializer,
        responses={
            200: {"description": "Email sent"},
            400: {"description": "License already activated"},
            404: {"description": "License not found in scope"},
            500: {"description": "Email provider rejected the email"},
        },
    )
    def post(self, request: Request) -> Response:
        """Resend activation email."""
        return async_to_sync(self._handle_resend)(request)

    async def _handle_resend(self, request: Request) -> Response:
        with tracer.start_as_current_span("resend_license_email") as span:
            license_id = _parse_license_id(_license_id_from(request))
            span.set_attribute("license.id", str(license_id))

            handler = ResendLicenseEmailHandler(
                identity_gate=deps.identity_gate(),
                license_repository=deps.license_repo,
                dispatcher=deps.dispatcher(),
                journal=deps.journal(),
            )
            await handler.handle(
                ResendLicenseEmailCommand(
                    user_id=deps.session_user_id(request), license_id=license_id
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response({"success": True, "message": "Activation email sent successfully"})


class UpdateLicenseEmailView(APIView):
    """View for re-addressing an unactivated license."""

    @extend_schema(
        operation_id="update_license_email",
        summary="Update License Email",
        description="Change the email of an unactivated license and re-send the activation email.",
        tags=["Licenses"],
        request=UpdateLicenseEmailRequestSerializer,
        responses={200: {"description": "Email updated"}},
    )
    def patch(self, request: Request) -> Response:
        """Update license email."""
        return async_to_sync(self._handle_update_email)(request)

    async def _handle_update_email(self, request: Request) -> Response:
        with tracer.start_as_current_span("update_license_email") as span:
            data = validated_request(UpdateLicenseEmailRequestSerializer, request.data)
            new_email = data.get("new_email")
            if not data.get("license_id") or not new_email:
                raise ValidationFailedError("License ID and new email are required")
            license_id = _parse_license_id(data["license_id"])
            span.set_attribute("license.id", str(license_id))

            handler = UpdateLicenseEmailHandler(
                identity_gate=deps.identity_gate(),
                license_repository=deps.license_repo,
                dispatcher=deps.dispatcher(),
                journal=deps.journal(),
            )
            email_sent = await handler.handle(
                UpdateLicenseEmailCommand(
                    user_id=deps.session_user_id(request),
                    license_id=license_id,
                    new_email=new_email,
                )
            )

            span.set_attribute("email.sent", email_sent)
            span.set_status(Status(StatusCode.OK))
            message = (
                "License email updated and activation email sent"
                if email_sent
                else "License email updated but failed to send activation email"
            )
            return Response({"success": True, "message": message, "emailSent": email_sent})


class ActivateLicenseView(APIView):
    """View for activating a license from the consumer application."""

    @extend_schema(
        operation_id="activate_license",
        summary="Activate License",
        description="Mark a license activated and record the business that claimed it.",
        tags=["Service"],
        request=ActivateLicenseRequestSerializer,
        responses={
            200: ActivatedLicenseSerializer,
            400: {"description": "Missing field or already activated"},
            404: {"description": "License not found"},
        },
    )
    def post(self, request: Request) -> Response:
        """Activate a license."""
        return async_to_sync(self._handle_activate)(request)

    async def _handle_activate(self, request: Request) -> Response:
        with tracer.start_as_current_span("activate_license") as span:
            data = validated_request(ActivateLicenseRequestSerializer, request.data)
            required = ("license_id", "business_name", "business_type")
            if not all(data.get(field) for field in required):
                raise ValidationFailedError(
                    "License ID, business name, and business type are required"
                )
            license_id = _parse_license_id(data["license_id"])
            span.set_attribute("license.id", str(license_id))

            handler = ActivateLicenseHandler(
                license_repository=deps.license_repo, journal=deps.journal()
            )
            result = await handler.handle(
                ActivateLicenseCommand(
                    license_id=license_id,
                    business_name=data["business_name"],
                    business_type=data["business_type"],
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(
                {
                    "success": True,
                    "message": "License activated successfully",
                    "license": ActivatedLicenseSerializer(result).data,
                }
            )


class VerifyLicenseView(APIView):
    """View for checking whether a license exists and is activated."""

    @extend_schema(
        operation_id="verify_license",
        summary="Verify License",
        tags=["Service"],
        parameters=[VerifyLicenseRequestSerializer],
        responses={200: VerifyLicenseResponseSerializer},
    )
    def get(self, request: Request) -> Response:
        """Verify a license."""
        return async_to_sync(self._handle_verify)(request)

    async def _handle_verify(self, request: Request) -> Response:
        with tracer.start_as_current_span("verify_license") as span:
            license_id = _parse_license_id(request.query_params.get("licenseId"))
            span.set_attribute("license.id", str(license_id))

            handler = VerifyLicenseHandler(license_repository=deps.license_repo)
            result = await handler.handle(VerifyLicenseQuery(license_id=license_id))

            span.set_attribute("license.verified", result.verified)
            span.set_status(Status(StatusCode.OK))
            return Response({"success": True, **VerifyLicenseResponseSerializer(result).data})


class ExportLicensesView(APIView):
    """View for downloading the caller's licenses as CSV."""

    @extend_schema(
        operation_id="export_licenses",
        summary="Export Licenses",
        tags=["Licenses"],
        responses={(200, "text/csv"): str},
    )
    def get(self, request: Request) -> HttpResponse:
        """Export licenses."""
        return async_to_sync(self._handle_export)(request)

    async def _handle_export(self, request: Request) -> HttpResponse:
        with tracer.start_as_current_span("export_licenses") as span:
            handler = ExportLicensesHandler(
                identity_gate=deps.identity_gate(),
                license_repository=deps.license_repo,
                programs=deps.partner_programs(),
            )
            result = await handler.handle(ExportLicensesQuery(user_id=deps.session_user_id(request)))

            span.set_attribute("export.filename", result.filename)
            span.set_status(Status(StatusCode.OK))
            response = HttpResponse(result.content, content_type="text/csv")
            response["Content-Disposition"] = f'attachment; filename="{result.filename}"'
            return response


class EmailStatusView(APIView):
    """View for refreshing provider delivery statuses."""

    @extend_schema(
        operation_id="sync_email_statuses",
        summary="Sync Email Statuses",
        description="Query the email provider for every license with a message id, rate limited.",
        tags=["Licenses"],
        request=None,
        responses={200: EmailStatusSyncResponseSerializer},
    )
    def post(self, request: Request) -> Response:
        """Sync email statuses."""
        return async_to_sync(self._handle_sync)(request)

    async def _handle_sync(self, request: Request) -> Response:
        with tracer.start_as_current_span("sync_email_statuses") as span:
            handler = SyncEmailStatusesHandler(
                identity_gate=deps.identity_gate(),
                license_repository=deps.license_repo,
                dispatcher=deps.dispatcher(),
            )
            result = await handler.handle(
                SyncEmailStatusesCommand(user_id=deps.session_user_id(request))
            )

            span.set_attribute("statuses.synced", result.synced)
            span.set_status(Status(StatusCode.OK))
            return Response(EmailStatusSyncResponseSerializer(result).data)


class PurchaseLicensesView(APIView):
    """
    View for seat purchases.

    GET is the payment provider's browser redirect and answers with a
    redirect to the dashboard; POST is a service top-up.
    """

    parser_classes = [JSONParser]

    @extend_schema(
        operation_id="complete_purchase",
        summary="Payment Callback",
        description="Credit purchased seats to the session admin's scope and redirect to the dashboard.",
        tags=["Licenses"],
        parameters=[PurchaseCallbackRequestSerializer],
        responses={302: {"description": "Redirect to the dashboard"}},
    )
    def get(self, request: Request) -> HttpResponseRedirect:
        """Handle the payment redirect."""
        return async_to_sync(self._handle_callback)(request)

    async def _handle_callback(self, request: Request) -> HttpResponseRedirect:
        with tracer.start_as_current_span("complete_purchase") as span:
            params = request.query_params
            handler = CompletePurchaseHandler(
                identity_gate=deps.identity_gate(),
                seat_ledger=deps.seat_ledger(),
                receipt_repository=deps.receipt_repo,
                journal=deps.journal(),
                callback_secret=getattr(settings, "PAYMENT_CALLBACK_SECRET", None),
            )
            command = CompletePurchaseCommand(
                user_id=deps.session_user_id(request),
                license_count=params.get("licenseCount"),
                payment=params.get("payment"),
                payment_type=params.get("paymentType"),
                reference=params.get("reference"),
                signature=params.get("signature"),
            )

            try:
                result = await handler.handle(command)
            except AuthenticationRequiredError:
                span.set_status(Status(StatusCode.ERROR, "unauthorized"))
                return HttpResponseRedirect(f"{settings.APP_URL}{LOGIN_REDIRECT_PATH}")
            except tuple(family for family, _ in PURCHASE_ERROR_CODES) as e:
                error_code = next(
                    code for family, code in PURCHASE_ERROR_CODES if isinstance(e, family)
                )
                span.set_status(Status(StatusCode.ERROR, error_code))
                logger.warning("Purchase callback rejected", extra={"error": error_code})
                return self._dashboard_redirect(error=error_code)
            except Exception:
                span.set_status(Status(StatusCode.ERROR, UNEXPECTED_PURCHASE_ERROR))
                logger.exception("Purchase callback failed")
                return self._dashboard_redirect(error=UNEXPECTED_PURCHASE_ERROR)

            span.set_attribute("licenses.added", result.licenses_added)
            span.set_status(Status(StatusCode.OK))
            return self._dashboard_redirect(
                success="purchase_complete",
                licenses_added=result.licenses_added,
                total_licenses=result.total_licenses,
            )

    def _dashboard_redirect(self, **params) -> HttpResponseRedirect:
        return HttpResponseRedirect(f"{settings.APP_URL}{DASHBOARD_PATH}?{urlencode(params)}")

    @extend_schema(
        operation_id="top_up_licenses",
        summary="Top Up Licenses",
        description="Credit seats to a team, or to an admin (their team when they have one).",
        tags=["Service"],
        request=TopUpLicensesRequestSerializer,
        responses={200: PurchaseResultSerializer, 404: {"description": "Team or admin not found"}},
    )
    def post(self, request: Request) -> Response:
        """Top up seats."""
        return async_to_sync(self._handle_top_up)(request)

    async def _handle_top_up(self, request: Request) -> Response:
        with tracer.start_as_current_span("top_up_licenses") as span:
            data = validated_request(TopUpLicensesRequestSerializer, request.data)
            handler = TopUpLicensesHandler(
                seat_ledger=deps.seat_ledger(),
                membership_lookup=deps.member_repo,
                journal=deps.journal(),
            )
            result = await handler.handle(
                TopUpLicensesCommand(
                    license_count=data.get("license_count"),
                    admin_id=data.get("admin_id"),
                    team_id=data.get("team_id"),
                )
            )

            span.set_attribute("licenses.added", result.licenses_added)
            span.set_status(Status(StatusCode.OK))
            return Response({"success": True, **PurchaseResultSerializer(result).data})
