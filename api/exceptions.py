"""
API exception handlers.

This module provides custom exception handling for REST API responses.
Every error body has the shape ``{"error": {"code", "message", "details"?}}``.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    AuthenticationRequiredError,
    DomainException,
    NotFoundError,
    PermissionDeniedError,
    UpstreamServiceError,
    ValidationFailedError,
)
from core.metrics import errors_total
from core.middleware.metrics import normalize_endpoint

logger = logging.getLogger(__name__)

# Checked in order; subclasses of a family inherit its status
DOMAIN_STATUS_CODES = (
    (ValidationFailedError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationRequiredError, status.HTTP_401_UNAUTHORIZED),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (UpstreamServiceError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_code_for(exc: DomainException) -> int:
    """HTTP status of a domain exception family."""
    for family, status_code in DOMAIN_STATUS_CODES:
        if isinstance(exc, family):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def validated_request(serializer_class, data: Any) -> Dict[str, Any]:
    """
    Validated data of a request serializer.

    Raises:
        ValidationFailedError: With the serializer's field errors as details
    """
    serializer = serializer_class(data=data)
    if not serializer.is_valid():
        raise ValidationFailedError("Invalid request body", details=serializer.errors)
    return serializer.validated_data


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)
    endpoint = _get_endpoint(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, trace_id)
    elif isinstance(exc, APIException):
        response = _handle_api_exception(exc, context)
    elif isinstance(exc, Http404):
        response = Response(
            {"error": {"code": "NOT_FOUND", "message": "Resource not found"}},
            status=status.HTTP_404_NOT_FOUND,
        )
    else:
        response = _handle_unexpected_exception(exc, trace_id)

    errors_total.labels(error_type=type(exc).__name__, endpoint=endpoint).inc()
    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "trace_id", getattr(request, "correlation_id", None))


def _get_endpoint(context: Dict[str, Any]) -> str:
    request = context.get("request")
    return normalize_endpoint(request.path) if request else "unknown"


def _handle_domain_exception(exc: DomainException, trace_id: Optional[str]) -> Response:
    """Handle domain-specific exceptions."""
    status_code = status_code_for(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log("Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id})

    body = {"code": exc.code, "message": exc.message}
    if exc.details:
        body["details"] = exc.details
    return Response({"error": body}, status=status_code)


def _handle_api_exception(exc: APIException, context: Dict[str, Any]) -> Response:
    """Reshape DRF's own exceptions (parse errors, auth, throttling)."""
    response = exception_handler(exc, context)
    data = response.data
    code = str(exc.default_code).upper().replace("-", "_")
    if isinstance(data, dict) and "detail" in data:
        response.data = {"error": {"code": code, "message": str(data["detail"])}}
    else:
        response.data = {
            "error": {"code": code, "message": str(exc.default_detail), "details": data}
        }
    return response


def _handle_unexpected_exception(exc: Exception, trace_id: Optional[str]) -> Response:
    """Handle unexpected or untracked exceptions."""
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
    return Response(
        {"error": {"code": "INTERNAL_ERROR", "message": "An internal error occurred"}},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
