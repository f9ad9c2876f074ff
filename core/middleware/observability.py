"""
Observability middleware.

Correlates every dashboard and service request with an id, logs it as
structured JSON and echoes the id and the active trace in the response.
"""

import logging
import time
import uuid
from typing import Callable, Dict, Optional, Tuple

from django.http import HttpRequest, HttpResponse
from opentelemetry import trace
from opentelemetry.trace import format_span_id, format_trace_id

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

# Probes hit these every few seconds
QUIET_PATHS = ("/health", "/ready", "/metrics")


def current_trace_ids() -> Tuple[Optional[str], Optional[str]]:
    """Trace and span id of the active span, or (None, None)."""
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return None, None
    return format_trace_id(span_context.trace_id), format_span_id(span_context.span_id)


def request_outcome(status_code: int) -> str:
    """Bucket a status code into success, client_error or server_error."""
    if status_code >= 500:
        return "server_error"
    if status_code >= 400:
        return "client_error"
    return "success"


class ObservabilityMiddleware:
    """
    Middleware for request observability.

    Attaches ``request.correlation_id``, logs the completed request with
    the session user or service flag, and sets the correlation, outcome,
    duration and trace headers on the response.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.correlation_id = correlation_id  # type: ignore
        started = time.monotonic()
        quiet = request.path.startswith(QUIET_PATHS)

        try:
            response = self.get_response(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={
                    **self._context(request, correlation_id),
                    "request_status": "exception",
                    "error": str(e),
                    "error_type": type(e).__name__,
                    "duration_ms": self._elapsed_ms(started),
                },
                exc_info=True,
            )
            raise

        outcome = request_outcome(response.status_code)
        duration_ms = self._elapsed_ms(started)
        if not quiet or outcome != "success":
            self._log_response(request, response, correlation_id, outcome, duration_ms)

        response[CORRELATION_HEADER] = correlation_id
        response["X-Request-Status"] = outcome
        response["X-Request-Duration"] = f"{duration_ms / 1000:.3f}"
        trace_id, _ = current_trace_ids()
        if trace_id:
            response["X-Trace-ID"] = trace_id
        return response

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return round((time.monotonic() - started) * 1000, 2)

    @staticmethod
    def _context(request: HttpRequest, correlation_id: str) -> Dict[str, object]:
        """Fields shared by every log line of a request."""
        context: Dict[str, object] = {
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.path,
        }
        trace_id, span_id = current_trace_ids()
        if trace_id:
            context["trace_id"] = trace_id
            context["span_id"] = span_id
        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            context["user_id"] = user.pk
        if getattr(request, "is_service_call", False):
            context["service_call"] = True
        return context

    def _log_response(self, request, response, correlation_id, outcome, duration_ms):
        """Log the completed request at a level matching its outcome."""
        log_extra = {
            **self._context(request, correlation_id),
            "request_status": outcome,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
            "remote_addr": request.META.get("REMOTE_ADDR"),
        }
        if outcome == "server_error":
            logger.error("Request completed with server error", extra=log_extra)
        elif outcome == "client_error":
            logger.warning("Request completed with client error", extra=log_extra)
        else:
            logger.info("Request completed", extra=log_extra)
