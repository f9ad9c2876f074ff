"""
Service key authentication middleware.

The consumer application calls activate, verify and the purchase
top-up without a session. When ``SERVICE_API_KEY`` is configured those
calls must carry it in the ``X-Service-Key`` header.
"""

import hmac
import logging
from typing import Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)

SERVICE_KEY_HEADER = "X-Service-Key"

# (path, methods) pairs; None matches every method
SERVICE_ENDPOINTS = (
    ("/api/licenses/activate", None),
    ("/api/licenses/verify", None),
    ("/api/licenses/purchase", ("POST",)),
)


class ServiceKeyMiddleware(MiddlewareMixin):
    """
    Middleware for service-role endpoints.

    Returns 401 when a service endpoint is called without the
    configured key. Does nothing when no key is configured.
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Validate the service key of a request.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401 if the key is missing or wrong, None otherwise
        """
        expected = getattr(settings, "SERVICE_API_KEY", None)
        if not expected or not self._is_service_endpoint(request):
            return None

        provided = request.headers.get(SERVICE_KEY_HEADER, "")
        if provided and hmac.compare_digest(provided, expected):
            request.is_service_call = True  # type: ignore
            return None

        logger.warning(
            "Service endpoint called without valid key",
            extra={"path": request.path, "method": request.method, "key_present": bool(provided)},
        )
        return JsonResponse(
            {"error": {"code": "UNAUTHORIZED", "message": "Invalid or missing service key"}},
            status=401,
        )

    def _is_service_endpoint(self, request: HttpRequest) -> bool:
        path = request.path.rstrip("/")
        for prefix, methods in SERVICE_ENDPOINTS:
            if path == prefix and (methods is None or request.method in methods):
                return True
        return False
