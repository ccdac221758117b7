"""
Admin token authentication middleware.

Administrative endpoints are guarded by a shared secret sent in a header.
Client and webhook endpoints authenticate in their own way (license keys
and signatures) and pass through untouched.
"""

import logging
import secrets
from typing import Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from core.domain.exceptions import InvalidAdminTokenError

logger = logging.getLogger(__name__)


class AdminTokenMiddleware(MiddlewareMixin):
    """
    Middleware for admin API authentication.

    This middleware:
    1. Matches requests under ``settings.ADMIN_PATH_PREFIX``
    2. Compares the admin token header in constant time
    3. Returns 401 Unauthorized if the token is missing or wrong
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate the admin token.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401 if authentication fails, None otherwise
        """
        if not request.path.startswith(settings.ADMIN_PATH_PREFIX):
            return None

        if self._is_authorized(request.headers.get(settings.ADMIN_TOKEN_HEADER, "")):
            return None

        logger.warning(
            "Rejected admin request",
            extra={"path": request.path, "remote_addr": request.META.get("REMOTE_ADDR")},
        )
        error = InvalidAdminTokenError()
        return JsonResponse(
            {"error": {"code": error.code, "message": error.message}},
            status=401,
        )

    def _is_authorized(self, token: str) -> bool:
        """
        Check a presented token against the configured one.

        An unset ``ADMIN_TOKEN`` rejects every request.

        Args:
            token: Token from the request header

        Returns:
            True if the token matches
        """
        expected = settings.ADMIN_TOKEN
        if not expected or not token:
            return False
        return secrets.compare_digest(token.encode(), expected.encode())
