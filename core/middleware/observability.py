"""
Observability middleware.

Tags every request with a correlation id and the API surface it hit,
and writes one structured log record when it completes.
"""

import logging
import time
import uuid
from typing import Callable, Optional

from django.http import HttpRequest, HttpResponse
from opentelemetry import trace
from opentelemetry.trace import format_trace_id

logger = logging.getLogger(__name__)

# Path prefix to surface label, first match wins
API_SURFACES = (
    ("/api/v1/license/", "client"),
    ("/api/v1/advisor/", "advisor"),
    ("/api/v1/webhooks/", "webhook"),
    ("/api/v1/admin/", "admin"),
)
PROBE_PATHS = ("/health/", "/ready/", "/metrics/")


def api_surface(path: str) -> str:
    """
    Classify a request path.

    Args:
        path: Request path

    Returns:
        Surface label, "probe" for health checks, else "other"
    """
    for prefix, surface in API_SURFACES:
        if path.startswith(prefix):
            return surface
    if path.startswith(PROBE_PATHS):
        return "probe"
    return "other"


def current_trace_id() -> Optional[str]:
    """Hex trace id of the active span, if tracing is on."""
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return None
    return format_trace_id(span_context.trace_id)


class ObservabilityMiddleware:
    """
    Middleware for request correlation and access logging.

    Probe requests are logged at debug level so they do not drown out
    client traffic.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        surface = api_surface(request.path)
        request.correlation_id = correlation_id  # type: ignore
        request.trace_id = current_trace_id()  # type: ignore

        started = time.monotonic()
        try:
            response = self.get_response(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={
                    "correlation_id": correlation_id,
                    "surface": surface,
                    "method": request.method,
                    "path": request.path,
                    "error_type": type(e).__name__,
                    "duration_ms": round((time.monotonic() - started) * 1000, 2),
                },
                exc_info=True,
            )
            raise

        duration = time.monotonic() - started
        self._log(request, response, correlation_id, surface, duration)

        response["X-Correlation-ID"] = correlation_id
        if request.trace_id:  # type: ignore
            response["X-Trace-ID"] = request.trace_id  # type: ignore
        return response

    def _log(self, request, response, correlation_id, surface, duration):
        """Write the access log record for a completed request."""
        extra = {
            "correlation_id": correlation_id,
            "surface": surface,
            "method": request.method,
            "path": request.path,
            "status_code": response.status_code,
            "duration_ms": round(duration * 1000, 2),
        }
        if request.trace_id:  # type: ignore
            extra["trace_id"] = request.trace_id  # type: ignore

        if response.status_code >= 500:
            logger.error("Request completed with server error", extra=extra)
        elif response.status_code >= 400:
            logger.warning("Request completed with client error", extra=extra)
        elif surface == "probe":
            logger.debug("Probe request completed", extra=extra)
        else:
            logger.info("Request completed", extra=extra)
