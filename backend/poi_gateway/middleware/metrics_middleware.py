"""
ASGI middleware for tracking HTTP request metrics.
Records request count, duration, and errors.
"""
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from poi_gateway.utils.metrics import http_requests_total, http_request_duration_seconds, errors_total

KNOWN_PATHS = frozenset({
    "/initiate",
    "/complete",
    "/sync-approved-members",
    "/health",
})


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to track HTTP metrics for Prometheus."""

    async def dispatch(self, request: Request, call_next):
        """Process request and record metrics."""
        start_time = time.time()

        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        normalized_path = self._normalize_path(request.url.path)

        try:
            response = await call_next(request)
        except Exception:
            errors_total.labels(error_type="exception").inc()
            raise

        status_code = response.status_code
        http_requests_total.labels(
            method=method,
            path=normalized_path,
            status=status_code
        ).inc()

        duration = time.time() - start_time
        http_request_duration_seconds.labels(
            method=method,
            path=normalized_path
        ).observe(duration)

        # Track errors (4xx and 5xx)
        if status_code >= 400:
            error_type = f"{status_code // 100}xx"
            errors_total.labels(error_type=error_type).inc()

        return response

    def _normalize_path(self, path: str) -> str:
        """
        Normalize path to reduce cardinality.
        Unknown paths (scanners, typos) collapse into a single label.
        """
        path = path.rstrip("/") or "/"
        return path if path in KNOWN_PATHS else "other"
