"""
ASGI middleware that authorizes requests by their Origin header.

There are no user accounts: a request is allowed if and only if its declared
origin is in the configured allow-list. Rejection happens before routing, so
a refused request never reaches the storage backend.
"""
import logging
from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from poi_gateway.config import Settings
from poi_gateway.errors import AuthorizationError
from poi_gateway.utils.logging import log_origin_rejected
from poi_gateway.utils.metrics import origin_rejections_total

logger = logging.getLogger(__name__)

ALLOWED_METHODS = "POST, OPTIONS"
ALLOWED_HEADERS = "Content-Type"

# Operational paths; exempt only when the request carries no Origin header
EXEMPT_PATHS = frozenset({"/health", "/metrics"})


def is_origin_allowed(origin: Optional[str], allowed_origins: Iterable[str]) -> bool:
    """Exact match of the declared origin against the allow-list."""
    if not origin:
        return False
    return origin in set(allowed_origins)


class OriginGuardMiddleware(BaseHTTPMiddleware):
    """
    Origin allow-list enforcement plus CORS headers.

    - OPTIONS from an allowed origin: 204 with capability headers
    - OPTIONS from anything else: bare 403
    - Other methods from a disallowed origin: 403 {"error": "Unauthorized origin"}
    - Allowed requests: origin echoed in Access-Control-Allow-Origin
    - /health and /metrics without any Origin header: passed through
    """

    def __init__(self, app, settings: Settings):
        super().__init__(app)
        self._allowed = frozenset(settings.allowed_origin_list)
        self._max_age = str(settings.cors_max_age)

        if not self._allowed:
            logger.warning("ALLOWED_ORIGINS is empty; every request will be refused")

    async def dispatch(self, request: Request, call_next):
        """Check origin and answer preflight requests."""
        origin = request.headers.get("origin")

        # Infrastructure scrapers send no Origin; browsers always do
        if request.url.path in EXEMPT_PATHS and origin is None:
            return await call_next(request)

        allowed = is_origin_allowed(origin, self._allowed)
        preflight = request.method == "OPTIONS"

        if not allowed:
            origin_rejections_total.labels(preflight=str(preflight).lower()).inc()
            log_origin_rejected(logger, origin, request.url.path, request.method)
            if preflight:
                return Response(status_code=403)
            return JSONResponse(
                AuthorizationError("Unauthorized origin").to_dict(),
                status_code=AuthorizationError.status_code
            )

        if preflight:
            return Response(
                status_code=204,
                headers={
                    "Access-Control-Allow-Origin": origin,
                    "Access-Control-Allow-Methods": ALLOWED_METHODS,
                    "Access-Control-Allow-Headers": ALLOWED_HEADERS,
                    "Access-Control-Max-Age": self._max_age,
                    "Vary": "Origin",
                }
            )

        try:
            response = await call_next(request)
        except Exception as e:
            # Unhandled errors still go back to an allowed origin as JSON
            logger.exception(f"Unhandled error on {request.method} {request.url.path}")
            response = JSONResponse(
                {"error": "Internal server error", "details": str(e)},
                status_code=500
            )

        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Vary"] = "Origin"
        return response
