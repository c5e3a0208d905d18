"""
FastAPI application entry point.

create_app() builds the settings and storage gateway once and hands them to
every component through app.state. Run with:

    uvicorn poi_gateway.main:app
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.exceptions import HTTPException as StarletteHTTPException

from poi_gateway.api.router import api_router
from poi_gateway.config import Settings
from poi_gateway.errors import GatewayError, NotFoundError, ValidationError
from poi_gateway.middleware.metrics_middleware import MetricsMiddleware
from poi_gateway.middleware.origin_guard import OriginGuardMiddleware
from poi_gateway.storage.apillon_client import ApillonClient
from poi_gateway.storage.base import StorageGateway
from poi_gateway.utils.logging import configure_logging

logger = logging.getLogger(__name__)

SERVICE_NAME = "poi-gateway"
VERSION = "0.1.0"


def _error_response(error: GatewayError) -> JSONResponse:
    return JSONResponse(error.to_dict(), status_code=error.status_code)


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    """Render taxonomy errors as {"error", "details"}."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc}")
    return _error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON or wrongly typed fields are client errors (400), not 422."""
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return _error_response(ValidationError("Invalid request body", details=details or None))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing errors use the same error body as everything else."""
    if exc.status_code == 404:
        return _error_response(NotFoundError("Invalid endpoint"))
    if exc.status_code == 405:
        return JSONResponse({"error": "Method not allowed"}, status_code=405)
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code)


def create_app(
    settings: Optional[Settings] = None,
    gateway: Optional[StorageGateway] = None
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration; loaded from the environment when omitted
        gateway: Storage backend; an ApillonClient over settings when omitted

    Returns:
        Configured FastAPI app
    """
    settings = settings or Settings()
    gateway = gateway or ApillonClient(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan context manager for startup/shutdown events.
        - Startup: Configure structured logging
        - Shutdown: Close the storage gateway's HTTP pool
        """
        configure_logging(SERVICE_NAME, settings.log_level)
        logger.info(
            f"{SERVICE_NAME} starting: {len(settings.allowed_origin_list)} allowed origin(s), "
            f"storage configured={gateway.is_configured()}"
        )
        yield
        await gateway.close()

    app = FastAPI(
        title="Proof-of-Ink Upload Gateway",
        description="Brokers uploads and folder promotion for a write-protected storage bucket",
        version=VERSION,
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.gateway = gateway

    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Origin guard runs before routing so refused requests never reach the backend
    app.add_middleware(OriginGuardMiddleware, settings=settings)

    # Metrics middleware (must be after the guard to track refused requests too)
    app.add_middleware(MetricsMiddleware)

    app.include_router(api_router)

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST
        )

    return app


app = create_app()
