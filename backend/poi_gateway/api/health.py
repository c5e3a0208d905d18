"""
Health check endpoint.
Reports configuration status without calling the storage backend.
"""
from fastapi import APIRouter, Depends

from poi_gateway.api.dependencies import get_gateway, get_settings
from poi_gateway.config import Settings
from poi_gateway.storage.base import StorageGateway

router = APIRouter()


@router.get("/health")
async def health_check(
    settings: Settings = Depends(get_settings),
    gateway: StorageGateway = Depends(get_gateway)
):
    """
    Health check endpoint.
    Unhealthy only means misconfigured; the backend itself is not contacted.
    """
    storage_configured = gateway.is_configured()
    allowed_origins = len(settings.allowed_origin_list)

    return {
        "status": "healthy" if storage_configured and allowed_origins else "degraded",
        "storage_configured": storage_configured,
        "allowed_origins": allowed_origins,
        "environment": settings.environment,
    }
