"""
Batch promotion endpoint.

POST /sync-approved-members moves each listed member's pending object into
the approved folder. The call succeeds (200) even when individual members
fail; callers inspect the errors list.
"""
from fastapi import APIRouter, Depends

from poi_gateway.api.dependencies import get_sync_service
from poi_gateway.errors import ValidationError
from poi_gateway.schemas.errors import error_responses
from poi_gateway.schemas.sync import SyncRequest, SyncResponse
from poi_gateway.services.sync_service import SyncService

router = APIRouter()


@router.post(
    "/sync-approved-members",
    response_model=SyncResponse,
    responses=error_responses(400, 403, 502)
)
async def sync_approved_members(
    request: SyncRequest,
    service: SyncService = Depends(get_sync_service)
):
    """Promote pending objects for the given addresses (first 50 only)."""
    if request.addresses is None:
        raise ValidationError("Missing addresses")

    result = await service.sync(request.addresses)
    return SyncResponse.from_result(result)
