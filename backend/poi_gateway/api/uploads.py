"""
Upload endpoints for the two-phase upload protocol.

1. POST /initiate - Open a session and get a signed upload URL
2. POST /complete - Confirm the upload finished

Why this approach?
- The gateway never handles file bytes
- Files go directly from the browser to the storage backend
- Write credentials stay on the server

Security:
- All endpoints are origin-gated (see OriginGuardMiddleware)
- Signed URLs are single-use and expire on the backend's schedule
"""
from fastapi import APIRouter, Depends

from poi_gateway.api.dependencies import get_upload_manager
from poi_gateway.schemas.errors import error_responses
from poi_gateway.schemas.uploads import (
    CompleteRequest,
    CompleteResponse,
    InitiateRequest,
    InitiateResponse,
)
from poi_gateway.storage.uploads import UploadSessionManager

router = APIRouter()


@router.post(
    "/initiate",
    response_model=InitiateResponse,
    responses=error_responses(400, 403, 502)
)
async def initiate_upload(
    request: InitiateRequest,
    manager: UploadSessionManager = Depends(get_upload_manager)
):
    """
    Open an upload session.

    Client then:
    1. PUTs the file to uploadUrl with the same Content-Type
    2. Calls /complete with sessionUuid
    """
    target = await manager.initiate(
        file_name=request.file_name,
        content_type=request.content_type,
        folder=request.directory_path
    )

    return InitiateResponse(
        session_uuid=target.session_uuid,
        upload_url=target.upload_url,
        file_uuid=target.file_uuid
    )


@router.post(
    "/complete",
    response_model=CompleteResponse,
    responses=error_responses(400, 403, 502)
)
async def complete_upload(
    request: CompleteRequest,
    manager: UploadSessionManager = Depends(get_upload_manager)
):
    """
    Finalize an upload session.

    A 502 here usually means the backend has not seen the PUT yet; the file
    is typically indexed shortly afterwards.
    """
    ack = await manager.complete(request.session_uuid)
    return CompleteResponse(message=ack.message)
