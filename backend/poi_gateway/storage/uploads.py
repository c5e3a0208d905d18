"""
Upload session service.

Runs the two-phase upload protocol on behalf of browser clients.

Flow:
1. Client calls initiate with file name, content type and target folder
2. Backend opens a session and returns a one-time signed upload URL
3. Client PUTs the file bytes directly to that URL
4. Client calls complete with the session UUID
5. Backend indexes the file and starts serving it

No session state is kept here. Each initiate opens a fresh backend session,
so a client retry is always safe; a session that is never completed is left
for the backend to collect.
"""
import logging
import time
from dataclasses import dataclass
from typing import Optional

from poi_gateway.errors import UpstreamError, ValidationError
from poi_gateway.storage.base import StorageGateway
from poi_gateway.storage.models import Folder, UploadTarget
from poi_gateway.utils.logging import log_upload_completed, log_upload_initiated
from poi_gateway.utils.metrics import uploads_completed_total, uploads_initiated_total

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = 'application/octet-stream'

# Mapping of file extensions to content types
EXTENSION_CONTENT_TYPES = {
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'png': 'image/png',
    'webp': 'image/webp',
    'gif': 'image/gif',
    'heic': 'image/heic',
    'heif': 'image/heif',
    'avif': 'image/avif',
    'svg': 'image/svg+xml',
}


def detect_content_type(file_name: str) -> str:
    """
    Guess a content type from a file name's extension.

    Args:
        file_name: Object name, e.g. "ADDR1.jpg"

    Returns:
        MIME type, or application/octet-stream for unknown extensions
    """
    if "." not in file_name:
        return DEFAULT_CONTENT_TYPE
    extension = file_name.rsplit(".", 1)[1].lower()
    return EXTENSION_CONTENT_TYPES.get(extension, DEFAULT_CONTENT_TYPE)


def parse_folder(value: Optional[str]) -> Folder:
    """
    Validate a caller-supplied folder name.

    Raises:
        ValidationError: If the value is not one of the known folders
    """
    try:
        return Folder(value)
    except ValueError:
        raise ValidationError(
            "Invalid directoryPath",
            details=f"must be one of: {', '.join(f.value for f in Folder)}"
        )


@dataclass
class UploadAck:
    """Acknowledgement of a completed upload session."""
    session_uuid: str
    message: str = "Upload completed successfully"


class UploadSessionManager:
    """
    Service for handling upload sessions.

    Responsibilities:
    - Validate upload requests before any backend call
    - Open sessions and hand back signed upload targets
    - Finalize sessions
    """

    def __init__(self, gateway: StorageGateway):
        self._gateway = gateway

    async def initiate(
        self,
        file_name: Optional[str],
        content_type: Optional[str],
        folder: Optional[str]
    ) -> UploadTarget:
        """
        Open an upload session.

        Args:
            file_name: Target file name, e.g. "ADDR1.jpg"
            content_type: MIME type the client will PUT with
            folder: Target folder name

        Returns:
            UploadTarget with session UUID and signed upload URL

        Raises:
            ValidationError: Missing field or unknown folder
            UpstreamError: Backend refused to open a session
        """
        if not file_name or not content_type or not folder:
            raise ValidationError("Missing required fields")

        target_folder = parse_folder(folder)

        start_time = time.time()
        try:
            target = await self._gateway.initiate_upload(file_name, content_type, target_folder)
        except UpstreamError as e:
            logger.error(f"Failed to initiate upload for {target_folder.value}/{file_name}: {e}")
            raise UpstreamError("Failed to initiate upload session", details=str(e)) from e

        uploads_initiated_total.labels(folder=target_folder.value).inc()
        log_upload_initiated(
            logger,
            session_uuid=target.session_uuid,
            file_name=file_name,
            folder=target_folder.value,
            duration_ms=(time.time() - start_time) * 1000
        )
        return target

    async def complete(self, session_uuid: Optional[str]) -> UploadAck:
        """
        Finalize an upload session.

        The backend may not have observed the PUT yet when this is called;
        that surfaces as UpstreamError and the caller is expected to treat it
        as non-fatal (the file is usually picked up shortly after).

        Raises:
            ValidationError: session_uuid missing
            UpstreamError: Backend rejected completion
        """
        if not session_uuid:
            raise ValidationError("Missing sessionUuid")

        start_time = time.time()
        try:
            await self._gateway.complete_upload(session_uuid)
        except UpstreamError as e:
            logger.warning(f"Failed to complete upload session {session_uuid}: {e}")
            raise UpstreamError("Failed to complete upload session", details=str(e)) from e

        uploads_completed_total.inc()
        log_upload_completed(
            logger,
            session_uuid=session_uuid,
            duration_ms=(time.time() - start_time) * 1000
        )
        return UploadAck(session_uuid=session_uuid)
