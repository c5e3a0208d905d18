"""
Copy-then-delete relocation of a single object.

The storage backend has no rename or move call, so a move is:
1. fetch the object's bytes via its retrieval link
2. open an upload session for the same name in the target folder
3. PUT the bytes to the session's upload URL
4. complete the session
5. delete the original

The original is deleted only after step 4 succeeds. A failure in steps 1-4
leaves the source untouched. A failure in step 5 leaves the object in both
folders and is raised as SourceDeleteError so it can be reconciled by hand.
"""
import logging
import time

from poi_gateway.errors import SourceDeleteError, UpstreamError, ValidationError
from poi_gateway.storage.base import StorageGateway
from poi_gateway.storage.models import Folder, MoveRecord, StorageObject
from poi_gateway.storage.uploads import detect_content_type
from poi_gateway.utils.logging import log_object_move_failed, log_object_moved
from poi_gateway.utils.metrics import object_move_duration_seconds

logger = logging.getLogger(__name__)


class MoveEngine:
    """Relocates objects between folders by copy-then-delete."""

    def __init__(self, gateway: StorageGateway):
        self._gateway = gateway

    async def move(self, obj: StorageObject, target: Folder) -> MoveRecord:
        """
        Move one object to another folder.

        Args:
            obj: Object as listed by the backend (must carry a retrieval link)
            target: Destination folder

        Returns:
            MoveRecord with the source and destination paths

        Raises:
            ValidationError: Object already lives in the target folder
            UpstreamError: Copy failed; the source is untouched
            SourceDeleteError: Copy succeeded but the source could not be deleted
        """
        if obj.folder == target:
            raise ValidationError(f"{obj.path} is already in {target.value}")

        identifier = obj.identifier or obj.name
        from_path = obj.path
        to_path = f"{target.value}/{obj.name}"
        start_time = time.time()

        # Steps 1-4: make a durable copy in the target folder
        step = "fetch"
        try:
            if not obj.content_link:
                raise UpstreamError("Object has no retrieval link")
            data = await self._gateway.fetch_content(obj.content_link)

            step = "initiate"
            content_type = detect_content_type(obj.name)
            upload = await self._gateway.initiate_upload(obj.name, content_type, target)

            step = "transfer"
            await self._gateway.put_content(upload.upload_url, data, content_type)

            step = "complete"
            await self._gateway.complete_upload(upload.session_uuid)
        except UpstreamError as e:
            log_object_move_failed(logger, identifier, str(e), step=step)
            raise UpstreamError(f"Copy of {from_path} failed at {step}", details=str(e)) from e

        # Step 5: only now is the original safe to remove
        try:
            await self._gateway.delete_object(obj.uuid)
        except UpstreamError as e:
            log_object_move_failed(logger, identifier, str(e), step="delete", to_path=to_path)
            raise SourceDeleteError(
                f"Copied to {to_path} but could not delete {from_path}",
                details=str(e)
            ) from e

        duration = time.time() - start_time
        object_move_duration_seconds.observe(duration)
        log_object_moved(logger, identifier, from_path, to_path, duration_ms=duration * 1000)

        return MoveRecord(identifier=identifier, from_path=from_path, to_path=to_path)
