"""
Folder index over the bucket listing.

Every call performs a full backend listing. Nothing is cached: the backend
is the only source of truth, and a stale list would cause wrong moves.
"""
import logging
from typing import Dict, List

from poi_gateway.storage.base import StorageGateway
from poi_gateway.storage.models import Folder, StorageObject

logger = logging.getLogger(__name__)


class FolderIndex:
    """Partitions backend objects by folder and keys them by identifier."""

    def __init__(self, gateway: StorageGateway):
        self._gateway = gateway

    async def list_folder(self, folder: Folder) -> List[StorageObject]:
        """
        List objects whose path is exactly the given folder.

        Objects with no path, a nested path, or an unknown folder are excluded.
        """
        objects = await self._gateway.list_objects()
        return [obj for obj in objects if obj.folder == folder]

    async def index_folder(self, folder: Folder) -> Dict[str, StorageObject]:
        """
        Map identifier -> object for the sync-eligible objects in a folder.

        Names without an extension (and placeholders like ".gitkeep") are
        left out. On a duplicate identifier the first listed object wins.
        """
        index: Dict[str, StorageObject] = {}
        for obj in await self.list_folder(folder):
            identifier = obj.identifier
            if identifier is None:
                continue
            if identifier in index:
                logger.warning(
                    f"Duplicate identifier {identifier} in {folder.value}: "
                    f"keeping {index[identifier].name}, ignoring {obj.name}"
                )
                continue
            index[identifier] = obj
        return index
