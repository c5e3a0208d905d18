"""
Storage module for the Apillon object-storage bucket.

Browsers upload directly to pre-signed URLs; this service only brokers the
sessions and relocates objects between folders.
The service NEVER holds object state between requests - the bucket is the
source of truth.
"""
from poi_gateway.storage.base import StorageGateway
from poi_gateway.storage.apillon_client import ApillonClient
from poi_gateway.storage.folder_index import FolderIndex
from poi_gateway.storage.models import (
    Folder,
    StorageObject,
    UploadTarget,
    MoveRecord,
    SkipRecord,
    ErrorRecord,
    SyncResult,
    split_name,
)
from poi_gateway.storage.move import MoveEngine
from poi_gateway.storage.uploads import UploadSessionManager, UploadAck

__all__ = [
    "StorageGateway",
    "ApillonClient",
    "FolderIndex",
    "Folder",
    "StorageObject",
    "UploadTarget",
    "MoveRecord",
    "SkipRecord",
    "ErrorRecord",
    "SyncResult",
    "split_name",
    "MoveEngine",
    "UploadSessionManager",
    "UploadAck",
]
