"""
FastAPI dependencies.

Components are built per request from the settings and storage gateway that
create_app() placed on app.state. They are cheap, hold no state of their own,
and can be swapped in tests through app.dependency_overrides.
"""
from fastapi import Depends, Request

from poi_gateway.config import Settings
from poi_gateway.services.sync_service import SyncService
from poi_gateway.storage.base import StorageGateway
from poi_gateway.storage.folder_index import FolderIndex
from poi_gateway.storage.move import MoveEngine
from poi_gateway.storage.uploads import UploadSessionManager


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_gateway(request: Request) -> StorageGateway:
    return request.app.state.gateway


def get_upload_manager(gateway: StorageGateway = Depends(get_gateway)) -> UploadSessionManager:
    return UploadSessionManager(gateway)


def get_sync_service(
    gateway: StorageGateway = Depends(get_gateway),
    settings: Settings = Depends(get_settings)
) -> SyncService:
    """Wire the folder index and move engine over the shared gateway."""
    return SyncService(
        index=FolderIndex(gateway),
        mover=MoveEngine(gateway),
        batch_limit=settings.sync_batch_limit
    )
