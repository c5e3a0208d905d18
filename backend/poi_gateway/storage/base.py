"""
Base class for storage gateways.
All backends must implement this interface so the upload, index and move
components can run against any of them (or against an in-memory fake in tests).
"""
from abc import ABC, abstractmethod
from typing import List

from poi_gateway.storage.models import Folder, StorageObject, UploadTarget


class StorageGateway(ABC):
    """
    Abstract base class for the object-storage backend.

    The backend offers no atomic move, so implementations expose only:
    - initiate_upload(): open a session and get a one-time write target
    - complete_upload(): finalize a session
    - list_objects(): list every object in the bucket
    - delete_object(): delete an object by backend uuid

    plus the two plain HTTP transfers the move recipe needs:
    - fetch_content(): GET an object's bytes via its retrieval link
    - put_content(): PUT bytes to an upload target
    """

    @abstractmethod
    async def initiate_upload(
        self,
        file_name: str,
        content_type: str,
        folder: Folder
    ) -> UploadTarget:
        """
        Open an upload session for one file.

        Raises:
            UpstreamError: If the backend refuses or answers with an unexpected shape
        """
        pass

    @abstractmethod
    async def complete_upload(self, session_uuid: str) -> None:
        """
        Finalize an upload session.

        Raises:
            UpstreamError: If the backend rejects completion
        """
        pass

    @abstractmethod
    async def list_objects(self) -> List[StorageObject]:
        """
        List all objects in the bucket, across every folder.

        Raises:
            UpstreamError: If the listing fails
        """
        pass

    @abstractmethod
    async def delete_object(self, uuid: str) -> None:
        """
        Delete an object by its backend identifier.

        Raises:
            UpstreamError: If the backend rejects the delete
        """
        pass

    @abstractmethod
    async def fetch_content(self, link: str) -> bytes:
        """
        Download an object's bytes.

        Raises:
            UpstreamError: If the link is unreachable
        """
        pass

    @abstractmethod
    async def put_content(self, upload_url: str, data: bytes, content_type: str) -> None:
        """
        Upload bytes to a pre-signed upload target.

        Raises:
            UpstreamError: If the transfer fails
        """
        pass

    @abstractmethod
    def is_configured(self) -> bool:
        """Check if the gateway has the credentials it needs."""
        pass

    async def close(self) -> None:
        """Release network resources. Default is a no-op."""
        return None
