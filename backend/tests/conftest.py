"""
Test configuration and fixtures.
Uses an in-memory storage gateway so no test touches the network.
"""
import os

# Set test environment before any imports
os.environ["ENVIRONMENT"] = "test"

import pytest
from typing import AsyncGenerator, Dict, List, Optional, Tuple

from httpx import AsyncClient, ASGITransport

from poi_gateway.config import Settings
from poi_gateway.errors import UpstreamError
from poi_gateway.main import create_app
from poi_gateway.storage.base import StorageGateway
from poi_gateway.storage.models import Folder, StorageObject, UploadTarget


ALLOWED_ORIGIN = "https://ink.example.org"
OTHER_ALLOWED_ORIGIN = "http://localhost:3000"
FOREIGN_ORIGIN = "https://evil.example.com"


class FakeStorageGateway(StorageGateway):
    """
    In-memory bucket with call recording and fault injection.

    - Sessions are numbered s-1, s-2, ... with file uuids f-1, f-2, ...
    - Content links keep serving after a delete (content-addressed storage),
      which lets tests reproduce a second mover's failing delete
    - fail_on maps an operation name to the exception it should raise
    """

    def __init__(self, configured: bool = True):
        self._configured = configured
        self.objects: Dict[str, StorageObject] = {}
        self.content: Dict[str, bytes] = {}
        self.sessions: Dict[str, dict] = {}
        self.calls: List[Tuple[str, tuple]] = []
        self.fail_on: Dict[str, Exception] = {}
        self._counter = 0
        self.closed = False

    # -- helpers -----------------------------------------------------------

    def add_object(self, name: str, folder: Optional[Folder], data: bytes = b"image-bytes") -> StorageObject:
        self._counter += 1
        uuid = f"existing-{self._counter}"
        link = f"https://cdn.test/{uuid}/{name}"
        obj = StorageObject(name=name, uuid=uuid, folder=folder, content_link=link, size=len(data))
        self.objects[uuid] = obj
        self.content[link] = data
        return obj

    def names_in(self, folder: Folder) -> List[str]:
        return sorted(o.name for o in self.objects.values() if o.folder == folder)

    def find(self, name: str, folder: Folder) -> Optional[StorageObject]:
        for obj in self.objects.values():
            if obj.name == name and obj.folder == folder:
                return obj
        return None

    def count(self, operation: Optional[str] = None) -> int:
        if operation is None:
            return len(self.calls)
        return sum(1 for op, _ in self.calls if op == operation)

    def _record(self, operation: str, *args):
        self.calls.append((operation, args))
        if operation in self.fail_on:
            raise self.fail_on[operation]

    # -- StorageGateway ----------------------------------------------------

    def is_configured(self) -> bool:
        return self._configured

    async def close(self) -> None:
        self.closed = True

    async def initiate_upload(self, file_name: str, content_type: str, folder: Folder) -> UploadTarget:
        self._record("initiate", file_name, content_type, folder)
        session_uuid = f"s-{len(self.sessions) + 1}"
        file_uuid = f"f-{len(self.sessions) + 1}"
        upload_url = f"https://upload.test/{session_uuid}"
        self.sessions[session_uuid] = {
            "file_name": file_name,
            "content_type": content_type,
            "folder": folder,
            "file_uuid": file_uuid,
            "upload_url": upload_url,
            "data": None,
            "completed": False,
        }
        return UploadTarget(
            session_uuid=session_uuid,
            upload_url=upload_url,
            file_uuid=file_uuid,
            file_name=file_name,
            content_type=content_type,
            folder=folder,
        )

    async def put_content(self, upload_url: str, data: bytes, content_type: str) -> None:
        self._record("put", upload_url, content_type)
        for session in self.sessions.values():
            if session["upload_url"] == upload_url:
                session["data"] = data
                return
        raise UpstreamError("Storage put failed with status 403", details="unknown upload url")

    async def complete_upload(self, session_uuid: str) -> None:
        self._record("complete", session_uuid)
        session = self.sessions.get(session_uuid)
        if session is None:
            raise UpstreamError("Storage complete failed with status 404", details="session not found")
        if session["completed"]:
            raise UpstreamError("Storage complete failed with status 400", details="session already ended")
        if session["data"] is None:
            raise UpstreamError("Storage complete failed with status 400", details="no file uploaded")

        # Latest write wins: replace any object with the same name in the folder
        existing = self.find(session["file_name"], session["folder"])
        if existing is not None:
            del self.objects[existing.uuid]

        link = f"https://cdn.test/{session['file_uuid']}/{session['file_name']}"
        self.objects[session["file_uuid"]] = StorageObject(
            name=session["file_name"],
            uuid=session["file_uuid"],
            folder=session["folder"],
            content_link=link,
            size=len(session["data"]),
        )
        self.content[link] = session["data"]
        session["completed"] = True

    async def list_objects(self) -> List[StorageObject]:
        self._record("list")
        return [
            StorageObject(
                name=o.name,
                uuid=o.uuid,
                folder=o.folder,
                content_link=o.content_link,
                size=o.size,
            )
            for o in self.objects.values()
        ]

    async def delete_object(self, uuid: str) -> None:
        self._record("delete", uuid)
        if uuid not in self.objects:
            raise UpstreamError("Storage delete failed with status 404", details="file not found")
        del self.objects[uuid]

    async def fetch_content(self, link: str) -> bytes:
        self._record("fetch", link)
        if link not in self.content:
            raise UpstreamError("Storage fetch failed with status 404")
        return self.content[link]


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the process environment and .env files."""
    return Settings(
        _env_file=None,
        allowed_origins=f"{ALLOWED_ORIGIN}, {OTHER_ALLOWED_ORIGIN}",
        apillon_api_key="test-key",
        apillon_api_secret="test-secret",
        apillon_bucket_uuid="bucket-123",
        environment="test",
    )


@pytest.fixture
def gateway() -> FakeStorageGateway:
    return FakeStorageGateway()


@pytest.fixture
async def client(settings: Settings, gateway: FakeStorageGateway) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client sending an allow-listed Origin header."""
    app = create_app(settings=settings, gateway=gateway)

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"Origin": ALLOWED_ORIGIN}
    ) as ac:
        yield ac


@pytest.fixture
async def bare_client(settings: Settings, gateway: FakeStorageGateway) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client with no default Origin header."""
    app = create_app(settings=settings, gateway=gateway)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
