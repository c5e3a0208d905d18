"""
Apillon Storage client.

Uses httpx against the Apillon Storage REST API. The write-enabled key pair
lives only in this process; browsers receive nothing but one-time pre-signed
upload URLs.

Why this split?
- Clients PUT file bytes straight to the signed URL (no proxying through us)
- The bucket's write credentials never leave the server
- The backend has no move primitive, so the gateway only exposes the
  initiate / complete / list / delete calls the move recipe is built from
"""
import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from poi_gateway.config import Settings
from poi_gateway.errors import UpstreamError
from poi_gateway.storage.base import StorageGateway
from poi_gateway.storage.models import Folder, StorageObject, UploadTarget
from poi_gateway.utils.logging import log_backend_failure
from poi_gateway.utils.metrics import backend_requests_total, backend_request_duration_seconds

logger = logging.getLogger(__name__)


class ApillonClient(StorageGateway):
    """
    Storage gateway backed by an Apillon bucket.

    Authenticates API calls with HTTP Basic auth (key:secret). Transfers to
    pre-signed URLs and reads of public content links go out unauthenticated.
    """

    def __init__(self, settings: Settings, http: Optional[httpx.AsyncClient] = None):
        """
        Initialize the client.

        Args:
            settings: Application settings (credentials, bucket, timeouts)
            http: Optional pre-built httpx client, used by tests to inject a transport

        Fails gracefully if not configured: every backend call then raises
        UpstreamError instead of reaching the network.
        """
        self._settings = settings
        self._api_base = settings.apillon_api_base.rstrip("/")
        self._bucket = settings.apillon_bucket_uuid
        self._page_size = settings.apillon_list_page_size
        self._http = http or httpx.AsyncClient(timeout=settings.http_timeout_seconds)
        self._auth: Optional[httpx.BasicAuth] = None

        if not settings.storage_configured:
            logger.warning(
                "Apillon storage not configured. "
                "Set APILLON_API_KEY, APILLON_API_SECRET and APILLON_BUCKET_UUID."
            )
            return

        self._auth = httpx.BasicAuth(settings.apillon_api_key, settings.apillon_api_secret)
        logger.info(f"Apillon client initialized for bucket: {self._bucket}")

    def is_configured(self) -> bool:
        """Check if Apillon credentials are present."""
        return self._auth is not None

    async def close(self) -> None:
        """Close HTTP client."""
        await self._http.aclose()

    def _bucket_url(self, suffix: str = "") -> str:
        return f"{self._api_base}/storage/buckets/{self._bucket}{suffix}"

    async def _send(
        self,
        operation: str,
        method: str,
        url: str,
        auth: Optional[httpx.BasicAuth] = None,
        **kwargs
    ) -> httpx.Response:
        """
        Issue one HTTP request and translate failures into UpstreamError.

        Records backend metrics for every call, successful or not.
        """
        start_time = time.time()
        try:
            if auth is not None:
                response = await self._http.request(method, url, auth=auth, **kwargs)
            else:
                response = await self._http.request(method, url, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            duration = time.time() - start_time
            backend_requests_total.labels(operation=operation, outcome="error").inc()
            backend_request_duration_seconds.labels(operation=operation).observe(duration)
            log_backend_failure(logger, operation, str(e), duration_ms=duration * 1000)
            raise UpstreamError(f"Storage {operation} request failed", details=str(e)) from e

        duration = time.time() - start_time
        backend_request_duration_seconds.labels(operation=operation).observe(duration)

        if response.is_error:
            backend_requests_total.labels(operation=operation, outcome="error").inc()
            log_backend_failure(
                logger,
                operation,
                response.text,
                status_code=response.status_code,
                duration_ms=duration * 1000
            )
            raise UpstreamError(
                f"Storage {operation} failed with status {response.status_code}",
                details=response.text or None
            )

        backend_requests_total.labels(operation=operation, outcome="ok").inc()
        return response

    async def _api_request(
        self,
        operation: str,
        method: str,
        url: str,
        **kwargs
    ) -> Dict[str, Any]:
        """Authenticated API call returning the decoded JSON body ({} when empty)."""
        if not self.is_configured():
            logger.error(f"Cannot {operation}: Apillon storage not configured")
            raise UpstreamError("Storage service not configured")

        response = await self._send(operation, method, url, auth=self._auth, **kwargs)
        if not response.content:
            return {}

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError(
                f"Storage {operation} returned a non-JSON response",
                details=response.text[:200]
            ) from e

        if not isinstance(payload, dict):
            raise UpstreamError(f"Storage {operation} returned an unexpected response shape")
        return payload

    async def initiate_upload(
        self,
        file_name: str,
        content_type: str,
        folder: Folder
    ) -> UploadTarget:
        """
        Open an upload session for a single file.

        POST /storage/buckets/{bucket}/upload

        Returns:
            UploadTarget with the session UUID and the signed upload URL
        """
        payload = await self._api_request(
            "initiate",
            "POST",
            self._bucket_url("/upload"),
            json={
                "files": [{
                    "fileName": file_name,
                    "contentType": content_type,
                    "path": folder.value,
                }],
                "directoryPath": folder.value,
            }
        )

        data = payload.get("data") or {}
        files = data.get("files") or []
        first = files[0] if files and isinstance(files[0], dict) else {}
        session_uuid = data.get("sessionUuid")
        upload_url = first.get("url")

        if not session_uuid or not upload_url:
            raise UpstreamError(
                "Storage initiate returned an unexpected response shape",
                details="missing sessionUuid or upload url"
            )

        return UploadTarget(
            session_uuid=session_uuid,
            upload_url=upload_url,
            file_uuid=first.get("fileUuid"),
            file_name=file_name,
            content_type=content_type,
            folder=folder,
        )

    async def complete_upload(self, session_uuid: str) -> None:
        """
        Mark an upload session as finished.

        POST /storage/buckets/{bucket}/upload/{session_uuid}/end
        """
        payload = await self._api_request(
            "complete",
            "POST",
            self._bucket_url(f"/upload/{session_uuid}/end")
        )

        data = payload.get("data") or {}
        if not data.get("success"):
            raise UpstreamError(
                "Storage complete was not acknowledged",
                details=f"session {session_uuid}"
            )

    async def list_objects(self) -> List[StorageObject]:
        """
        List every object in the bucket.

        GET /storage/buckets/{bucket}/files?limit=N&page=P

        Walks pages until data.total objects have been seen. When the
        backend omits the total, paging continues while pages come back
        full. An empty page always ends the walk.
        """
        objects: List[StorageObject] = []
        seen = 0
        page = 1

        while True:
            payload = await self._api_request(
                "list",
                "GET",
                self._bucket_url("/files"),
                params={"limit": self._page_size, "page": page}
            )

            data = payload.get("data") or {}
            items = data.get("items")
            if not isinstance(items, list):
                raise UpstreamError("Storage list returned an unexpected response shape")

            seen += len(items)
            for item in items:
                obj = self._parse_item(item)
                if obj is not None:
                    objects.append(obj)

            total = data.get("total")
            if not items:
                break
            if isinstance(total, int) and not isinstance(total, bool):
                if seen >= total:
                    break
            elif len(items) < self._page_size:
                break
            page += 1

        logger.debug(f"Listed {len(objects)} objects in {page} page(s)")
        return objects

    @staticmethod
    def _parse_item(item: Any) -> Optional[StorageObject]:
        if not isinstance(item, dict):
            return None
        name = item.get("name")
        uuid = item.get("fileUuid") or item.get("uuid")
        if not name or not uuid:
            logger.debug(f"Skipping listing entry without name or uuid: {item!r}")
            return None
        return StorageObject(
            name=name,
            uuid=uuid,
            folder=Folder.from_path(item.get("path")),
            content_link=item.get("link"),
            size=item.get("size"),
        )

    async def delete_object(self, uuid: str) -> None:
        """
        Delete an object by its backend UUID.

        DELETE /storage/buckets/{bucket}/files/{uuid}

        A 404 is reported as an error: a concurrent mover may already have
        removed the object and the caller must see that.
        """
        await self._api_request("delete", "DELETE", self._bucket_url(f"/files/{uuid}"))
        logger.debug(f"Deleted object {uuid}")

    async def fetch_content(self, link: str) -> bytes:
        """Download an object's bytes from its public retrieval link."""
        if not link:
            raise UpstreamError("Object has no retrieval link")
        response = await self._send("fetch", "GET", link, follow_redirects=True)
        return response.content

    async def put_content(self, upload_url: str, data: bytes, content_type: str) -> None:
        """PUT bytes to a pre-signed upload URL."""
        await self._send(
            "put",
            "PUT",
            upload_url,
            content=data,
            headers={"Content-Type": content_type}
        )
