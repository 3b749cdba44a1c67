"""
SauceStorageClient — httpx-backed implementation of StorageClient.

Talks to the Sauce Labs storage REST API (or anything that speaks the same
protocol, by pointing ``STORAGE_BASE_URL`` elsewhere)::

    GET  /rest/v1/storage/<account>                       -> {"files": [...]}
    POST /rest/v1/storage/<account>/<name>?overwrite=true -> {"md5": ..., ...}

Each request opens its own ``httpx.AsyncClient``; nothing is pooled across
calls. Requests are bounded by ``asyncio.wait_for`` so that a timeout cancels
the in-flight request as a whole, not just a single socket read.

Also exposes ``get_storage_client()`` factory, which resolves the active
client from ``settings.storage_client_type``.
"""
import asyncio
import time
from pathlib import Path
from typing import Any, AsyncIterator, Awaitable, Dict, List, Optional, TypeVar

import httpx
from pydantic import ValidationError

from buildsync.config import settings
from buildsync.errors import (
    LocalReadError,
    ProtocolError,
    RemoteConnectionError,
    RemoteError,
    RequestTimeoutError,
)
from buildsync.logging_config import get_logger
from buildsync.metrics import STAGE_DURATION, UPLOADS_TOTAL
from buildsync.storage.hashing import CHUNK_SIZE
from buildsync.storage.interfaces import StorageClient
from buildsync.storage.schemas import Inventory, RemoteEntry, UploadResult
from buildsync.tracing import get_tracer

logger = get_logger(__name__)
tracer = get_tracer(__name__)

T = TypeVar("T")


async def _iter_file(path: Path, chunk_size: int = CHUNK_SIZE) -> AsyncIterator[bytes]:
    """Yield *path* in chunks, reading off the event loop."""
    try:
        f = open(path, "rb")
    except OSError as e:
        raise LocalReadError(f"Could not open {path} for upload: {e}") from e
    with f:
        while True:
            try:
                chunk = await asyncio.to_thread(f.read, chunk_size)
            except OSError as e:
                raise LocalReadError(f"Read failed while uploading {path}: {e}") from e
            if not chunk:
                break
            yield chunk


def _decode_json(response: httpx.Response, stage: str) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise ProtocolError(f"{stage} response is not valid JSON: {e}") from e


class SauceStorageClient(StorageClient):
    """
    Storage client for the Sauce Labs storage REST API.

    Credentials are held per instance and sent as HTTP basic auth.
    """

    def __init__(
        self,
        account: str,
        access_key: str,
        base_url: str | None = None,
        inventory_timeout: float | None = None,
        upload_timeout: float | None = None,
    ) -> None:
        self.account = account
        self._auth = httpx.BasicAuth(account, access_key)
        root = base_url.rstrip("/") + "/rest/v1/storage" if base_url else settings.storage_api_root
        self.account_url = f"{root}/{account}"
        self.inventory_timeout = (
            settings.inventory_timeout_s if inventory_timeout is None else inventory_timeout
        )
        self.upload_timeout = (
            settings.upload_timeout_s if upload_timeout is None else upload_timeout
        )

    async def _bounded(self, request: Awaitable[T], timeout: float, stage: str) -> T:
        """Await *request* within *timeout*, mapping transport failures."""
        try:
            return await asyncio.wait_for(request, timeout=timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise RequestTimeoutError(
                f"{stage} did not complete within {timeout}s"
            ) from e
        except httpx.TransportError as e:
            raise RemoteConnectionError(f"{stage} connection failed: {e}") from e

    async def _get(self, url: str, timeout: float) -> httpx.Response:
        async with httpx.AsyncClient(auth=self._auth, timeout=timeout) as client:
            return await client.get(url)

    async def _post(
        self,
        url: str,
        content: AsyncIterator[bytes],
        headers: Dict[str, str],
        timeout: float,
    ) -> httpx.Response:
        async with httpx.AsyncClient(auth=self._auth, timeout=timeout) as client:
            return await client.post(
                url, params={"overwrite": "true"}, content=content, headers=headers
            )

    async def list_files(self) -> List[RemoteEntry]:
        """Fetch the inventory for the configured account."""
        with tracer.start_as_current_span("storage.list_files"):
            t0 = time.monotonic()
            response = await self._bounded(
                self._get(self.account_url, self.inventory_timeout),
                self.inventory_timeout,
                "inventory",
            )
            STAGE_DURATION.labels(stage="inventory").observe(time.monotonic() - t0)

            if response.status_code != 200:
                raise RemoteError(response.status_code, stage="inventory")

            payload = _decode_json(response, "inventory")
            try:
                inventory = Inventory.model_validate(payload)
            except ValidationError as e:
                raise ProtocolError(
                    f'inventory payload does not have a valid "files" list: {e}'
                ) from e

        logger.debug("inventory_fetched", account=self.account, files=len(inventory.files))
        return inventory.files

    async def upload(
        self, path: Path, name: str, timeout: Optional[float] = None
    ) -> UploadResult:
        """
        Stream *path* to the service as *name*, overwriting any existing file.

        Returns:
            ``UploadResult`` carrying at least the service-side ``md5``.
        """
        if timeout is None:
            timeout = self.upload_timeout
        path = Path(path)
        try:
            size = path.stat().st_size
        except OSError as e:
            raise LocalReadError(f"Could not stat {path} for upload: {e}") from e

        headers = {
            "Content-Type": "application/octet-stream",
            "Content-Length": str(size),
        }

        with tracer.start_as_current_span("storage.upload") as span:
            span.set_attribute("artifact.name", name)
            span.set_attribute("artifact.size_bytes", size)
            logger.info("upload_started", name=name, bytes=size, timeout_s=timeout)

            t0 = time.monotonic()
            try:
                response = await self._bounded(
                    self._post(f"{self.account_url}/{name}", _iter_file(path), headers, timeout),
                    timeout,
                    "upload",
                )
            except Exception:
                UPLOADS_TOTAL.labels(status="failed").inc()
                raise
            duration = time.monotonic() - t0
            STAGE_DURATION.labels(stage="upload").observe(duration)

            if response.status_code != 200:
                UPLOADS_TOTAL.labels(status="failed").inc()
                payload = None
                try:
                    body = response.json()
                except ValueError:
                    body = None
                if isinstance(body, dict) and body.get("errors"):
                    payload = body
                raise RemoteError(response.status_code, payload=payload, stage="upload")

            try:
                result = UploadResult.model_validate(_decode_json(response, "upload"))
            except ValidationError as e:
                UPLOADS_TOTAL.labels(status="failed").inc()
                raise ProtocolError(f"upload response is missing md5: {e}") from e
            except ProtocolError:
                UPLOADS_TOTAL.labels(status="failed").inc()
                raise

        UPLOADS_TOTAL.labels(status="success").inc()
        logger.info("upload_complete", name=name, md5=result.md5, duration_s=round(duration, 2))
        return result


def get_storage_client(account: str, access_key: str) -> StorageClient:
    """
    Factory: resolve the active storage client from configuration.

    Currently supports ``sauce`` (default).
    """
    client_type = settings.storage_client_type.lower()
    if client_type == "sauce":
        return SauceStorageClient(account, access_key)
    raise ValueError(
        f"Unknown STORAGE_CLIENT_TYPE: '{client_type}'. Supported: sauce"
    )
