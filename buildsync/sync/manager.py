"""
BuildSync — makes sure a build artifact is on remote storage before use.

Stages:
    1. Resolve  — absolute path and base name of the local build
    2. Join     — local MD5 hash and remote inventory, fetched concurrently
    3. Compare  — look for an entry matching both name and hash
    4. Upload   — only when nothing matched; overwrite by name
    5. Verify   — the service-reported hash must equal the local hash

Usage
-----

.. code-block:: python

    from buildsync.sync.manager import BuildSync

    sync = BuildSync(os.environ["SAUCE_USERNAME"], os.environ["SAUCE_ACCESS_KEY"])
    app = await sync.sync("build/MyApp.ipa")   # "storage:MyApp.ipa"
"""
import asyncio
import time
from typing import List, Optional, Tuple

from buildsync.config import settings
from buildsync.errors import IntegrityMismatchError
from buildsync.logging_config import get_logger
from buildsync.metrics import STAGE_DURATION, SYNC_TOTAL
from buildsync.storage.client import get_storage_client
from buildsync.storage.hashing import compute_local_hash
from buildsync.storage.interfaces import StorageClient
from buildsync.storage.schemas import RemoteEntry
from buildsync.sync.schemas import Artifact
from buildsync.tracing import get_tracer

logger = get_logger(__name__)
tracer = get_tracer(__name__)


def find_match(entries: List[RemoteEntry], name: str, md5: str) -> Optional[RemoteEntry]:
    """Return the first entry whose name and hash both match, if any."""
    for entry in entries:
        if entry.name == name and entry.md5 == md5:
            return entry
    return None


class BuildSync:
    """
    Upload-if-needed front end over a ``StorageClient``.

    Holds no state between calls besides the client and its credentials.
    """

    def __init__(
        self,
        account: str,
        access_key: str,
        storage: StorageClient | None = None,
        reference_prefix: str | None = None,
    ) -> None:
        self.storage = storage or get_storage_client(account, access_key)
        self.reference_prefix = (
            settings.reference_prefix if reference_prefix is None else reference_prefix
        )

    async def _hash_and_list(self, artifact: Artifact) -> Tuple[str, List[RemoteEntry]]:
        """Run hashing and the inventory fetch together; the first failure wins."""
        hash_task = asyncio.ensure_future(compute_local_hash(artifact.path))
        inventory_task = asyncio.ensure_future(self.storage.list_files())
        try:
            local_hash, entries = await asyncio.gather(hash_task, inventory_task)
        except BaseException:
            hash_task.cancel()
            inventory_task.cancel()
            raise
        return local_hash, entries

    async def sync(self, build_path, upload_timeout: float | None = None) -> str:
        """
        Ensure *build_path* is stored remotely and return its storage reference.

        Uploads only when no remote entry matches both name and MD5. After an
        upload, the hash reported by the service must equal the local hash.

        Raises:
            InvalidArgumentError: *build_path* is not a string.
            LocalReadError: the build cannot be read.
            RequestTimeoutError, RemoteConnectionError, RemoteError, ProtocolError:
                the storage service could not be queried or written.
            IntegrityMismatchError: the uploaded hash differs from the local one.
        """
        artifact = Artifact.from_path(build_path)

        with tracer.start_as_current_span("sync") as root_span:
            root_span.set_attribute("artifact.name", artifact.name)
            logger.info("sync_started", name=artifact.name, path=str(artifact.path))

            try:
                t0 = time.monotonic()
                local_hash, entries = await self._hash_and_list(artifact)
                STAGE_DURATION.labels(stage="join").observe(time.monotonic() - t0)
                root_span.set_attribute("artifact.md5", local_hash)

                if find_match(entries, artifact.name, local_hash) is not None:
                    outcome = "reused"
                    logger.info("upload_skipped", name=artifact.name, md5=local_hash)
                else:
                    outcome = "uploaded"
                    logger.info(
                        "upload_required",
                        name=artifact.name,
                        md5=local_hash,
                        name_present=any(e.name == artifact.name for e in entries),
                    )
                    result = await self.storage.upload(
                        artifact.path, artifact.name, timeout=upload_timeout
                    )
                    if result.md5 != local_hash:
                        raise IntegrityMismatchError(local_hash, result.md5)
            except Exception as e:
                SYNC_TOTAL.labels(outcome="failed").inc()
                logger.error(
                    "sync_failed",
                    name=artifact.name,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                raise

        SYNC_TOTAL.labels(outcome=outcome).inc()
        reference = f"{self.reference_prefix}:{artifact.name}"
        logger.info("sync_complete", name=artifact.name, outcome=outcome, reference=reference)
        return reference

    async def get_app_capability(self, build_path) -> str:
        """Alias of ``sync`` named after the Appium ``app`` capability it feeds."""
        return await self.sync(build_path)
