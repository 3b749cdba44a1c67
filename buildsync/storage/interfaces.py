"""
StorageClient — vendor-neutral interface for build storage services.

Implementations must handle:
    - Listing the files stored for the configured account
    - Uploading a local file under a given name, overwriting any existing one

The active client is resolved at runtime from ``settings.storage_client_type``.
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from buildsync.storage.schemas import RemoteEntry, UploadResult


class StorageClient(ABC):
    """Abstract base for remote build storage backends."""

    @abstractmethod
    async def list_files(self) -> List[RemoteEntry]:
        """
        Return the inventory of stored files.

        Raises:
            RequestTimeoutError, RemoteConnectionError, RemoteError, ProtocolError
        """

    @abstractmethod
    async def upload(
        self, path: Path, name: str, timeout: Optional[float] = None
    ) -> UploadResult:
        """
        Stream *path* to the service as *name* (create or overwrite).

        Returns:
            The service's description of the stored file, including its ``md5``.
        """
