"""
Error taxonomy for build synchronisation.

Every failure surfaced by ``BuildSync.sync`` is a ``BuildSyncError``. Where a
builtin exception already describes the failure class, the error also
derives from it, so ``except TimeoutError`` or ``except OSError`` keep
working for callers that do not know this package.
"""
from typing import Any, Dict, Optional


class BuildSyncError(Exception):
    """Base class for every error raised by this package."""


class InvalidArgumentError(BuildSyncError, TypeError):
    """The caller passed something that is not a path."""


class LocalReadError(BuildSyncError, OSError):
    """The local artifact could not be opened or read."""


class RequestTimeoutError(BuildSyncError, TimeoutError):
    """A request to the storage service did not complete in time."""


class RemoteConnectionError(BuildSyncError, ConnectionError):
    """The connection to the storage service failed or was closed early."""


class ProtocolError(BuildSyncError):
    """The storage service answered with a body we cannot interpret."""


class IntegrityMismatchError(BuildSyncError):
    """The hash reported after upload differs from the local hash."""

    def __init__(self, local_hash: str, remote_hash: str) -> None:
        super().__init__(
            f"Uploaded file hash {remote_hash!r} did not match local file hash {local_hash!r}"
        )
        self.local_hash = local_hash
        self.remote_hash = remote_hash


class RemoteError(BuildSyncError):
    """
    The storage service answered with a non-200 status.

    ``payload`` holds the decoded error body when the service sent a
    structured one (``{"errors": [...]}``), otherwise ``None``.
    """

    def __init__(
        self,
        status_code: int,
        payload: Optional[Dict[str, Any]] = None,
        stage: str = "request",
    ) -> None:
        message = f"{stage} failed with status {status_code}"
        if payload is not None:
            message = f"{message}: {payload.get('errors')}"
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload
        self.stage = stage
