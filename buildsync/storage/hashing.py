"""
Local content hashing.

The storage service reports MD5 digests, so the local side hashes with MD5
too. Reads run in a worker thread so the event loop stays free for the
concurrent inventory request.
"""
import asyncio
import hashlib
from pathlib import Path
from typing import Union

from buildsync.errors import LocalReadError

CHUNK_SIZE = 64 * 1024


def _md5_file(path: Path, chunk_size: int) -> str:
    md5_hash = hashlib.md5()
    with open(path, "rb") as f:
        for block in iter(lambda: f.read(chunk_size), b""):
            md5_hash.update(block)
    return md5_hash.hexdigest()


async def compute_local_hash(path: Union[str, Path], chunk_size: int = CHUNK_SIZE) -> str:
    """
    Stream *path* from disk and return its hex MD5 digest.

    Raises:
        LocalReadError: the file cannot be opened or a read fails mid-stream.
    """
    try:
        return await asyncio.to_thread(_md5_file, Path(path), chunk_size)
    except OSError as e:
        raise LocalReadError(f"Could not hash local file {path}: {e}") from e
