"""Unit tests for local MD5 hashing."""
import hashlib

import pytest

from buildsync.errors import LocalReadError
from buildsync.storage.hashing import compute_local_hash


@pytest.mark.asyncio
async def test_hash_matches_md5_of_content(build_file, build_md5):
    assert await compute_local_hash(build_file) == build_md5


@pytest.mark.asyncio
async def test_hash_is_deterministic(build_file):
    first = await compute_local_hash(build_file)
    second = await compute_local_hash(str(build_file))
    assert first == second


@pytest.mark.asyncio
async def test_different_content_gives_different_hash(tmp_path):
    a = tmp_path / "a.apk"
    b = tmp_path / "b.apk"
    a.write_bytes(b"release build 1")
    b.write_bytes(b"release build 2")

    assert await compute_local_hash(a) != await compute_local_hash(b)


@pytest.mark.asyncio
async def test_small_chunks_give_same_digest(build_file, build_md5):
    """Chunk boundaries must not affect the digest."""
    assert await compute_local_hash(build_file, chunk_size=7) == build_md5


@pytest.mark.asyncio
async def test_empty_file(tmp_path):
    empty = tmp_path / "empty.zip"
    empty.write_bytes(b"")
    assert await compute_local_hash(empty) == hashlib.md5(b"").hexdigest()


@pytest.mark.asyncio
async def test_missing_file_raises_local_read_error(tmp_path):
    with pytest.raises(LocalReadError) as exc_info:
        await compute_local_hash(tmp_path / "nope.ipa")

    assert isinstance(exc_info.value, OSError)
    assert "nope.ipa" in str(exc_info.value)


@pytest.mark.asyncio
async def test_directory_raises_local_read_error(tmp_path):
    with pytest.raises(LocalReadError):
        await compute_local_hash(tmp_path)
