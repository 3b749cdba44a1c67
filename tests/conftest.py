import hashlib
from pathlib import Path

import pytest

from buildsync.storage.client import SauceStorageClient

BUILD_BYTES = b"PK\x03\x04 fake ipa payload " * 512


@pytest.fixture
def build_file(tmp_path: Path) -> Path:
    """A small build artifact named ``app.ipa``."""
    path = tmp_path / "app.ipa"
    path.write_bytes(BUILD_BYTES)
    return path


@pytest.fixture
def build_md5() -> str:
    """MD5 of the ``build_file`` content."""
    return hashlib.md5(BUILD_BYTES).hexdigest()


@pytest.fixture
def storage_client() -> SauceStorageClient:
    """Client for account ``alice`` against a fake storage host."""
    return SauceStorageClient("alice", "secret", base_url="https://storage.test")
