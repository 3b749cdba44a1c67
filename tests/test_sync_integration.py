"""
End-to-end tests for BuildSync over the real SauceStorageClient.

HTTP is served by pytest-httpx; the local build is a real file.
"""
import pytest
from pytest_httpx import HTTPXMock

from buildsync.errors import IntegrityMismatchError, RemoteError
from buildsync.sync.manager import BuildSync

LIST_URL = "https://storage.test/rest/v1/storage/alice"
UPLOAD_URL = "https://storage.test/rest/v1/storage/alice/app.ipa?overwrite=true"


@pytest.fixture
def syncer(storage_client) -> BuildSync:
    return BuildSync("alice", "secret", storage=storage_client)


@pytest.mark.asyncio
async def test_stored_build_is_not_uploaded_again(
    syncer, build_file, build_md5, httpx_mock: HTTPXMock
):
    httpx_mock.add_response(
        method="GET", url=LIST_URL, json={"files": [{"name": "app.ipa", "md5": build_md5}]}
    )

    reference = await syncer.sync(str(build_file))

    assert reference == "storage:app.ipa"
    assert [r.method for r in httpx_mock.get_requests()] == ["GET"]


@pytest.mark.asyncio
async def test_missing_build_is_uploaded_once(
    syncer, build_file, build_md5, httpx_mock: HTTPXMock
):
    httpx_mock.add_response(method="GET", url=LIST_URL, json={"files": []})
    httpx_mock.add_response(method="POST", url=UPLOAD_URL, json={"md5": build_md5})

    reference = await syncer.sync(str(build_file))

    assert reference == "storage:app.ipa"
    posts = httpx_mock.get_requests(method="POST")
    assert len(posts) == 1
    assert posts[0].url == UPLOAD_URL


@pytest.mark.asyncio
async def test_listing_server_error_fails_sync(syncer, build_file, httpx_mock: HTTPXMock):
    httpx_mock.add_response(method="GET", url=LIST_URL, status_code=500)

    with pytest.raises(RemoteError) as exc_info:
        await syncer.sync(str(build_file))

    assert exc_info.value.status_code == 500
    assert httpx_mock.get_requests(method="POST") == []


@pytest.mark.asyncio
async def test_corrupted_upload_fails_sync(syncer, build_file, httpx_mock: HTTPXMock):
    httpx_mock.add_response(method="GET", url=LIST_URL, json={"files": []})
    httpx_mock.add_response(method="POST", url=UPLOAD_URL, json={"md5": "0" * 32})

    with pytest.raises(IntegrityMismatchError):
        await syncer.sync(str(build_file))
