from __future__ import annotations

import io
import os
from collections.abc import Callable, Generator

import httpx
import pytest

from upload_api.services.uploads import UploadableFile
from upload_api.storage.base import BlobStore


@pytest.fixture(scope="session", autouse=True)
def _test_settings() -> Generator[None, None, None]:
    os.environ.setdefault("NFT_STORAGE_TOKEN", "test-nft-token")
    os.environ.setdefault("NFT_STORAGE_API_URL", "https://api.nft.storage")

    # Clear cached settings so imports inside the test session see the test env.
    from upload_api.core.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class RecordingBlobStore(BlobStore):
    def __init__(self, *, cid: str | None = None, error: Exception | None = None) -> None:
        self.cid = cid
        self.error = error
        self.calls: list[dict[str, object]] = []

    async def store_blob(self, *, data: bytes, content_type: str | None) -> str:
        self.calls.append({"data": data, "content_type": content_type})
        if self.error is not None:
            raise self.error
        assert self.cid is not None
        return self.cid


@pytest.fixture()
def make_file() -> Callable[..., UploadableFile]:
    def _make(
        *,
        name: str = "a.png",
        mime_type: str = "image/png",
        size: int | None = None,
        data: bytes = b"\x89PNG-bytes",
    ) -> UploadableFile:
        return UploadableFile(
            name=name,
            mime_type=mime_type,
            size=len(data) if size is None else size,
            content=io.BytesIO(data),
        )

    return _make


def mock_async_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), timeout=10.0)


@pytest.fixture()
def recording_store() -> type[RecordingBlobStore]:
    return RecordingBlobStore


@pytest.fixture()
def mock_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    return mock_async_client
