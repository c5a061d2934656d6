from __future__ import annotations

import asyncio

import httpx
import pytest

from upload_api.storage.base import BlobStoreError
from upload_api.storage.nft_storage import (
    NFTStorageBlobStore,
    NFTStorageConfig,
    NFTStorageError,
)


def _store(client: httpx.AsyncClient, *, token: str = "token-1") -> NFTStorageBlobStore:
    return NFTStorageBlobStore(
        NFTStorageConfig(token=token, api_url="https://api.nft.storage/"),
        client=client,
    )


def _store_blob(store: NFTStorageBlobStore, client: httpx.AsyncClient, **kwargs) -> str:
    async def run() -> str:
        async with client:
            return await store.store_blob(**kwargs)

    return asyncio.run(run())


def test_store_blob_posts_payload_with_bearer_token(mock_client) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True, "value": {"cid": "bafy-stored"}})

    client = mock_client(handler)
    cid = _store_blob(_store(client), client, data=b"hello", content_type="text/plain")

    assert cid == "bafy-stored"
    assert len(seen) == 1
    req = seen[0]
    assert req.method == "POST"
    assert str(req.url) == "https://api.nft.storage/upload"
    assert req.headers.get("Authorization") == "Bearer token-1"
    assert req.headers.get("Content-Type") == "text/plain"
    assert req.content == b"hello"


def test_store_blob_raises_with_upstream_status_and_message(mock_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            401,
            json={"ok": False, "error": {"name": "HTTPError", "message": "API Key is missing"}},
        )

    client = mock_client(handler)
    with pytest.raises(NFTStorageError) as excinfo:
        _store_blob(_store(client), client, data=b"hello", content_type=None)

    assert excinfo.value.status_code == 401
    assert str(excinfo.value) == "API Key is missing"
    assert isinstance(excinfo.value, BlobStoreError)


def test_store_blob_uses_default_message_for_non_json_error(mock_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="<html>boom</html>")

    client = mock_client(handler)
    with pytest.raises(NFTStorageError) as excinfo:
        _store_blob(_store(client), client, data=b"x", content_type=None)

    assert excinfo.value.status_code == 500
    assert str(excinfo.value) == "NFT.Storage upload failed"


def test_store_blob_rejects_ok_false_body(mock_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": False, "error": {"message": "bad payload"}})

    client = mock_client(handler)
    with pytest.raises(NFTStorageError) as excinfo:
        _store_blob(_store(client), client, data=b"x", content_type=None)

    assert excinfo.value.status_code == 502
    assert str(excinfo.value) == "bad payload"


def test_store_blob_rejects_missing_cid(mock_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": True, "value": {}})

    client = mock_client(handler)
    with pytest.raises(NFTStorageError, match="missing the CID"):
        _store_blob(_store(client), client, data=b"x", content_type=None)


def test_store_blob_rejects_non_json_success(mock_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="not json")

    client = mock_client(handler)
    with pytest.raises(NFTStorageError, match="non-JSON"):
        _store_blob(_store(client), client, data=b"x", content_type=None)


def test_store_blob_wraps_transport_errors(mock_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = mock_client(handler)
    with pytest.raises(NFTStorageError) as excinfo:
        _store_blob(_store(client), client, data=b"x", content_type=None)

    assert excinfo.value.status_code == 503
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_store_requires_token(mock_client) -> None:
    client = mock_client(lambda request: httpx.Response(200))
    with pytest.raises(BlobStoreError, match="token is not configured"):
        _store(client, token="")
