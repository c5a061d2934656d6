from __future__ import annotations

from dataclasses import dataclass

import httpx

from upload_api.storage.base import BlobStore, BlobStoreError

NFT_STORAGE_API_URL = "https://api.nft.storage"


@dataclass(frozen=True)
class NFTStorageConfig:
    token: str
    api_url: str = NFT_STORAGE_API_URL


class NFTStorageError(BlobStoreError):
    pass


class NFTStorageBlobStore(BlobStore):
    """Stores blobs through the NFT.Storage ``/upload`` endpoint.

    The service hashes and chunks the payload itself; the only thing that comes
    back is the CID of the stored blob.
    """

    def __init__(self, config: NFTStorageConfig, *, client: httpx.AsyncClient) -> None:
        if not config.token:
            raise BlobStoreError("NFT.Storage token is not configured", status_code=500)
        self._token = config.token
        self._upload_url = f"{config.api_url.rstrip('/')}/upload"
        self._client = client

    async def store_blob(self, *, data: bytes, content_type: str | None) -> str:
        headers = {"Authorization": f"Bearer {self._token}"}
        if content_type:
            headers["Content-Type"] = content_type

        try:
            res = await self._client.post(self._upload_url, content=data, headers=headers)
        except httpx.HTTPError as e:
            raise NFTStorageError(str(e) or type(e).__name__, status_code=503) from e

        _raise_for_nft_storage_error(res, default_message="NFT.Storage upload failed")

        try:
            payload = res.json()
        except ValueError as e:
            raise NFTStorageError(
                "NFT.Storage returned a non-JSON response", status_code=502
            ) from e

        if not isinstance(payload, dict) or not payload.get("ok"):
            raise NFTStorageError(
                _error_message(payload, default="NFT.Storage rejected the upload"),
                status_code=502,
            )

        value = payload.get("value") or {}
        cid = value.get("cid") if isinstance(value, dict) else None
        if not isinstance(cid, str) or not cid:
            raise NFTStorageError("NFT.Storage response is missing the CID", status_code=502)
        return cid


def _raise_for_nft_storage_error(res: httpx.Response, *, default_message: str) -> None:
    if res.status_code < 400:
        return

    message = default_message
    try:
        message = _error_message(res.json(), default=default_message)
    except ValueError:
        message = default_message

    raise NFTStorageError(message, status_code=res.status_code)


def _error_message(payload: object, *, default: str) -> str:
    if not isinstance(payload, dict):
        return default
    error = payload.get("error")
    if isinstance(error, dict):
        return error.get("message") or default
    if isinstance(error, str) and error:
        return error
    return default
