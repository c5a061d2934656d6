from __future__ import annotations

import httpx

from upload_api.core.config import get_settings
from upload_api.storage.base import BlobStore
from upload_api.storage.nft_storage import NFTStorageBlobStore, NFTStorageConfig


def build_blob_store(*, client: httpx.AsyncClient) -> BlobStore:
    settings = get_settings()
    return NFTStorageBlobStore(
        NFTStorageConfig(
            token=settings.NFT_STORAGE_TOKEN,
            api_url=settings.NFT_STORAGE_API_URL,
        ),
        client=client,
    )
