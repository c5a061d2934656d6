from __future__ import annotations

from collections.abc import AsyncGenerator

import httpx

from upload_api.core.config import get_settings


async def get_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    # Centralize HTTP client configuration (timeouts, etc) so we can override in tests.
    settings = get_settings()
    async with httpx.AsyncClient(timeout=settings.NFT_STORAGE_TIMEOUT_SECONDS) as client:
        yield client
