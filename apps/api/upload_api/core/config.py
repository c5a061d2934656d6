from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from upload_api.storage.nft_storage import NFT_STORAGE_API_URL


class Settings(BaseSettings):
    # Prefer repo-root `.env`, keep local `.env` as a fallback for service-specific overrides.
    _REPO_ROOT = Path(__file__).resolve().parents[4]
    model_config = SettingsConfigDict(env_file=(_REPO_ROOT / ".env", ".env"), extra="ignore")

    VERSION: str = "0.1.0"

    CORS_ORIGINS: str = "http://localhost:3000"

    NFT_STORAGE_API_URL: str = NFT_STORAGE_API_URL
    NFT_STORAGE_TOKEN: str = ""
    NFT_STORAGE_TIMEOUT_SECONDS: float = 60.0
    MAX_UPLOAD_BYTES: int = 52_428_800  # 50 MiB

    REQUEST_ID_HEADER: str = "x-request-id"
    ENABLE_PROMETHEUS_METRICS: bool = True
    PROMETHEUS_METRICS_PATH: str = "/metrics"
    CONTENT_SECURITY_POLICY: str = "default-src 'none'; frame-ancestors 'none'"

    @field_validator("NFT_STORAGE_API_URL")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("MAX_UPLOAD_BYTES")
    @classmethod
    def _validate_max_upload_bytes(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("MAX_UPLOAD_BYTES must be positive")
        return v

    @field_validator("NFT_STORAGE_TIMEOUT_SECONDS")
    @classmethod
    def _validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("NFT_STORAGE_TIMEOUT_SECONDS must be positive")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
