from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import IO, NamedTuple

from upload_api.core.metrics import observe_upload_attempt
from upload_api.core.middleware import request_id_ctx
from upload_api.storage.base import BlobStore

MAX_UPLOAD_BYTES = 52_428_800  # 50 MiB
_MIB = 1024 * 1024

logger = logging.getLogger("upload.api")


@dataclass(frozen=True)
class UploadableFile:
    name: str
    mime_type: str
    size: int
    content: IO[bytes]

    def __post_init__(self) -> None:
        if self.size < 0:
            raise ValueError("file size must be non-negative")


@dataclass(frozen=True)
class UploadFileInfo:
    name: str
    mime_type: str
    size: int
    created_at: datetime


@dataclass(frozen=True)
class UploadDetail:
    cid: str | None
    file: UploadFileInfo


class UploadResult(NamedTuple):
    error: Exception | None
    detail: UploadDetail

    @property
    def ok(self) -> bool:
        return self.error is None


class SizeLimitExceededError(ValueError):
    def __init__(self, *, max_bytes: int) -> None:
        super().__init__(f"Maximum file size to be upload is {_format_limit(max_bytes)}")
        self.max_bytes = max_bytes


def get_cid_detail(*, cid: str | None, file: UploadableFile) -> UploadDetail:
    base = UploadFileInfo(
        name=file.name,
        mime_type=file.mime_type,
        size=file.size,
        created_at=datetime.now(UTC),
    )
    if not cid:
        return UploadDetail(cid=None, file=base)
    return UploadDetail(cid=cid, file=base)


class UploadAdapter:
    """Forwards one file to a blob store and normalizes the outcome.

    ``upload_blob`` never raises for upload failures. The error is returned as
    the first element of the result, next to a detail record that is built on
    every path.
    """

    def __init__(self, blob_store: BlobStore, *, max_upload_bytes: int = MAX_UPLOAD_BYTES) -> None:
        self._blob_store = blob_store
        self._max_upload_bytes = max_upload_bytes

    async def upload_blob(self, file: UploadableFile) -> UploadResult:
        detail = get_cid_detail(cid=None, file=file)

        if file.size > self._max_upload_bytes:
            observe_upload_attempt(outcome="rejected")
            _log_upload("upload.rejected", file=file, max_bytes=self._max_upload_bytes)
            return UploadResult(SizeLimitExceededError(max_bytes=self._max_upload_bytes), detail)

        try:
            cid = await self._blob_store.store_blob(
                data=await asyncio.to_thread(file.content.read),
                content_type=file.mime_type or None,
            )
        except Exception as e:  # noqa: BLE001
            observe_upload_attempt(outcome="failed")
            _log_upload("upload.failed", file=file, error=type(e).__name__)
            return UploadResult(e, detail)

        detail = get_cid_detail(cid=cid, file=file)
        observe_upload_attempt(outcome="stored")
        _log_upload("upload.stored", file=file, cid=detail.cid)
        return UploadResult(None, detail)


def _log_upload(event: str, *, file: UploadableFile, **fields: object) -> None:
    payload: dict[str, object] = {
        "event": event,
        "request_id": request_id_ctx.get(),
        "name": file.name,
        "mime_type": file.mime_type,
        "size": file.size,
    }
    payload.update(fields)
    logger.info(json.dumps(payload, separators=(",", ":"), sort_keys=True))


def _format_limit(max_bytes: int) -> str:
    if max_bytes % _MIB == 0:
        return f"{max_bytes // _MIB} MB"
    return f"{max_bytes} bytes"
