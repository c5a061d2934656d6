from __future__ import annotations

import os

import httpx
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import JSONResponse

from upload_api.core.config import get_settings
from upload_api.core.http import get_http_client
from upload_api.schemas.uploads import UploadResponse
from upload_api.services.uploads import SizeLimitExceededError, UploadableFile, UploadAdapter
from upload_api.storage.base import BlobStore, BlobStoreError
from upload_api.storage.factory import build_blob_store

router = APIRouter(prefix="/uploads", tags=["uploads"])


def get_blob_store(client: httpx.AsyncClient = Depends(get_http_client)) -> BlobStore:
    try:
        return build_blob_store(client=client)
    except BlobStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Upload storage is not configured",
        ) from e


def get_upload_adapter(blob_store: BlobStore = Depends(get_blob_store)) -> UploadAdapter:
    settings = get_settings()
    return UploadAdapter(blob_store, max_upload_bytes=settings.MAX_UPLOAD_BYTES)


@router.post(
    "",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        413: {"model": UploadResponse},
        status.HTTP_502_BAD_GATEWAY: {"model": UploadResponse},
    },
)
async def uploads_create(
    file: UploadFile = File(...),
    adapter: UploadAdapter = Depends(get_upload_adapter),
) -> UploadResponse | JSONResponse:
    uploadable = UploadableFile(
        name=file.filename or "",
        mime_type=file.content_type or "",
        size=_upload_size(file),
        content=file.file,
    )
    result = await adapter.upload_blob(uploadable)
    body = UploadResponse.from_result(result)

    if result.error is None:
        return body
    if isinstance(result.error, SizeLimitExceededError):
        status_code = 413
    else:
        status_code = status.HTTP_502_BAD_GATEWAY
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _upload_size(file: UploadFile) -> int:
    if file.size is not None:
        return file.size
    # Spooled uploads without a recorded size: measure and rewind.
    file.file.seek(0, os.SEEK_END)
    size = file.file.tell()
    file.file.seek(0)
    return size
