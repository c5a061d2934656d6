from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from upload_api.services.uploads import UploadResult


class UploadFileOut(BaseModel):
    name: str
    type: str
    size: int = Field(ge=0)
    created_at: datetime


class UploadResponse(BaseModel):
    cid: str | None
    file: UploadFileOut
    error: str | None = None

    @classmethod
    def from_result(cls, result: UploadResult) -> UploadResponse:
        detail = result.detail
        return cls(
            cid=detail.cid,
            file=UploadFileOut(
                name=detail.file.name,
                type=detail.file.mime_type,
                size=detail.file.size,
                created_at=detail.file.created_at,
            ),
            error=str(result.error) if result.error is not None else None,
        )
