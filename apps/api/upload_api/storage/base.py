from __future__ import annotations


class BlobStoreError(RuntimeError):
    def __init__(self, message: str, *, status_code: int = 502) -> None:
        super().__init__(message)
        self.status_code = status_code


class BlobStore:
    async def store_blob(
        self, *, data: bytes, content_type: str | None
    ) -> str:  # pragma: no cover
        """Store ``data`` and return its content identifier."""
        raise NotImplementedError
