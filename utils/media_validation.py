"""Validation helpers for uploaded image content."""

from typing import Optional

from fastapi import HTTPException, UploadFile

ALLOWED_IMAGE_TYPES = frozenset({
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
})

_READ_CHUNK_SIZE = 1024 * 1024


def normalize_mime_type(content_type: Optional[str]) -> str:
    """Lower-case a Content-Type value and strip any parameters."""
    if not content_type:
        return ""
    return content_type.lower().split(";", 1)[0].strip()


async def read_upload_bytes(upload: UploadFile, max_bytes: int) -> bytes:
    """Read an uploaded file into memory, rejecting payloads over `max_bytes`.

    Raises:
        HTTPException(413): If the payload is larger than `max_bytes`.
    """
    if upload.size is not None and upload.size > max_bytes:
        raise HTTPException(status_code=413, detail=f"File too large. Maximum size is {max_bytes} bytes.")

    chunks = []
    total = 0
    while True:
        chunk = await upload.read(_READ_CHUNK_SIZE)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise HTTPException(status_code=413, detail=f"File too large. Maximum size is {max_bytes} bytes.")
        chunks.append(chunk)
    return b"".join(chunks)
