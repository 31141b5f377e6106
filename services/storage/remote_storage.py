"""Remote object-storage backend built on a blob client.

The client only needs `upload_bytes`, `delete_by_name`, `exists_by_name`
and `close`; `AzureBlobClient` is the production implementation.
"""

from __future__ import annotations

from typing import Protocol, Tuple

from models.storage_pointer import REMOTE, StoragePointer
from services.storage.base import BaseImageStorage
from utils.errors import StorageFailure


class BlobClient(Protocol):
    async def upload_bytes(self, data: bytes, proposed_name: str, mime_type: str) -> Tuple[str, str]: ...

    async def delete_by_name(self, name: str) -> bool: ...

    async def exists_by_name(self, name: str) -> bool: ...

    async def close(self) -> None: ...


class RemoteBlobStorage(BaseImageStorage):
    kind = REMOTE

    def __init__(self, client: BlobClient) -> None:
        self._client = client

    async def write(self, data: bytes, name: str, mime_type: str) -> StoragePointer:
        try:
            url, actual_name = await self._client.upload_bytes(data, name, mime_type)
        except Exception as exc:
            raise StorageFailure(f"Failed to upload blob {name}") from exc
        return StoragePointer.remote(actual_name, url)

    async def delete(self, pointer: StoragePointer) -> bool:
        try:
            return await self._client.delete_by_name(pointer.name)
        except Exception as exc:
            raise StorageFailure(f"Failed to delete blob {pointer.name}") from exc

    async def exists(self, pointer: StoragePointer) -> bool:
        try:
            return await self._client.exists_by_name(pointer.name)
        except Exception as exc:
            raise StorageFailure(f"Failed to look up blob {pointer.name}") from exc

    async def close(self) -> None:
        await self._client.close()
