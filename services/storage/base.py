from abc import ABCMeta, abstractmethod

from models.storage_pointer import StoragePointer


class BaseImageStorage(metaclass=ABCMeta):
    """Capability shared by every storage backend.

    One instance is built at startup and injected into the upload
    pipeline; it is never switched per request.
    """

    kind: str

    @abstractmethod
    async def write(self, data: bytes, name: str, mime_type: str) -> StoragePointer:
        """Store `data` under `name` and return a pointer to it."""
        return NotImplemented

    @abstractmethod
    async def delete(self, pointer: StoragePointer) -> bool:
        """Delete the bytes behind `pointer`. Returns False if they were already gone."""
        return NotImplemented

    @abstractmethod
    async def exists(self, pointer: StoragePointer) -> bool:
        return NotImplemented

    def owns(self, pointer: StoragePointer) -> bool:
        """True if `pointer` was written by a backend of this kind."""
        return pointer.kind == self.kind

    async def close(self) -> None:
        """Release any client held by the backend."""
