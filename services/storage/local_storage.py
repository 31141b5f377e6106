"""Local filesystem backend writing into a single upload directory."""

from __future__ import annotations

import logging
from pathlib import Path

import aiofiles
import aiofiles.os

from models.storage_pointer import LOCAL, StoragePointer
from services.storage.base import BaseImageStorage
from utils.errors import StorageFailure

LOGGER = logging.getLogger(__name__)


class LocalFileStorage(BaseImageStorage):
    kind = LOCAL

    def __init__(self, base_directory: Path | str) -> None:
        self._base_directory = Path(base_directory).resolve()

    @property
    def base_directory(self) -> Path:
        return self._base_directory

    def ensure_directory(self) -> None:
        self._base_directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, name: str) -> Path:
        """Resolve `name` inside the upload directory, dropping any directory parts."""
        file_name_only = Path(name).name
        if not file_name_only or file_name_only in (".", ".."):
            raise ValueError(f"Invalid stored file name: {name!r}")
        return self._base_directory / file_name_only

    async def write(self, data: bytes, name: str, mime_type: str) -> StoragePointer:
        full_file_path = self.path_for(name)
        try:
            await aiofiles.os.makedirs(self._base_directory, exist_ok=True)
            async with aiofiles.open(full_file_path, "wb") as f:
                await f.write(data)
        except OSError as exc:
            # Remove whatever part of the file made it to disk.
            try:
                await aiofiles.os.remove(full_file_path)
            except FileNotFoundError:
                pass
            except OSError:
                LOGGER.exception("Failed to remove partial upload %s", full_file_path)
            raise StorageFailure(f"Failed to write {full_file_path.name}") from exc

        LOGGER.info("Stored %d bytes (%s) at %s", len(data), mime_type, full_file_path)
        return StoragePointer.local(full_file_path.name)

    async def delete(self, pointer: StoragePointer) -> bool:
        full_file_path = self.path_for(pointer.name)
        try:
            await aiofiles.os.remove(full_file_path)
        except FileNotFoundError:
            LOGGER.warning("File '%s' does not exist", full_file_path.name)
            return False
        except OSError as exc:
            raise StorageFailure(f"Failed to delete {full_file_path.name}") from exc

        LOGGER.info("File '%s' deleted", full_file_path.name)
        return True

    async def exists(self, pointer: StoragePointer) -> bool:
        return await aiofiles.os.path.isfile(self.path_for(pointer.name))
