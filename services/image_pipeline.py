"""Authenticated upload and deletion of image bytes.

`ImagePipeline` checks the requester, the payload, the target record, its
owner and the declared MIME type, in that order, before any byte is
written. Once bytes are written they are removed again on every path that
does not end in a committed record. Deletion removes the stored bytes on a
best-effort basis and then the record.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import PurePath
from typing import Optional

from dal.image_dal import ImageDAL
from models.image_record import ImageRecord
from models.storage_pointer import StoragePointer
from services.storage.base import BaseImageStorage
from services.storage.naming import generate_storage_name
from utils.errors import BadRequest, Forbidden, NotFound, StorageFailure, Unauthenticated, UnsupportedMediaType
from utils.media_validation import ALLOWED_IMAGE_TYPES, normalize_mime_type

LOGGER = logging.getLogger(__name__)


@dataclass
class UploadResult:
    image: ImageRecord
    pointer: StoragePointer
    mime_type: str


class ImagePipeline:
    """Upload and delete image bytes for records owned by the requester.

    Args:
        image_dal: Access to IMAGE rows.
        storage: The process-wide storage backend chosen at startup.
    """

    def __init__(self, image_dal: ImageDAL, storage: BaseImageStorage) -> None:
        self._images = image_dal
        self._storage = storage

    async def get_owned_image(self, requester_id: Optional[int], image_id: int) -> ImageRecord:
        """Return the image if it exists and belongs to the requester.

        Raises:
            Unauthenticated: No requester.
            NotFound: No image with this id.
            Forbidden: The image belongs to someone else.
        """
        if requester_id is None:
            raise Unauthenticated()
        image = await self._images.get_image_by_id(image_id)
        if image is None:
            raise NotFound("Image not found")
        if image.owner_id != requester_id:
            raise Forbidden("Forbidden: You do not own this image")
        return image

    async def upload(
        self,
        requester_id: Optional[int],
        image_id: int,
        data: Optional[bytes],
        declared_filename: Optional[str],
        declared_mime_type: Optional[str],
    ) -> UploadResult:
        """Store `data` as the bytes of image `image_id`.

        Returns:
            The updated record, its new storage pointer and MIME type.

        Raises:
            Unauthenticated, BadRequest, NotFound, Forbidden,
            UnsupportedMediaType: Validation failures, in that order.
            StorageFailure: The backend could not write the bytes.
        """
        if requester_id is None:
            raise Unauthenticated()
        if data is None:
            raise BadRequest("No file uploaded")
        if not data:
            raise BadRequest("Uploaded file is empty")

        image = await self.get_owned_image(requester_id, image_id)

        mime_type = normalize_mime_type(declared_mime_type)
        if mime_type not in ALLOWED_IMAGE_TYPES:
            raise UnsupportedMediaType()

        previous = image.storage_pointer
        pointer = await self._storage.write(data, generate_storage_name(declared_filename), mime_type)

        image.filename = _display_name(declared_filename) or pointer.name
        image.mime_type = mime_type
        image.apply_pointer(pointer)
        image.shot_date = int(time.time())

        try:
            if not await self._images.save_upload(image):
                # The record was deleted while the bytes were being written.
                raise NotFound("Image not found")
        except Exception:
            await self._discard(pointer)
            raise

        if previous is not None and previous != pointer:
            await self._discard(previous)

        LOGGER.info("Image %s uploaded by user %s to %s storage", image_id, requester_id, pointer.kind)
        return UploadResult(image=image, pointer=pointer, mime_type=mime_type)

    async def delete(self, requester_id: Optional[int], image_id: int) -> None:
        """Delete the stored bytes (best effort) and then the record."""
        image = await self.get_owned_image(requester_id, image_id)

        pointer = image.storage_pointer
        if pointer is not None:
            await self._discard(pointer)

        await self._images.delete_image(image_id)
        LOGGER.info("Image %s deleted by user %s", image_id, requester_id)

    async def _discard(self, pointer: StoragePointer) -> bool:
        """Delete stored bytes, logging instead of raising on failure."""
        if not self._storage.owns(pointer):
            LOGGER.warning(
                "Cannot delete %s object '%s' with the %s backend",
                pointer.kind,
                pointer.name,
                self._storage.kind,
            )
            return False
        try:
            return await self._storage.delete(pointer)
        except StorageFailure:
            LOGGER.exception("Error deleting stored object '%s'", pointer.name)
            return False


def _display_name(declared_filename: Optional[str]) -> str:
    if not declared_filename:
        return ""
    return PurePath(declared_filename.replace("\\", "/")).name
