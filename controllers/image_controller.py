import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, UploadFile

from dal.album_dal import AlbumDAL
from dal.image_dal import ImageDAL
from models.image_record import ImageRecord
from models.storage_pointer import REMOTE
from models.user_record import UserRecord
from services.image_pipeline import ImagePipeline
from utils.errors import ApiError, StorageFailure
from utils.media_validation import read_upload_bytes

LOGGER = logging.getLogger(__name__)

UPLOADS_URL_PREFIX = "/uploads"


def _get_pipeline(request: Request) -> ImagePipeline:
    pipeline = getattr(request.app.state, "image_pipeline", None)
    if pipeline is None:
        raise HTTPException(status_code=500, detail="Image pipeline not initialized.")
    return pipeline


def image_view(image: ImageRecord) -> Dict[str, Any]:
    """Client-facing representation of an image record."""
    pointer = image.storage_pointer
    url: Optional[str] = None
    if pointer is not None:
        url = pointer.blob_url if pointer.kind == REMOTE else f"{UPLOADS_URL_PREFIX}/{pointer.filename}"

    return {
        "id": image.id,
        "url": url,
        "filename": image.filename,
        "title": image.title,
        "description": image.description,
        "mime_type": image.mime_type,
        "album_id": image.album_id,
        "created_at": image.created_at,
        "shot_date": image.shot_date,
        "storage_type": pointer.kind if pointer is not None else None,
    }


async def create_image(
    request: Request,
    user: UserRecord,
    title: Optional[str],
    description: Optional[str] = None,
    album_id: Optional[int] = None,
) -> Dict[str, Any]:
    """Create the metadata record that a later upload fills in."""
    if not title or not title.strip():
        raise HTTPException(status_code=400, detail="Title is required")

    db_initializer = request.app.state.db_initializer
    if album_id is not None:
        album = await AlbumDAL(db_initializer).get_album(album_id, user.id)
        if album is None:
            raise HTTPException(status_code=404, detail="Album not found")

    title = title.strip()
    record = ImageRecord(
        id=None,
        owner_id=user.id,
        filename=title,
        title=title,
        description=description,
        album_id=album_id,
    )
    image_id = await ImageDAL(db_initializer).create_image(record)
    return {"success": True, "content": {"id": image_id}}


async def upload_image(
    request: Request,
    user: Optional[UserRecord],
    image_id: int,
    file: Optional[UploadFile],
) -> Dict[str, Any]:
    """Store the uploaded bytes for `image_id` through the configured backend.

    Returns:
        `{"success": True, "content": {id, filename, mime_type[, url]}}`;
        `url` is present only for remote storage.

    Raises:
        HTTPException: 400/401/403/404/413/415 for rejected uploads, 500 on
            storage failures.
    """
    pipeline = _get_pipeline(request)

    data: Optional[bytes] = None
    filename: Optional[str] = None
    content_type: Optional[str] = None
    if file is not None:
        data = await read_upload_bytes(file, request.app.state.config.max_upload_bytes)
        filename = file.filename
        content_type = file.content_type

    try:
        result = await pipeline.upload(
            user.id if user is not None else None,
            image_id,
            data,
            filename,
            content_type,
        )
    except StorageFailure as exc:
        LOGGER.exception("Upload image error")
        raise HTTPException(status_code=500, detail="Server error during image upload") from exc
    except ApiError as exc:
        raise exc.to_http() from exc

    content: Dict[str, Any] = {
        "id": result.image.id,
        "filename": result.image.filename,
        "mime_type": result.mime_type,
    }
    if result.pointer.kind == REMOTE:
        content["url"] = result.pointer.blob_url
    return {"success": True, "content": content}


async def get_my_images(request: Request, user: UserRecord) -> Dict[str, Any]:
    images = await ImageDAL(request.app.state.db_initializer).list_images_by_owner(user.id)
    return {"success": True, "content": [image_view(image) for image in images]}


async def get_image(request: Request, user: UserRecord, image_id: int) -> Dict[str, Any]:
    try:
        image = await _get_pipeline(request).get_owned_image(user.id, image_id)
    except ApiError as exc:
        raise exc.to_http() from exc
    return {"success": True, "content": image_view(image)}


async def delete_image(request: Request, user: UserRecord, image_id: int) -> Dict[str, Any]:
    try:
        await _get_pipeline(request).delete(user.id, image_id)
    except ApiError as exc:
        raise exc.to_http() from exc
    return {"success": True, "result": "Image deleted successfully"}
