"""FastAPI routes for image metadata and uploads."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from pydantic import BaseModel, Field

from controllers.image_controller import create_image, delete_image, get_image, get_my_images, upload_image
from models.user_record import UserRecord
from routes.dependencies import SQLITE_MAX_INTEGER, RecordId, get_optional_user, require_user
from utils.errors import Internal

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/image", tags=["image"])


class CreateImagePayload(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    album_id: Optional[int] = Field(None, ge=1, le=SQLITE_MAX_INTEGER)


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_image_route(
    request: Request,
    payload: CreateImagePayload,
    user: UserRecord = Depends(require_user),
):
    """Create an image placeholder (metadata only)."""
    try:
        return await create_image(request, user, payload.title, payload.description, payload.album_id)
    except HTTPException:
        raise
    except Exception as exc:
        LOGGER.exception("Create image error")
        raise Internal("Server error during image creation").to_http() from exc


@router.post("/{image_id}/upload")
async def upload_image_route(
    request: Request,
    image_id: RecordId,
    file: Optional[UploadFile] = File(None),
    user: Optional[UserRecord] = Depends(get_optional_user),
):
    """Upload the binary file (multipart field `file`) for an existing image id."""
    try:
        return await upload_image(request, user, image_id, file)
    except HTTPException:
        raise
    except Exception as exc:
        LOGGER.exception("Upload image error")
        raise Internal("Server error during image upload").to_http() from exc


@router.get("/me")
async def get_my_images_route(request: Request, user: UserRecord = Depends(require_user)):
    """List the images owned by the caller."""
    try:
        return await get_my_images(request, user)
    except HTTPException:
        raise
    except Exception as exc:
        LOGGER.exception("Get my images error")
        raise Internal("Server error fetching images").to_http() from exc


@router.get("/{image_id}")
async def get_image_route(request: Request, image_id: RecordId, user: UserRecord = Depends(require_user)):
    try:
        return await get_image(request, user, image_id)
    except HTTPException:
        raise
    except Exception as exc:
        LOGGER.exception("Get image error")
        raise Internal("Server error fetching image").to_http() from exc


@router.delete("/{image_id}")
async def delete_image_route(request: Request, image_id: RecordId, user: UserRecord = Depends(require_user)):
    """Delete an image and its stored bytes."""
    try:
        return await delete_image(request, user, image_id)
    except HTTPException:
        raise
    except Exception as exc:
        LOGGER.exception("Delete image error")
        raise Internal("Server error deleting image").to_http() from exc
