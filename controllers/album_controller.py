"""Owner-scoped album CRUD."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request

from controllers.image_controller import image_view
from dal.album_dal import AlbumDAL
from dal.image_dal import ImageDAL
from models.group_records import AlbumRecord
from models.user_record import UserRecord


def _album_view(album: AlbumRecord) -> Dict[str, Any]:
    return {
        "id": album.id,
        "name": album.name,
        "description": album.description,
        "color": album.color,
        "created_at": album.created_at,
        "updated_at": album.updated_at,
    }


async def _album_with_images(request: Request, album: AlbumRecord) -> Dict[str, Any]:
    images = await ImageDAL(request.app.state.db_initializer).list_images_by_album(album.id)
    return {**_album_view(album), "images": [image_view(image) for image in images]}


async def create_album(
    request: Request,
    user: UserRecord,
    name: Optional[str],
    description: Optional[str] = None,
    color: Optional[str] = None,
) -> Dict[str, Any]:
    if not name or not name.strip():
        raise HTTPException(status_code=400, detail="Name is required")

    album_dal = AlbumDAL(request.app.state.db_initializer)
    album_id = await album_dal.create_album(
        AlbumRecord(id=None, owner_id=user.id, name=name.strip(), description=description, color=color)
    )
    album = await album_dal.get_album(album_id, user.id)
    return await _album_with_images(request, album)


async def list_albums(request: Request, user: UserRecord) -> list:
    """The caller's albums, each with the number of images it holds."""
    db_initializer = request.app.state.db_initializer
    albums = await AlbumDAL(db_initializer).list_albums(user.id)
    image_dal = ImageDAL(db_initializer)
    counts = await asyncio.gather(*(image_dal.count_images_by_album(album.id) for album in albums))
    return [{**_album_view(album), "qty": qty} for album, qty in zip(albums, counts)]


async def get_album(request: Request, user: UserRecord, album_id: int) -> Dict[str, Any]:
    album = await AlbumDAL(request.app.state.db_initializer).get_album(album_id, user.id)
    if album is None:
        raise HTTPException(status_code=404, detail="Album not found")
    return await _album_with_images(request, album)


async def update_album(
    request: Request,
    user: UserRecord,
    album_id: int,
    *,
    name: Optional[str] = None,
    description: Optional[str] = None,
    color: Optional[str] = None,
) -> Dict[str, Any]:
    if name is not None and not name.strip():
        raise HTTPException(status_code=400, detail="Name must not be empty")

    updated = await AlbumDAL(request.app.state.db_initializer).update_album(
        album_id,
        user.id,
        name=name.strip() if name is not None else None,
        description=description,
        color=color,
    )
    if updated is None:
        raise HTTPException(status_code=404, detail="Album not found")
    return _album_view(updated)


async def delete_album(request: Request, user: UserRecord, album_id: int) -> None:
    deleted = await AlbumDAL(request.app.state.db_initializer).delete_album(album_id, user.id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Album not found")
