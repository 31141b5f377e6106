"""FastAPI routes for albums and collections."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel

from controllers import album_controller, collection_controller
from models.user_record import UserRecord
from routes.dependencies import RecordId, require_user
from utils.errors import Internal

LOGGER = logging.getLogger(__name__)

album_router = APIRouter(prefix="/album", tags=["album"])
collection_router = APIRouter(prefix="/collection", tags=["collection"], dependencies=[Depends(require_user)])


class GroupPayload(BaseModel):
	name: Optional[str] = None
	description: Optional[str] = None
	color: Optional[str] = None


def _internal_error() -> HTTPException:
	LOGGER.exception("Unhandled error in album/collection route")
	return Internal().to_http()


@album_router.post("", status_code=status.HTTP_201_CREATED)
async def create_album_route(request: Request, payload: GroupPayload, user: UserRecord = Depends(require_user)):
	try:
		return await album_controller.create_album(request, user, payload.name, payload.description, payload.color)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error() from exc


@album_router.get("")
async def list_albums_route(request: Request, user: UserRecord = Depends(require_user)):
	try:
		return await album_controller.list_albums(request, user)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error() from exc


@album_router.get("/{album_id}")
async def get_album_route(request: Request, album_id: RecordId, user: UserRecord = Depends(require_user)):
	try:
		return await album_controller.get_album(request, user, album_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error() from exc


@album_router.put("/{album_id}")
async def update_album_route(
	request: Request,
	album_id: RecordId,
	payload: GroupPayload,
	user: UserRecord = Depends(require_user),
):
	try:
		return await album_controller.update_album(
			request, user, album_id, name=payload.name, description=payload.description, color=payload.color
		)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error() from exc


@album_router.delete("/{album_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_album_route(request: Request, album_id: RecordId, user: UserRecord = Depends(require_user)):
	try:
		await album_controller.delete_album(request, user, album_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error() from exc
	return Response(status_code=status.HTTP_204_NO_CONTENT)


@collection_router.post("", status_code=status.HTTP_201_CREATED)
async def create_collection_route(request: Request, payload: GroupPayload):
	try:
		return await collection_controller.create_collection(request, payload.name, payload.description, payload.color)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error() from exc


@collection_router.get("")
async def list_collections_route(request: Request):
	try:
		return await collection_controller.list_collections(request)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error() from exc


@collection_router.get("/{collection_id}")
async def get_collection_route(request: Request, collection_id: RecordId):
	try:
		return await collection_controller.get_collection(request, collection_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error() from exc


@collection_router.put("/{collection_id}")
async def update_collection_route(request: Request, collection_id: RecordId, payload: GroupPayload):
	try:
		return await collection_controller.update_collection(
			request, collection_id, name=payload.name, description=payload.description, color=payload.color
		)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error() from exc


@collection_router.delete("/{collection_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_collection_route(request: Request, collection_id: RecordId):
	try:
		await collection_controller.delete_collection(request, collection_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise _internal_error() from exc
	return Response(status_code=status.HTTP_204_NO_CONTENT)
