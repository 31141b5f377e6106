from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request

from dal.collection_dal import CollectionDAL
from models.group_records import CollectionRecord


async def create_collection(
    request: Request,
    name: Optional[str],
    description: Optional[str] = None,
    color: Optional[str] = None,
) -> Dict[str, Any]:
    if not name or not name.strip():
        raise HTTPException(status_code=400, detail="Name is required")

    collection_dal = CollectionDAL(request.app.state.db_initializer)
    collection_id = await collection_dal.create_collection(
        CollectionRecord(id=None, name=name.strip(), description=description, color=color)
    )
    return asdict(await collection_dal.get_collection(collection_id))


async def list_collections(request: Request) -> List[Dict[str, Any]]:
    collections = await CollectionDAL(request.app.state.db_initializer).list_collections()
    return [asdict(c) for c in collections]


async def get_collection(request: Request, collection_id: int) -> Dict[str, Any]:
    collection = await CollectionDAL(request.app.state.db_initializer).get_collection(collection_id)
    if collection is None:
        raise HTTPException(status_code=404, detail="Collection not found")
    return asdict(collection)


async def update_collection(
    request: Request,
    collection_id: int,
    *,
    name: Optional[str] = None,
    description: Optional[str] = None,
    color: Optional[str] = None,
) -> Dict[str, Any]:
    if name is not None and not name.strip():
        raise HTTPException(status_code=400, detail="Name must not be empty")

    updated = await CollectionDAL(request.app.state.db_initializer).update_collection(
        collection_id,
        name=name.strip() if name is not None else None,
        description=description,
        color=color,
    )
    if updated is None:
        raise HTTPException(status_code=404, detail="Collection not found")
    return asdict(updated)


async def delete_collection(request: Request, collection_id: int) -> None:
    if not await CollectionDAL(request.app.state.db_initializer).delete_collection(collection_id):
        raise HTTPException(status_code=404, detail="Collection not found")
