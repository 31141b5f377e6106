"""Records for the two ways of grouping images: albums and collections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class AlbumRecord:
    """Row of the ALBUM table. Albums belong to a single owner."""

    id: Optional[int]
    owner_id: int
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    created_at: Optional[int] = None
    updated_at: Optional[int] = None


@dataclass
class CollectionRecord:
    """Row of the COLLECTION table. Collections are shared and have no owner."""

    id: Optional[int]
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    created_at: Optional[int] = None
    updated_at: Optional[int] = None
