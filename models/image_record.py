from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from models.storage_pointer import StoragePointer


@dataclass
class ImageRecord:
    """In-memory representation of a row in the IMAGE table.

    Attributes:
        id: Primary key (None for new records).
        owner_id: Id of the user who created the image; never changes.
        filename: Display name (the title until a file is uploaded).
        mime_type: MIME type of the stored bytes.
        title: Optional title.
        description: Optional free text.
        album_id: Optional album the image belongs to.
        stored_filename: Name of the file in the local upload directory.
        blob_name: Name of the blob in remote storage.
        blob_url: Public URL of the blob in remote storage.
        shot_date: Unix timestamp, refreshed on every upload.
        created_at: Unix timestamp (seconds) when the row was inserted.
    """

    id: Optional[int]
    owner_id: int
    filename: str
    mime_type: str = "image/png"
    title: Optional[str] = None
    description: Optional[str] = None
    album_id: Optional[int] = None
    stored_filename: Optional[str] = None
    blob_name: Optional[str] = None
    blob_url: Optional[str] = None
    shot_date: Optional[int] = None
    created_at: Optional[int] = None

    @property
    def storage_pointer(self) -> Optional[StoragePointer]:
        """Pointer to the stored bytes, or None before the first upload."""
        if self.blob_name and self.blob_url:
            return StoragePointer.remote(self.blob_name, self.blob_url)
        if self.stored_filename:
            return StoragePointer.local(self.stored_filename)
        return None

    def apply_pointer(self, pointer: StoragePointer) -> None:
        """Replace both pointer forms with `pointer`, clearing the other form."""
        self.stored_filename = pointer.filename
        self.blob_name = pointer.blob_name
        self.blob_url = pointer.blob_url
