from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

LOCAL = "local"
REMOTE = "remote"


@dataclass(frozen=True)
class StoragePointer:
    """Location of an image's stored bytes.

    Exactly one form is populated: `filename` for the local backend, or
    `blob_name` plus `blob_url` for remote object storage.
    """

    filename: Optional[str] = None
    blob_name: Optional[str] = None
    blob_url: Optional[str] = None

    def __post_init__(self) -> None:
        local = self.filename is not None
        remote = self.blob_name is not None or self.blob_url is not None
        if local == remote:
            raise ValueError("A storage pointer holds either a local filename or a blob name and URL.")
        if remote and not (self.blob_name and self.blob_url):
            raise ValueError("A remote storage pointer needs both blob_name and blob_url.")

    @classmethod
    def local(cls, filename: str) -> "StoragePointer":
        return cls(filename=filename)

    @classmethod
    def remote(cls, blob_name: str, blob_url: str) -> "StoragePointer":
        return cls(blob_name=blob_name, blob_url=blob_url)

    @property
    def kind(self) -> str:
        return REMOTE if self.blob_name else LOCAL

    @property
    def name(self) -> str:
        """The backend-specific object name (file name or blob name)."""
        return self.blob_name or self.filename or ""
