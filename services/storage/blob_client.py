"""Azure Blob Storage client.

Wraps an async `BlobServiceClient` bound to one container. The container
is created on first use, with public read access to its blobs, so the
returned blob URLs can be served directly to browsers.

Public class: `AzureBlobClient`

Example:
    client = AzureBlobClient.from_connection_string(conn_str, "images")
    url, name = await client.upload_bytes(data, "1718000000000-42.png", "image/png")
    await client.close()
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Tuple

from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient, ContainerClient

LOGGER = logging.getLogger(__name__)


class AzureBlobClient:
    """Upload, delete and probe blobs in a single container.

    Args:
        service_client: Async Blob service client owning the HTTP pipeline.
        container_name: Container that holds every uploaded image.
    """

    def __init__(self, service_client: BlobServiceClient, container_name: str) -> None:
        self._service = service_client
        self.container_name = container_name
        self._container: Optional[ContainerClient] = None
        self._container_lock = asyncio.Lock()

    @classmethod
    def from_connection_string(cls, connection_string: str, container_name: str) -> "AzureBlobClient":
        return cls(BlobServiceClient.from_connection_string(connection_string), container_name)

    async def ensure_container(self) -> ContainerClient:
        """Return the container client, creating the container if it is absent."""
        if self._container is not None:
            return self._container

        async with self._container_lock:
            if self._container is None:
                container = self._service.get_container_client(self.container_name)
                if not await container.exists():
                    try:
                        await container.create_container(public_access="blob")
                        LOGGER.info("Container '%s' created", self.container_name)
                    except ResourceExistsError:
                        # Another process created it between exists() and create.
                        pass
                self._container = container
        return self._container

    async def upload_bytes(self, data: bytes, proposed_name: str, mime_type: str) -> Tuple[str, str]:
        """Upload `data` and return `(url, actual_name)`."""
        container = await self.ensure_container()
        blob = container.get_blob_client(proposed_name)
        await blob.upload_blob(
            data,
            overwrite=True,
            content_settings=ContentSettings(content_type=mime_type),
        )
        LOGGER.info("Blob '%s' uploaded (%d bytes)", proposed_name, len(data))
        return blob.url, proposed_name

    async def delete_by_name(self, name: str) -> bool:
        """Delete a blob. Returns False if it did not exist."""
        container = await self.ensure_container()
        try:
            await container.delete_blob(name)
        except ResourceNotFoundError:
            LOGGER.warning("Blob '%s' does not exist", name)
            return False
        LOGGER.info("Blob '%s' deleted successfully", name)
        return True

    async def exists_by_name(self, name: str) -> bool:
        container = await self.ensure_container()
        return await container.get_blob_client(name).exists()

    async def close(self) -> None:
        await self._service.close()
