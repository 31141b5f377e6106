"""Startup-time selection of the process-wide storage backend."""

import logging

from services.storage.base import BaseImageStorage
from services.storage.blob_client import AzureBlobClient
from services.storage.key_vault import get_storage_connection_string
from services.storage.local_storage import LocalFileStorage
from services.storage.remote_storage import RemoteBlobStorage
from utils.app_config import AppConfig

LOGGER = logging.getLogger(__name__)


async def build_storage(config: AppConfig) -> BaseImageStorage:
    """Build the one storage backend used for the lifetime of the process.

    Remote storage is chosen when a connection string or Key Vault URL is
    configured; otherwise files go to the local upload directory.
    """
    if config.use_remote_storage:
        connection_string = await get_storage_connection_string(config)
        client = AzureBlobClient.from_connection_string(connection_string, config.blob_container_name)
        LOGGER.info("Using Azure Blob Storage container '%s'", config.blob_container_name)
        return RemoteBlobStorage(client)

    storage = LocalFileStorage(config.upload_dir)
    storage.ensure_directory()
    LOGGER.info("Using local upload directory %s", storage.base_directory)
    return storage
