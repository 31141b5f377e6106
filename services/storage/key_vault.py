"""Resolve the storage connection string from Key Vault or the environment."""

from __future__ import annotations

import logging

from azure.identity.aio import DefaultAzureCredential
from azure.keyvault.secrets.aio import SecretClient

from utils.app_config import AppConfig

LOGGER = logging.getLogger(__name__)

STORAGE_CONNECTION_SECRET = "STORAGE-CONNECTION-STRING"


async def fetch_secret(vault_url: str, secret_name: str) -> str:
    """Read one secret value from Azure Key Vault.

    Raises:
        RuntimeError: If the secret exists but has no value.
    """
    async with DefaultAzureCredential() as credential:
        async with SecretClient(vault_url=vault_url, credential=credential) as client:
            secret = await client.get_secret(secret_name)
    if not secret.value:
        raise RuntimeError(f"Secret {secret_name} has no value")
    return secret.value


async def get_storage_connection_string(config: AppConfig) -> str:
    """Return the Blob Storage connection string.

    Key Vault wins when `AZURE_KEY_VAULT_URL` is configured; otherwise
    `AZURE_STORAGE_CONNECTION_STRING` is used.
    """
    if not config.key_vault_url:
        LOGGER.info("Key Vault not configured, using AZURE_STORAGE_CONNECTION_STRING")
        if not config.storage_connection_string:
            raise RuntimeError("AZURE_STORAGE_CONNECTION_STRING environment variable is not set")
        return config.storage_connection_string

    try:
        return await fetch_secret(config.key_vault_url, STORAGE_CONNECTION_SECRET)
    except Exception:
        LOGGER.error("Failed to get storage connection string from Key Vault")
        raise
