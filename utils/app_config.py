"""Application configuration read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
DEFAULT_TOKEN_TTL_SECONDS = 7 * 24 * 60 * 60


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_optional(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


@dataclass(frozen=True)
class AppConfig:
    """Static settings fixed for the lifetime of the process.

    Attributes:
        jwt_secret: Secret used to sign and verify session tokens.
        token_ttl_seconds: Lifetime of issued tokens.
        upload_dir: Directory used by the local storage backend.
        max_upload_bytes: Largest accepted upload payload.
        storage_connection_string: Azure Storage connection string, if set.
        key_vault_url: Azure Key Vault URL, if set.
        blob_container_name: Container that receives uploaded blobs.
        cookie_secure: Whether the `token` cookie is marked Secure.
    """

    jwt_secret: str
    token_ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS
    upload_dir: Path = Path("uploads")
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    storage_connection_string: Optional[str] = None
    key_vault_url: Optional[str] = None
    blob_container_name: str = "images"
    cookie_secure: bool = False

    @property
    def use_remote_storage(self) -> bool:
        """True when any remote-storage configuration is present."""
        return bool(self.storage_connection_string or self.key_vault_url)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build the configuration from the process environment.

        Raises:
            RuntimeError: If a required variable is missing or malformed.
        """
        jwt_secret = _env_optional("JWT_SECRET")
        if jwt_secret is None:
            raise RuntimeError("JWT_SECRET environment variable is not set")

        try:
            token_ttl = int(os.getenv("TOKEN_TTL_SECONDS", str(DEFAULT_TOKEN_TTL_SECONDS)))
            max_upload = int(os.getenv("MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES)))
        except ValueError as exc:
            raise RuntimeError("TOKEN_TTL_SECONDS and MAX_UPLOAD_BYTES must be integers") from exc

        upload_dir = Path(os.getenv("UPLOAD_DIR") or "uploads").expanduser()
        if not upload_dir.is_absolute():
            upload_dir = Path.cwd() / upload_dir

        return cls(
            jwt_secret=jwt_secret,
            token_ttl_seconds=token_ttl,
            upload_dir=upload_dir,
            max_upload_bytes=max_upload,
            storage_connection_string=_env_optional("AZURE_STORAGE_CONNECTION_STRING"),
            key_vault_url=_env_optional("AZURE_KEY_VAULT_URL"),
            blob_container_name=_env_optional("AZURE_BLOB_CONTAINER_NAME") or "images",
            cookie_secure=_env_flag("COOKIE_SECURE"),
        )
