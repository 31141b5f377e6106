"""Collision-resistant names for stored uploads."""

import re
import secrets
import time
from pathlib import PurePath
from typing import Optional

_EXTENSION_RE = re.compile(r"^\.[A-Za-z0-9]{1,10}$")


def storage_extension(original_filename: Optional[str]) -> str:
    """Return the sanitized extension (with leading dot) of `original_filename`, or ''."""
    if not original_filename:
        return ""
    suffix = PurePath(original_filename.replace("\\", "/")).suffix
    return suffix.lower() if _EXTENSION_RE.match(suffix) else ""


def generate_storage_name(original_filename: Optional[str]) -> str:
    """Build `<epoch millis>-<random below 1e9><extension>`.

    Example: `generate_storage_name("sunset.PNG")` -> `1718000000000-482913377.png`
    """
    timestamp = int(time.time() * 1000)
    suffix = secrets.randbelow(1_000_000_000)
    return f"{timestamp}-{suffix}{storage_extension(original_filename)}"
