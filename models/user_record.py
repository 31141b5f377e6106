from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class UserRecord:
    """Row of the USERS table."""

    id: Optional[int]
    username: str
    email: str
    hashed_password: str
    is_active: bool = True
    created_at: Optional[int] = None

    def public_view(self) -> Dict[str, Any]:
        """Fields safe to return to clients."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "isActive": self.is_active,
        }
