"""Password hashing and session tokens.

Passwords are hashed with argon2. Tokens are HS256 JWTs that carry the
user id and expire after the configured TTL.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

LOGGER = logging.getLogger(__name__)

_ALGORITHM = "HS256"
TOKEN_COOKIE = "token"


class AuthService:
    """Hash/verify passwords and issue/verify tokens.

    Args:
        secret: HMAC secret used to sign tokens.
        token_ttl_seconds: Lifetime of issued tokens.
    """

    def __init__(self, secret: str, token_ttl_seconds: int) -> None:
        self._secret = secret
        self.token_ttl_seconds = token_ttl_seconds
        self._hasher = PasswordHasher()

    def hash_password(self, password: str) -> str:
        return self._hasher.hash(password)

    def verify_password(self, hashed_password: str, password: str) -> bool:
        try:
            return self._hasher.verify(hashed_password, password)
        except (VerificationError, InvalidHashError):
            return False

    def issue_token(self, user_id: int) -> str:
        now = int(time.time())
        payload = {"userId": user_id, "iat": now, "exp": now + self.token_ttl_seconds}
        return jwt.encode(payload, self._secret, algorithm=_ALGORITHM)

    def verify_token(self, token: str) -> Optional[int]:
        """Return the user id carried by `token`, or None if it is invalid or expired."""
        try:
            payload = jwt.decode(token, self._secret, algorithms=[_ALGORITHM])
        except jwt.PyJWTError as exc:
            LOGGER.info("Token verification failed: %s", exc)
            return None
        user_id = payload.get("userId")
        return user_id if isinstance(user_id, int) else None
