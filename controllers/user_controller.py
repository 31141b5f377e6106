"""Registration, login and session helpers."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, Response

from dal.user_dal import DuplicateEmailError, UserDAL
from models.user_record import UserRecord
from services.auth_service import TOKEN_COOKIE, AuthService

LOGGER = logging.getLogger(__name__)


async def register(
    request: Request,
    email: Optional[str],
    password: Optional[str],
    username: Optional[str],
) -> Dict[str, Any]:
    """Create an active user with an argon2-hashed password."""
    if not email or not password or not username:
        raise HTTPException(status_code=400, detail="Email, password, and username are required")

    auth_service: AuthService = request.app.state.auth_service
    user_dal = UserDAL(request.app.state.db_initializer)

    email = email.strip().lower()
    if await user_dal.get_user_by_email(email) is not None:
        raise HTTPException(status_code=400, detail="User with this email already exists")

    record = UserRecord(
        id=None,
        username=username.strip(),
        email=email,
        hashed_password=auth_service.hash_password(password),
    )
    try:
        user_id = await user_dal.create_user(record)
    except DuplicateEmailError as exc:
        raise HTTPException(status_code=400, detail="User with this email already exists") from exc

    LOGGER.info("Registered user %s", user_id)
    return {"success": True, "result": "User registered successfully"}


async def login(
    request: Request,
    response: Response,
    email: Optional[str],
    password: Optional[str],
) -> Dict[str, Any]:
    """Verify credentials, set the `token` cookie and return the token."""
    if not email or not password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    auth_service: AuthService = request.app.state.auth_service
    user = await UserDAL(request.app.state.db_initializer).get_user_by_email(email.strip().lower())
    if user is None or not auth_service.verify_password(user.hashed_password, password):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is inactive")

    token = auth_service.issue_token(user.id)
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        max_age=auth_service.token_ttl_seconds,
        httponly=True,
        secure=request.app.state.config.cookie_secure,
        samesite="lax",
    )
    return {"success": True, "result": "Authenticated", "token": token, "user": user.public_view()}


def logout(request: Request, response: Response) -> Dict[str, Any]:
    response.delete_cookie(
        TOKEN_COOKIE,
        httponly=True,
        secure=request.app.state.config.cookie_secure,
        samesite="lax",
    )
    return {"success": True, "result": "Logged out"}


def me(user: UserRecord) -> Dict[str, Any]:
    return {"success": True, "user": user.public_view()}
