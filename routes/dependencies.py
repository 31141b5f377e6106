"""Request-scoped dependencies shared by the routers."""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Path, Request

from dal.user_dal import UserDAL
from models.user_record import UserRecord
from services.auth_service import TOKEN_COOKIE, AuthService

SQLITE_MAX_INTEGER = 2**63 - 1

# Ids outside the SQLite INTEGER range are rejected as validation errors (400).
RecordId = Annotated[int, Path(ge=1, le=SQLITE_MAX_INTEGER)]


def parse_token(request: Request) -> Optional[str]:
    """Return the bearer token from the Authorization header, else the `token` cookie."""
    auth_header = request.headers.get("authorization")
    if auth_header and auth_header.lower().startswith("bearer "):
        token = auth_header[7:].strip()
        if token:
            return token
    return request.cookies.get(TOKEN_COOKIE) or None


def get_auth_service(request: Request) -> AuthService:
    auth_service = getattr(request.app.state, "auth_service", None)
    if auth_service is None:
        raise HTTPException(status_code=500, detail="Auth service not initialized.")
    return auth_service


async def get_optional_user(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
) -> Optional[UserRecord]:
    """Resolve the caller, or None when no valid credential is present."""
    token = parse_token(request)
    if token is None:
        return None

    user_id = auth_service.verify_token(token)
    if user_id is None:
        return None

    user = await UserDAL(request.app.state.db_initializer).get_user_by_id(user_id)
    if user is None or not user.is_active:
        return None
    return user


async def require_user(user: Optional[UserRecord] = Depends(get_optional_user)) -> UserRecord:
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user
