"""FastAPI routes for registration and sessions."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel

from controllers.user_controller import login, logout, me, register
from models.user_record import UserRecord
from routes.dependencies import require_user
from utils.errors import Internal

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["user"])


class RegisterPayload(BaseModel):
	email: Optional[str] = None
	password: Optional[str] = None
	username: Optional[str] = None


class LoginPayload(BaseModel):
	email: Optional[str] = None
	password: Optional[str] = None


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register_route(request: Request, payload: RegisterPayload):
	try:
		return await register(request, payload.email, payload.password, payload.username)
	except HTTPException:
		raise
	except Exception as exc:
		LOGGER.exception("Registration error")
		raise Internal("Server error during registration").to_http() from exc


@router.post("/login")
async def login_route(request: Request, response: Response, payload: LoginPayload):
	try:
		return await login(request, response, payload.email, payload.password)
	except HTTPException:
		raise
	except Exception as exc:
		LOGGER.exception("Login error")
		raise Internal("Server error during login").to_http() from exc


@router.post("/logout")
async def logout_route(request: Request, response: Response):
	return logout(request, response)


@router.get("/me")
async def me_route(user: UserRecord = Depends(require_user)):
	return me(user)
