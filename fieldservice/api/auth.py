"""Auth API: signup, login, logout, current technician profile."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.db import crud
from fieldservice.db.engine import get_db
from fieldservice.dependencies import require_auth, read_capability
from fieldservice.errors import InvalidCapability
from fieldservice.schemas import (
    SignupRequest, LoginRequest, ProfileUpdate, AuthResponse, TechnicianRead, WhoAmIResponse,
)
from fieldservice.services import auth as auth_service
from fieldservice.services.auth import AuthContext, AuthResult, SESSION_COOKIE_NAME, SESSION_MAX_AGE_DAYS

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(result: AuthResult, status_code: int = 200) -> JSONResponse:
    body = AuthResponse(
        technician=TechnicianRead.model_validate(result.technician),
        token=result.token,
    )
    response = JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))
    response.set_cookie(
        SESSION_COOKIE_NAME, result.token,
        httponly=True, samesite="lax",
        max_age=86400 * SESSION_MAX_AGE_DAYS,
    )
    return response


@router.post("/signup", status_code=201, response_model=AuthResponse)
async def signup(
    body: SignupRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    ip = request.client.host if request.client else ""
    result = await auth_service.register(db, body.email, body.password, body.name, ip_address=ip)
    return _auth_response(result, status_code=201)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    ip = request.client.host if request.client else ""
    result = await auth_service.authenticate(db, body.email, body.password, ip_address=ip)
    return _auth_response(result)


@router.post("/logout")
async def logout(
    request: Request,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await auth_service.revoke(read_capability(request), db)
    response = JSONResponse(content={"ok": True})
    response.delete_cookie(SESSION_COOKIE_NAME)
    return response


@router.get("/me", response_model=WhoAmIResponse)
async def get_me(
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    tech = await crud.get_technician(db, auth.technician_id)
    if not tech:
        raise InvalidCapability()
    return {"technician": tech}


@router.put("/me", response_model=WhoAmIResponse)
async def update_me(
    body: ProfileUpdate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    tech = await auth_service.update_profile(db, auth, **body.model_dump(exclude_unset=True))
    return {"technician": tech}
