"""FastAPI dependency providers: capability resolution."""

from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.db.engine import get_db
from fieldservice.services import auth as auth_service
from fieldservice.services.auth import AuthContext, SESSION_COOKIE_NAME


def read_capability(request: Request) -> str | None:
    """Bearer token from the Authorization header, else the session cookie."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return request.cookies.get(SESSION_COOKIE_NAME)


async def require_auth(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> AuthContext:
    """Resolve the caller's technician for this request, or fail with 401."""
    return await auth_service.resolve(read_capability(request), db)
