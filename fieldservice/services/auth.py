"""Identity store: technician signup/login, bcrypt passwords, DB-backed capabilities."""

from __future__ import annotations

import hashlib
import logging
import re
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone, timedelta

import bcrypt
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.config import get_settings
from fieldservice.db import crud
from fieldservice.errors import (
    DuplicateIdentity, InvalidCapability, InvalidCredential, ValidationError, WeakCredential,
)
from fieldservice.models import Technician, TechnicianSession

logger = logging.getLogger(__name__)

_settings = get_settings()

SESSION_COOKIE_NAME = _settings.auth.cookie_name
SESSION_MAX_AGE_DAYS = _settings.auth.session_max_age_days

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass
class AuthContext:
    technician_id: str
    email: str
    name: str
    phone: str | None = None


@dataclass
class AuthResult:
    technician: Technician
    token: str


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


_DUMMY_HASH = hash_password(secrets.token_urlsafe(16))


def _hash_token(token: str) -> str:
    """SHA-256 hash of a capability token for DB storage."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def normalize_email(email: str | None) -> str:
    value = (email or "").strip().lower()
    if not value:
        raise ValidationError("Email and password are required")
    if not EMAIL_RE.match(value):
        raise ValidationError("Invalid email")
    return value


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def context_for(tech: Technician) -> AuthContext:
    return AuthContext(technician_id=tech.id, email=tech.email, name=tech.name, phone=tech.phone)


async def issue_capability(tech: Technician, db: AsyncSession, ip_address: str = "") -> str:
    """Create a DB-backed session. Returns the raw token (not the hash)."""
    token = secrets.token_urlsafe(48)
    session = TechnicianSession(
        technician_id=tech.id,
        token_hash=_hash_token(token),
        expires_at=datetime.now(timezone.utc) + timedelta(days=SESSION_MAX_AGE_DAYS),
        ip_address=ip_address,
    )
    db.add(session)
    await db.commit()
    return token


async def register(
    db: AsyncSession,
    email: str | None,
    password: str | None,
    name: str | None = None,
    ip_address: str = "",
) -> AuthResult:
    """Create a technician and sign them in."""
    email = normalize_email(email)
    if not password:
        raise ValidationError("Email and password are required")
    if len(password) < _settings.auth.min_password_length:
        raise WeakCredential(
            f"Password must be at least {_settings.auth.min_password_length} characters"
        )

    if await crud.get_technician_by_email(db, email):
        raise DuplicateIdentity()

    try:
        tech = await crud.create_technician(
            db,
            email=email,
            password_hash=hash_password(password),
            name=(name or "").strip() or "Técnico",
        )
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email
        await db.rollback()
        raise DuplicateIdentity()

    token = await issue_capability(tech, db, ip_address=ip_address)
    logger.info("Technician registered: %s", tech.id)
    return AuthResult(technician=tech, token=token)


async def authenticate(
    db: AsyncSession, email: str | None, password: str | None, ip_address: str = "",
) -> AuthResult:
    if not email or not password:
        raise ValidationError("Email and password are required")

    tech = await crud.get_technician_by_email(db, email.strip().lower())
    if not tech:
        # Spend the same bcrypt time as a wrong password would
        verify_password(password, _DUMMY_HASH)
        raise InvalidCredential()
    if not verify_password(password, tech.password_hash):
        raise InvalidCredential()

    token = await issue_capability(tech, db, ip_address=ip_address)
    tech = await crud.update_technician(db, tech, last_login_at=datetime.now(timezone.utc))
    return AuthResult(technician=tech, token=token)


async def resolve(token: str | None, db: AsyncSession) -> AuthContext:
    """Map a capability back to its technician, sliding the expiry forward."""
    if not token:
        raise InvalidCapability()

    result = await db.execute(
        select(TechnicianSession).where(TechnicianSession.token_hash == _hash_token(token))
    )
    session = result.scalars().first()
    now = datetime.now(timezone.utc)
    if not session or _as_utc(session.expires_at) <= now:
        raise InvalidCapability("Session expired")

    tech = await crud.get_technician(db, session.technician_id)
    if not tech:
        raise InvalidCapability()

    session.expires_at = now + timedelta(days=SESSION_MAX_AGE_DAYS)
    await db.commit()
    return context_for(tech)


async def revoke(token: str, db: AsyncSession) -> None:
    """Delete a session by token."""
    await db.execute(
        delete(TechnicianSession).where(TechnicianSession.token_hash == _hash_token(token))
    )
    await db.commit()


async def update_profile(db: AsyncSession, auth: AuthContext, **changes) -> Technician:
    tech = await crud.get_technician(db, auth.technician_id)
    if not tech:
        raise InvalidCapability()
    if "name" in changes:
        name = (changes["name"] or "").strip()
        if not name:
            raise ValidationError("Name cannot be empty")
        changes["name"] = name
    return await crud.update_technician(db, tech, **changes)
