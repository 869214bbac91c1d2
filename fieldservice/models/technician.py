"""Technician identity and the session capabilities issued to it."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from fieldservice.models.base import Base, ULIDMixin, UpdatedAtMixin


class Technician(Base, ULIDMixin, UpdatedAtMixin):
    __tablename__ = "technicians"

    # Stored lower-cased, so the unique index is case-insensitive in practice
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    name: Mapped[str] = mapped_column(String(200), default="Técnico")
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True, default=None)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class TechnicianSession(Base, ULIDMixin):
    __tablename__ = "technician_sessions"

    technician_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("technicians.id", ondelete="CASCADE"), index=True
    )
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    ip_address: Mapped[str] = mapped_column(String(45), default="")
