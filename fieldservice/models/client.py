"""Client directory contact."""

from __future__ import annotations

from sqlalchemy import String, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from fieldservice.models.base import Base, ULIDMixin, UpdatedAtMixin


class Client(Base, ULIDMixin, UpdatedAtMixin):
    __tablename__ = "clients"

    name: Mapped[str] = mapped_column(String(200), index=True)
    phone: Mapped[str] = mapped_column(String(50))
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, default=None)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True, default=None)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True, default=None)
    state: Mapped[str | None] = mapped_column(String(50), nullable=True, default=None)
    zip_code: Mapped[str | None] = mapped_column(String(20), nullable=True, default=None)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    created_by: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("technicians.id", ondelete="SET NULL"), nullable=True
    )
