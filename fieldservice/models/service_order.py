"""Service order (OS) and its status vocabulary."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import String, Text, Float, Integer, ForeignKey, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from fieldservice.models.base import Base, ULIDMixin, UpdatedAtMixin, utcnow


class OrderStatus(str, enum.Enum):
    PENDING = "Pendente"
    IN_PROGRESS = "Em Andamento"
    COMPLETED = "Concluída"
    CANCELLED = "Cancelada"


class OsNumber(Base):
    """Allocation log for the human-facing OS number.

    Rows are never deleted, so AUTOINCREMENT keeps numbers from being reused
    after their order is gone.
    """

    __tablename__ = "os_numbers"
    __table_args__ = {"sqlite_autoincrement": True}

    number: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    allocated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class ServiceOrder(Base, ULIDMixin, UpdatedAtMixin):
    __tablename__ = "service_orders"

    os_number: Mapped[int] = mapped_column(Integer, unique=True, index=True)
    technician_id: Mapped[str] = mapped_column(String(26), ForeignKey("technicians.id"), index=True)
    status: Mapped[str] = mapped_column(String(20), default=OrderStatus.PENDING.value)
    client_name: Mapped[str] = mapped_column(String(200))
    location: Mapped[str] = mapped_column(String(500))
    contact_name: Mapped[str] = mapped_column(String(200))
    contact_phone: Mapped[str] = mapped_column(String(50))
    problem_description: Mapped[str] = mapped_column(Text)
    service_description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    internal_notes: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    start_datetime: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    completion_datetime: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, default=None)
    total_value: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
