"""Records that only exist under a service order: media, replaced parts, signature."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Text, Float, Integer, ForeignKey, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from fieldservice.models.base import Base, ULIDMixin, utcnow


class OrderPhoto(Base, ULIDMixin):
    __tablename__ = "order_photos"

    order_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("service_orders.id", ondelete="CASCADE"), index=True
    )
    media_url: Mapped[str] = mapped_column(Text)
    photo_type: Mapped[str] = mapped_column(String(20))  # problem | solution
    media_type: Mapped[str] = mapped_column(String(10), default="image")  # image | video
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True, default=None)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class ReplacedPart(Base, ULIDMixin):
    __tablename__ = "order_parts_replaced"

    order_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("service_orders.id", ondelete="CASCADE"), index=True
    )
    old_part: Mapped[str] = mapped_column(String(500))
    new_part: Mapped[str] = mapped_column(String(500))
    part_value: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)


class OrderSignature(Base, ULIDMixin):
    __tablename__ = "order_signatures"

    order_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("service_orders.id", ondelete="CASCADE"), unique=True
    )
    signature_data: Mapped[str] = mapped_column(Text)  # data: URL of the drawn PNG
    signed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
