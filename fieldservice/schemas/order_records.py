from __future__ import annotations
from datetime import datetime
from pydantic import AliasChoices, BaseModel, Field


class OrderPhotoCreate(BaseModel):
    # photo_url is what older clients send
    media_url: str | None = Field(default=None, validation_alias=AliasChoices("media_url", "photo_url"))
    photo_type: str | None = None
    media_type: str | None = None
    duration_seconds: int | None = None


class OrderPhotoRead(BaseModel):
    id: str
    order_id: str
    media_url: str
    photo_type: str
    media_type: str
    duration_seconds: int | None = None
    uploaded_at: datetime

    model_config = {"from_attributes": True}


class ReplacedPartCreate(BaseModel):
    old_part: str | None = None
    new_part: str | None = None
    part_value: float | None = Field(default=None, ge=0, allow_inf_nan=False)


class ReplacedPartRead(BaseModel):
    id: str
    order_id: str
    old_part: str
    new_part: str
    part_value: float | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class SignatureUpsert(BaseModel):
    signature_data: str | None = None


class SignatureRead(BaseModel):
    id: str
    order_id: str
    signature_data: str
    signed_at: datetime

    model_config = {"from_attributes": True}
