from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel


class SignupRequest(BaseModel):
    email: str | None = None
    password: str | None = None
    name: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class ProfileUpdate(BaseModel):
    name: str | None = None
    phone: str | None = None


class TechnicianRead(BaseModel):
    id: str
    email: str
    name: str
    phone: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    technician: TechnicianRead
    token: str


class WhoAmIResponse(BaseModel):
    technician: TechnicianRead
