"""Pydantic request/response schemas."""

from fieldservice.schemas.technician import (
    SignupRequest, LoginRequest, ProfileUpdate, TechnicianRead, AuthResponse, WhoAmIResponse,
)
from fieldservice.schemas.client import ClientCreate, ClientUpdate, ClientRead
from fieldservice.schemas.service_order import (
    ServiceOrderCreate, ServiceOrderUpdate, ServiceOrderRead, ServiceOrderStats,
)
from fieldservice.schemas.order_records import (
    OrderPhotoCreate, OrderPhotoRead,
    ReplacedPartCreate, ReplacedPartRead,
    SignatureUpsert, SignatureRead,
)
from fieldservice.schemas.report import ServiceReport

__all__ = [
    "SignupRequest", "LoginRequest", "ProfileUpdate", "TechnicianRead", "AuthResponse", "WhoAmIResponse",
    "ClientCreate", "ClientUpdate", "ClientRead",
    "ServiceOrderCreate", "ServiceOrderUpdate", "ServiceOrderRead", "ServiceOrderStats",
    "OrderPhotoCreate", "OrderPhotoRead",
    "ReplacedPartCreate", "ReplacedPartRead",
    "SignatureUpsert", "SignatureRead",
    "ServiceReport",
]
