"""SQLAlchemy ORM models."""

from fieldservice.models.base import Base
from fieldservice.models.technician import Technician, TechnicianSession
from fieldservice.models.client import Client
from fieldservice.models.service_order import ServiceOrder, OsNumber, OrderStatus
from fieldservice.models.order_records import OrderPhoto, ReplacedPart, OrderSignature

__all__ = [
    "Base",
    "Technician", "TechnicianSession",
    "Client",
    "ServiceOrder", "OsNumber", "OrderStatus",
    "OrderPhoto", "ReplacedPart", "OrderSignature",
]
