"""Central router that includes all sub-routers."""

from fastapi import APIRouter

from fieldservice.api.health import router as health_router
from fieldservice.api.auth import router as auth_router
from fieldservice.api.service_orders import router as service_orders_router
from fieldservice.api.order_records import router as order_records_router
from fieldservice.api.reports import router as reports_router
from fieldservice.api.clients import router as clients_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(auth_router)
api_router.include_router(service_orders_router)
api_router.include_router(order_records_router)
api_router.include_router(reports_router)
api_router.include_router(clients_router)
