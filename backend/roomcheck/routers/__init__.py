"""API Routers for RoomCheck."""

from roomcheck.routers.auth import router as auth_router
from roomcheck.routers.homes import router as homes_router
from roomcheck.routers.rooms import router as rooms_router
from roomcheck.routers.inspections import router as inspections_router
from roomcheck.routers.tenant import router as tenant_router

__all__ = [
    "auth_router",
    "homes_router",
    "rooms_router",
    "inspections_router",
    "tenant_router",
]
