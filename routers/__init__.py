# routers/__init__.py

from .auth import router as auth_router
from .access import router as access_router
from .dashboard import router as dashboard_router
from .members import router as members_router
from .roles import router as roles_router
from .health import router as health_router

__all__ = [
    "auth_router",
    "access_router",
    "dashboard_router",
    "members_router",
    "roles_router",
    "health_router",
]
