from mt5platform.web.routers.accounts import router as accounts_router
from mt5platform.web.routers.auth import router as auth_router
from mt5platform.web.routers.health import router as health_router
from mt5platform.web.routers.users import router as users_router

__all__ = [
    "accounts_router",
    "auth_router",
    "health_router",
    "users_router",
]
