# Session Store API
from sessionstore.api.error_handlers import register_error_handlers
from sessionstore.api.health import router as health_router
from sessionstore.api.sessions import router as sessions_router
from sessionstore.api.users import router as users_router

__all__ = [
    "health_router",
    "register_error_handlers",
    "sessions_router",
    "users_router",
]
