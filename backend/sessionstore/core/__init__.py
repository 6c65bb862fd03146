# Session Store Core Module
from .config import Settings, get_settings
from .database import Base, build_engine, build_session_maker, check_db_connection
from .logging import get_logger, setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "setup_logging",
    "get_logger",
    "Base",
    "build_engine",
    "build_session_maker",
    "check_db_connection",
]
