# Session Store Services
from sessionstore.services.reaper import SessionReaper
from sessionstore.services.session import SessionService

__all__ = [
    "SessionReaper",
    "SessionService",
]
