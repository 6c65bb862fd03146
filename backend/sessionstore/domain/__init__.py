# Session Store Domain
from sessionstore.domain.errors import NotFoundError, SessionStoreError, StorageUnavailableError
from sessionstore.domain.session import ID_MAX, Clock, Session, is_valid_id, utcnow
from sessionstore.domain.user import User

__all__ = [
    "ID_MAX",
    "Clock",
    "NotFoundError",
    "Session",
    "SessionStoreError",
    "StorageUnavailableError",
    "User",
    "is_valid_id",
    "utcnow",
]
