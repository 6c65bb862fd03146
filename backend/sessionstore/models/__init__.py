# Session Store Models
from sessionstore.models.session import SessionRecord
from sessionstore.models.user import UserRecord

__all__ = [
    "SessionRecord",
    "UserRecord",
]
