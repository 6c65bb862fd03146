# Session Store Schemas
from sessionstore.schemas.session import LoginRequest, MessageResponse, SessionResponse
from sessionstore.schemas.user import UserCreate, UserResponse

__all__ = [
    "LoginRequest",
    "MessageResponse",
    "SessionResponse",
    "UserCreate",
    "UserResponse",
]
