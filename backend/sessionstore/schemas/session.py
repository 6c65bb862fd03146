"""Pydantic schemas for the session API."""

from datetime import datetime

from pydantic import Base64Bytes, BaseModel, Field


class LoginRequest(BaseModel):
    """Request to open a session for already-verified credentials."""

    encrypted_credentials: Base64Bytes = Field(
        ..., description="Opaque encrypted credential blob, base64 encoded"
    )


class SessionResponse(BaseModel):
    """A session as seen by clients. Credentials are never echoed back."""

    session_id: int
    expires_at: datetime
    end_of_life: datetime


class MessageResponse(BaseModel):
    message: str
