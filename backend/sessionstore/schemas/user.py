"""Pydantic schemas for the user API."""

from pydantic import BaseModel, ConfigDict, Field


class UserCreate(BaseModel):
    """Request to create a user."""

    first: str = Field(..., min_length=1, max_length=255)
    last: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first: str
    last: str
    email: str
