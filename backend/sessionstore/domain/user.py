"""User profile entity."""

from dataclasses import dataclass


@dataclass
class User:
    """A user profile record. ``id`` is assigned by the store on creation."""

    first: str
    last: str
    email: str
    id: int | None = None
