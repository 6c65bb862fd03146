"""Persistence contracts for sessions and users.

Implementations raise only ``NotFoundError`` and ``StorageUnavailableError``
and must be safe to call concurrently without external locking.
"""

from abc import ABC, abstractmethod
from datetime import timedelta

from sessionstore.domain import Session, User


class SessionStore(ABC):
    """Storage for login sessions."""

    @abstractmethod
    async def save(self, session: Session) -> Session:
        """Insert ``session`` and set its ``id`` to the store-assigned value.

        Any ``id`` already present is overwritten. Returns the same object.
        """

    @abstractmethod
    async def load(self, session_id: int) -> Session:
        """Return the session with ``session_id``.

        Raises:
            NotFoundError: no session has this id.
        """

    @abstractmethod
    async def terminate(self, session_id: int) -> None:
        """Delete the session. Unknown ids are not an error."""

    @abstractmethod
    async def extend(self, session_id: int, duration: timedelta) -> None:
        """Move ``expires_at`` to now + ``duration``, now taken by the store.

        ``end_of_life`` is never touched. Unknown ids are a silent no-op.
        """

    @abstractmethod
    async def sweep_expired(self) -> int:
        """Delete every session past either clock; return how many were removed."""


class UserStore(ABC):
    """Storage for user profiles."""

    @abstractmethod
    async def create(self, user: User) -> User:
        """Insert ``user`` and set its ``id``. Returns the same object."""

    @abstractmethod
    async def get_by_id(self, user_id: int) -> User:
        """Raises NotFoundError when absent."""

    @abstractmethod
    async def get_by_email(self, email: str) -> User:
        """Raises NotFoundError when absent."""

    @abstractmethod
    async def delete(self, user_id: int) -> None:
        """Delete the user. Unknown ids are not an error."""
