"""Relational implementation of the session and user stores (SQLAlchemy).

This module is the only place where database exceptions are seen. A missing
row becomes ``NotFoundError``; everything else the driver or SQLAlchemy
raises becomes ``StorageUnavailableError`` with the original as its cause.
Ids outside the column range are answered without a query, since the
driver cannot bind them.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import delete, insert, or_, select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import NoResultFound, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sessionstore.core.logging import get_logger
from sessionstore.domain import (
    Clock,
    NotFoundError,
    Session,
    StorageUnavailableError,
    User,
    is_valid_id,
    utcnow,
)
from sessionstore.models import SessionRecord, UserRecord
from sessionstore.stores.base import SessionStore, UserStore

logger = get_logger("stores.sql")


def _as_utc(value: datetime) -> datetime:
    """Normalize to UTC; naive values (SQLite returns these) are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class _SQLStore:
    """Shared transaction handling for the SQL stores."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        """One short transaction per operation, committed on success.

        ``NotFoundError`` raised inside the block passes through untouched.
        """
        try:
            async with self._session_maker.begin() as db:
                yield db
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"{operation} failed: {e}")
            raise StorageUnavailableError(f"{operation} failed: {e}") from e


class SQLSessionStore(_SQLStore, SessionStore):
    """Session store backed by the ``sessions`` table."""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        clock: Clock = utcnow,
    ):
        super().__init__(session_maker)
        self._clock = clock

    async def save(self, session: Session) -> Session:
        async with self._transaction("save session") as db:
            result = await db.execute(
                insert(SessionRecord)
                .values(
                    encrypted_credentials=session.encrypted_credentials,
                    expires_at=_as_utc(session.expires_at),
                    end_of_life=_as_utc(session.end_of_life),
                )
                .returning(SessionRecord.id)
            )
            new_id = result.scalar_one()
        session.id = new_id
        return session

    async def load(self, session_id: int) -> Session:
        if not is_valid_id(session_id):
            raise NotFoundError("session", session_id)
        async with self._transaction("load session") as db:
            result = await db.execute(
                select(
                    SessionRecord.id,
                    SessionRecord.encrypted_credentials,
                    SessionRecord.expires_at,
                    SessionRecord.end_of_life,
                ).where(SessionRecord.id == session_id)
            )
            try:
                row = result.one()
            except NoResultFound:
                raise NotFoundError("session", session_id) from None
        return Session(
            id=row.id,
            encrypted_credentials=bytes(row.encrypted_credentials),
            expires_at=_as_utc(row.expires_at),
            end_of_life=_as_utc(row.end_of_life),
        )

    async def terminate(self, session_id: int) -> None:
        if not is_valid_id(session_id):
            return
        async with self._transaction("terminate session") as db:
            await db.execute(
                delete(SessionRecord)
                .where(SessionRecord.id == session_id)
                .execution_options(synchronize_session=False)
            )

    async def extend(self, session_id: int, duration: timedelta) -> None:
        if not is_valid_id(session_id):
            return
        async with self._transaction("extend session") as db:
            await db.execute(
                update(SessionRecord)
                .where(SessionRecord.id == session_id)
                .values(expires_at=_as_utc(self._clock() + duration))
                .execution_options(synchronize_session=False)
            )

    async def sweep_expired(self) -> int:
        now = _as_utc(self._clock())
        async with self._transaction("sweep expired sessions") as db:
            result: CursorResult[Any] = await db.execute(  # type: ignore[assignment]
                delete(SessionRecord)
                .where(or_(SessionRecord.expires_at <= now, SessionRecord.end_of_life <= now))
                .execution_options(synchronize_session=False)
            )
            removed = result.rowcount
        return removed


class SQLUserStore(_SQLStore, UserStore):
    """User store backed by the ``users`` table."""

    async def create(self, user: User) -> User:
        async with self._transaction("create user") as db:
            result = await db.execute(
                insert(UserRecord)
                .values(first=user.first, last=user.last, email=user.email)
                .returning(UserRecord.id)
            )
            new_id = result.scalar_one()
        user.id = new_id
        return user

    async def get_by_id(self, user_id: int) -> User:
        if not is_valid_id(user_id):
            raise NotFoundError("user", user_id)
        return await self._get_one("user", user_id, UserRecord.id == user_id)

    async def get_by_email(self, email: str) -> User:
        return await self._get_one("user", email, UserRecord.email == email)

    async def delete(self, user_id: int) -> None:
        if not is_valid_id(user_id):
            return
        async with self._transaction("delete user") as db:
            await db.execute(
                delete(UserRecord)
                .where(UserRecord.id == user_id)
                .execution_options(synchronize_session=False)
            )

    async def _get_one(self, kind: str, key: object, criterion: Any) -> User:
        async with self._transaction(f"load {kind}") as db:
            result = await db.execute(
                select(UserRecord.id, UserRecord.first, UserRecord.last, UserRecord.email)
                .where(criterion)
                .order_by(UserRecord.id)
                .limit(1)
            )
            try:
                row = result.one()
            except NoResultFound:
                raise NotFoundError(kind, key) from None
        return User(id=row.id, first=row.first, last=row.last, email=row.email)
