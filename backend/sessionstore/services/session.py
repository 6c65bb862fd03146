"""Session service - login, logout and refresh on top of a SessionStore."""

from datetime import timedelta

from sessionstore.core.logging import get_logger
from sessionstore.domain import Clock, NotFoundError, Session, utcnow
from sessionstore.stores.base import SessionStore

logger = get_logger("services.session")


class SessionService:
    """Storage-agnostic session operations for the transport layer.

    Holds no state of its own; every call goes to the store.
    """

    def __init__(
        self,
        store: SessionStore,
        idle_timeout: timedelta,
        max_lifetime: timedelta,
        clock: Clock = utcnow,
    ):
        self.store = store
        self.idle_timeout = idle_timeout
        self.max_lifetime = max_lifetime
        self._clock = clock

    async def login(
        self,
        encrypted_credentials: bytes,
        idle_timeout: timedelta | None = None,
        max_lifetime: timedelta | None = None,
    ) -> Session:
        """Persist a new session for already-verified credentials."""
        session = Session.new(
            encrypted_credentials,
            idle_timeout=self.idle_timeout if idle_timeout is None else idle_timeout,
            max_lifetime=self.max_lifetime if max_lifetime is None else max_lifetime,
            now=self._clock(),
        )
        await self.store.save(session)
        logger.info(f"Session {session.id} created", extra={"session_id": session.id})
        return session

    async def logout(self, session_id: int) -> None:
        await self.store.terminate(session_id)
        logger.info(f"Session {session_id} terminated", extra={"session_id": session_id})

    async def refresh(self, session_id: int, duration: timedelta | None = None) -> None:
        await self.store.extend(session_id, self.idle_timeout if duration is None else duration)

    async def validate(self, session_id: int) -> Session:
        """Load a session that is still live.

        A session past either clock but not yet swept is treated as absent.

        Raises:
            NotFoundError: the session does not exist or is reclaimable.
        """
        session = await self.store.load(session_id)
        if session.is_reclaimable(self._clock()):
            raise NotFoundError("session", session_id)
        return session
