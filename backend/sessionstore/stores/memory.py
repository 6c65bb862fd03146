"""In-process implementations of the stores, for tests and local runs.

Records are copied on the way in and out so callers never share state with
the store. No operation awaits while touching the dicts, so each one is
atomic with respect to other coroutines on the same event loop.
"""

import itertools
from dataclasses import replace
from datetime import timedelta

from sessionstore.domain import Clock, NotFoundError, Session, User, utcnow
from sessionstore.stores.base import SessionStore, UserStore


class InMemorySessionStore(SessionStore):
    def __init__(self, clock: Clock = utcnow):
        self._clock = clock
        self._sessions: dict[int, Session] = {}
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._sessions)

    async def save(self, session: Session) -> Session:
        session.id = next(self._ids)
        self._sessions[session.id] = replace(session)
        return session

    async def load(self, session_id: int) -> Session:
        try:
            return replace(self._sessions[session_id])
        except KeyError:
            raise NotFoundError("session", session_id) from None

    async def terminate(self, session_id: int) -> None:
        self._sessions.pop(session_id, None)

    async def extend(self, session_id: int, duration: timedelta) -> None:
        stored = self._sessions.get(session_id)
        if stored is not None:
            stored.expires_at = self._clock() + duration

    async def sweep_expired(self) -> int:
        now = self._clock()
        expired = [sid for sid, s in self._sessions.items() if s.is_reclaimable(now)]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)


class InMemoryUserStore(UserStore):
    def __init__(self):
        self._users: dict[int, User] = {}
        self._ids = itertools.count(1)

    async def create(self, user: User) -> User:
        user.id = next(self._ids)
        self._users[user.id] = replace(user)
        return user

    async def get_by_id(self, user_id: int) -> User:
        try:
            return replace(self._users[user_id])
        except KeyError:
            raise NotFoundError("user", user_id) from None

    async def get_by_email(self, email: str) -> User:
        for user in self._users.values():
            if user.email == email:
                return replace(user)
        raise NotFoundError("user", email)

    async def delete(self, user_id: int) -> None:
        self._users.pop(user_id, None)
