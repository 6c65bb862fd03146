"""Session entity and its two expiry clocks."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

Clock = Callable[[], datetime]

# Ids are SERIAL (int4) in the database; anything larger cannot name a record
ID_MAX = 2**31 - 1


def is_valid_id(value: int) -> bool:
    """True if ``value`` can be a store-assigned id."""
    return 0 < value <= ID_MAX


def utcnow() -> datetime:
    """Default clock: the current time, timezone-aware in UTC."""
    return datetime.now(UTC)


@dataclass
class Session:
    """A server-side record of one authenticated login.

    ``expires_at`` is the idle clock and moves forward on refresh.
    ``end_of_life`` is the absolute ceiling fixed at creation; it bounds the
    session's lifetime no matter how often it is refreshed.
    """

    encrypted_credentials: bytes
    expires_at: datetime
    end_of_life: datetime
    id: int | None = None

    @classmethod
    def new(
        cls,
        encrypted_credentials: bytes,
        idle_timeout: timedelta,
        max_lifetime: timedelta,
        now: datetime | None = None,
    ) -> "Session":
        """Build an unsaved session starting at ``now``."""
        now = now or utcnow()
        return cls(
            encrypted_credentials=encrypted_credentials,
            expires_at=now + idle_timeout,
            end_of_life=now + max_lifetime,
        )

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    def is_reclaimable(self, now: datetime) -> bool:
        """True once either clock has passed."""
        return now >= self.expires_at or now >= self.end_of_life

    def __repr__(self) -> str:
        # Credentials are opaque and stay out of logs
        return (
            f"<Session id={self.id} expires_at={self.expires_at.isoformat()} "
            f"end_of_life={self.end_of_life.isoformat()}>"
        )
