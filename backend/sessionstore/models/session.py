"""Login session table."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, LargeBinary
from sqlalchemy.orm import Mapped, mapped_column

from sessionstore.core.database import Base


class SessionRecord(Base):
    """A persisted login session.

    Rows are removed on logout or by the reaper once either timestamp passes.
    """

    __tablename__ = "sessions"
    # Never reuse identifiers of deleted rows on SQLite
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    encrypted_credentials: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    end_of_life: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )

    def __repr__(self) -> str:
        return f"<SessionRecord {self.id}>"
