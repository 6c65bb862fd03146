"""User profile table."""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from sessionstore.core.database import Base


class UserRecord(Base):
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first: Mapped[str] = mapped_column(Text, nullable=False)
    last: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<UserRecord {self.email}>"
