"""
SQLAlchemy models.

There is exactly one table: ``user_manuals``. Soft deletion is a column
(``deleted_at``), not a separate table, so every query has to decide
explicitly whether deleted rows are in scope (see services/store.py).
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from manual_api.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserManual(Base):
    """A catalogued user manual: title, serial number, description, video."""

    __tablename__ = "user_manuals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(1000), nullable=False)
    serial_number: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    video_link: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    # Non-null = soft-deleted. The row stays in the table.
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )

    def __repr__(self) -> str:
        return f"<UserManual(id={self.id}, title={self.title!r})>"
