from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from collab_board.adapters.store.database import Base

ADMIN_CREDENTIAL_NAME = "admin"


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite stores datetimes without an offset."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Activist(Base):
    """One collaboration post on the board."""

    __tablename__ = "activists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    interest: Mapped[str] = mapped_column(Text)
    location: Mapped[str] = mapped_column(String(255))
    signal_username: Mapped[str] = mapped_column(String(64))
    alias: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    # None means the post is unprotected and can only be removed by the admin
    password_hash: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)


class AdminCredential(Base):
    """Named singleton record holding the admin password hash.

    ``version`` is bumped on every change so updates can be made
    compare-and-swap.
    """

    __tablename__ = "admin_credential"

    name: Mapped[str] = mapped_column(String(32), primary_key=True, default=ADMIN_CREDENTIAL_NAME)
    password_hash: Mapped[str] = mapped_column(String(128))
    version: Mapped[int] = mapped_column(Integer, default=1)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
