"""
User model for FastAPI Users integration.

Uses SQLAlchemy 2.0 Mapped[] annotations; the base class fields (email,
hashed_password, is_active, ...) come from fastapi-users.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi_users.db import SQLAlchemyBaseUserTableUUID
from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .character import Character


def _utcnow() -> datetime:
    # Persist naive UTC
    return datetime.now(UTC).replace(tzinfo=None)


class User(SQLAlchemyBaseUserTableUUID, Base):
    """
    User model for FastAPI Users with SQLAlchemy 2.0 typing.

    Extends SQLAlchemyBaseUserTableUUID with a display name and timestamps.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(length=255), nullable=False, server_default="")

    created_at: Mapped[datetime] = mapped_column(DateTime(), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(), default=_utcnow, onupdate=_utcnow, nullable=False)

    characters: Mapped[list["Character"]] = relationship(
        "Character", back_populates="user", cascade="all, delete-orphan", lazy="select"
    )

    def __repr__(self) -> str:
        """String representation of the user."""
        return f"<User(id={self.id}, email={self.email}, is_active={self.is_active})>"
