"""
Character model.

A saved character: identity indices into the reference catalog, the six
ability scores, chosen proficiency and spell indices, level and max HP.
"""

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi_users_db_sqlalchemy.generics import GUID
from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .user import User


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class Character(Base):
    """Persisted character record owned by a user."""

    __tablename__ = "characters"
    __table_args__ = (
        CheckConstraint("level >= 1 AND level <= 20", name="ck_characters_level_range"),
        CheckConstraint("max_hp >= 1", name="ck_characters_max_hp_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(String(length=100), nullable=False)
    race: Mapped[str] = mapped_column(String(length=64), nullable=False)
    character_class: Mapped[str] = mapped_column(String(length=64), nullable=False)
    background: Mapped[str] = mapped_column(String(length=64), nullable=False)
    alignment: Mapped[str] = mapped_column(String(length=64), nullable=False)

    strength: Mapped[int] = mapped_column(Integer, nullable=False)
    dexterity: Mapped[int] = mapped_column(Integer, nullable=False)
    constitution: Mapped[int] = mapped_column(Integer, nullable=False)
    intelligence: Mapped[int] = mapped_column(Integer, nullable=False)
    wisdom: Mapped[int] = mapped_column(Integer, nullable=False)
    charisma: Mapped[int] = mapped_column(Integer, nullable=False)

    proficiencies: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    spells: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    max_hp: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(), default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(), default=_utcnow, onupdate=_utcnow, nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="characters")

    def get_stats(self) -> dict[str, int]:
        """Return the six ability scores keyed by ability name."""
        return {
            "strength": self.strength,
            "dexterity": self.dexterity,
            "constitution": self.constitution,
            "intelligence": self.intelligence,
            "wisdom": self.wisdom,
            "charisma": self.charisma,
        }

    def __repr__(self) -> str:
        return f"<Character(id={self.id}, name={self.name}, class={self.character_class}, level={self.level})>"
