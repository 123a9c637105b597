"""SQLAlchemy ORM models for CharForge."""

from .base import Base
from .character import Character
from .user import User

__all__ = ["Base", "Character", "User"]
