"""Async repositories over the SQLAlchemy models."""

from .character_repository import CharacterRepository

__all__ = ["CharacterRepository"]
