"""
Shared SQLAlchemy DeclarativeBase for all models.

All models MUST use this shared Base class so SQLAlchemy can resolve
string references in relationships and create every table together.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Shared declarative base for all CharForge models."""
