"""
Base declarative class for SQLAlchemy models.

This module contains only the domain model base class.
Database connection logic lives in image_dock.core.database
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
