"""
Shared SQLAlchemy DeclarativeBase for all models.

All models must inherit from this Base so they share one metadata registry
and DatabaseManager.create_tables() can create every table at once.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Shared declarative base for all ChatBoard models."""
