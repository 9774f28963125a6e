"""
SQLAlchemy declarative base.

All models inherit from this Base class.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.
    
    This allows SQLAlchemy to track and manage all tables together
    (alembic autogenerate and create_all both read Base.metadata).
    """
    pass
