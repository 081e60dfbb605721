"""
SQLAlchemy declarative base.
Kept in its own module to avoid circular imports.
"""
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
