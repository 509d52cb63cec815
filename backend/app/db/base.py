"""
Declarative base shared by all models.
"""
from sqlalchemy import Column, DateTime, Integer, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class BaseModel(Base):
    """Abstract model with an integer primary key."""
    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)


class TimestampMixin:
    """Adds a creation timestamp filled in by the store."""
    created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)
