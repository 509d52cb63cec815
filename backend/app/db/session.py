"""
Database session management.
"""
import logging
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.db.base import Base

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> Engine:
    """Create the engine for ``settings.DATABASE_URL``."""
    if settings.DATABASE_URL.startswith("sqlite"):
        # One shared connection so an in-memory database survives across threads
        return create_engine(
            settings.DATABASE_URL,
            echo=settings.DB_ECHO,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool
        )
    return create_engine(
        settings.DATABASE_URL,
        echo=settings.DB_ECHO,
        pool_pre_ping=True,
        pool_recycle=3600
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def check_connection(engine: Engine) -> None:
    """Round-trip to the store; raises if it cannot be reached."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info(f"Database connection OK ({engine.url.get_backend_name()})")


def get_db(request: Request) -> Iterator[Session]:
    """Dependency for getting database session."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        # Anything left uncommitted is rolled back on close
        db.close()


def init_db(engine: Engine) -> None:
    """Initialize database tables."""
    import app.models  # noqa: F401  (registers every model on Base.metadata)
    Base.metadata.create_all(bind=engine)
