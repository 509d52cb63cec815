"""
FastAPI entrypoint for the Gift Book backend application.

Usage:
    uvicorn app.main:app --app-dir backend
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import Settings, settings
from app.core.exceptions import (
    GiftBookError,
    describe_storage_error,
    giftbook_exception_handler,
    request_validation_exception_handler,
    storage_exception_handler,
)
from app.core.security import SessionVerifier
from app.db.session import build_engine, build_session_factory, check_connection
from app.api.router import api_router
from app.api.routes import health

logger = logging.getLogger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build an application bound to ``app_settings`` (the environment by default)."""
    app_settings = app_settings or settings

    logging.basicConfig(
        level=logging.DEBUG if app_settings.DEBUG else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    engine = build_engine(app_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {app_settings.APP_NAME} API")
        try:
            check_connection(engine)
        except SQLAlchemyError as e:
            # Without the store nothing can be served
            logger.error(f"Database connection failed: {describe_storage_error(e)}")
            raise

        yield

        logger.info(f"Shutting down {app_settings.APP_NAME} API")
        engine.dispose()

    app = FastAPI(
        title=f"{app_settings.APP_NAME} API",
        description="Backend API for recording monetary gifts received for an event",
        version="1.0.0",
        lifespan=lifespan
    )

    app.state.settings = app_settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.session_verifier = SessionVerifier(app_settings.SECRET_KEY, app_settings.ALGORITHM)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(GiftBookError, giftbook_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, storage_exception_handler)

    # Include API routes
    app.include_router(api_router, prefix="/api")
    app.include_router(health.router)

    return app


app = create_app()
