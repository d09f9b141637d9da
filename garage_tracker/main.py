"""
FastAPI Application Entry Point

This module builds the FastAPI application and configures:
- API routes
- Middleware (logging, CORS)
- Exception handlers (domain errors -> JSON error bodies)
- Application-scoped components: database, password hasher, token codec

create_app() takes an explicit Settings object so tests (or several
instances in one process) can run with their own database and secret.
The module-level ``app`` uses the environment-derived settings and is
what uvicorn serves:

    uvicorn garage_tracker.main:app
"""

import logging
from datetime import timedelta
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from garage_tracker.api import endpoints
from garage_tracker.api.errors import register_exception_handlers
from garage_tracker.core.logging_config import setup_logging
from garage_tracker.core.passwords import PasswordHasher
from garage_tracker.core.rate_limit import limiter
from garage_tracker.core.setting import DEFAULT_JWT_SECRET, Settings, settings
from garage_tracker.core.tokens import SessionTokenCodec
from garage_tracker.db.session import Database
from garage_tracker.middleware.logging import add_logging_middleware

logger = logging.getLogger(__name__)


def build_token_codec(app_settings: Settings) -> SessionTokenCodec:
    expires_in = None
    if app_settings.ACCESS_TOKEN_EXPIRE_MINUTES:
        expires_in = timedelta(minutes=app_settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    return SessionTokenCodec(
        secret=app_settings.JWT_SECRET,
        algorithm=app_settings.JWT_ALGORITHM,
        expires_in=expires_in,
    )


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure a FastAPI application.

    Args:
        app_settings: Configuration to use; defaults to the settings read
            from the environment. RATE_LIMIT_ENABLED is honoured; the
            RATE_LIMIT_* limit strings always come from the environment

    Raises:
        RuntimeError: If running in production with the default JWT secret
    """
    app_settings = app_settings or settings
    setup_logging(app_settings.LOG_LEVEL)

    if app_settings.JWT_SECRET == DEFAULT_JWT_SECRET:
        if app_settings.is_production:
            raise RuntimeError("JWT_SECRET must be set in production")
        logger.warning("Using the default JWT secret; set JWT_SECRET outside development")

    app = FastAPI(
        title=app_settings.PROJECT_NAME,
        description="Multi-tenant vehicle service record keeper for garages",
        version=app_settings.VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = app_settings
    app.state.database = Database(app_settings.DATABASE_URL)
    app.state.password_hasher = PasswordHasher()
    app.state.token_codec = build_token_codec(app_settings)

    # Only the on/off switch is per app; limit strings are fixed at import (core/rate_limit.py)
    limiter.enabled = app_settings.RATE_LIMIT_ENABLED
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    register_exception_handlers(app)

    add_logging_middleware(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint for health checks."""
        return {
            "message": app_settings.PROJECT_NAME,
            "version": app_settings.VERSION,
            "docs": "/docs"
        }

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint for monitoring; verifies database connectivity."""
        database: Database = request.app.state.database
        try:
            async with database.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"Health check failed: {e}")
            return JSONResponse(status_code=503, content={"status": "unhealthy"})
        return {"status": "healthy"}

    app.include_router(endpoints.router)

    @app.on_event("startup")
    async def startup_event():
        """Create missing tables so a fresh SQLite file works without migrations."""
        await app.state.database.create_tables()

    @app.on_event("shutdown")
    async def shutdown_event():
        """Release pooled connections."""
        await app.state.database.dispose()

    return app


app = create_app()
