"""User Service API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map UserServiceError → {"error": message} responses
    - CORS configured from settings (not hardcoded)
    - The connection pool is created on startup, stored on app.state, disposed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Unreachable store at startup is logged, not fatal: the health check reports 503
      and the orchestrator decides (ADR: instances come up before their database)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.routes import health, users
from app.config import get_settings
from app.core.errors import StoreUnavailableError
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db_manager = DatabaseSessionManager(
        settings.sqlalchemy_url,
        pool_size=settings.database_pool_size,
        pool_timeout=settings.database_pool_timeout,
        query_timeout=settings.database_query_timeout,
        connect_timeout=settings.database_connect_timeout,
    )
    if settings.database_create_schema:
        try:
            await db_manager.create_schema()
        except StoreUnavailableError:
            logger.warning(
                "Store unreachable at startup, schema bootstrap skipped",
                exc_info=True,
            )
    app.state.db_manager = db_manager
    logger.info("User service started")
    yield
    logger.info("User service shutting down")
    del app.state.db_manager
    await db_manager.close()


app = FastAPI(title="User Service API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(users.router)

register_error_handlers(app)
