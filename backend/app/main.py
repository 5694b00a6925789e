"""Legal Admin API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery — ExMA anti-pattern)
    - Module registry built and frozen at import, before the first request
    - Global error handlers map LegalError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Three error handler layers (api/error_handlers.py): LegalError (domain),
      RequestValidationError (Pydantic), Exception (catch-all) — never leaks internal details
    - Schema creation and seeding opt-in via settings: production schemas are
      managed outside the app
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.routes import command, health, public, query
from app.config import get_settings
from app.infrastructure import database
from app.infrastructure.observability import setup_logging
from app.infrastructure.seeding import seed_database
from app.modules.bootstrap import build_registry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_auto_create:
        await database.db_manager.create_schema()
    if settings.seed_files:
        await seed_database(database.db_manager.engine, settings.seed_files)
    logger.info("Legal Admin API started")
    yield
    logger.info("Legal Admin API shutting down")
    await database.db_manager.dispose()


app = FastAPI(
    title="Legal Admin API", version="1.0.0", lifespan=lifespan,
)

# Registry — explicit registration tables, frozen before serving
app.state.registry = build_registry()

# CORS — configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — explicit registration (ExMA: no convention-over-config)
app.include_router(health.router)
app.include_router(command.router)
app.include_router(query.router)
app.include_router(public.router)

register_error_handlers(app)
