"""Onboarding API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map OnboardingError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and reporters initialized on startup; a misconfigured reporter aborts startup

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers extracted to api/error_handlers.py (keeps import fan-out low)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from onboarding.api.error_handlers import register_error_handlers
from onboarding.api.routes import health, users
from onboarding.config import get_settings
from onboarding.infrastructure.database import init_db
from onboarding.infrastructure.observability import setup_logging
from onboarding.infrastructure.report_dispatch import init_reporting
from onboarding.infrastructure.reporters import build_reporters

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    dispatcher = init_reporting(
        build_reporters(settings),
        timeout_seconds=settings.reporter_timeout_seconds,
        ceiling_seconds=settings.reporting_ceiling_seconds,
    )
    logger.info(
        f"Onboarding API started with reporters {settings.reporters}",
    )
    yield
    logger.info("Onboarding API shutting down")
    await dispatcher.aclose()
    await manager.dispose()


app = FastAPI(
    title="Onboarding API", version="1.0.0", lifespan=lifespan,
)

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
