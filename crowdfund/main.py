"""Crowdfund Ledger API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CrowdfundError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and ledger runtime initialized and hydrated on startup via lifespan

Design Decisions:
    - Lifespan over @app.on_event: cleaner startup/shutdown pairing
    - Runtime hydrated before the first request: queries never see a half-loaded ledger
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crowdfund.api.error_handlers import register_error_handlers
from crowdfund.api.routes import accounts, events, health, projects
from crowdfund.config import get_settings
from crowdfund.infrastructure.database import init_db
from crowdfund.infrastructure.observability import setup_logging
from crowdfund.services.ledger_runtime import init_runtime

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
    if settings.database_auto_create:
        await manager.create_schema()
    runtime = init_runtime(settings)
    async with manager.session() as db:
        await runtime.hydrate(db)
    logger.info(
        f"Crowdfund ledger started (fee {settings.fee_rate}/{settings.fee_scale_factor})",
    )
    yield
    await manager.dispose()
    logger.info("Crowdfund ledger shutting down")


app = FastAPI(
    title="Crowdfund Escrow Ledger", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(projects.router)
app.include_router(events.router)
app.include_router(accounts.router)

register_error_handlers(app)
