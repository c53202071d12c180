"""shop-near-u API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ShopNearError → structured JSON responses
    - CORS configured from settings (not hardcoded), with credentials for the
      auth cookie
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shopnear.infrastructure import database
from shopnear.infrastructure.observability import setup_logging
from shopnear.config import get_settings
from shopnear.api.error_handlers import register_error_handlers
from shopnear.api.routes import (
    catalog, health, shop_account, shop_discovery, shop_products, user_auth,
)

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
    logger.info("shop-near-u API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("shop-near-u API shutting down")


app = FastAPI(
    title="shop-near-u API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(user_auth.router)
app.include_router(shop_account.router)
app.include_router(shop_products.router)
app.include_router(shop_discovery.router)
app.include_router(catalog.router)

register_error_handlers(app)
