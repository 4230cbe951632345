"""
Store Counter API - Main Application.

FastAPI application with CORS enabled for the counter front end.

The StoreCounter is built from the persistent store when the application
starts and flushed back to it on shutdown.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import __version__
from api.dependencies import get_counter
from repositories.settings import load_settings
from repositories.store import build_store
from services.counter_service import StoreCounter

logger = logging.getLogger(__name__)


def create_app(counter: Optional[StoreCounter] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        counter: Pre-built StoreCounter (tests). When omitted, one is opened
            from the configured store at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "counter", None) is None:
            settings = load_settings()
            app.state.counter = StoreCounter.open(build_store(settings), tz=settings.timezone)
        yield
        if not app.state.counter.flush():
            logger.warning("Shutdown flush incomplete; some data may not have been persisted")

    app = FastAPI(
        title="Store Counter API",
        description="Point-of-sale counter: record sales, undo, and view daily/weekly/monthly totals",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.counter = counter

    # Single-operator tool served to a local front end
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["Health"])
    def health_check(counter: StoreCounter = Depends(get_counter)):
        """
        Health check endpoint.

        Returns the API status, version and whether storage is degraded
        (in-memory only because no storage medium accepted the last write).
        """
        return {
            "status": "healthy",
            "version": __version__,
            "service": "store-counter-api",
            "storage": "degraded" if counter.state.persistence_degraded else "ok",
        }

    @app.get("/", tags=["Root"])
    def root():
        """
        Root endpoint with API information.
        """
        return {
            "message": "Store Counter API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health"
        }

    # Import and include routers
    from api.routers import backup, products, sales, stats

    app.include_router(products.router, prefix="/api/v1", tags=["Products"])
    app.include_router(sales.router, prefix="/api/v1", tags=["Sales"])
    app.include_router(stats.router, prefix="/api/v1", tags=["Stats"])
    app.include_router(backup.router, prefix="/api/v1", tags=["Backup"])

    return app


app = create_app()
