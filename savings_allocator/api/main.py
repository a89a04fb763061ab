"""FastAPI application factory"""

import threading
from typing import Optional

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from savings_allocator.api.middleware import RequestIDMiddleware, MetricsMiddleware
from savings_allocator.api.v1 import accounts, allocation, catalog, preferences, ranking
from savings_allocator.config import settings
from savings_allocator.domain.catalog import Catalog
from savings_allocator.infrastructure.catalog_file import load_catalog
from savings_allocator.infrastructure.database.session import init_db
from savings_allocator.infrastructure.observability.logging import setup_logging

# Setup structured logging
setup_logging(settings.log_level)


def create_app(account_catalog: Optional[Catalog] = None, create_tables: bool = True) -> FastAPI:
    """
    Create and configure FastAPI application.

    The catalog is loaded once here and stays read-only for the process
    lifetime; pass one explicitly to serve a different set of tiers.
    """
    app = FastAPI(
        title="Savings Allocator",
        description="Rank high-yield savings accounts and spread cash across their caps",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    if create_tables:
        init_db()

    app.state.catalog = account_catalog if account_catalog is not None else load_catalog(settings.catalog_path)
    app.state.allocator = None
    app.state.allocator_lock = threading.Lock()

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name, "tiers": len(app.state.catalog)}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(catalog.router, prefix="/v1", tags=["catalog"])
    app.include_router(ranking.router, prefix="/v1", tags=["ranking"])
    app.include_router(allocation.router, prefix="/v1", tags=["allocation"])
    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])
    app.include_router(preferences.router, prefix="/v1", tags=["preferences"])

    return app


app = create_app()
