"""FastAPI application factory"""

import logging
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from customer_sync.api.middleware import RequestIDMiddleware, MetricsMiddleware
from customer_sync.api.v1 import customers, sources
from customer_sync.domain.hooks import Hooks, SOURCE_DELETED, DEFAULT_SOURCE_SET
from customer_sync.infrastructure.observability.logging import setup_logging
from customer_sync.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def build_hooks() -> Hooks:
    """Default subscribers for lifecycle events"""
    hooks = Hooks()
    hooks.subscribe(
        SOURCE_DELETED,
        lambda customer_id, response: logging.info(
            "Payment source deleted",
            extra={"customer_id": customer_id, "source_id": response.get("id"), "step": "source_deleted"},
        ),
    )
    hooks.subscribe(
        DEFAULT_SOURCE_SET,
        lambda customer_id, response: logging.info(
            "Default payment source updated",
            extra={
                "customer_id": customer_id,
                "source_id": response.get("default_source"),
                "step": "default_source_set",
            },
        ),
    )
    return hooks


def create_app(hooks: Hooks | None = None) -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Customer Sync",
        description="Links local accounts to payment-processor customers and their saved sources",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.hooks = hooks or build_hooks()

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(customers.router, prefix="/v1", tags=["customers"])
    app.include_router(sources.router, prefix="/v1", tags=["sources"])

    return app


app = create_app()
