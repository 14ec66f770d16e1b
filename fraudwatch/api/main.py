"""FastAPI application factory"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from fraudwatch.api.middleware import RequestIDMiddleware, MetricsMiddleware
from fraudwatch.api.v1 import analyze, live, transactions
from fraudwatch.api.v1.analyze import INVALID_TRANSACTION
from fraudwatch.infrastructure.feed.live_engine import LiveTransactionEngine
from fraudwatch.infrastructure.observability.logging import setup_logging
from fraudwatch.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def build_live_engine() -> LiveTransactionEngine:
    """Live feed configured from settings"""
    return LiveTransactionEngine(
        initial_size=settings.live_feed_initial_size,
        min_interval=settings.live_feed_min_interval_seconds,
        max_interval=settings.live_feed_max_interval_seconds,
    )


def create_app(live_engine: Optional[LiveTransactionEngine] = None) -> FastAPI:
    """Create and configure FastAPI application"""
    engine = live_engine or build_live_engine()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.live_feed_enabled:
            await engine.start()
        try:
            yield
        finally:
            await engine.stop()

    app = FastAPI(
        title="Fraudwatch",
        description="Transaction fraud risk scoring and live monitoring service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.live_engine = engine

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Malformed transactions are a 400, other validation failures keep FastAPI's 422
    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        if request.url.path.endswith("/analyze-transaction"):
            return JSONResponse(status_code=400, content=INVALID_TRANSACTION)
        return await request_validation_exception_handler(request, exc)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(analyze.router, prefix="/v1", tags=["analysis"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(live.router, prefix="/v1", tags=["live"])

    return app


app = create_app()
