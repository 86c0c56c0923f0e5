"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from rule37_service.api.middleware import RequestIDMiddleware, MetricsMiddleware
from rule37_service.api.v1 import calculation
from rule37_service.infrastructure.observability.logging import setup_logging
from rule37_service.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Rule 37 ITC Reversal Service",
        description="GST 180-day ITC reversal and interest calculation",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(calculation.router, prefix="/v1", tags=["rule37"])

    return app


app = create_app()
