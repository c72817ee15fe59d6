"""FastAPI application for the template service."""

import logging

from fastapi import FastAPI
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from template_service import __version__
from template_service.api.middleware import (
    AccessLogMiddleware,
    RealIPMiddleware,
    RecoveryMiddleware,
    RequestIDMiddleware,
    WriteErrorMiddleware,
)
from template_service.api.routes import docs_router, metrics_router, root_router
from template_service.context import AppContext

logger = logging.getLogger(__name__)

# Paths kept out of request tracing
UNTRACED_URLS = "metrics,docs"


def create_app(context: AppContext) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        context: Application context built at startup.

    Returns:
        Configured FastAPI application instance.
    """
    settings = context.settings

    app = FastAPI(
        title=settings.otel_service_name,
        description="Template service with OpenTelemetry tracing and metrics",
        version=__version__,
        # /docs is served by docs_router
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.context = context

    # Include root router
    # Provides: GET / - Hello World
    app.include_router(root_router)

    # Include metrics router
    # Provides: GET /metrics - Prometheus exposition
    app.include_router(metrics_router)

    # Include documentation router
    # Provides:
    # - GET /docs - Redirect to /docs/index.html
    # - GET /docs/index.html - Swagger UI
    # - GET /docs/doc.json - OpenAPI document
    app.include_router(docs_router)

    # Middleware runs in reverse order of registration: the write guard
    # first, recovery closest to the handlers
    app.add_middleware(RecoveryMiddleware, logger=context.logger)
    app.add_middleware(AccessLogMiddleware, logger=context.logger)
    app.add_middleware(RealIPMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(WriteErrorMiddleware, logger=context.logger)

    _instrument_fastapi(app, context)

    return app


def _instrument_fastapi(app: FastAPI, context: AppContext) -> None:
    """Wrap request handling in server spans from the service's tracer provider."""
    telemetry = context.telemetry
    try:
        FastAPIInstrumentor.instrument_app(
            app,
            tracer_provider=telemetry.tracer_provider if telemetry else None,
            meter_provider=telemetry.meter_provider if telemetry else None,
            excluded_urls=UNTRACED_URLS,
        )
        logger.debug("FastAPI instrumentation enabled")
    except Exception as e:
        logger.warning("Failed to instrument FastAPI: %s", e)
