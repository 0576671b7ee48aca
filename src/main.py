"""FastAPI application entrypoint for orchestration-service.

Patterns applied:
- asynccontextmanager lifespan (modern FastAPI pattern, not deprecated @app.on_event)
- configure_logging() called ONCE in lifespan startup
- Model invoker and Orchestrator built once and kept on app.state
- Health endpoints for K8s probes (/health, /health/ready)
- Docs disabled in production
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from src import __version__
from src.api.error_handlers import register_exception_handlers
from src.api.routes.health import router as health_router
from src.api.routes.jobs import router as jobs_router
from src.core.config import Settings, get_settings
from src.core.exceptions import ConfigurationError
from src.core.logging import configure_logging, get_logger
from src.observability.tracing import (
    TracingMiddleware,
    setup_tracing,
    shutdown_tracing,
)
from src.orchestration.orchestrator import Orchestrator
from src.providers.factory import InvokerFactory


# =============================================================================
# Application Metadata
# =============================================================================
APP_NAME = "orchestration-service"
APP_DESCRIPTION = "Multi-model inference orchestration with consensus and cooperative merge"

# Probes stay out of traces
TRACING_EXCLUDE_PATHS = ["/health", "/health/ready"]


# =============================================================================
# Lifespan Context Manager (Modern FastAPI Pattern)
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown events.

    Logging is configured ONCE here. A missing model endpoint does not
    stop startup: the service comes up not-ready and /health/ready
    reports 503.

    Args:
        app: FastAPI application instance.

    Yields:
        None after startup, before shutdown.
    """
    # =========================================================================
    # STARTUP
    # =========================================================================
    settings: Settings = getattr(app.state, "settings", None) or get_settings()

    configure_logging(level=settings.log_level)
    logger = get_logger(__name__)

    logger.info(
        "Application starting",
        service=APP_NAME,
        version=__version__,
        environment=settings.environment,
        port=settings.port,
        default_strategy=settings.default_strategy,
    )

    if settings.tracing_enabled:
        setup_tracing(
            service_name=settings.service_name,
            otlp_endpoint=settings.otlp_endpoint,
        )

    app.state.environment = settings.environment
    app.state.service_name = settings.service_name

    if getattr(app.state, "orchestrator", None) is None:
        try:
            invoker = InvokerFactory.create_invoker(settings)
        except ConfigurationError as e:
            logger.error("Model invoker not configured", error=e.message)
            app.state.orchestrator = None
        else:
            app.state.orchestrator = Orchestrator(
                invoker=invoker,
                max_concurrency=settings.max_concurrency,
            )
            logger.info(
                "Model invoker ready",
                invoker=invoker.name,
                max_concurrency=settings.max_concurrency,
            )

    app.state.initialized = True

    yield

    # =========================================================================
    # SHUTDOWN
    # =========================================================================
    logger.info("Application shutting down", service=APP_NAME)

    orchestrator: Orchestrator | None = getattr(app.state, "orchestrator", None)
    if orchestrator is not None:
        await orchestrator.invoker.aclose()
    app.state.orchestrator = None

    if settings.tracing_enabled:
        shutdown_tracing()

    app.state.initialized = False


# =============================================================================
# Application Factory
# =============================================================================
def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings to use. Defaults to get_settings().

    Returns:
        Configured FastAPI application.
    """
    settings = settings or get_settings()

    application = FastAPI(
        title=APP_NAME,
        description=APP_DESCRIPTION,
        version=__version__,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
        openapi_url="/openapi.json" if settings.environment != "production" else None,
        lifespan=lifespan,
    )
    application.state.settings = settings
    application.state.orchestrator = None

    if settings.tracing_enabled:
        application.add_middleware(
            TracingMiddleware,
            exclude_paths=TRACING_EXCLUDE_PATHS,
        )

    # =========================================================================
    # Register Routers
    # =========================================================================
    application.include_router(health_router)
    application.include_router(jobs_router)

    # =========================================================================
    # Register Exception Handlers
    # =========================================================================
    register_exception_handlers(application)

    return application


app = create_app()


def main() -> None:
    """Run the service with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
