"""
FastAPI application entry point with async lifespan management.

This module initializes the FastAPI application with:
- Structured logging with request correlation IDs
- Async database connection pool and S3 client built in the lifespan
- Permissive CORS middleware (any origin, GET/POST/OPTIONS)
- Automatic route discovery and registration
- Centralized exception handlers

Architecture:
    - Logging configured before app creation (JSON/console)
    - Lifespan context manager owns the database pool and storage client
    - Routes are auto-discovered from image_dock/routes/
    - Configuration is loaded from the environment and .env files
"""

import uuid

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from image_dock.core import register_routers, setup_logging
from image_dock.core.exceptions.handlers import register_exception_handlers
from image_dock.core.lifespan import app_lifespan
from image_dock.main_config import cors_config, fastapi_config, settings

# =============================================================================
# Setup Logging (before app creation)
# =============================================================================
setup_logging()


def create_app() -> FastAPI:
    """Build the FastAPI application with middleware, handlers and routes."""
    application = FastAPI(
        title=fastapi_config.title,
        description=fastapi_config.description,
        version=fastapi_config.version,
        docs_url=fastapi_config.docs_url,
        redoc_url=fastapi_config.redoc_url,
        openapi_url=fastapi_config.openapi_url,
        lifespan=app_lifespan,
        debug=fastapi_config.debug,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=cors_config.origins_list,
        allow_credentials=cors_config.allow_credentials,
        allow_methods=cors_config.methods_list,
        allow_headers=cors_config.headers_list,
    )

    # Adds request_id to the logging context and X-Request-ID to responses
    application.add_middleware(
        CorrelationIdMiddleware,
        header_name="X-Request-ID",
        generator=lambda: uuid.uuid4().hex[:16],
        validator=None,
        transformer=lambda x: x,
    )

    register_exception_handlers(application)
    register_routers(application)
    return application


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    # Use our structured logging config, disable uvicorn's default logging
    uvicorn.run(
        "image_dock.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        workers=settings.workers,
        log_config=None,
    )


if __name__ == "__main__":
    run()
