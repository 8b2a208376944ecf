"""FundRaiser Donation Backend - FastAPI Application."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi_pagination import add_pagination

from src.api import register_routers
from src.core.config import get_settings
from src.core.exceptions import ErrorSeverity, FundRaiserError
from src.core.logging import configure_logging
from src.db import close_db, init_db
from src.gateway import close_payment_gateway

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Startup: Initialize database tables
    Shutdown: Close gateway client and database connections
    """
    # Startup
    await init_db()
    yield
    # Shutdown
    await close_payment_gateway()
    await close_db()


async def fundraiser_error_handler(request: Request, exc: FundRaiserError) -> JSONResponse:
    """Map domain errors to a uniform JSON error body."""
    logger.log(
        _LOG_LEVELS.get(exc.severity, logging.WARNING),
        f"{request.method} {request.url.path} -> {exc.error_code}: {exc.message}",
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error_code": exc.error_code,
            "message": exc.message,
            "details": exc.details,
        },
    )


def create_app() -> FastAPI:
    """Application factory.

    Returns:
        Configured FastAPI application instance
    """
    # Fails fast on missing configuration
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Donation platform API with SSLCommerz payments",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(FundRaiserError, fundraiser_error_handler)

    register_routers(app)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    add_pagination(app)
    return app


# Application instance
app = create_app()
