import os
import logging
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI
import uvicorn
from contextlib import asynccontextmanager

from app.core.exceptions import (
    RelayError,
    general_exception_handler,
    relay_exception_handler,
)
from app.core.middleware import (
    RateLimitMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from app.presentation.api.v1.routers import health
from app.presentation.api.v1.routers import image
from app.presentation.api.v1.routers import search
from app.core.config import settings


# Configure logging: both to console and to file
log_dir = os.path.dirname(settings.log_file)
if log_dir:
    os.makedirs(log_dir, exist_ok=True)
log_handlers = [
    logging.StreamHandler(),
    RotatingFileHandler(
        settings.log_file, maxBytes=5 * 1024 * 1024, backupCount=2, encoding="utf-8"
    ),
]
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format=settings.log_format,
    datefmt=settings.log_date_format,
    handlers=log_handlers,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    logger.info("Starting %s...", settings.api_title)
    if not settings.search_configured:
        logger.error("URL not set in environment or .env file; search is disabled")
    logger.info(
        "Allowed image domains: %s (timeout=%.1fs, retries=%d)",
        ", ".join(settings.allowed_domains),
        settings.upstream_timeout,
        settings.upstream_retry_attempts,
    )
    yield
    logger.info("Shutting down %s...", settings.api_title)


def create_application() -> FastAPI:
    """Create and configure FastAPI application"""

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Add custom middleware
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        calls=settings.rate_limit_calls,
        period=settings.rate_limit_period,
    )

    # Add exception handlers
    app.add_exception_handler(RelayError, relay_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(health.router)
    app.include_router(search.router)
    app.include_router(image.router)

    return app


# Create application instance
app = create_application()

if __name__ == "__main__":
    dev_mode = os.getenv("DEV_MODE", "false").lower() == "true"
    uvicorn.run(
        "app.presentation.main:app",
        host=settings.host,
        port=settings.port,
        reload=dev_mode,
    )
