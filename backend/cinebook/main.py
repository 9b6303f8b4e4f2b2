"""
Cinebook Booking API - Main Application Entry Point

A small cinema booking backend:
- Sign-in with implicit registration of unseen usernames
- Atomic booking of a screening's seats
- Cancellation of the most recent matching booking
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI

from cinebook.core.config import get_settings
from cinebook.core.logging import setup_logging, get_logger
from cinebook.core.metrics import start_metrics_server
from cinebook.api.router import api_router
from cinebook.api.middleware import PermissiveCORSMiddleware, RequestLoggingMiddleware
from cinebook.api.exception_handlers import register_exception_handlers
from cinebook.db.session import dispose_engine

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        pooled=settings.DB_POOL_ENABLED,
        auto_register=settings.AUTO_REGISTER_ON_SIGNIN,
    )

    if settings.METRICS_ENABLED:
        start_metrics_server(settings.METRICS_PORT)

    yield

    await dispose_engine()
    logger.info("application_shutdown")


# Interactive docs only in debug; paths match exactly, anything unrouted is a 404
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Cinema seat booking API with atomic booking and cancellation",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
    redirect_slashes=False,
)

app.add_middleware(PermissiveCORSMiddleware)
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

app.include_router(api_router)
