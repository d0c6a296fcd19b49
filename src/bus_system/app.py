"""Main FastAPI application module."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from bus_system import __version__
from bus_system.api.api_router import router as api_router
from bus_system.api.health_check import router as health_router
from bus_system.database import create_all_tables, dispose_db
from bus_system.event_bus import get_event_bus
from bus_system.events import register_event_handlers
from bus_system.exception_handlers import register_exception_handlers
from bus_system.logging import setup_logging, setup_sqlalchemy_logging
from bus_system.services.di import register_all_services
from bus_system.services.registry import get_service_registry
from bus_system.settings import Settings, get_settings


def _log_server_endpoints_summary(settings: Settings) -> None:
    """Log the server URL and the main endpoints."""
    server_url = f"http://{settings.host}:{settings.port}"
    logger.info(f"Server running at: {server_url}")

    endpoints = [
        ("Ping", "/ping"),
        ("Health Check", "/health-check"),
        ("REST API", "/api"),
        ("OpenAPI Schema", "/openapi.json"),
        ("API Docs", "/docs"),
    ]
    logger.info("Available endpoints:")
    for name, path in endpoints:
        logger.info(f"   {name}: {server_url}{path}")


def initialize_services(settings: Settings) -> None:
    """Configure logging, register services and subscribe event handlers.

    Shared by the server lifespan and the CLI.

    Args:
        settings: Application settings
    """
    setup_logging(log_level=settings.log_level)
    if settings.sql_log:
        setup_sqlalchemy_logging()

    logger.info("Registering services in the service registry")
    register_all_services(get_service_registry())
    register_event_handlers(get_event_bus())


@asynccontextmanager
async def app_lifespan(_app: FastAPI):
    """Handle startup and shutdown events for the main application."""
    settings = get_settings()
    _app.state.settings = settings  # type: ignore[attr-defined]

    initialize_services(settings)

    if settings.create_tables:
        create_all_tables()

    _log_server_endpoints_summary(settings)

    yield

    logger.info("Bus system server shutting down")

    # Shutdown event bus
    get_event_bus().shutdown()

    # Dispose database connections
    dispose_db()


app = FastAPI(
    lifespan=app_lifespan,
    title="Bus system server",
    description="Buses, menus and the integration events that keep them consistent",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, replace with specific origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(health_router, prefix="")
app.include_router(api_router, prefix="/api")
