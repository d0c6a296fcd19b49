"""API router initialization."""

from fastapi import APIRouter
from loguru import logger

from bus_system.api.buses import router as buses_router
from bus_system.api.categories import router as categories_router
from bus_system.api.menu_items import router as menu_items_router

# Create main API router
router = APIRouter()

# Mount API endpoints
router.include_router(buses_router, tags=["buses"])
router.include_router(categories_router, tags=["categories"])
router.include_router(menu_items_router, tags=["menu-items"])

logger.debug("API router initialized (buses, categories, menu-items routers mounted)")
