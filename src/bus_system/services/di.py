"""Dependency injection setup module.

This module provides centralized service registration for both the FastAPI
server and the CLI.
"""

from loguru import logger

from bus_system.database import borrow_db_session
from bus_system.event_bus import EventBus, get_event_bus
from bus_system.events.menu_handlers import BusDeletedEventHandler
from bus_system.services.bus_service import BusService, get_bus_service
from bus_system.services.category_service import CategoryService, get_category_service
from bus_system.services.menu_item_service import MenuItemService, get_menu_item_service
from bus_system.services.registry import ServiceRegistry


def register_core_services(registry: ServiceRegistry) -> None:
    """Register core services in the service registry.

    Args:
        registry: Service registry instance to register services in
    """
    logger.debug("Registering core services in DI container")

    registry.register_factory(EventBus, get_event_bus)


def register_app_services(registry: ServiceRegistry) -> None:
    """Register application-specific services in the service registry.

    Application services are registered as factories because their
    get_*_service() functions already provide singleton behavior via @lru_cache.

    Args:
        registry: Service registry instance to register services in
    """
    logger.debug("Registering application services in DI container")

    registry.register_factory(BusService, get_bus_service)
    registry.register_factory(CategoryService, get_category_service)
    registry.register_factory(MenuItemService, get_menu_item_service)


def register_event_handler_services(registry: ServiceRegistry) -> None:
    """Register event handlers as scoped services.

    A handler instance is created once per publish scope and never reused
    across events. Each handler opens its own database session per event.

    Args:
        registry: Service registry instance to register services in
    """
    logger.debug("Registering event handler services in DI container")

    registry.register_scoped(BusDeletedEventHandler, lambda scope: BusDeletedEventHandler(session_factory=borrow_db_session))


def register_all_services(registry: ServiceRegistry) -> None:
    """Register all services in the service registry.

    Args:
        registry: Service registry instance to register services in
    """
    register_core_services(registry)
    register_app_services(registry)
    register_event_handler_services(registry)
