"""Tests for service registration and injection."""

from bus_system.event_bus import EventBus, get_event_bus
from bus_system.events import BusDeletedEventHandler
from bus_system.services.bus_service import BusService, get_bus_service
from bus_system.services.category_service import CategoryService
from bus_system.services.di import register_all_services
from bus_system.services.menu_item_service import MenuItemService
from bus_system.services.registry import ServiceRegistry


def test_register_all_services(registry: ServiceRegistry):
    register_all_services(registry)

    assert registry.get(EventBus) is get_event_bus()
    assert registry.get(BusService) is get_bus_service()
    assert isinstance(registry.get(CategoryService), CategoryService)
    assert isinstance(registry.get(MenuItemService), MenuItemService)


def test_event_handlers_are_scoped(registry: ServiceRegistry):
    register_all_services(registry)

    assert registry.is_scoped(BusDeletedEventHandler)
    with registry.create_scope() as first, registry.create_scope() as second:
        handler = first.get(BusDeletedEventHandler)
        assert handler is first.get(BusDeletedEventHandler)
        assert handler is not second.get(BusDeletedEventHandler)


def test_services_default_to_global_event_bus():
    assert BusService().event_bus is get_event_bus()
    assert CategoryService(bus_service=BusService()).event_bus is get_event_bus()


def test_services_accept_custom_event_bus(event_bus: EventBus):
    service = BusService(event_bus=event_bus)
    assert service.event_bus is event_bus
