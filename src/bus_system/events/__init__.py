"""Integration events and their handlers.

This module provides the event types exchanged between the bus and menu
sides of the system, and the startup wiring that subscribes handlers.
"""

from loguru import logger

from bus_system.event_bus import EventBus, get_event_bus
from bus_system.events.menu_handlers import BusDeletedEventHandler
from bus_system.events.types import BusCreatedEvent, BusDeletedEvent, BusUpdatedEvent, CategoryDeletedEvent

__all__ = [
    "BusCreatedEvent",
    "BusDeletedEvent",
    "BusDeletedEventHandler",
    "BusUpdatedEvent",
    "CategoryDeletedEvent",
    "register_event_handlers",
]


def register_event_handlers(event_bus: EventBus | None = None) -> None:
    """Subscribe handlers to the events they react to.

    Handler types must also be registered in the ServiceRegistry (see
    ``services.di.register_event_handler_services``) so they can be resolved
    when an event is published.

    Args:
        event_bus: Event bus to subscribe on. Defaults to the global event bus.
    """
    logger.debug("Registering event handlers in event bus")

    event_bus = event_bus if event_bus is not None else get_event_bus()

    # Menu cleanup when a bus is removed
    event_bus.subscribe(BusDeletedEvent, BusDeletedEventHandler)

    logger.info("Event handlers registered successfully")
