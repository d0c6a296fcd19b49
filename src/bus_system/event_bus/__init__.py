"""In-process Event Bus for cross-service consistency.

This package provides the publish/subscribe mechanism that keeps independently
owned stores consistent, e.g. removing a bus's menu when the bus is deleted.
It supports:

- **Pydantic Event Models**: Immutable integration events with id and timestamp
- **Class-based Handlers**: One ``async handle(event)`` per handler type
- **Scoped Resolution**: Handlers are resolved fresh from the ServiceRegistry per publish
- **Sequential Dispatch**: Handlers run in registration order, one at a time
- **Error Isolation**: Handler failures are logged and never reach the publisher

## Quick Start

```python
from bus_system.event_bus import EventBus, EventHandler, IntegrationEvent
from bus_system.services.registry import ServiceRegistry

class BusRetiredEvent(IntegrationEvent):
    bus_id: int

class ArchiveMenuHandler(EventHandler[BusRetiredEvent]):
    async def handle(self, event: BusRetiredEvent) -> None:
        print(f"Archiving menu of bus {event.bus_id}")

registry = ServiceRegistry()
registry.register_scoped(ArchiveMenuHandler, lambda scope: ArchiveMenuHandler())

bus = EventBus(registry)
bus.subscribe(BusRetiredEvent, ArchiveMenuHandler)
await bus.publish(BusRetiredEvent(bus_id=1))
```

Producers and consumers are wired together only by the event type; neither
holds a reference to the other.

"""

from .bus import EventBus, get_event_bus
from .core import EventBusError, EventEmissionError, EventHandler, HandlerRegistrationError, IntegrationEvent

__all__ = [
    "EventBus",
    "EventBusError",
    "EventEmissionError",
    "EventHandler",
    "HandlerRegistrationError",
    "IntegrationEvent",
    "get_event_bus",
]
