"""Event Bus Implementation.

This module provides the main EventBus class that handles handler
registration and event publication.

## Key Features

- **Scoped Handler Resolution**: Handler instances are resolved fresh from a
  ``ServiceScope`` on every publish; all handlers of one publish share one scope
- **Sequential Dispatch**: Handlers run one after another in registration order
- **Error Isolation**: A failing handler is logged and skipped, never blocking
  its siblings or the publisher
- **Idempotent Subscription**: Subscribing the same handler twice is a no-op
- **Singleton Pattern**: Global instance via @lru_cache

## Usage

```python
from bus_system.event_bus import get_event_bus
from bus_system.events.types import BusDeletedEvent

bus = get_event_bus()
bus.subscribe(BusDeletedEvent, BusDeletedEventHandler)

# From async code
await bus.publish(BusDeletedEvent(bus_id=42))

# From sync code (sync routes, CLI)
bus.publish_sync(BusDeletedEvent(bus_id=42))
```

Delivery is best effort: there is no retry, no dead-letter queue and no
persistence. An event published while a handler is failing is lost for that
handler.

"""

import asyncio
import concurrent.futures
import threading
from functools import lru_cache
from typing import TYPE_CHECKING

from loguru import logger

from bus_system.services.registry import ServiceRegistry, get_service_registry

from .core import EventEmissionError, EventHandler, HandlerRegistrationError, IntegrationEvent

if TYPE_CHECKING:
    from loguru import Logger

HandlerType = type[EventHandler]


class EventBus:
    """In-process publish/subscribe registry for integration events.

    Handler types are registered per event name. On publish, one resolution
    scope is opened for the whole call and each registered handler type is
    resolved from it and awaited in turn.

    Example:
        ```python
        bus = EventBus(registry)
        bus.subscribe(BusDeletedEvent, BusDeletedEventHandler)
        await bus.publish(BusDeletedEvent(bus_id=1))
        ```
    """

    def __init__(self, registry: ServiceRegistry | None = None, log: "Logger | None" = None) -> None:
        """Initialize a new EventBus instance.

        Args:
            registry: Service registry handler instances are resolved from.
                      Defaults to the global registry.
            log: Logger used for dispatch diagnostics. Defaults to the global
                 loguru logger bound with ``component="event_bus"``.
        """
        self._registry = registry if registry is not None else get_service_registry()
        self._log = log if log is not None else logger.bind(component="event_bus")
        self._handlers: dict[str, list[HandlerType]] = {}
        self._lock = threading.Lock()
        self._sync_executor: concurrent.futures.ThreadPoolExecutor | None = None
        self._log.debug("EventBus initialized")

    @property
    def registry(self) -> ServiceRegistry:
        """The service registry handlers are resolved from."""
        return self._registry

    def subscribe(self, event_type: type[IntegrationEvent], handler_type: HandlerType) -> None:
        """Register a handler type for an event type.

        Registration is idempotent: subscribing the same handler type twice
        for the same event type keeps a single registration.

        Args:
            event_type: The IntegrationEvent subclass to handle
            handler_type: The EventHandler subclass resolved on each publish

        Raises:
            HandlerRegistrationError: If either argument is not the expected kind of class
        """
        if not (isinstance(event_type, type) and issubclass(event_type, IntegrationEvent)):
            raise HandlerRegistrationError(f"Event type must be an IntegrationEvent subclass, got: {event_type}")

        if not (isinstance(handler_type, type) and issubclass(handler_type, EventHandler)):
            raise HandlerRegistrationError(f"Handler must be an EventHandler subclass, got: {handler_type}")

        event_name = event_type.event_name()
        with self._lock:
            handler_types = self._handlers.setdefault(event_name, [])
            if handler_type in handler_types:
                self._log.debug(f"{handler_type.__name__} already subscribed to {event_name}")
                return
            handler_types.append(handler_type)

        self._log.info(f"Subscribed {handler_type.__name__} to event {event_name}")

    def get_handler_types(self, event_type: type[IntegrationEvent]) -> list[HandlerType]:
        """Get the handler types registered for an event type, in registration order."""
        with self._lock:
            return list(self._handlers.get(event_type.event_name(), []))

    def get_handler_count(self, event_type: type[IntegrationEvent]) -> int:
        """Get the number of handlers registered for an event type."""
        return len(self.get_handler_types(event_type))

    def get_registered_events(self) -> list[str]:
        """Get the names of all event types that have registered handlers."""
        with self._lock:
            return list(self._handlers.keys())

    async def publish(self, event: IntegrationEvent) -> None:
        """Publish an event to every handler registered for its type.

        Handlers run sequentially in registration order. Any exception raised
        while resolving or running a handler is logged and dispatch continues
        with the next handler; the publisher never sees handler failures.

        Args:
            event: The event instance to publish

        Raises:
            EventEmissionError: If event is not an IntegrationEvent instance
        """
        if not isinstance(event, IntegrationEvent):
            raise EventEmissionError(f"Event must be an IntegrationEvent instance, got: {type(event).__name__}")

        event_name = event.event_name()
        self._log.info(f"Publishing event {event_name} with Id {event.id}")

        with self._lock:
            handler_types = list(self._handlers.get(event_name, []))

        if not handler_types:
            self._log.debug(f"No handlers registered for event {event_name}")
            return

        failed = 0
        with self._registry.create_scope() as scope:
            for handler_type in handler_types:
                try:
                    handler = scope.try_get(handler_type)
                    if handler is None:
                        self._log.debug(f"Handler {handler_type.__name__} could not be resolved, skipping")
                        continue
                    self._log.trace(f"Dispatching {event_name} to {handler_type.__name__}")
                    await handler.handle(event)
                except Exception:
                    failed += 1
                    self._log.exception(f"Error handling event {event_name} with handler {handler_type.__name__}")

        if failed:
            self._log.warning(f"Event {event_name}: {len(handler_types) - failed} succeeded, {failed} failed handlers")
        else:
            self._log.debug(f"Event {event_name} dispatched to {len(handler_types)} handlers")

    def publish_sync(self, event: IntegrationEvent) -> None:
        """Publish an event from a synchronous context and wait for dispatch to finish.

        Use this from sync code paths (FastAPI sync routes, CLI commands).

        Args:
            event: The event instance to publish
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # No running loop - we can use asyncio.run directly
            asyncio.run(self.publish(event))
            return

        # We're inside an async context - use thread pool to run the coroutine
        if self._sync_executor is None:
            self._sync_executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)
            self._log.debug("Created sync executor for EventBus")
        future = self._sync_executor.submit(asyncio.run, self.publish(event))
        future.result()

    def shutdown(self) -> None:
        """Shutdown the EventBus and release resources.

        Call this during application shutdown to cleanly release the thread pool
        used for synchronous event publication.
        """
        if self._sync_executor is not None:
            self._log.debug("Shutting down EventBus sync executor")
            self._sync_executor.shutdown(wait=True)
            self._sync_executor = None
        self._log.debug("EventBus shutdown complete")


@lru_cache
def get_event_bus() -> EventBus:
    """Get or create the singleton EventBus instance.

    Returns:
        The EventBus instance bound to the global service registry
    """
    return EventBus(get_service_registry())
