"""Core Event Bus Components.

This module contains the fundamental abstractions for the event bus system:
the integration event base model, the handler contract and the error types.

## Key Components

- **IntegrationEvent**: Immutable base fact carrying an id and an occurrence timestamp
- **EventHandler**: Base class for handlers resolved from the service registry
- **EventBusError**: Base exception for all event bus related errors
- **HandlerRegistrationError**: Raised when handler registration fails
- **EventEmissionError**: Raised when event emission fails

## Usage Example

```python
from bus_system.event_bus.core import EventHandler, IntegrationEvent

class OrderPlacedEvent(IntegrationEvent):
    order_id: int

class OrderPlacedHandler(EventHandler[OrderPlacedEvent]):
    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    async def handle(self, event: OrderPlacedEvent) -> None:
        with self.session_factory() as session:
            ...

# The handler type is registered as a scoped service, then subscribed:
registry.register_scoped(OrderPlacedHandler, lambda scope: OrderPlacedHandler(borrow_db_session))
bus.subscribe(OrderPlacedEvent, OrderPlacedHandler)
```

"""

from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Generic, TypeVar
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


class IntegrationEvent(BaseModel):
    """Base class for all integration events.

    An integration event is an immutable fact published after the business
    change it describes has been committed. Events are never persisted;
    they are discarded once dispatch completes.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Unique event identifier")
    occurred_on: datetime = Field(default_factory=_utcnow, description="UTC time the event was created")

    @classmethod
    def event_name(cls) -> str:
        """Name under which handlers for this event type are registered."""
        return cls.__name__


T_Event = TypeVar("T_Event", bound=IntegrationEvent)


class EventHandler(ABC, Generic[T_Event]):
    """Base class for event handlers.

    Handlers inherit from this class and implement ``handle``. The generic
    type parameter specifies which event type the handler processes.

    Handler instances are resolved from a ``ServiceScope`` on every publish,
    so constructor arguments (database session factories, loggers, services)
    are supplied by the factory registered in the ``ServiceRegistry``.
    """

    @abstractmethod
    async def handle(self, event: T_Event) -> None:
        """Handle the event.

        Args:
            event: The event to handle. Must be an instance of the generic type.

        Raises:
            Any exception that occurs during handling. Exceptions are caught
            and logged by the event bus; they never reach the publisher.
        """


class EventBusError(Exception):
    """Base exception for all event bus related errors.

    Use this for catching any event bus related error:
        ```python
        try:
            bus.subscribe(BusDeletedEvent, BusDeletedEventHandler)
        except EventBusError as e:
            logger.error(f"Event bus error: {e}")
        ```
    """


class HandlerRegistrationError(EventBusError):
    """Raised when handler registration fails.

    This occurs when:
    - The event type is not an IntegrationEvent subclass
    - The handler type is not an EventHandler subclass
    """


class EventEmissionError(EventBusError):
    """Raised when event emission fails.

    This occurs when the published object is not an IntegrationEvent instance.
    Handler failures never raise this error.
    """
