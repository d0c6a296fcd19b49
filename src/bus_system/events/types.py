"""Integration event definitions.

These are the facts exchanged between the bus and menu sides of the system.
Each event is published after the change it describes has been committed.
"""

from pydantic import Field

from bus_system.event_bus.core import IntegrationEvent


class BusCreatedEvent(IntegrationEvent):
    """Event published when a bus is created."""

    bus_id: int
    plate_number: str
    description: str | None = None


class BusUpdatedEvent(IntegrationEvent):
    """Event published when a bus's plate number changes."""

    bus_id: int
    plate_number: str
    description: str | None = None


class BusDeletedEvent(IntegrationEvent):
    """Event published when a bus is deleted.

    Menu-side consumers remove every category (and its items) owned by the bus.
    """

    bus_id: int = Field(..., description="Identifier of the deleted bus")


class CategoryDeletedEvent(IntegrationEvent):
    """Event published when a menu category is deleted."""

    category_id: int
    bus_id: int
