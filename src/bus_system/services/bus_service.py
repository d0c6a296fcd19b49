"""Service for bus-related operations."""

from functools import lru_cache

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from bus_system.event_bus import EventBus, get_event_bus
from bus_system.events.types import BusCreatedEvent, BusDeletedEvent, BusUpdatedEvent
from bus_system.exceptions import BadRequestError, ResourceConflictError
from bus_system.models.api_model import BusCreateInput, BusResponse, BusUpdateInput
from bus_system.models.db_model import Bus as BusModel


def normalize_plate_number(plate_number: str) -> str:
    """Return the canonical form of a plate number (trimmed, upper-case)."""
    return plate_number.strip().upper()


class BusService:
    """Service for bus-related operations.

    Every committed create, plate change and delete is followed by the
    matching integration event on the event bus.
    """

    def __init__(self, event_bus: EventBus | None = None):
        """Initialize the bus service.

        Args:
            event_bus: Event bus to publish to. Defaults to the global event bus.
        """
        self.event_bus = event_bus if event_bus is not None else get_event_bus()

    def list_buses(self, session: Session) -> list[BusResponse]:
        """Get all buses ordered by id."""
        buses = session.exec(select(BusModel).order_by(BusModel.id)).all()
        logger.debug(f"Service: list_buses found {len(buses)} buses")
        return [BusResponse.model_validate(bus) for bus in buses]

    def get_bus_by_id(self, session: Session, bus_id: int) -> BusResponse | None:
        """Get a bus by ID.

        Args:
            session: Database session
            bus_id: ID of the bus to retrieve

        Returns:
            BusResponse if found, None otherwise
        """
        bus = session.get(BusModel, bus_id)
        logger.debug(f"Service: get_bus_by_id({bus_id}) result: {'found' if bus else 'not found'}")
        return BusResponse.model_validate(bus) if bus else None

    def get_bus_by_plate(self, session: Session, plate_number: str) -> BusResponse | None:
        """Get a bus by plate number, compared in normalized form.

        Raises:
            BadRequestError: If the plate number is blank
        """
        if not plate_number or not plate_number.strip():
            raise BadRequestError("Plate number is required")

        stmt = select(BusModel).where(BusModel.plate_number == normalize_plate_number(plate_number))
        bus = session.exec(stmt).first()
        return BusResponse.model_validate(bus) if bus else None

    def bus_exists(self, session: Session, bus_id: int) -> bool:
        """Check whether a bus with the given ID exists."""
        return session.get(BusModel, bus_id) is not None

    def _find_other_with_plate(self, session: Session, plate_number: str, exclude_id: int | None = None) -> BusModel | None:
        stmt = select(BusModel).where(BusModel.plate_number == plate_number)
        if exclude_id is not None:
            stmt = stmt.where(BusModel.id != exclude_id)
        return session.exec(stmt).first()

    def create_bus(self, session: Session, data: BusCreateInput) -> BusResponse | None:
        """Create a new bus and publish ``BusCreatedEvent``.

        Args:
            session: Database session
            data: Bus input data

        Returns:
            BusResponse for the new bus, or None if the write failed

        Raises:
            BadRequestError: If the plate number is blank
            ResourceConflictError: If another bus already uses the plate number
        """
        if not data.plate_number or not data.plate_number.strip():
            raise BadRequestError("Plate number is required")

        plate_number = normalize_plate_number(data.plate_number)
        if self._find_other_with_plate(session, plate_number):
            raise ResourceConflictError(f"Bus with plate number '{data.plate_number}' already exists")

        try:
            bus = BusModel(
                plate_number=plate_number,
                description=data.description.strip() if data.description else data.description,
                created_by=data.created_by,
            )
            session.add(bus)
            session.commit()
            session.refresh(bus)
        except SQLAlchemyError as e:
            logger.error(f"Service: create_bus - failed to create bus: {e}")
            session.rollback()
            return None

        logger.info(f"Bus {bus.id} created with plate number {bus.plate_number}")
        self.event_bus.publish_sync(BusCreatedEvent(bus_id=bus.id, plate_number=bus.plate_number, description=bus.description))
        return BusResponse.model_validate(bus)

    def update_bus(self, session: Session, bus_id: int, data: BusUpdateInput) -> BusResponse | None:
        """Update a bus.

        ``BusUpdatedEvent`` is published only when the plate number actually
        changed; description-only edits stay local.

        Returns:
            The updated BusResponse, or None if the bus was not found or the write failed

        Raises:
            ResourceConflictError: If another bus already uses the new plate number
        """
        bus = session.get(BusModel, bus_id)
        if bus is None:
            logger.debug(f"Service: update_bus - bus not found: {bus_id}")
            return None

        plate_changed = False
        if data.plate_number and data.plate_number.strip():
            plate_number = normalize_plate_number(data.plate_number)
            if self._find_other_with_plate(session, plate_number, exclude_id=bus_id):
                raise ResourceConflictError(f"Bus with plate number '{data.plate_number}' already exists")
            plate_changed = bus.plate_number != plate_number
            bus.plate_number = plate_number

        if data.description is not None:
            bus.description = data.description.strip()

        try:
            session.add(bus)
            session.commit()
            session.refresh(bus)
        except SQLAlchemyError as e:
            logger.error(f"Service: update_bus - failed to update bus: {e}")
            session.rollback()
            return None

        logger.info(f"Bus {bus_id} updated")
        if plate_changed:
            self.event_bus.publish_sync(BusUpdatedEvent(bus_id=bus.id, plate_number=bus.plate_number, description=bus.description))
        return BusResponse.model_validate(bus)

    def delete_bus(self, session: Session, bus_id: int) -> bool:
        """Delete a bus and publish ``BusDeletedEvent``.

        The result reflects only the removal of the bus row. Menu cleanup runs
        in event handlers whose failures are not reported here.

        Returns:
            True if the bus was deleted, False if not found or the write failed
        """
        bus = session.get(BusModel, bus_id)
        if bus is None:
            logger.debug(f"Service: delete_bus - bus not found: {bus_id}")
            return False

        try:
            session.delete(bus)
            session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Service: delete_bus - failed to delete bus: {e}")
            session.rollback()
            return False

        self.event_bus.publish_sync(BusDeletedEvent(bus_id=bus_id))
        logger.info(f"Bus {bus_id} deleted")
        return True


@lru_cache
def get_bus_service() -> BusService:
    """Get the bus service singleton.

    Returns:
        BusService: The singleton bus service instance
    """
    return BusService()
