"""Service for menu category operations."""

from functools import lru_cache

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from bus_system.event_bus import EventBus, get_event_bus
from bus_system.events.types import CategoryDeletedEvent
from bus_system.exceptions import BadRequestError
from bus_system.models.api_model import (
    CategoryCreateInput,
    CategoryResponse,
    CategoryUpdateInput,
    CategoryWithItemsResponse,
    MenuItemResponse,
)
from bus_system.models.db_model import Category as CategoryModel
from bus_system.services.bus_service import BusService, get_bus_service


def to_category_response(category: CategoryModel) -> CategoryResponse:
    return CategoryResponse(
        id=category.id,
        bus_id=category.bus_id,
        name=category.name,
        menu_item_count=len(category.menu_items),
    )


def to_category_with_items_response(category: CategoryModel) -> CategoryWithItemsResponse:
    return CategoryWithItemsResponse(
        id=category.id,
        bus_id=category.bus_id,
        name=category.name,
        menu_items=[MenuItemResponse.model_validate(item) for item in category.menu_items],
    )


class CategoryService:
    """Service for menu category operations."""

    def __init__(self, bus_service: BusService | None = None, event_bus: EventBus | None = None):
        """Initialize the category service.

        Args:
            bus_service: Used to verify that a category's bus exists
            event_bus: Event bus to publish to. Defaults to the global event bus.
        """
        self.bus_service = bus_service if bus_service is not None else get_bus_service()
        self.event_bus = event_bus if event_bus is not None else get_event_bus()

    def list_categories(self, session: Session, bus_id: int | None = None) -> list[CategoryResponse]:
        """Get all categories, optionally filtered by bus.

        Args:
            session: Database session
            bus_id: Only return categories of this bus when given

        Returns:
            List of CategoryResponse objects with item counts
        """
        stmt = select(CategoryModel).order_by(CategoryModel.id)
        if bus_id is not None:
            stmt = stmt.where(CategoryModel.bus_id == bus_id)
        categories = session.exec(stmt).all()
        logger.debug(f"Service: list_categories(bus_id={bus_id}) found {len(categories)} categories")
        return [to_category_response(category) for category in categories]

    def get_category(self, session: Session, category_id: int) -> CategoryResponse | None:
        category = session.get(CategoryModel, category_id)
        return to_category_response(category) if category else None

    def get_category_with_items(self, session: Session, category_id: int) -> CategoryWithItemsResponse | None:
        category = session.get(CategoryModel, category_id)
        return to_category_with_items_response(category) if category else None

    def get_bus_categories_with_items(self, session: Session, bus_id: int) -> list[CategoryWithItemsResponse]:
        """Get every category of a bus together with its menu items."""
        stmt = select(CategoryModel).where(CategoryModel.bus_id == bus_id).order_by(CategoryModel.id)
        return [to_category_with_items_response(category) for category in session.exec(stmt).all()]

    def create_category(self, session: Session, data: CategoryCreateInput) -> CategoryResponse | None:
        """Create a new category for an existing bus.

        Returns:
            CategoryResponse for the new category, or None if the write failed

        Raises:
            BadRequestError: If the name is blank or the bus does not exist
        """
        if not data.name or not data.name.strip():
            raise BadRequestError("Category name is required")

        if not self.bus_service.bus_exists(session, data.bus_id):
            raise BadRequestError(f"Bus with ID {data.bus_id} does not exist")

        try:
            category = CategoryModel(bus_id=data.bus_id, name=data.name.strip())
            session.add(category)
            session.commit()
            session.refresh(category)
        except SQLAlchemyError as e:
            logger.error(f"Service: create_category - failed to create category: {e}")
            session.rollback()
            return None

        logger.info(f"Category {category.id} created for bus {category.bus_id}")
        return to_category_response(category)

    def update_category(self, session: Session, category_id: int, data: CategoryUpdateInput) -> CategoryResponse | None:
        """Rename a category. A blank or missing name leaves it unchanged."""
        category = session.get(CategoryModel, category_id)
        if category is None:
            logger.debug(f"Service: update_category - category not found: {category_id}")
            return None

        if data.name and data.name.strip():
            category.name = data.name.strip()

        try:
            session.add(category)
            session.commit()
            session.refresh(category)
        except SQLAlchemyError as e:
            logger.error(f"Service: update_category - failed to update category: {e}")
            session.rollback()
            return None

        logger.info(f"Category {category_id} updated")
        return to_category_response(category)

    def delete_category(self, session: Session, category_id: int) -> bool:
        """Delete a category with its menu items and publish ``CategoryDeletedEvent``.

        Returns:
            True if the category was deleted, False if not found or the write failed
        """
        category = session.get(CategoryModel, category_id)
        if category is None:
            logger.debug(f"Service: delete_category - category not found: {category_id}")
            return False

        bus_id = category.bus_id
        item_count = len(category.menu_items)
        try:
            session.delete(category)
            session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Service: delete_category - failed to delete category: {e}")
            session.rollback()
            return False

        self.event_bus.publish_sync(CategoryDeletedEvent(category_id=category_id, bus_id=bus_id))
        logger.info(f"Category {category_id} deleted with {item_count} menu items")
        return True


@lru_cache
def get_category_service() -> CategoryService:
    """Get the category service singleton.

    Returns:
        CategoryService: The singleton category service instance
    """
    return CategoryService()
