"""Service for menu item operations."""

from decimal import Decimal
from functools import lru_cache

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from bus_system.exceptions import BadRequestError
from bus_system.models.api_model import MenuItemCreateInput, MenuItemResponse, MenuItemUpdateInput
from bus_system.models.db_model import Category as CategoryModel
from bus_system.models.db_model import MenuItem as MenuItemModel


def _validate_price(price: Decimal) -> None:
    if price < 0:
        raise BadRequestError("Price cannot be negative")


def _strip_or_none(value: str | None) -> str | None:
    return value.strip() if value is not None else None


class MenuItemService:
    """Service for menu item operations."""

    def _require_category(self, session: Session, category_id: int) -> None:
        if session.get(CategoryModel, category_id) is None:
            raise BadRequestError(f"Category with ID {category_id} does not exist")

    def list_menu_items(self, session: Session, category_id: int | None = None) -> list[MenuItemResponse]:
        """Get all menu items, optionally filtered by category."""
        stmt = select(MenuItemModel).order_by(MenuItemModel.id)
        if category_id is not None:
            stmt = stmt.where(MenuItemModel.category_id == category_id)
        return [MenuItemResponse.model_validate(item) for item in session.exec(stmt).all()]

    def get_menu_item(self, session: Session, menu_item_id: int) -> MenuItemResponse | None:
        item = session.get(MenuItemModel, menu_item_id)
        return MenuItemResponse.model_validate(item) if item else None

    def create_menu_item(self, session: Session, data: MenuItemCreateInput) -> MenuItemResponse | None:
        """Create a menu item in an existing category.

        Raises:
            BadRequestError: If the name is blank, the price is negative or the category does not exist
        """
        if not data.name or not data.name.strip():
            raise BadRequestError("Menu item name is required")
        _validate_price(data.price)
        self._require_category(session, data.category_id)

        try:
            item = MenuItemModel(
                category_id=data.category_id,
                name=data.name.strip(),
                description=_strip_or_none(data.description),
                image=_strip_or_none(data.image),
                price=data.price,
            )
            session.add(item)
            session.commit()
            session.refresh(item)
        except SQLAlchemyError as e:
            logger.error(f"Service: create_menu_item - failed to create menu item: {e}")
            session.rollback()
            return None

        logger.info(f"Menu item {item.id} created in category {item.category_id}")
        return MenuItemResponse.model_validate(item)

    def update_menu_item(self, session: Session, menu_item_id: int, data: MenuItemUpdateInput) -> MenuItemResponse | None:
        """Partially update a menu item.

        Returns:
            The updated MenuItemResponse, or None if not found or the write failed

        Raises:
            BadRequestError: If the new price is negative or the new category does not exist
        """
        item = session.get(MenuItemModel, menu_item_id)
        if item is None:
            logger.debug(f"Service: update_menu_item - menu item not found: {menu_item_id}")
            return None

        if data.price is not None:
            _validate_price(data.price)
        if data.category_id is not None:
            self._require_category(session, data.category_id)

        if data.category_id is not None:
            item.category_id = data.category_id
        if data.name and data.name.strip():
            item.name = data.name.strip()
        if data.description is not None:
            item.description = data.description.strip()
        if data.image is not None:
            item.image = data.image.strip()
        if data.price is not None:
            item.price = data.price

        try:
            session.add(item)
            session.commit()
            session.refresh(item)
        except SQLAlchemyError as e:
            logger.error(f"Service: update_menu_item - failed to update menu item: {e}")
            session.rollback()
            return None

        logger.info(f"Menu item {menu_item_id} updated")
        return MenuItemResponse.model_validate(item)

    def delete_menu_item(self, session: Session, menu_item_id: int) -> bool:
        """Delete a menu item by ID."""
        item = session.get(MenuItemModel, menu_item_id)
        if item is None:
            return False

        try:
            session.delete(item)
            session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Service: delete_menu_item - failed to delete menu item: {e}")
            session.rollback()
            return False

        logger.info(f"Menu item {menu_item_id} deleted")
        return True


@lru_cache
def get_menu_item_service() -> MenuItemService:
    """Get the menu item service singleton."""
    return MenuItemService()
