"""Tests for CategoryService."""

from decimal import Decimal

import pytest
from sqlmodel import Session, select

from bus_system.event_bus import EventHandler
from bus_system.events import CategoryDeletedEvent
from bus_system.exceptions import BadRequestError
from bus_system.models.api_model import BusCreateInput, CategoryCreateInput, CategoryUpdateInput
from bus_system.models.db_model import MenuItem
from bus_system.services.bus_service import BusService
from bus_system.services.category_service import CategoryService


@pytest.fixture
def bus_service(event_bus) -> BusService:
    return BusService(event_bus=event_bus)


@pytest.fixture
def category_service(bus_service, event_bus) -> CategoryService:
    return CategoryService(bus_service=bus_service, event_bus=event_bus)


@pytest.fixture
def bus_id(session: Session, bus_service: BusService) -> int:
    return bus_service.create_bus(session, BusCreateInput(plate_number="AB-123")).id


def _add_item(session: Session, category_id: int, name: str) -> None:
    session.add(MenuItem(category_id=category_id, name=name, price=Decimal("2.00")))
    session.commit()


def test_create_category(session: Session, category_service: CategoryService, bus_id: int):
    category = category_service.create_category(session, CategoryCreateInput(bus_id=bus_id, name=" Drinks "))

    assert category.name == "Drinks"
    assert category.bus_id == bus_id
    assert category.menu_item_count == 0


def test_create_category_for_unknown_bus(session: Session, category_service: CategoryService):
    with pytest.raises(BadRequestError, match="does not exist"):
        category_service.create_category(session, CategoryCreateInput(bus_id=999, name="Drinks"))


def test_create_category_with_blank_name(session: Session, category_service: CategoryService, bus_id: int):
    with pytest.raises(BadRequestError):
        category_service.create_category(session, CategoryCreateInput(bus_id=bus_id, name="  "))


def test_list_filters_by_bus(session: Session, category_service: CategoryService, bus_service: BusService, bus_id: int):
    other_bus_id = bus_service.create_bus(session, BusCreateInput(plate_number="CD-456")).id
    category_service.create_category(session, CategoryCreateInput(bus_id=bus_id, name="Drinks"))
    category_service.create_category(session, CategoryCreateInput(bus_id=other_bus_id, name="Snacks"))

    assert len(category_service.list_categories(session)) == 2
    assert [c.name for c in category_service.list_categories(session, bus_id=other_bus_id)] == ["Snacks"]


def test_with_items_views(session: Session, category_service: CategoryService, bus_id: int):
    category = category_service.create_category(session, CategoryCreateInput(bus_id=bus_id, name="Drinks"))
    _add_item(session, category.id, "Water")
    _add_item(session, category.id, "Juice")
    session.expire_all()

    assert category_service.get_category(session, category.id).menu_item_count == 2
    with_items = category_service.get_category_with_items(session, category.id)
    assert [i.name for i in with_items.menu_items] == ["Water", "Juice"]
    assert [c.id for c in category_service.get_bus_categories_with_items(session, bus_id)] == [category.id]
    assert category_service.get_category_with_items(session, 999) is None


def test_update_category(session: Session, category_service: CategoryService, bus_id: int):
    category = category_service.create_category(session, CategoryCreateInput(bus_id=bus_id, name="Drinks"))

    assert category_service.update_category(session, category.id, CategoryUpdateInput(name="Beverages")).name == "Beverages"
    assert category_service.update_category(session, category.id, CategoryUpdateInput(name=" ")).name == "Beverages"
    assert category_service.update_category(session, 999, CategoryUpdateInput(name="x")) is None


def test_delete_category_removes_items_and_publishes(session: Session, registry, event_bus, category_service, bus_id: int):
    received: list[CategoryDeletedEvent] = []

    class CategoryDeletedRecorder(EventHandler[CategoryDeletedEvent]):
        async def handle(self, event: CategoryDeletedEvent) -> None:
            received.append(event)

    registry.register_scoped(CategoryDeletedRecorder, lambda scope: CategoryDeletedRecorder())
    event_bus.subscribe(CategoryDeletedEvent, CategoryDeletedRecorder)

    category = category_service.create_category(session, CategoryCreateInput(bus_id=bus_id, name="Drinks"))
    _add_item(session, category.id, "Water")
    session.expire_all()

    assert category_service.delete_category(session, category.id) is True
    assert session.exec(select(MenuItem)).all() == []
    assert len(received) == 1
    assert received[0].category_id == category.id
    assert received[0].bus_id == bus_id


def test_delete_missing_category(session: Session, category_service: CategoryService):
    assert category_service.delete_category(session, 999) is False
