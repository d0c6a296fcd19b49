from datetime import UTC, datetime
from decimal import Decimal

from sqlmodel import Field, Relationship

from bus_system.models.base_model import BusBase, CategoryBase, MenuItemBase


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Bus(BusBase, table=True):
    """Bus model."""

    __tablename__ = "buses"

    id: int | None = Field(default=None, primary_key=True)
    plate_number: str = Field(unique=True, index=True, max_length=20)
    created_date: datetime = Field(default_factory=_utcnow)


class Category(CategoryBase, table=True):
    """Menu category model.

    ``bus_id`` references a bus owned by the bus side of the system; there is
    no foreign key. Categories of a deleted bus are removed by the
    ``BusDeletedEvent`` handler.
    """

    __tablename__ = "categories"

    id: int | None = Field(default=None, primary_key=True)
    bus_id: int = Field(index=True)
    name: str = Field(max_length=100)

    # Items are owned by the category and removed with it
    menu_items: list["MenuItem"] = Relationship(
        back_populates="category", sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )


class MenuItem(MenuItemBase, table=True):
    """Menu item model."""

    __tablename__ = "menu_items"

    id: int | None = Field(default=None, primary_key=True)
    category_id: int = Field(foreign_key="categories.id", index=True, ondelete="CASCADE")
    name: str = Field(max_length=200)
    price: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)

    category: "Category" = Relationship(back_populates="menu_items")
