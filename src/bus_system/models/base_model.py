from decimal import Decimal

from sqlmodel import Field, SQLModel


class BusBase(SQLModel):
    """Base model for a bus."""

    id: int | None = None
    plate_number: str | None = None
    description: str | None = None
    created_by: int | None = None


class CategoryBase(SQLModel):
    """Base model for a menu category."""

    id: int | None = None
    bus_id: int | None = None
    name: str | None = None


class MenuItemBase(SQLModel):
    """Base model for a menu item."""

    id: int | None = None
    category_id: int | None = None
    name: str | None = None
    description: str | None = Field(default=None, max_length=500)
    image: str | None = Field(default=None, max_length=500)
    price: Decimal | None = Field(default=None, max_digits=10, decimal_places=2)
