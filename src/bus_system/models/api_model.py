"""API models for the bus system."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from bus_system.models.base_model import BusBase, CategoryBase, MenuItemBase


# Bus models
class BusResponse(BusBase):
    id: int
    plate_number: str
    created_date: datetime


class BusCreateInput(BaseModel):
    plate_number: str = Field(..., max_length=20)
    description: str | None = None
    created_by: int | None = None


class BusUpdateInput(BaseModel):
    """Partial bus update; omitted fields are left unchanged."""

    plate_number: str | None = Field(default=None, max_length=20)
    description: str | None = None


class BusExistsResponse(BaseModel):
    bus_id: int
    exists: bool


# Menu item models
class MenuItemResponse(MenuItemBase):
    id: int
    category_id: int
    name: str
    price: Decimal


class MenuItemCreateInput(BaseModel):
    category_id: int
    name: str = Field(..., max_length=200)
    description: str | None = Field(default=None, max_length=500)
    image: str | None = Field(default=None, max_length=500)
    price: Decimal = Field(..., max_digits=10, decimal_places=2)


class MenuItemUpdateInput(BaseModel):
    """Partial menu item update; omitted fields are left unchanged."""

    category_id: int | None = None
    name: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=500)
    image: str | None = Field(default=None, max_length=500)
    price: Decimal | None = Field(default=None, max_digits=10, decimal_places=2)


# Category models
class CategoryResponse(CategoryBase):
    id: int
    bus_id: int
    name: str
    menu_item_count: int = 0


class CategoryWithItemsResponse(CategoryBase):
    id: int
    bus_id: int
    name: str
    menu_items: list[MenuItemResponse] = []


class CategoryCreateInput(BaseModel):
    bus_id: int
    name: str = Field(..., max_length=100)


class CategoryUpdateInput(BaseModel):
    name: str | None = Field(default=None, max_length=100)
