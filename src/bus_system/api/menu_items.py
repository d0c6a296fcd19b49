"""Menu item API."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from bus_system.database import get_db_session
from bus_system.models.api_model import MenuItemCreateInput, MenuItemResponse, MenuItemUpdateInput
from bus_system.services.menu_item_service import MenuItemService, get_menu_item_service

router = APIRouter()


def _not_found(menu_item_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Menu item with ID {menu_item_id} not found",
    )


@router.get("/menu-items", response_model=list[MenuItemResponse])
def list_menu_items(
    category_id: int | None = None,
    menu_item_service: MenuItemService = Depends(get_menu_item_service),
    session: Session = Depends(get_db_session),
) -> list[MenuItemResponse]:
    return menu_item_service.list_menu_items(session, category_id)


@router.get("/menu-items/{menu_item_id}", response_model=MenuItemResponse)
def get_menu_item(
    menu_item_id: int,
    menu_item_service: MenuItemService = Depends(get_menu_item_service),
    session: Session = Depends(get_db_session),
) -> MenuItemResponse:
    item = menu_item_service.get_menu_item(session, menu_item_id)
    if not item:
        raise _not_found(menu_item_id)
    return item


@router.post("/menu-items", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
def create_menu_item(
    menu_item: MenuItemCreateInput,
    menu_item_service: MenuItemService = Depends(get_menu_item_service),
    session: Session = Depends(get_db_session),
) -> MenuItemResponse:
    created = menu_item_service.create_menu_item(session, menu_item)
    if not created:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to create menu item",
        )
    return created


@router.put("/menu-items/{menu_item_id}", response_model=MenuItemResponse)
def update_menu_item(
    menu_item_id: int,
    menu_item: MenuItemUpdateInput,
    menu_item_service: MenuItemService = Depends(get_menu_item_service),
    session: Session = Depends(get_db_session),
) -> MenuItemResponse:
    updated = menu_item_service.update_menu_item(session, menu_item_id, menu_item)
    if not updated:
        raise _not_found(menu_item_id)
    return updated


@router.delete("/menu-items/{menu_item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu_item(
    menu_item_id: int,
    menu_item_service: MenuItemService = Depends(get_menu_item_service),
    session: Session = Depends(get_db_session),
) -> None:
    if not menu_item_service.delete_menu_item(session, menu_item_id):
        raise _not_found(menu_item_id)
