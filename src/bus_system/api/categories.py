"""Category API - menu category management."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from bus_system.database import get_db_session
from bus_system.models.api_model import CategoryCreateInput, CategoryResponse, CategoryUpdateInput, CategoryWithItemsResponse
from bus_system.services.category_service import CategoryService, get_category_service

router = APIRouter()


def _not_found(category_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Category with ID {category_id} not found",
    )


@router.get("/categories", response_model=list[CategoryResponse])
def list_categories(
    bus_id: int | None = None,
    category_service: CategoryService = Depends(get_category_service),
    session: Session = Depends(get_db_session),
) -> list[CategoryResponse]:
    """Get all categories, optionally filtered by bus ID."""
    return category_service.list_categories(session, bus_id)


@router.get("/categories/bus/{bus_id}/with-items", response_model=list[CategoryWithItemsResponse])
def get_bus_categories_with_items(
    bus_id: int,
    category_service: CategoryService = Depends(get_category_service),
    session: Session = Depends(get_db_session),
) -> list[CategoryWithItemsResponse]:
    """Get all categories of a bus with their menu items."""
    return category_service.get_bus_categories_with_items(session, bus_id)


@router.get("/categories/{category_id}", response_model=CategoryResponse)
def get_category(
    category_id: int,
    category_service: CategoryService = Depends(get_category_service),
    session: Session = Depends(get_db_session),
) -> CategoryResponse:
    category = category_service.get_category(session, category_id)
    if not category:
        raise _not_found(category_id)
    return category


@router.get("/categories/{category_id}/with-items", response_model=CategoryWithItemsResponse)
def get_category_with_items(
    category_id: int,
    category_service: CategoryService = Depends(get_category_service),
    session: Session = Depends(get_db_session),
) -> CategoryWithItemsResponse:
    category = category_service.get_category_with_items(session, category_id)
    if not category:
        raise _not_found(category_id)
    return category


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    category: CategoryCreateInput,
    category_service: CategoryService = Depends(get_category_service),
    session: Session = Depends(get_db_session),
) -> CategoryResponse:
    created = category_service.create_category(session, category)
    if not created:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to create category",
        )
    return created


@router.put("/categories/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    category: CategoryUpdateInput,
    category_service: CategoryService = Depends(get_category_service),
    session: Session = Depends(get_db_session),
) -> CategoryResponse:
    updated = category_service.update_category(session, category_id, category)
    if not updated:
        raise _not_found(category_id)
    return updated


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    category_service: CategoryService = Depends(get_category_service),
    session: Session = Depends(get_db_session),
) -> None:
    """Delete a category together with its menu items."""
    if not category_service.delete_category(session, category_id):
        raise _not_found(category_id)
