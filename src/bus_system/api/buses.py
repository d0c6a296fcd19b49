"""
Bus API - CRUD operations for bus management.

All endpoints delegate to BusService, which publishes the matching
integration events after each committed change.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from bus_system.database import get_db_session
from bus_system.models.api_model import BusCreateInput, BusExistsResponse, BusResponse, BusUpdateInput
from bus_system.services.bus_service import BusService, get_bus_service

router = APIRouter()


@router.get("/buses", response_model=list[BusResponse])
def list_buses(
    bus_service: BusService = Depends(get_bus_service),
    session: Session = Depends(get_db_session),
) -> list[BusResponse]:
    """Get all buses."""
    return bus_service.list_buses(session)


@router.get("/buses/plate/{plate_number}", response_model=BusResponse)
def get_bus_by_plate(
    plate_number: str,
    bus_service: BusService = Depends(get_bus_service),
    session: Session = Depends(get_db_session),
) -> BusResponse:
    """Get a bus by plate number (case-insensitive)."""
    bus = bus_service.get_bus_by_plate(session, plate_number)
    if not bus:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Bus with plate number '{plate_number}' not found",
        )
    return bus


@router.get("/buses/{bus_id}", response_model=BusResponse)
def get_bus(
    bus_id: int,
    bus_service: BusService = Depends(get_bus_service),
    session: Session = Depends(get_db_session),
) -> BusResponse:
    """Get a bus by ID.

    Raises:
        HTTPException: If bus not found
    """
    bus = bus_service.get_bus_by_id(session, bus_id)
    if not bus:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Bus with ID {bus_id} not found",
        )
    return bus


@router.get("/buses/{bus_id}/exists", response_model=BusExistsResponse)
def bus_exists(
    bus_id: int,
    bus_service: BusService = Depends(get_bus_service),
    session: Session = Depends(get_db_session),
) -> BusExistsResponse:
    """Check if a bus exists (used by the menu side to validate references)."""
    return BusExistsResponse(bus_id=bus_id, exists=bus_service.bus_exists(session, bus_id))


@router.post("/buses", response_model=BusResponse, status_code=status.HTTP_201_CREATED)
def create_bus(
    bus: BusCreateInput,
    bus_service: BusService = Depends(get_bus_service),
    session: Session = Depends(get_db_session),
) -> BusResponse:
    """Create a new bus.

    Raises:
        HTTPException: If creation failed
    """
    created_bus = bus_service.create_bus(session, bus)
    if not created_bus:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to create bus",
        )
    return created_bus


@router.put("/buses/{bus_id}", response_model=BusResponse)
def update_bus(
    bus_id: int,
    bus: BusUpdateInput,
    bus_service: BusService = Depends(get_bus_service),
    session: Session = Depends(get_db_session),
) -> BusResponse:
    """Update a bus.

    Raises:
        HTTPException: If bus not found or update failed
    """
    updated_bus = bus_service.update_bus(session, bus_id, bus)
    if not updated_bus:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Bus with ID {bus_id} not found or update failed",
        )
    return updated_bus


@router.delete("/buses/{bus_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_bus(
    bus_id: int,
    bus_service: BusService = Depends(get_bus_service),
    session: Session = Depends(get_db_session),
) -> None:
    """Delete a bus by ID.

    Succeeds once the bus row is removed; menu cleanup happens in event
    handlers and its outcome is not reported to the caller.

    Raises:
        HTTPException: If bus not found or deletion failed
    """
    success = bus_service.delete_bus(session, bus_id)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Bus with ID {bus_id} not found or deletion failed",
        )
