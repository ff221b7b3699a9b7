"""Ground endpoints."""
from datetime import date
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from groundbook.core.database import get_db
from groundbook.core.exceptions import GroundBookError
from groundbook.core.security import require_admin
from groundbook.models.user import User
from groundbook.schemas.ground import (
    GroundAvailability,
    GroundCreate,
    GroundInDB,
    GroundStatusToggle,
    GroundUpdate,
)
from groundbook.services import ground_service

router = APIRouter(prefix="/api/grounds", tags=["grounds"])


def _ground_fields(ground_data: GroundCreate) -> dict:
    """Flatten a ground payload into model columns."""
    ground_service.validate_operating_hours(
        ground_data.is_24x7, ground_data.opening_time, ground_data.closing_time
    )

    data = ground_data.model_dump(exclude={"location"})
    data.update(ground_data.location.model_dump())
    # First image is always the cover
    data["cover"] = data["gallery"][0] if data["gallery"] else None
    return data


@router.get("", response_model=List[GroundInDB])
async def list_grounds(
    db: AsyncSession = Depends(get_db),
):
    """
    List active grounds, newest first.

    Args:
        db: Database session

    Returns:
        List of grounds
    """
    try:
        return await ground_service.list_grounds(db)
    except GroundBookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.get("/{ground_id}", response_model=GroundInDB)
async def get_ground(
    ground_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get an active ground by ID."""
    try:
        return await ground_service.get_ground(db, ground_id, active_only=True)
    except GroundBookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.get("/{ground_id}/availability", response_model=GroundAvailability)
async def get_ground_availability(
    ground_id: int,
    date: date = Query(..., description="Date (YYYY-MM-DD)"),
    db: AsyncSession = Depends(get_db),
):
    """
    List the 2-hour slots a ground offers on a date.

    Slots run from the opening hour to the closing hour, or around the
    clock for 24x7 grounds. Each slot is flagged when already booked.

    Args:
        ground_id: Ground ID
        date: Date to inspect
        db: Database session

    Returns:
        Slots with their booked flag
    """
    try:
        ground = await ground_service.get_ground(db, ground_id, active_only=True)
        return await ground_service.get_availability(db, ground, date)
    except GroundBookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.post("", response_model=GroundInDB, status_code=201)
async def create_ground(
    ground: GroundCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a new ground.

    Gallery entries are image URLs already held by the media store; the
    first one becomes the cover.

    Args:
        ground: Ground data
        admin: Administrator creating the ground
        db: Database session

    Returns:
        Created ground
    """
    try:
        return await ground_service.create_ground(db, _ground_fields(ground), created_by=admin.id)
    except GroundBookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.put("/{ground_id}", response_model=GroundInDB)
async def update_ground(
    ground_id: int,
    ground_update: GroundUpdate,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Replace a ground's details.

    Args:
        ground_id: Ground ID
        ground_update: New ground data, with at least one image
        db: Database session

    Returns:
        Updated ground
    """
    if not ground_update.gallery:
        raise HTTPException(status_code=400, detail="At least one image required")

    try:
        fields = _ground_fields(ground_update)
        ground = await ground_service.get_ground(db, ground_id)
        return await ground_service.update_ground(db, ground, fields)
    except GroundBookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.patch("/{ground_id}/status", response_model=GroundStatusToggle)
async def toggle_ground_status(
    ground_id: int,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Activate an inactive ground or deactivate an active one."""
    try:
        ground = await ground_service.get_ground(db, ground_id)
        ground = await ground_service.toggle_ground(db, ground)
    except GroundBookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())

    return GroundStatusToggle(
        message=f"Ground {'activated' if ground.is_active else 'deactivated'}",
        is_active=ground.is_active,
    )


@router.delete("/{ground_id}", status_code=204)
async def delete_ground(
    ground_id: int,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a ground and its bookings.

    Args:
        ground_id: Ground ID
        db: Database session
    """
    try:
        ground = await ground_service.get_ground(db, ground_id)
        await ground_service.delete_ground(db, ground)
    except GroundBookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())
