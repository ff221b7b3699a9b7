"""Booking endpoints."""
from datetime import date
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from groundbook.core.database import get_db
from groundbook.core.exceptions import GroundBookError
from groundbook.core.security import get_current_user, require_admin
from groundbook.models.user import User
from groundbook.schemas.booking import (
    BookingAdminRow,
    BookingCreate,
    BookingDetail,
    BookingStatusUpdate,
)
from groundbook.services.booking_service import booking_service

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


@router.get("/slots", response_model=List[str])
async def get_booked_slots(
    ground: int = Query(..., description="Ground ID"),
    date: date = Query(..., description="Date (YYYY-MM-DD)"),
    db: AsyncSession = Depends(get_db),
):
    """
    List slots already confirmed for a ground on a date.

    Args:
        ground: Ground ID
        date: Booking date
        db: Database session

    Returns:
        Flat list of slot labels
    """
    try:
        return await booking_service.list_booked_slots(db, ground, date)
    except GroundBookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.get("/user/{user_id}", response_model=List[BookingDetail])
async def get_user_bookings(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List a user's bookings, newest first. Users may only list their own."""
    if current_user.id != user_id and not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Not allowed to view these bookings")

    try:
        return await booking_service.list_user_bookings(db, user_id)
    except GroundBookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.post("", response_model=BookingDetail, status_code=201)
async def create_booking(
    booking: BookingCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Book consecutive slots on a ground.

    The amount is computed from the ground's hourly price. Responds 409 with
    the conflicting slots when any of them is already confirmed.

    Args:
        booking: Ground, date and ordered slot labels
        current_user: Authenticated user who will own the booking
        db: Database session

    Returns:
        Created booking
    """
    try:
        return await booking_service.create_booking(
            db,
            ground_id=booking.ground_id,
            user_id=current_user.id,
            booking_date=booking.date,
            slots=booking.time_slots,
        )
    except GroundBookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.get("", response_model=List[BookingAdminRow])
async def list_bookings(
    search: str = Query(default="", description="Match on user or ground name"),
    status: str = Query(default="all", description="Booking status or 'all'"),
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """List all bookings for administrators."""
    try:
        return await booking_service.list_bookings(db, search=search, status=status)
    except GroundBookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.get("/{booking_id}", response_model=BookingDetail)
async def get_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await booking_service.get_booking_for(db, booking_id, current_user)
    except GroundBookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.patch("/{booking_id}/status", response_model=BookingDetail)
async def update_booking_status(
    booking_id: int,
    update: BookingStatusUpdate,
    _admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Set a booking's status.

    Any status can be set from any other one.
    """
    try:
        return await booking_service.update_status(db, booking_id, update.status)
    except GroundBookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())
