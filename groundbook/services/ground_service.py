"""Ground operating hours, slot availability and ground records."""
import logging
from datetime import date
from typing import List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from groundbook.core.exceptions import NotFoundError, StoreUnavailable, ValidationError
from groundbook.models.booking import Booking
from groundbook.models.ground import Ground
from groundbook.schemas.ground import GroundAvailability, SlotAvailability
from groundbook.services.slot_validator import (
    SLOT_HOURS,
    format_slot,
    get_booked_slots,
    normalize_slot,
    parse_slot_hour,
)

logger = logging.getLogger(__name__)


def _parse_clock(value: str) -> int:
    """Minutes since midnight for an HH:MM string."""
    try:
        hours, minutes = value.split(":")
        hours, minutes = int(hours), int(minutes)
    except (AttributeError, ValueError):
        raise ValidationError("invalid-time", f"Invalid time '{value}', expected HH:MM")

    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        raise ValidationError("invalid-time", f"Invalid time '{value}', expected HH:MM")
    return hours * 60 + minutes


def validate_operating_hours(
    is_24x7: bool, opening_time: Optional[str], closing_time: Optional[str]
) -> None:
    """
    Enforce that a ground which is not open around the clock has a valid window.

    Raises:
        ValidationError: If a time is missing or closing is not after opening
    """
    if is_24x7:
        return

    if not opening_time or not closing_time:
        raise ValidationError(
            "missing-operating-hours",
            "Opening and closing times are required unless the ground is open 24x7",
        )

    if _parse_clock(closing_time) <= _parse_clock(opening_time):
        raise ValidationError(
            "invalid-operating-hours",
            "Closing time must be after opening time",
        )


def _open_hours(ground: Ground):
    """First whole hour a slot may start and the hour by which it must end."""
    if ground.is_24x7:
        return 0, 24
    # A ground opening at 07:30 offers nothing before 08:00
    start = -(-_parse_clock(ground.opening_time) // 60)
    end = _parse_clock(ground.closing_time) // 60
    return start, end


def generate_time_slots(ground: Ground) -> List[str]:
    """
    Slots offered by a ground in a day.

    Blocks start at the first whole hour after opening and step by two
    hours; a trailing block that would run past closing is not offered.
    """
    start, end = _open_hours(ground)
    return [format_slot(hour) for hour in range(start, end - SLOT_HOURS + 1, SLOT_HOURS)]


def validate_within_hours(ground: Ground, slots: Sequence[str]) -> None:
    """
    Reject slots that start before the ground opens or end after it closes.

    Raises:
        ValidationError: With reason "outside-operating-hours"
    """
    start, end = _open_hours(ground)
    outside = [
        normalize_slot(slot)
        for slot in slots
        if not start <= parse_slot_hour(slot) <= end - SLOT_HOURS
    ]
    if outside:
        raise ValidationError(
            "outside-operating-hours",
            f"Slots {outside} fall outside the ground's operating hours",
        )


async def get_availability(
    db: AsyncSession, ground: Ground, booking_date: date
) -> GroundAvailability:
    """
    Offered slots for a ground on a date, each flagged when already confirmed.

    Args:
        db: Database session
        ground: Ground instance
        booking_date: Date to inspect

    Returns:
        GroundAvailability for the date
    """
    booked = {normalize_slot(slot) for slot in await get_booked_slots(db, ground.id, booking_date)}
    slots = [
        SlotAvailability(slot=slot, booked=slot in booked)
        for slot in generate_time_slots(ground)
    ]
    logger.debug(f"Ground {ground.id} on {booking_date}: {len(booked)} of {len(slots)} slots booked")

    return GroundAvailability(ground_id=ground.id, date=booking_date, slots=slots)


async def list_grounds(db: AsyncSession) -> List[Ground]:
    """Active grounds, newest first."""
    try:
        result = await db.execute(
            select(Ground)
            .where(Ground.is_active.is_(True))
            .order_by(Ground.created_at.desc(), Ground.id.desc())
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to list grounds: {e}", exc_info=True)
        raise StoreUnavailable("ground list") from e
    return list(result.scalars().all())


async def get_ground(db: AsyncSession, ground_id: int, active_only: bool = False) -> Ground:
    """
    Fetch a ground by ID.

    Raises:
        NotFoundError: If it does not exist, or is inactive and active_only is set
        StoreUnavailable: If the query fails
    """
    query = select(Ground).where(Ground.id == ground_id)
    if active_only:
        query = query.where(Ground.is_active.is_(True))

    try:
        result = await db.execute(query)
        ground = result.scalar_one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Failed to load ground {ground_id}: {e}", exc_info=True)
        raise StoreUnavailable("ground lookup") from e

    if not ground:
        raise NotFoundError("Ground", ground_id)
    return ground


async def _commit(db: AsyncSession, operation: str) -> None:
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed {operation}: {e}", exc_info=True)
        raise StoreUnavailable(operation) from e


async def create_ground(db: AsyncSession, fields: dict, created_by: int) -> Ground:
    """Insert a ground from already validated column values."""
    ground = Ground(**fields, created_by=created_by)
    db.add(ground)
    await _commit(db, "ground insert")
    await db.refresh(ground)

    logger.info(f"Created ground {ground.id} ({ground.name})")
    return ground


async def update_ground(db: AsyncSession, ground: Ground, fields: dict) -> Ground:
    """Overwrite a ground's columns."""
    for field, value in fields.items():
        setattr(ground, field, value)

    await _commit(db, "ground update")
    await db.refresh(ground)
    return ground


async def toggle_ground(db: AsyncSession, ground: Ground) -> Ground:
    """Flip a ground between active and inactive."""
    ground.is_active = not ground.is_active
    await _commit(db, "ground status update")

    logger.info(f"Ground {ground.id} active={ground.is_active}")
    return ground


async def delete_ground(db: AsyncSession, ground: Ground) -> None:
    """Delete a ground together with its bookings."""
    try:
        await db.execute(delete(Booking).where(Booking.ground_id == ground.id))
        await db.delete(ground)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to delete ground {ground.id}: {e}", exc_info=True)
        raise StoreUnavailable("ground delete") from e

    await _commit(db, "ground delete")
    logger.info(f"Deleted ground {ground.id}")
