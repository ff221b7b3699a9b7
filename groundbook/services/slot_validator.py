"""Slot label parsing, contiguity checks and conflict detection.

A slot is a fixed 2-hour block labelled by its clock times, e.g. "09:00 - 11:00".
A booking's slots must form one contiguous run, and two confirmed bookings
on the same ground and date may not share a slot label.
"""
import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import FrozenSet, Iterable, List, Sequence

from sqlalchemy import select, and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from groundbook.core.exceptions import StoreUnavailable, ValidationError
from groundbook.models.booking import Booking, BookingStatus

logger = logging.getLogger(__name__)

SLOT_HOURS = 2

_SLOT_LABEL = re.compile(r"^\s*(\d{1,2}):00\s*-\s*(\d{1,2}):00\s*$")


@dataclass(frozen=True)
class SlotConflict:
    """Outcome of a conflict check."""

    conflict: bool
    conflicting_slots: FrozenSet[str] = field(default_factory=frozenset)


def format_slot(start_hour: int) -> str:
    """Build the label for the slot starting at the given hour."""
    return f"{start_hour:02d}:00 - {start_hour + SLOT_HOURS:02d}:00"


def parse_slot_hour(label: str) -> int:
    """
    Return the starting hour of a slot label.

    Raises:
        ValidationError: If the label is not a 2-hour "HH:00 - HH:00" block
    """
    match = _SLOT_LABEL.match(label) if isinstance(label, str) else None
    if not match:
        raise ValidationError("invalid-slot-label", f"Invalid time slot '{label}'")

    start, end = int(match.group(1)), int(match.group(2))
    if start > 23 or end > 24 or end % 24 != (start + SLOT_HOURS) % 24:
        raise ValidationError(
            "invalid-slot-label",
            f"Time slot '{label}' is not a {SLOT_HOURS}-hour block",
        )
    return start


def normalize_slot(label: str) -> str:
    """
    Canonical spelling of a slot label.

    "9:00-11:00" and " 09:00 -  11:00 " both become "09:00 - 11:00", and a
    block ending at midnight is always written "22:00 - 24:00".
    """
    return format_slot(parse_slot_hour(label))


def validate_consecutive(slots: Sequence[str], strict_order: bool = True) -> bool:
    """
    Check that slots are consecutive 2-hour blocks.

    With strict_order the sequence is judged as given, so contiguous slots
    submitted out of chronological order are rejected. Without it the
    starting hours are sorted first.
    """
    hours = [parse_slot_hour(slot) for slot in slots]
    if not strict_order:
        hours.sort()

    for previous, current in zip(hours, hours[1:]):
        if current != previous + SLOT_HOURS:
            return False
    return True


def find_conflicts(requested: Iterable[str], booked: Iterable[str]) -> FrozenSet[str]:
    """Intersect requested slot labels with already booked ones, compared in canonical form."""
    return frozenset(normalize_slot(slot) for slot in requested) & frozenset(
        normalize_slot(slot) for slot in booked
    )


async def get_booked_slots(db: AsyncSession, ground_id: int, booking_date: date) -> List[str]:
    """
    Return the slot labels held by confirmed bookings on a ground and date.

    Raises:
        StoreUnavailable: If the query fails
    """
    try:
        result = await db.execute(
            select(Booking.time_slots).where(
                and_(
                    Booking.ground_id == ground_id,
                    Booking.date == booking_date,
                    Booking.status == BookingStatus.CONFIRMED.value,
                )
            )
        )
        rows = result.scalars().all()
    except SQLAlchemyError as e:
        logger.error(
            f"Failed to load booked slots for ground {ground_id} on {booking_date}: {e}",
            exc_info=True,
        )
        raise StoreUnavailable("booked slot lookup") from e

    booked = []
    for time_slots in rows:
        booked.extend(time_slots or [])
    return booked


async def check_conflict(
    db: AsyncSession,
    ground_id: int,
    booking_date: date,
    requested_slots: Iterable[str],
) -> SlotConflict:
    """
    Check requested slots against confirmed bookings for the same ground and date.

    Matching is by slot label after normalization, so differently spelled
    labels for the same block still collide.

    Args:
        db: Database session
        ground_id: Ground ID
        booking_date: Calendar date of the request
        requested_slots: Slot labels being requested

    Returns:
        SlotConflict with the overlapping labels, empty when there is none
    """
    booked = await get_booked_slots(db, ground_id, booking_date)
    overlap = find_conflicts(requested_slots, booked)
    return SlotConflict(conflict=bool(overlap), conflicting_slots=overlap)
