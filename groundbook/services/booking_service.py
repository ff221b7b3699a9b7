"""Booking service for creating, listing and updating bookings."""
import asyncio
import logging
import weakref
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Sequence, Tuple, Union

from sqlalchemy import select, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from groundbook.core.config import settings
from groundbook.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    StoreUnavailable,
    ValidationError,
)
from groundbook.models.booking import Booking, BookingStatus
from groundbook.models.ground import Ground
from groundbook.models.user import User
from groundbook.schemas.booking import BookingAdminRow
from groundbook.services.ground_service import validate_within_hours
from groundbook.services.slot_validator import (
    SLOT_HOURS,
    check_conflict,
    get_booked_slots,
    normalize_slot,
    validate_consecutive,
)

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def compute_total_amount(price_per_hour, slot_count: int) -> Decimal:
    """Price of a booking: hourly price times slots times hours per slot."""
    price = price_per_hour if isinstance(price_per_hour, Decimal) else Decimal(str(price_per_hour))
    return (price * slot_count * SLOT_HOURS).quantize(CENTS, rounding=ROUND_HALF_UP)


class SlotLockRegistry:
    """
    Hands out one asyncio.Lock per (ground, date).

    Holding the lock across the conflict check and the insert serializes
    booking creation for that key within this process. Locks are dropped
    once nobody references them.
    """

    def __init__(self):
        self._locks = weakref.WeakValueDictionary()

    def lock_for(self, ground_id: int, booking_date: date) -> asyncio.Lock:
        key = (ground_id, booking_date)
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock


class BookingService:
    """Service for managing bookings."""

    def __init__(self, strict_order: bool = True, locks: Optional[SlotLockRegistry] = None):
        self.strict_order = strict_order
        self.locks = locks or SlotLockRegistry()

    async def list_booked_slots(
        self, db: AsyncSession, ground_id: int, booking_date: date
    ) -> List[str]:
        """Flat, sorted set of slot labels confirmed on a ground and date."""
        booked = await get_booked_slots(db, ground_id, booking_date)
        return sorted({normalize_slot(slot) for slot in booked})

    async def create_booking(
        self,
        db: AsyncSession,
        ground_id: int,
        user_id: int,
        booking_date: date,
        slots: Sequence[str],
        price_per_hour=None,
    ) -> Booking:
        """
        Validate, conflict-check and persist a confirmed booking.

        Args:
            db: Database session
            ground_id: Ground ID
            user_id: Owner of the booking
            booking_date: Calendar date
            slots: Ordered slot labels, stored in canonical form
            price_per_hour: Overrides the ground's price when given

        Returns:
            The created booking with ground and user loaded

        Raises:
            ValidationError: Empty or non-consecutive slots, or slots outside the
                ground's operating hours
            NotFoundError: Unknown or inactive ground
            ConflictError: Slots already confirmed for this ground and date
            StoreUnavailable: The store failed a read or the write
        """
        slots = list(slots or [])
        if not slots or not validate_consecutive(slots, strict_order=self.strict_order):
            logger.warning(f"Rejected non-consecutive slots {slots} for ground {ground_id}")
            raise ValidationError(
                "non-consecutive-slots",
                f"Slots must be consecutive {SLOT_HOURS}-hour blocks",
            )

        ground = await self._get_active_ground(db, ground_id)
        validate_within_hours(ground, slots)
        slots = [normalize_slot(slot) for slot in slots]
        if price_per_hour is None:
            price_per_hour = ground.price

        async with self.locks.lock_for(ground_id, booking_date):
            result = await check_conflict(db, ground_id, booking_date, slots)
            if result.conflict:
                logger.warning(
                    f"Booking conflict on ground {ground_id} for {booking_date}: "
                    f"{sorted(result.conflicting_slots)}"
                )
                raise ConflictError(result.conflicting_slots)

            booking = Booking(
                user_id=user_id,
                ground_id=ground_id,
                date=booking_date,
                time_slots=slots,
                status=BookingStatus.CONFIRMED.value,
                total_amount=compute_total_amount(price_per_hour, len(slots)),
            )

            try:
                db.add(booking)
                await db.commit()
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error(f"Failed to store booking for ground {ground_id}: {e}", exc_info=True)
                raise StoreUnavailable("booking insert") from e

        logger.info(
            f"Created booking {booking.id} on ground {ground.name} ({ground_id}) "
            f"for {booking_date} slots {slots}"
        )
        return await self.get_booking(db, booking.id)

    async def get_booking(self, db: AsyncSession, booking_id: int) -> Booking:
        """Fetch a booking with its ground and user."""
        try:
            result = await db.execute(
                select(Booking)
                .options(selectinload(Booking.ground), selectinload(Booking.user))
                .where(Booking.id == booking_id)
                .execution_options(populate_existing=True)
            )
            booking = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreUnavailable("booking lookup") from e

        if not booking:
            raise NotFoundError("Booking", booking_id)
        return booking

    async def get_booking_for(self, db: AsyncSession, booking_id: int, requester: User) -> Booking:
        """Fetch a booking visible to the requester (its owner or an admin)."""
        booking = await self.get_booking(db, booking_id)
        if booking.user_id != requester.id and not requester.is_admin:
            raise PermissionDeniedError("Not allowed to view this booking")
        return booking

    async def list_user_bookings(self, db: AsyncSession, user_id: int) -> List[Booking]:
        """Bookings owned by a user, newest first."""
        try:
            result = await db.execute(
                select(Booking)
                .options(selectinload(Booking.ground), selectinload(Booking.user))
                .where(Booking.user_id == user_id)
                .order_by(Booking.created_at.desc(), Booking.id.desc())
            )
        except SQLAlchemyError as e:
            raise StoreUnavailable("user booking lookup") from e
        return list(result.scalars().all())

    async def list_bookings(
        self, db: AsyncSession, search: str = "", status: str = "all"
    ) -> List[BookingAdminRow]:
        """
        List bookings for administrators.

        Args:
            db: Database session
            search: Case-insensitive substring of the user's or the ground's name
            status: A booking status, or "all"

        Returns:
            Rows newest first
        """
        query = (
            select(Booking, User.name, Ground.name, Ground.cover)
            .join(User, Booking.user_id == User.id)
            .join(Ground, Booking.ground_id == Ground.id)
        )

        if status and status != "all":
            query = query.where(Booking.status == self._coerce_status(status).value)

        if search:
            pattern = f"%{search}%"
            query = query.where(or_(User.name.ilike(pattern), Ground.name.ilike(pattern)))

        query = query.order_by(Booking.created_at.desc(), Booking.id.desc())

        try:
            result = await db.execute(query)
            rows: List[Tuple[Booking, str, str, Optional[str]]] = result.all()
        except SQLAlchemyError as e:
            logger.error(f"Bookings query failed: {e}", exc_info=True)
            raise StoreUnavailable("booking list") from e

        return [
            BookingAdminRow(
                id=booking.id,
                user_name=user_name,
                ground_name=ground_name,
                ground_cover=ground_cover,
                date=booking.date,
                time_slots=booking.time_slots,
                total_amount=booking.total_amount,
                status=booking.status,
                created_at=booking.created_at,
            )
            for booking, user_name, ground_name, ground_cover in rows
        ]

    async def update_status(
        self,
        db: AsyncSession,
        booking_id: int,
        status: Union[BookingStatus, str],
    ) -> Booking:
        """
        Overwrite a booking's status.

        Any status may replace any other, including re-confirming a
        cancelled booking. Slots are neither freed nor re-checked.
        """
        new_status = self._coerce_status(status)
        booking = await self.get_booking(db, booking_id)
        previous = booking.status

        try:
            booking.status = new_status.value
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to update booking {booking_id}: {e}", exc_info=True)
            raise StoreUnavailable("booking status update") from e

        logger.info(f"Booking {booking_id} status {previous} -> {new_status.value}")
        return await self.get_booking(db, booking_id)

    async def _get_active_ground(self, db: AsyncSession, ground_id: int) -> Ground:
        try:
            result = await db.execute(
                select(Ground).where(Ground.id == ground_id, Ground.is_active.is_(True))
            )
            ground = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreUnavailable("ground lookup") from e

        if not ground:
            raise NotFoundError("Ground", ground_id)
        return ground

    def _coerce_status(self, status: Union[BookingStatus, str]) -> BookingStatus:
        try:
            return BookingStatus(status)
        except ValueError:
            raise ValidationError("invalid-status", f"Unknown booking status '{status}'")


# Singleton instance
booking_service = BookingService(strict_order=settings.STRICT_SLOT_ORDER)
