"""Statistics for the admin dashboard."""
import logging
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from groundbook.core.config import settings
from groundbook.core.exceptions import StoreUnavailable
from groundbook.models.booking import Booking, BookingStatus
from groundbook.models.ground import Ground
from groundbook.models.user import User
from groundbook.schemas.stats import (
    Analytics,
    ChartData,
    DailyAmount,
    DailyCount,
    DashboardStats,
    TopGround,
)

logger = logging.getLogger(__name__)

CONFIRMED = BookingStatus.CONFIRMED.value


def _to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(Decimal("0.01"))


class StatsService:
    """Service computing dashboard aggregates over bookings, grounds and users."""

    def __init__(
        self,
        window_days: int = 30,
        recent_days: int = 7,
        recent_limit: int = 6,
        top_grounds_limit: int = 5,
    ):
        self.window_days = window_days
        self.recent_days = recent_days
        self.recent_limit = recent_limit
        self.top_grounds_limit = top_grounds_limit

    def _since(self, days: int, now: Optional[datetime] = None) -> datetime:
        return (now or datetime.now(timezone.utc)) - timedelta(days=days)

    async def _scalar(self, db: AsyncSession, query, operation: str):
        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Stats query '{operation}' failed: {e}", exc_info=True)
            raise StoreUnavailable(operation) from e
        return result.scalar()

    async def _rows(self, db: AsyncSession, query, operation: str):
        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Stats query '{operation}' failed: {e}", exc_info=True)
            raise StoreUnavailable(operation) from e
        return result.all()

    async def total_revenue(self, db: AsyncSession) -> Decimal:
        """Sum of amounts over confirmed bookings."""
        total = await self._scalar(
            db,
            select(func.sum(Booking.total_amount)).where(Booking.status == CONFIRMED),
            "total revenue",
        )
        return _to_decimal(total)

    async def revenue_by_day(
        self, db: AsyncSession, since: datetime, confirmed_only: bool = True
    ) -> List[DailyAmount]:
        """Booking amounts grouped by creation day."""
        day = func.date(Booking.created_at)
        query = select(day, func.sum(Booking.total_amount)).where(Booking.created_at >= since)
        if confirmed_only:
            query = query.where(Booking.status == CONFIRMED)
        query = query.group_by(day).order_by(day)

        rows = await self._rows(db, query, "revenue trend")
        return [DailyAmount(date=str(d), amount=_to_decimal(amount)) for d, amount in rows]

    async def bookings_by_day(self, db: AsyncSession, since: datetime) -> List[DailyCount]:
        """Number of bookings grouped by creation day, any status."""
        day = func.date(Booking.created_at)
        query = (
            select(day, func.count(Booking.id))
            .where(Booking.created_at >= since)
            .group_by(day)
            .order_by(day)
        )
        rows = await self._rows(db, query, "booking trend")
        return [DailyCount(date=str(d), count=count) for d, count in rows]

    async def get_dashboard_stats(self, db: AsyncSession) -> DashboardStats:
        """
        Totals and 30-day trends for the dashboard.

        The revenue trend here covers bookings of every status, the
        headline revenue only confirmed ones.
        """
        since = self._since(self.window_days)
        today = date.today()

        total_grounds = await self._scalar(db, select(func.count(Ground.id)), "ground count")
        active_bookings = await self._scalar(
            db,
            select(func.count(Booking.id)).where(
                Booking.status == CONFIRMED, Booking.date >= today
            ),
            "active booking count",
        )
        total_users = await self._scalar(
            db, select(func.count(User.id)).where(User.role == "user"), "user count"
        )

        return DashboardStats(
            total_revenue=await self.total_revenue(db),
            total_grounds=total_grounds or 0,
            active_bookings=active_bookings or 0,
            total_users=total_users or 0,
            revenue_trends=await self.revenue_by_day(db, since, confirmed_only=False),
            booking_trends=await self.bookings_by_day(db, since),
        )

    async def get_recent_bookings(self, db: AsyncSession) -> List[Booking]:
        """Most recently created bookings within the recent window."""
        try:
            result = await db.execute(
                select(Booking)
                .options(selectinload(Booking.ground), selectinload(Booking.user))
                .where(Booking.created_at >= self._since(self.recent_days))
                .order_by(Booking.created_at.desc(), Booking.id.desc())
                .limit(self.recent_limit)
            )
        except SQLAlchemyError as e:
            raise StoreUnavailable("recent bookings") from e
        return list(result.scalars().all())

    async def get_chart_data(self, db: AsyncSession) -> ChartData:
        since = self._since(self.window_days)
        return ChartData(
            booking_trends=await self.bookings_by_day(db, since),
            revenue_data=await self.revenue_by_day(db, since),
        )

    async def get_top_grounds(self, db: AsyncSession) -> List[TopGround]:
        """Active grounds ranked by the amount of all their bookings."""
        revenue = func.coalesce(func.sum(Booking.total_amount), 0)
        query = (
            select(Ground.id, Ground.name, Ground.cover, func.count(Booking.id), revenue)
            .outerjoin(Booking, Booking.ground_id == Ground.id)
            .where(Ground.is_active.is_(True))
            .group_by(Ground.id, Ground.name, Ground.cover)
            .order_by(revenue.desc(), Ground.id)
            .limit(self.top_grounds_limit)
        )
        rows = await self._rows(db, query, "top grounds")
        return [
            TopGround(id=gid, name=name, cover=cover, bookings=count, total_revenue=_to_decimal(total))
            for gid, name, cover, count, total in rows
        ]

    async def get_analytics(self, db: AsyncSession) -> Analytics:
        since = self._since(self.window_days)

        total_bookings = await self._scalar(
            db,
            select(func.count(Booking.id)).where(Booking.status == CONFIRMED),
            "confirmed booking count",
        )
        active_grounds = await self._scalar(
            db,
            select(func.count(Ground.id)).where(Ground.is_active.is_(True)),
            "active ground count",
        )
        new_users = await self._scalar(
            db,
            select(func.count(User.id)).where(User.created_at >= since),
            "new user count",
        )

        return Analytics(
            total_revenue=await self.total_revenue(db),
            total_bookings=total_bookings or 0,
            active_grounds=active_grounds or 0,
            new_users=new_users or 0,
            revenue_trend=await self.revenue_by_day(db, since),
            booking_trend=await self.bookings_by_day(db, since),
            top_grounds=await self.get_top_grounds(db),
        )


# Singleton instance
stats_service = StatsService(
    window_days=settings.STATS_WINDOW_DAYS,
    recent_days=settings.RECENT_BOOKINGS_DAYS,
    recent_limit=settings.RECENT_BOOKINGS_LIMIT,
)
