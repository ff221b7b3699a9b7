"""Admin statistics schemas."""
from pydantic import BaseModel
from typing import List, Optional
from decimal import Decimal


class DailyAmount(BaseModel):
    """Revenue summed for one day."""

    date: str
    amount: Decimal


class DailyCount(BaseModel):
    """Bookings counted for one day."""

    date: str
    count: int


class DashboardStats(BaseModel):
    """Schema for the admin dashboard."""

    total_revenue: Decimal
    total_grounds: int
    active_bookings: int
    total_users: int
    revenue_trends: List[DailyAmount]
    booking_trends: List[DailyCount]


class ChartData(BaseModel):
    """Schema for dashboard charts."""

    booking_trends: List[DailyCount]
    revenue_data: List[DailyAmount]


class TopGround(BaseModel):
    """A ground ranked by revenue."""

    id: int
    name: str
    cover: Optional[str] = None
    bookings: int
    total_revenue: Decimal


class Analytics(BaseModel):
    """Schema for the analytics page."""

    total_revenue: Decimal
    total_bookings: int
    active_grounds: int
    new_users: int
    revenue_trend: List[DailyAmount]
    booking_trend: List[DailyCount]
    top_grounds: List[TopGround]
