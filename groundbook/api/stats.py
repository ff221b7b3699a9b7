"""Admin statistics endpoints."""
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from groundbook.core.database import get_db
from groundbook.core.exceptions import GroundBookError
from groundbook.core.security import require_admin
from groundbook.schemas.booking import BookingDetail
from groundbook.schemas.stats import Analytics, ChartData, DashboardStats
from groundbook.services.stats_service import stats_service

router = APIRouter(
    prefix="/api/admin",
    tags=["stats"],
    dependencies=[Depends(require_admin)],
)


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(db: AsyncSession = Depends(get_db)):
    """
    Headline totals and 30-day trends.

    Returns:
        Revenue, ground, active booking and user counts with daily trends
    """
    try:
        return await stats_service.get_dashboard_stats(db)
    except GroundBookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.get("/recent-bookings", response_model=List[BookingDetail])
async def get_recent_bookings(db: AsyncSession = Depends(get_db)):
    """Bookings created in the last week, newest first."""
    try:
        return await stats_service.get_recent_bookings(db)
    except GroundBookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.get("/chart-data", response_model=ChartData)
async def get_chart_data(db: AsyncSession = Depends(get_db)):
    try:
        return await stats_service.get_chart_data(db)
    except GroundBookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())


@router.get("/analytics", response_model=Analytics)
async def get_analytics(db: AsyncSession = Depends(get_db)):
    """
    Totals, trends and the top grounds by revenue.

    Returns:
        Analytics summary
    """
    try:
        return await stats_service.get_analytics(db)
    except GroundBookError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())
