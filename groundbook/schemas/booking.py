"""Booking schemas."""
from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal

from groundbook.models.booking import BookingStatus


class BookingCreate(BaseModel):
    """Schema for creating a booking."""

    ground_id: int
    date: date
    time_slots: List[str]


class BookingStatusUpdate(BaseModel):
    """Schema for changing a booking's status."""

    status: BookingStatus


class BookingInDB(BaseModel):
    """Schema for booking from database."""

    id: int
    user_id: int
    ground_id: int
    date: date
    time_slots: List[str]
    status: BookingStatus
    total_amount: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class BookingGroundSummary(BaseModel):
    """Ground fields embedded in booking responses."""

    id: int
    name: str
    cover: Optional[str] = None
    location: Optional[dict] = None
    price: Optional[Decimal] = None
    opening_time: Optional[str] = None
    closing_time: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class BookingUserSummary(BaseModel):
    """User fields embedded in booking responses."""

    id: int
    name: str
    email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class BookingDetail(BookingInDB):
    """Schema for a booking with its ground and owner."""

    ground: Optional[BookingGroundSummary] = None
    user: Optional[BookingUserSummary] = None


class BookingAdminRow(BaseModel):
    """Schema for a row in the admin booking list."""

    id: int
    user_name: str
    ground_name: str
    ground_cover: Optional[str] = None
    date: date
    time_slots: List[str]
    total_amount: Decimal
    status: BookingStatus
    created_at: Optional[datetime] = None
