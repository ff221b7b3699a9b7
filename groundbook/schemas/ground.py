"""Ground schemas."""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal


class Location(BaseModel):
    """Postal location of a ground."""

    address: str
    city: str
    state: str
    pincode: str = Field(..., pattern=r"^\d{6}$")
    landmark: Optional[str] = None


class GroundBase(BaseModel):
    """Base ground schema."""

    name: str = Field(..., min_length=3)
    description: str = Field(..., min_length=50)
    price: Decimal = Field(..., ge=1)
    opening_time: Optional[str] = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    closing_time: Optional[str] = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    is_24x7: bool = False
    location: Location
    gallery: List[str] = Field(default_factory=list)


class GroundCreate(GroundBase):
    """Schema for creating a ground."""

    pass


class GroundUpdate(GroundBase):
    """Schema for replacing a ground's details."""

    pass


class GroundInDB(BaseModel):
    """Schema for ground from database."""

    id: int
    name: str
    description: str
    price: Decimal
    opening_time: Optional[str] = None
    closing_time: Optional[str] = None
    is_24x7: bool
    location: Location
    gallery: List[str]
    cover: Optional[str] = None
    created_by: Optional[int] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class GroundStatusToggle(BaseModel):
    """Schema for the result of activating or deactivating a ground."""

    message: str
    is_active: bool


class SlotAvailability(BaseModel):
    """A bookable slot and whether it is already taken."""

    slot: str
    booked: bool


class GroundAvailability(BaseModel):
    """Schema for a ground's slots on one date."""

    ground_id: int
    date: date
    slots: List[SlotAvailability]
