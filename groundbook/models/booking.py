"""Booking model."""
import enum

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Date, Numeric, JSON, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from groundbook.core.database import Base


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Booking(Base):
    """Represents a reservation of consecutive 2-hour slots on one ground and date."""

    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    ground_id = Column(Integer, ForeignKey("grounds.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    time_slots = Column(JSON, nullable=False)  # Ordered labels like "09:00 - 11:00"
    status = Column(String, nullable=False, default=BookingStatus.PENDING.value)
    total_amount = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="bookings")
    ground = relationship("Ground", back_populates="bookings")

    # Conflict lookups always filter on ground, date and status
    __table_args__ = (
        Index("ix_bookings_ground_date_status", "ground_id", "date", "status"),
    )
