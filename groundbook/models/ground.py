"""Ground model."""
from sqlalchemy import Column, Integer, String, Boolean, Numeric, ForeignKey, DateTime, JSON, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from groundbook.core.database import Base


class Ground(Base):
    """Represents a bookable sports ground."""

    __tablename__ = "grounds"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)  # Per hour
    opening_time = Column(String(5), nullable=True)  # HH:MM, ignored when is_24x7
    closing_time = Column(String(5), nullable=True)
    is_24x7 = Column(Boolean, default=False, nullable=False)

    # Location
    address = Column(String, nullable=False)
    city = Column(String, nullable=False, index=True)
    state = Column(String, nullable=False)
    pincode = Column(String(6), nullable=False)
    landmark = Column(String, nullable=True)

    gallery = Column(JSON, nullable=False, default=list)  # Image URLs, first one is the cover
    cover = Column(String, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    creator = relationship("User")
    bookings = relationship("Booking", back_populates="ground", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def location(self) -> dict:
        return {
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "pincode": self.pincode,
            "landmark": self.landmark,
        }
