"""Database models."""
from groundbook.models.user import User
from groundbook.models.ground import Ground
from groundbook.models.booking import Booking, BookingStatus

__all__ = ["User", "Ground", "Booking", "BookingStatus"]
