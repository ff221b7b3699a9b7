"""API schemas."""
from groundbook.schemas.user import (
    UserRegister,
    UserLogin,
    UserPublic,
    AuthResponse,
)
from groundbook.schemas.ground import (
    Location,
    GroundCreate,
    GroundUpdate,
    GroundInDB,
    GroundStatusToggle,
    SlotAvailability,
    GroundAvailability,
)
from groundbook.schemas.booking import (
    BookingCreate,
    BookingStatusUpdate,
    BookingInDB,
    BookingDetail,
    BookingAdminRow,
)
from groundbook.schemas.stats import (
    DailyAmount,
    DailyCount,
    DashboardStats,
    ChartData,
    TopGround,
    Analytics,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserPublic",
    "AuthResponse",
    "Location",
    "GroundCreate",
    "GroundUpdate",
    "GroundInDB",
    "GroundStatusToggle",
    "SlotAvailability",
    "GroundAvailability",
    "BookingCreate",
    "BookingStatusUpdate",
    "BookingInDB",
    "BookingDetail",
    "BookingAdminRow",
    "DailyAmount",
    "DailyCount",
    "DashboardStats",
    "ChartData",
    "TopGround",
    "Analytics",
]
