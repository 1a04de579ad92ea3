from fleetbook.models.account import Account
from fleetbook.models.booking import Booking
from fleetbook.models.enums import BookingStatus, UserRole, VehicleType
from fleetbook.models.vehicle import Vehicle

__all__ = [
    "Account",
    "Booking",
    "Vehicle",
    "BookingStatus",
    "UserRole",
    "VehicleType",
]
