from fleetbook.services.access_service import AccessService
from fleetbook.services.booking_service import BookingService
from fleetbook.services.fare import Fare, derive_fare
from fleetbook.services.query_cache import QueryCache
from fleetbook.services.vehicle_service import VehicleService

__all__ = [
    "AccessService",
    "BookingService",
    "Fare",
    "QueryCache",
    "VehicleService",
    "derive_fare",
]
