"""Query/command boundary used by the HTTP layer.

Every call takes the acting account (or Flask-Login's anonymous user),
authorizes it against the access matrix, and then either reads through the
query cache or runs a command and drops the cache keys that command makes
stale. Invalidation only happens after the command committed; a failing
command leaves both the store and the cache untouched.
"""

from fleetbook.errors import AccessDeniedError
from fleetbook.models import UserRole
from fleetbook.serializers import booking_to_dict, vehicle_to_dict
from fleetbook.services import AccessService, BookingService, VehicleService
from fleetbook.services.query_cache import (
    ALL_BOOKINGS,
    ALL_VEHICLES,
    AVAILABLE_VEHICLES,
    QueryCache,
    booking_key,
    user_bookings_key,
    user_profile_key,
    user_role_key,
    vehicle_key,
)


def _booking_keys(owner_principal, booking_id, *vehicle_ids):
    keys = [user_bookings_key(owner_principal), ALL_BOOKINGS, booking_key(booking_id), AVAILABLE_VEHICLES, ALL_VEHICLES]
    keys.extend(vehicle_key(vehicle_id) for vehicle_id in vehicle_ids if vehicle_id is not None)
    return keys


def _vehicle_keys(vehicle_id):
    return [AVAILABLE_VEHICLES, ALL_VEHICLES, vehicle_key(vehicle_id)]


class FleetDesk:
    # Bookings

    @staticmethod
    def create_booking(actor, **fields):
        AccessService.authorize(actor, "create_booking")
        booking = BookingService.create_booking(actor, **fields)
        QueryCache.invalidate(*_booking_keys(actor.principal, booking.id, booking.vehicle_id))
        return booking_to_dict(booking)

    @staticmethod
    def update_booking(actor, booking_id, patch):
        AccessService.authorize(actor, "update_booking")
        existing = BookingService.get_booking(booking_id)
        previous_vehicle_id = existing.vehicle_id if existing else None
        booking = BookingService.update_booking(actor, booking_id, patch)
        QueryCache.invalidate(
            *_booking_keys(booking.account.principal, booking.id, previous_vehicle_id, booking.vehicle_id)
        )
        return booking_to_dict(booking)

    @staticmethod
    def cancel_booking(actor, booking_id):
        AccessService.authorize(actor, "cancel_booking")
        booking = BookingService.cancel_booking(actor, booking_id)
        QueryCache.invalidate(*_booking_keys(booking.account.principal, booking.id, booking.vehicle_id))
        return booking_to_dict(booking)

    @staticmethod
    def complete_booking(actor, booking_id):
        AccessService.authorize(actor, "complete_booking")
        booking = BookingService.complete_booking(actor, booking_id)
        QueryCache.invalidate(*_booking_keys(booking.account.principal, booking.id, booking.vehicle_id))
        return booking_to_dict(booking)

    @staticmethod
    def get_booking(actor, booking_id):
        AccessService.authorize(actor, "get_booking")

        def load():
            booking = BookingService.get_booking(booking_id)
            return booking_to_dict(booking) if booking else None

        data = QueryCache.fetch(booking_key(booking_id), load)
        if data is not None and data["user"] != actor.principal and not AccessService.is_admin(actor):
            raise AccessDeniedError("Not authorized for this booking.")
        return data

    @staticmethod
    def get_user_bookings(actor):
        AccessService.authorize(actor, "get_user_bookings")
        return QueryCache.fetch(
            user_bookings_key(actor.principal),
            lambda: [booking_to_dict(b) for b in BookingService.list_for_account(actor)],
        )

    @staticmethod
    def get_all_bookings(actor):
        AccessService.authorize(actor, "get_all_bookings")
        return QueryCache.fetch(ALL_BOOKINGS, lambda: [booking_to_dict(b) for b in BookingService.list_all()])

    # Vehicles

    @staticmethod
    def add_vehicle(actor, vehicle_type, current_location):
        AccessService.authorize(actor, "add_vehicle")
        vehicle = VehicleService.add_vehicle(vehicle_type, current_location)
        QueryCache.invalidate(*_vehicle_keys(vehicle.id))
        return vehicle_to_dict(vehicle)

    @staticmethod
    def delete_vehicle(actor, vehicle_id):
        AccessService.authorize(actor, "delete_vehicle")
        VehicleService.delete_vehicle(vehicle_id)
        QueryCache.invalidate(*_vehicle_keys(vehicle_id))

    @staticmethod
    def update_vehicle(actor, vehicle_id, patch):
        AccessService.authorize(actor, "update_vehicle")
        vehicle = VehicleService.update_vehicle(vehicle_id, patch)
        QueryCache.invalidate(*_vehicle_keys(vehicle.id))
        return vehicle_to_dict(vehicle)

    @staticmethod
    def set_vehicle_availability(actor, vehicle_id, is_available):
        AccessService.authorize(actor, "set_vehicle_availability")
        vehicle = VehicleService.set_availability(vehicle_id, is_available)
        QueryCache.invalidate(*_vehicle_keys(vehicle.id))
        return vehicle_to_dict(vehicle)

    @staticmethod
    def update_vehicle_location(actor, vehicle_id, new_location):
        AccessService.authorize(actor, "update_vehicle_location")
        vehicle = VehicleService.update_location(vehicle_id, new_location)
        QueryCache.invalidate(*_vehicle_keys(vehicle.id))
        return vehicle_to_dict(vehicle)

    @staticmethod
    def get_available_vehicles(actor):
        AccessService.authorize(actor, "get_available_vehicles")
        return QueryCache.fetch(
            AVAILABLE_VEHICLES, lambda: [vehicle_to_dict(v) for v in VehicleService.list_available()]
        )

    @staticmethod
    def get_all_vehicles(actor):
        AccessService.authorize(actor, "get_all_vehicles")
        return QueryCache.fetch(ALL_VEHICLES, lambda: [vehicle_to_dict(v) for v in VehicleService.list_all()])

    @staticmethod
    def get_vehicle(actor, vehicle_id):
        AccessService.authorize(actor, "get_vehicle")

        def load():
            vehicle = VehicleService.get_vehicle(vehicle_id)
            return vehicle_to_dict(vehicle) if vehicle else None

        return QueryCache.fetch(vehicle_key(vehicle_id), load)

    # Roles and profiles

    @staticmethod
    def get_caller_user_role(actor):
        AccessService.authorize(actor, "get_caller_user_role")
        if not getattr(actor, "is_authenticated", False):
            return UserRole.GUEST.value
        return QueryCache.fetch(user_role_key(actor.principal), lambda: AccessService.role_for(actor).value)

    @staticmethod
    def is_caller_admin(actor):
        AccessService.authorize(actor, "is_caller_admin")
        return FleetDesk.get_caller_user_role(actor) == UserRole.ADMIN.value

    @staticmethod
    def assign_user_role(actor, principal, role):
        AccessService.authorize(actor, "assign_user_role")
        account = AccessService.assign_role(principal, role)
        QueryCache.invalidate(user_role_key(account.principal), user_profile_key(account.principal))
        return {"principal": account.principal, "role": account.role}

    @staticmethod
    def get_caller_profile(actor):
        AccessService.authorize(actor, "get_caller_profile")
        return QueryCache.fetch(user_profile_key(actor.principal), lambda: AccessService.profile_of(actor))

    @staticmethod
    def save_caller_profile(actor, name, title=None):
        AccessService.authorize(actor, "save_caller_profile")
        account = AccessService.save_profile(actor, name, title)
        QueryCache.invalidate(user_profile_key(account.principal))
        return AccessService.profile_of(account)

    @staticmethod
    def get_user_profile(actor, principal):
        AccessService.authorize(actor, "get_user_profile")
        AccessService.ensure_can_view_profile(actor, principal)
        return QueryCache.fetch(user_profile_key(principal), lambda: AccessService.profile_for_principal(principal))
