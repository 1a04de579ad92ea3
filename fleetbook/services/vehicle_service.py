from flask import current_app

from fleetbook.errors import ConflictError, NotFoundError, ValidationError
from fleetbook.extensions import db
from fleetbook.models import Booking, BookingStatus, Vehicle, VehicleType
from fleetbook.patch import cleared_fields, set_fields
from fleetbook.services.parsing import parse_bool, parse_text


class VehicleService:
    PATCHABLE_FIELDS = ("vehicle_type", "current_location")

    @staticmethod
    def get_vehicle(vehicle_id):
        return db.session.get(Vehicle, vehicle_id)

    @staticmethod
    def require_vehicle(vehicle_id):
        vehicle = db.session.get(Vehicle, vehicle_id)
        if not vehicle:
            raise NotFoundError("Vehicle not found.")
        return vehicle

    @staticmethod
    def list_all():
        return Vehicle.query.order_by(Vehicle.id.asc()).all()

    @staticmethod
    def list_available():
        return Vehicle.query.filter_by(is_available=True).order_by(Vehicle.id.asc()).all()

    @staticmethod
    def has_active_booking(vehicle_id, exclude_booking_id=None):
        query = Booking.query.filter_by(vehicle_id=vehicle_id, status=BookingStatus.ACTIVE.value)
        if exclude_booking_id is not None:
            query = query.filter(Booking.id != exclude_booking_id)
        return query.first() is not None

    @staticmethod
    def add_vehicle(vehicle_type, current_location):
        parsed_type = VehicleType.parse(vehicle_type, "vehicle type")
        location = parse_text(current_location if current_location is not None else "", "Current location")

        vehicle = Vehicle(vehicle_type=parsed_type.value, current_location=location, is_available=True)
        db.session.add(vehicle)
        db.session.commit()
        current_app.logger.info("Vehicle %s added (%s at %r)", vehicle.id, vehicle.vehicle_type, location)
        return vehicle

    @staticmethod
    def delete_vehicle(vehicle_id):
        vehicle = VehicleService.require_vehicle(vehicle_id)
        if VehicleService.has_active_booking(vehicle.id):
            raise ConflictError("Vehicle has an active booking and cannot be deleted.")
        db.session.delete(vehicle)
        db.session.commit()
        current_app.logger.info("Vehicle %s deleted", vehicle_id)

    @staticmethod
    def update_vehicle(vehicle_id, patch):
        vehicle = VehicleService.require_vehicle(vehicle_id)
        if cleared_fields(patch):
            raise ValidationError("Vehicle type and location cannot be cleared.")

        changes = set_fields(patch)
        unknown = set(changes) - set(VehicleService.PATCHABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown vehicle fields: {', '.join(sorted(unknown))}.")

        updates = {}
        if "vehicle_type" in changes:
            updates["vehicle_type"] = VehicleType.parse(changes["vehicle_type"], "vehicle type").value
        if "current_location" in changes:
            updates["current_location"] = parse_text(changes["current_location"], "Current location")

        for field, value in updates.items():
            setattr(vehicle, field, value)
        db.session.commit()
        current_app.logger.info("Vehicle %s updated: %s", vehicle.id, ", ".join(sorted(updates)) or "no changes")
        return vehicle

    @staticmethod
    def set_availability(vehicle_id, is_available):
        vehicle = VehicleService.require_vehicle(vehicle_id)
        vehicle.is_available = parse_bool(is_available, "Availability")
        db.session.commit()
        current_app.logger.info("Vehicle %s availability set to %s", vehicle.id, vehicle.is_available)
        return vehicle

    @staticmethod
    def update_location(vehicle_id, new_location):
        vehicle = VehicleService.require_vehicle(vehicle_id)
        if new_location is None:
            raise ValidationError("New location is required.")
        vehicle.current_location = parse_text(new_location, "Current location")
        db.session.commit()
        current_app.logger.info("Vehicle %s moved to %r", vehicle.id, vehicle.current_location)
        return vehicle
