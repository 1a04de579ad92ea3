from flask import current_app

from fleetbook.errors import ConflictError, InvalidStateError, NotFoundError, ValidationError
from fleetbook.extensions import db
from fleetbook.models import Booking, BookingStatus, Vehicle
from fleetbook.models.base import now_ns
from fleetbook.patch import cleared_fields, set_fields
from fleetbook.services.access_service import AccessService
from fleetbook.services.fare import FARE_INPUTS, derive_fare
from fleetbook.services.parsing import ensure_storable, parse_instant_ns, parse_non_negative_int, parse_text
from fleetbook.services.vehicle_service import VehicleService

BOOKING_TRANSITIONS = {
    "active": {"completed", "cancelled"},
    "completed": set(),
    "cancelled": set(),
}

TEXT_FIELDS = {
    "pickup_location": ("Pickup location", 255),
    "destination": ("Destination", 255),
    "vehicle_no": ("Vehicle number", 64),
    "customer_name": ("Customer name", 120),
    "customer_no": ("Customer number", 32),
}

NUMERIC_FIELDS = {
    "starting_km": "Starting km",
    "ending_km": "Ending km",
    "rate_per_km": "Rate per km",
    "toll_tax": "Toll tax",
    "diesel_or_gas_by_customer": "Diesel/gas by customer",
}

BOOKING_FIELDS = ("vehicle_id", "date_time", *TEXT_FIELDS, *NUMERIC_FIELDS)


class BookingService:
    @staticmethod
    def _clean_fields(raw, required):
        cleaned = {}
        for field in BOOKING_FIELDS:
            if field not in raw:
                continue
            value = raw[field]
            if value is None:
                if required:
                    raise ValidationError(f"{field.replace('_', ' ').capitalize()} is required.")
                continue
            if field == "vehicle_id":
                cleaned[field] = parse_non_negative_int(value, "Vehicle id")
            elif field == "date_time":
                cleaned[field] = parse_instant_ns(value, "Date/time")
            elif field in TEXT_FIELDS:
                label, max_length = TEXT_FIELDS[field]
                cleaned[field] = parse_text(value, label, max_length=max_length)
            else:
                cleaned[field] = parse_non_negative_int(value, NUMERIC_FIELDS[field])
        return cleaned

    @staticmethod
    def _release_vehicle(vehicle_id, booking_id):
        vehicle = VehicleService.get_vehicle(vehicle_id)
        if vehicle and not VehicleService.has_active_booking(vehicle_id, exclude_booking_id=booking_id):
            vehicle.is_available = True

    @staticmethod
    def _storable_fare(inputs):
        fare = derive_fare(**{name: inputs[name] for name in FARE_INPUTS})
        ensure_storable(fare.total_amount, "Total amount")
        ensure_storable(fare.net_amount, "Net amount")
        return fare

    @staticmethod
    def _claim_vehicle(vehicle_id):
        # Locked and re-read; concurrent claims serialize on the vehicle row.
        vehicle = db.session.get(Vehicle, vehicle_id, with_for_update=True, populate_existing=True)
        if not vehicle:
            raise NotFoundError("Vehicle not found.")
        if not vehicle.is_available:
            raise ConflictError("Vehicle is not available.")
        return vehicle

    @staticmethod
    def require_booking(booking_id):
        booking = db.session.get(Booking, booking_id)
        if not booking:
            raise NotFoundError("Booking not found.")
        return booking

    @staticmethod
    def get_booking(booking_id):
        return db.session.get(Booking, booking_id)

    @staticmethod
    def list_for_account(account):
        return (
            Booking.query.filter_by(account_id=account.id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .all()
        )

    @staticmethod
    def list_all():
        return Booking.query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()

    @staticmethod
    def create_booking(
        account,
        vehicle_id,
        date_time,
        pickup_location,
        destination,
        vehicle_no,
        customer_name,
        customer_no,
        starting_km,
        ending_km,
        rate_per_km,
        toll_tax,
        diesel_or_gas_by_customer,
    ):
        fields = BookingService._clean_fields(
            {
                "vehicle_id": vehicle_id,
                "date_time": date_time,
                "pickup_location": pickup_location,
                "destination": destination,
                "vehicle_no": vehicle_no,
                "customer_name": customer_name,
                "customer_no": customer_no,
                "starting_km": starting_km,
                "ending_km": ending_km,
                "rate_per_km": rate_per_km,
                "toll_tax": toll_tax,
                "diesel_or_gas_by_customer": diesel_or_gas_by_customer,
            },
            required=True,
        )
        fare = BookingService._storable_fare(fields)
        vehicle = BookingService._claim_vehicle(fields["vehicle_id"])

        now = now_ns()
        booking = Booking(
            account_id=account.id,
            status=BookingStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
            **fields,
            **fare._asdict(),
        )
        vehicle.is_available = False
        db.session.add(booking)
        db.session.commit()
        current_app.logger.info(
            "Booking %s created by %s for vehicle %s", booking.id, account.principal, booking.vehicle_id
        )
        return booking

    @staticmethod
    def update_booking(account, booking_id, patch):
        booking = BookingService.require_booking(booking_id)
        AccessService.ensure_owner_or_admin(account, booking)
        if booking.status != BookingStatus.ACTIVE.value:
            raise InvalidStateError(f"Booking is {booking.status}; only active bookings can be changed.")
        if cleared_fields(patch):
            raise ValidationError("Booking fields cannot be cleared.")

        changes = set_fields(patch)
        unknown = set(changes) - set(BOOKING_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown booking fields: {', '.join(sorted(unknown))}.")
        updates = BookingService._clean_fields(changes, required=False)

        fare_inputs = {name: updates.get(name, getattr(booking, name)) for name in FARE_INPUTS}
        updates.update(BookingService._storable_fare(fare_inputs)._asdict())

        new_vehicle = None
        previous_vehicle_id = booking.vehicle_id
        if "vehicle_id" in updates and updates["vehicle_id"] != previous_vehicle_id:
            new_vehicle = BookingService._claim_vehicle(updates["vehicle_id"])

        for field, value in updates.items():
            setattr(booking, field, value)
        booking.updated_at = now_ns()
        if new_vehicle is not None:
            new_vehicle.is_available = False
            BookingService._release_vehicle(previous_vehicle_id, booking.id)

        db.session.commit()
        current_app.logger.info("Booking %s updated by %s", booking.id, account.principal)
        return booking

    @staticmethod
    def _transition(booking, target):
        current = booking.status
        if target.value not in BOOKING_TRANSITIONS.get(current, set()):
            raise InvalidStateError(f"Invalid status transition from {current} to {target.value}.")
        booking.status = target.value
        booking.updated_at = now_ns()
        BookingService._release_vehicle(booking.vehicle_id, booking.id)
        db.session.commit()
        return booking

    @staticmethod
    def cancel_booking(account, booking_id):
        booking = BookingService.require_booking(booking_id)
        AccessService.ensure_owner_or_admin(account, booking)
        BookingService._transition(booking, BookingStatus.CANCELLED)
        current_app.logger.info("Booking %s cancelled by %s", booking.id, account.principal)
        return booking

    @staticmethod
    def complete_booking(account, booking_id):
        booking = BookingService.require_booking(booking_id)
        BookingService._transition(booking, BookingStatus.COMPLETED)
        current_app.logger.info("Booking %s completed by %s", booking.id, account.principal)
        return booking
