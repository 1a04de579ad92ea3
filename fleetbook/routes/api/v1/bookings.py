from flask import Blueprint, jsonify, request

from fleetbook.decorators import acting_account, principal_required
from fleetbook.facade import FleetDesk
from fleetbook.patch import patch_from_payload
from fleetbook.services.booking_service import BOOKING_FIELDS

api_booking_bp = Blueprint("api_booking", __name__)


@api_booking_bp.post("")
@principal_required
def create_booking():
    payload = request.get_json(silent=True) or {}
    booking = FleetDesk.create_booking(acting_account(), **{field: payload.get(field) for field in BOOKING_FIELDS})
    return jsonify(booking), 201


@api_booking_bp.get("")
@principal_required
def all_bookings():
    return jsonify(FleetDesk.get_all_bookings(acting_account()))


@api_booking_bp.get("/me")
@principal_required
def my_bookings():
    return jsonify(FleetDesk.get_user_bookings(acting_account()))


@api_booking_bp.get("/<int:booking_id>")
@principal_required
def get_booking(booking_id):
    booking = FleetDesk.get_booking(acting_account(), booking_id)
    if booking is None:
        return jsonify({"error": "Booking not found."}), 404
    return jsonify(booking)


@api_booking_bp.patch("/<int:booking_id>")
@principal_required
def update_booking(booking_id):
    payload = request.get_json(silent=True) or {}
    booking = FleetDesk.update_booking(acting_account(), booking_id, patch_from_payload(payload, BOOKING_FIELDS))
    return jsonify(booking)


@api_booking_bp.post("/<int:booking_id>/cancel")
@principal_required
def cancel_booking(booking_id):
    booking = FleetDesk.cancel_booking(acting_account(), booking_id)
    return jsonify({"id": booking["id"], "status": booking["status"]})


@api_booking_bp.post("/<int:booking_id>/complete")
@principal_required
def complete_booking(booking_id):
    booking = FleetDesk.complete_booking(acting_account(), booking_id)
    return jsonify({"id": booking["id"], "status": booking["status"]})
