from flask import Blueprint, jsonify, request

from fleetbook.decorators import acting_account, principal_required
from fleetbook.facade import FleetDesk
from fleetbook.patch import patch_from_payload
from fleetbook.services import VehicleService

api_vehicle_bp = Blueprint("api_vehicle", __name__)


@api_vehicle_bp.get("")
@principal_required
def list_vehicles():
    return jsonify(FleetDesk.get_all_vehicles(acting_account()))


@api_vehicle_bp.get("/available")
@principal_required
def available_vehicles():
    return jsonify(FleetDesk.get_available_vehicles(acting_account()))


@api_vehicle_bp.post("")
@principal_required
def add_vehicle():
    payload = request.get_json(silent=True) or {}
    vehicle = FleetDesk.add_vehicle(
        acting_account(),
        vehicle_type=payload.get("vehicle_type"),
        current_location=payload.get("current_location"),
    )
    return jsonify(vehicle), 201


@api_vehicle_bp.get("/<int:vehicle_id>")
@principal_required
def get_vehicle(vehicle_id):
    vehicle = FleetDesk.get_vehicle(acting_account(), vehicle_id)
    if vehicle is None:
        return jsonify({"error": "Vehicle not found."}), 404
    return jsonify(vehicle)


@api_vehicle_bp.patch("/<int:vehicle_id>")
@principal_required
def update_vehicle(vehicle_id):
    payload = request.get_json(silent=True) or {}
    patch = patch_from_payload(payload, VehicleService.PATCHABLE_FIELDS)
    return jsonify(FleetDesk.update_vehicle(acting_account(), vehicle_id, patch))


@api_vehicle_bp.delete("/<int:vehicle_id>")
@principal_required
def delete_vehicle(vehicle_id):
    FleetDesk.delete_vehicle(acting_account(), vehicle_id)
    return jsonify({"ok": True})


@api_vehicle_bp.patch("/<int:vehicle_id>/availability")
@principal_required
def set_availability(vehicle_id):
    payload = request.get_json(silent=True) or {}
    vehicle = FleetDesk.set_vehicle_availability(
        acting_account(),
        vehicle_id=vehicle_id,
        is_available=payload.get("is_available"),
    )
    return jsonify({"id": vehicle["id"], "is_available": vehicle["is_available"]})


@api_vehicle_bp.patch("/<int:vehicle_id>/location")
@principal_required
def update_location(vehicle_id):
    payload = request.get_json(silent=True) or {}
    vehicle = FleetDesk.update_vehicle_location(
        acting_account(),
        vehicle_id=vehicle_id,
        new_location=payload.get("current_location"),
    )
    return jsonify({"id": vehicle["id"], "current_location": vehicle["current_location"]})
