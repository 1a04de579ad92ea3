from flask import Blueprint, jsonify, request

from fleetbook.decorators import acting_account, principal_required
from fleetbook.facade import FleetDesk

api_access_bp = Blueprint("api_access", __name__)


@api_access_bp.get("/role")
def caller_role():
    return jsonify({"role": FleetDesk.get_caller_user_role(acting_account())})


@api_access_bp.get("/is-admin")
def caller_is_admin():
    return jsonify({"is_admin": FleetDesk.is_caller_admin(acting_account())})


@api_access_bp.get("/profile")
@principal_required
def caller_profile():
    return jsonify({"profile": FleetDesk.get_caller_profile(acting_account())})


@api_access_bp.put("/profile")
@principal_required
def save_caller_profile():
    payload = request.get_json(silent=True) or {}
    profile = FleetDesk.save_caller_profile(acting_account(), payload.get("name"), payload.get("title"))
    return jsonify({"profile": profile})


@api_access_bp.get("/profiles/<path:principal>")
@principal_required
def user_profile(principal):
    return jsonify({"principal": principal, "profile": FleetDesk.get_user_profile(acting_account(), principal)})


@api_access_bp.put("/roles/<path:principal>")
@principal_required
def assign_role(principal):
    payload = request.get_json(silent=True) or {}
    return jsonify(FleetDesk.assign_user_role(acting_account(), principal, payload.get("role")))
