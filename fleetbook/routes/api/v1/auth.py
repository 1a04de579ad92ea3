from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_user, logout_user

from fleetbook.decorators import acting_account, principal_required
from fleetbook.errors import UnauthorizedError
from fleetbook.extensions import limiter
from fleetbook.facade import FleetDesk
from fleetbook.services import AccessService

api_auth_bp = Blueprint("api_auth", __name__)


@api_auth_bp.post("/login")
@limiter.limit("30 per minute")
def api_login():
    principal = request.headers.get(current_app.config["PRINCIPAL_HEADER"], "")
    account = AccessService.load_or_register(principal, touch=True)
    if account is None:
        raise UnauthorizedError("No authenticated principal supplied by the identity provider.")
    login_user(account)
    return jsonify({"principal": account.principal, "role": account.role})


@api_auth_bp.post("/logout")
@principal_required
def api_logout():
    logout_user()
    return jsonify({"ok": True})


@api_auth_bp.get("/me")
def api_me():
    actor = acting_account()
    if not current_user.is_authenticated:
        return jsonify({"authenticated": False, "principal": None, "role": FleetDesk.get_caller_user_role(actor)})
    role = FleetDesk.get_caller_user_role(actor)
    return jsonify(
        {
            "authenticated": True,
            "principal": actor.principal,
            "role": role,
            "profile": FleetDesk.get_caller_profile(actor) if role != "guest" else None,
        }
    )
