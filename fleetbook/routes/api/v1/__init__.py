from flask import Blueprint

from fleetbook.routes.api.v1.access import api_access_bp
from fleetbook.routes.api.v1.auth import api_auth_bp
from fleetbook.routes.api.v1.bookings import api_booking_bp
from fleetbook.routes.api.v1.vehicles import api_vehicle_bp

api_v1_bp = Blueprint("api_v1", __name__)
api_v1_bp.register_blueprint(api_auth_bp, url_prefix="/auth")
api_v1_bp.register_blueprint(api_booking_bp, url_prefix="/bookings")
api_v1_bp.register_blueprint(api_vehicle_bp, url_prefix="/vehicles")
api_v1_bp.register_blueprint(api_access_bp, url_prefix="/access")
