import pytest
from flask_login import AnonymousUserMixin

from fleetbook import create_app
from fleetbook.extensions import cache, db
from fleetbook.facade import FleetDesk
from fleetbook.services import AccessService

ADMIN_PRINCIPAL = "principal-admin"
STAFF_PRINCIPAL = "principal-staff"
OTHER_PRINCIPAL = "principal-other"

TRIP_DATE_NS = 1_767_261_600_000_000_000


@pytest.fixture()
def app():
    app = create_app("testing")
    yield app
    with app.app_context():
        cache.clear()
        db.drop_all()


@pytest.fixture()
def ctx(app):
    with app.app_context():
        yield app
        db.session.remove()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def admin(ctx):
    return AccessService.load_or_register(ADMIN_PRINCIPAL)


@pytest.fixture()
def staff(ctx):
    return AccessService.load_or_register(STAFF_PRINCIPAL)


@pytest.fixture()
def other_staff(ctx):
    return AccessService.load_or_register(OTHER_PRINCIPAL)


@pytest.fixture()
def anonymous():
    return AnonymousUserMixin()


@pytest.fixture()
def cab(admin):
    return FleetDesk.add_vehicle(admin, "cab", "Depot A")


@pytest.fixture()
def van(admin):
    return FleetDesk.add_vehicle(admin, "van", "Depot B")


def booking_fields(vehicle_id, /, **overrides):
    fields = {
        "vehicle_id": vehicle_id,
        "date_time": TRIP_DATE_NS,
        "pickup_location": "Central Station",
        "destination": "Airport",
        "vehicle_no": "KA-01-1234",
        "customer_name": "Asha Rao",
        "customer_no": "9876543210",
        "starting_km": 100,
        "ending_km": 150,
        "rate_per_km": 10,
        "toll_tax": 20,
        "diesel_or_gas_by_customer": 5,
    }
    fields.update(overrides)
    return fields


def headers_for(principal):
    return {"X-Authenticated-Principal": principal}
