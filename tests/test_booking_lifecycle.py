import pytest
from sqlalchemy import text

from conftest import TRIP_DATE_NS, booking_fields
from fleetbook.errors import (
    AccessDeniedError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from fleetbook.extensions import db
from fleetbook.facade import FleetDesk
from fleetbook.models import Booking, Vehicle
from fleetbook.patch import CLEAR, UNSET, SetTo


def test_create_booking_derives_amounts_and_stamps(staff, cab):
    booking = FleetDesk.create_booking(staff, **booking_fields(cab["id"]))

    assert booking["status"] == "active"
    assert booking["user"] == staff.principal
    assert booking["vehicle_id"] == cab["id"]
    assert booking["date_time"] == TRIP_DATE_NS
    assert (booking["total_km"], booking["total_amount"], booking["net_amount"]) == (50, 500, 475)
    assert booking["created_at"] == booking["updated_at"]
    assert booking["created_at"] > 0


def test_create_booking_accepts_iso_datetime(staff, cab):
    booking = FleetDesk.create_booking(staff, **booking_fields(cab["id"], date_time="2026-01-01T10:00:00Z"))

    assert booking["date_time"] == TRIP_DATE_NS


def test_create_booking_clamps_reversed_odometer_and_allows_negative_net(staff, cab):
    booking = FleetDesk.create_booking(
        staff, **booking_fields(cab["id"], starting_km=300, ending_km=250, toll_tax=40, diesel_or_gas_by_customer=10)
    )

    assert booking["total_km"] == 0
    assert booking["total_amount"] == 0
    assert booking["net_amount"] == -50


def test_create_booking_for_missing_vehicle(staff):
    with pytest.raises(NotFoundError):
        FleetDesk.create_booking(staff, **booking_fields(9999))


@pytest.mark.parametrize(
    "overrides",
    [
        {"starting_km": -1},
        {"rate_per_km": "ten"},
        {"toll_tax": True},
        {"ending_km": 12.5},
        {"customer_name": None},
        {"date_time": "next tuesday"},
        {"ending_km": 10**20},
        {"rate_per_km": 2**63},
        {"vehicle_id": 2**64},
        {"date_time": 2**63},
        {"date_time": "9999-12-31T00:00:00Z"},
        {"date_time": "1969-12-31T23:59:59Z"},
        {"starting_km": 0, "ending_km": 2**40, "rate_per_km": 2**40},
        {"toll_tax": 2**63 - 1, "diesel_or_gas_by_customer": 2**63 - 1},
    ],
)
def test_create_booking_rejects_malformed_input(staff, cab, overrides):
    with pytest.raises(ValidationError):
        FleetDesk.create_booking(staff, **booking_fields(cab["id"], **overrides))
    assert Booking.query.count() == 0


def test_create_booking_requires_identity(anonymous, cab, ctx):
    with pytest.raises(UnauthorizedError):
        FleetDesk.create_booking(anonymous, **booking_fields(cab["id"]))


def test_cancel_moves_active_to_cancelled_once(admin, staff, cab):
    booking = FleetDesk.create_booking(staff, **booking_fields(cab["id"]))

    cancelled = FleetDesk.cancel_booking(staff, booking["id"])
    assert cancelled["status"] == "cancelled"
    assert cancelled["updated_at"] >= booking["updated_at"]

    with pytest.raises(InvalidStateError):
        FleetDesk.cancel_booking(staff, booking["id"])
    with pytest.raises(InvalidStateError):
        FleetDesk.complete_booking(admin, booking["id"])


def test_complete_is_terminal(admin, staff, cab):
    booking = FleetDesk.create_booking(staff, **booking_fields(cab["id"]))

    assert FleetDesk.complete_booking(admin, booking["id"])["status"] == "completed"
    with pytest.raises(InvalidStateError):
        FleetDesk.complete_booking(admin, booking["id"])
    with pytest.raises(InvalidStateError):
        FleetDesk.cancel_booking(staff, booking["id"])


def test_complete_requires_admin(staff, cab):
    booking = FleetDesk.create_booking(staff, **booking_fields(cab["id"]))

    with pytest.raises(AccessDeniedError):
        FleetDesk.complete_booking(staff, booking["id"])
    assert FleetDesk.get_booking(staff, booking["id"])["status"] == "active"


def test_cancel_missing_booking(staff):
    with pytest.raises(NotFoundError):
        FleetDesk.cancel_booking(staff, 404)


def test_other_staff_cannot_touch_booking(staff, other_staff, cab):
    booking = FleetDesk.create_booking(staff, **booking_fields(cab["id"]))

    with pytest.raises(AccessDeniedError):
        FleetDesk.cancel_booking(other_staff, booking["id"])
    with pytest.raises(AccessDeniedError):
        FleetDesk.update_booking(other_staff, booking["id"], {"destination": SetTo("Harbour")})
    with pytest.raises(AccessDeniedError):
        FleetDesk.get_booking(other_staff, booking["id"])


def test_admin_can_edit_any_active_booking(admin, staff, cab):
    booking = FleetDesk.create_booking(staff, **booking_fields(cab["id"]))

    updated = FleetDesk.update_booking(admin, booking["id"], {"destination": SetTo("Harbour")})

    assert updated["destination"] == "Harbour"
    assert updated["user"] == staff.principal


def test_partial_update_leaves_unset_fields(staff, cab):
    booking = FleetDesk.create_booking(staff, **booking_fields(cab["id"]))

    updated = FleetDesk.update_booking(
        staff,
        booking["id"],
        {"customer_name": SetTo("Ravi Kumar"), "destination": UNSET, "pickup_location": UNSET},
    )

    assert updated["customer_name"] == "Ravi Kumar"
    assert updated["destination"] == "Airport"
    assert updated["pickup_location"] == "Central Station"
    assert updated["net_amount"] == 475
    assert updated["created_at"] == booking["created_at"]
    assert updated["updated_at"] >= booking["updated_at"]


def test_update_recomputes_fare_from_stored_and_new_inputs(staff, cab):
    booking = FleetDesk.create_booking(staff, **booking_fields(cab["id"]))

    updated = FleetDesk.update_booking(staff, booking["id"], {"ending_km": SetTo(200), "toll_tax": SetTo(0)})

    assert updated["total_km"] == 100
    assert updated["total_amount"] == 1000
    assert updated["net_amount"] == 995


def test_update_rejects_clear(staff, cab):
    booking = FleetDesk.create_booking(staff, **booking_fields(cab["id"]))

    with pytest.raises(ValidationError):
        FleetDesk.update_booking(staff, booking["id"], {"destination": CLEAR})


@pytest.mark.parametrize(
    "patch",
    [
        {},
        {"destination": SetTo("Harbour")},
        {"ending_km": SetTo(999), "rate_per_km": SetTo(1)},
        {"toll_tax": SetTo(-5)},
    ],
)
def test_update_on_closed_booking_always_fails(admin, staff, cab, patch):
    booking = FleetDesk.create_booking(staff, **booking_fields(cab["id"]))
    FleetDesk.complete_booking(admin, booking["id"])

    with pytest.raises(InvalidStateError):
        FleetDesk.update_booking(staff, booking["id"], patch)


def test_failed_update_changes_nothing(staff, cab):
    booking = FleetDesk.create_booking(staff, **booking_fields(cab["id"]))

    with pytest.raises(ValidationError):
        FleetDesk.update_booking(staff, booking["id"], {"ending_km": SetTo(500), "toll_tax": SetTo(-1)})
    db.session.rollback()

    stored = db.session.get(Booking, booking["id"])
    assert stored.ending_km == 150
    assert stored.toll_tax == 20
    assert stored.net_amount == 475


@pytest.mark.parametrize(
    "patch",
    [
        {"ending_km": SetTo(10**20)},
        {"ending_km": SetTo(2**40), "rate_per_km": SetTo(2**40)},
        {"toll_tax": SetTo(2**63 - 1), "diesel_or_gas_by_customer": SetTo(2**63 - 1)},
        {"date_time": SetTo(2**63)},
    ],
)
def test_update_rejects_amounts_beyond_storage(staff, cab, patch):
    booking = FleetDesk.create_booking(staff, **booking_fields(cab["id"]))

    with pytest.raises(ValidationError):
        FleetDesk.update_booking(staff, booking["id"], patch)
    db.session.rollback()

    stored = db.session.get(Booking, booking["id"])
    assert (stored.ending_km, stored.rate_per_km, stored.total_amount) == (150, 10, 500)


def test_largest_storable_amounts_are_accepted(staff, cab):
    fields = booking_fields(cab["id"], starting_km=0, ending_km=2**62, rate_per_km=1, toll_tax=0, diesel_or_gas_by_customer=0)

    booking = FleetDesk.create_booking(staff, **fields)

    assert booking["total_amount"] == 2**62


def test_claim_reads_current_availability(staff, cab):
    vehicle = db.session.get(Vehicle, cab["id"])
    assert vehicle.is_available is True
    db.session.execute(text("UPDATE vehicles SET is_available = 0 WHERE id = :id"), {"id": cab["id"]})

    with pytest.raises(ConflictError):
        FleetDesk.create_booking(staff, **booking_fields(cab["id"]))


def test_update_to_missing_vehicle(staff, cab):
    booking = FleetDesk.create_booking(staff, **booking_fields(cab["id"]))

    with pytest.raises(NotFoundError):
        FleetDesk.update_booking(staff, booking["id"], {"vehicle_id": SetTo(9999)})
    db.session.rollback()
    assert db.session.get(Booking, booking["id"]).vehicle_id == cab["id"]


def test_update_moves_booking_to_another_vehicle(staff, cab, van):
    booking = FleetDesk.create_booking(staff, **booking_fields(cab["id"]))

    updated = FleetDesk.update_booking(staff, booking["id"], {"vehicle_id": SetTo(van["id"])})

    assert updated["vehicle_id"] == van["id"]
    assert FleetDesk.get_vehicle(staff, cab["id"])["is_available"] is True
    assert FleetDesk.get_vehicle(staff, van["id"])["is_available"] is False


def test_booking_listings(admin, staff, other_staff, cab, van):
    mine = FleetDesk.create_booking(staff, **booking_fields(cab["id"]))
    theirs = FleetDesk.create_booking(other_staff, **booking_fields(van["id"]))

    assert [b["id"] for b in FleetDesk.get_user_bookings(staff)] == [mine["id"]]
    assert [b["id"] for b in FleetDesk.get_user_bookings(other_staff)] == [theirs["id"]]
    assert {b["id"] for b in FleetDesk.get_all_bookings(admin)} == {mine["id"], theirs["id"]}
    with pytest.raises(AccessDeniedError):
        FleetDesk.get_all_bookings(staff)


def test_get_missing_booking_is_absent(staff):
    assert FleetDesk.get_booking(staff, 12345) is None
