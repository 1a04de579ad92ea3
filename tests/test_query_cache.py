import pytest

from conftest import booking_fields
from fleetbook.errors import ConflictError
from fleetbook.extensions import cache
from fleetbook.facade import FleetDesk
from fleetbook.patch import SetTo
from fleetbook.services import QueryCache
from fleetbook.services.query_cache import ALL_VEHICLES, AVAILABLE_VEHICLES, booking_key, user_bookings_key


def test_fetch_reads_through_once(ctx):
    calls = []

    def loader():
        calls.append(1)
        return [{"id": 1}]

    assert QueryCache.fetch("probe", loader) == [{"id": 1}]
    assert QueryCache.fetch("probe", loader) == [{"id": 1}]
    assert len(calls) == 1


def test_absent_results_are_not_cached(ctx):
    QueryCache.fetch("missing", lambda: None)

    assert cache.get("missing") is None
    assert QueryCache.fetch("missing", lambda: {"id": 7}) == {"id": 7}


def test_invalidate_drops_duplicates_and_blanks(ctx):
    cache.set("a", 1)

    assert QueryCache.invalidate("a", "a", None, "b") == ["a", "b"]
    assert cache.get("a") is None


def test_available_vehicles_are_fresh_after_booking(staff, cab):
    assert [v["id"] for v in FleetDesk.get_available_vehicles(staff)] == [cab["id"]]
    assert cache.get(AVAILABLE_VEHICLES) is not None

    FleetDesk.create_booking(staff, **booking_fields(cab["id"]))

    assert cache.get(AVAILABLE_VEHICLES) is None
    assert FleetDesk.get_available_vehicles(staff) == []
    assert FleetDesk.get_all_vehicles(staff)[0]["is_available"] is False


def test_owner_list_is_fresh_after_admin_completes(admin, staff, cab):
    booking = FleetDesk.create_booking(staff, **booking_fields(cab["id"]))
    assert FleetDesk.get_user_bookings(staff)[0]["status"] == "active"
    assert FleetDesk.get_booking(staff, booking["id"])["status"] == "active"

    FleetDesk.complete_booking(admin, booking["id"])

    assert cache.get(user_bookings_key(staff.principal)) is None
    assert cache.get(booking_key(booking["id"])) is None
    assert FleetDesk.get_user_bookings(staff)[0]["status"] == "completed"
    assert FleetDesk.get_booking(staff, booking["id"])["status"] == "completed"


def test_update_refreshes_cached_booking(staff, cab):
    booking = FleetDesk.create_booking(staff, **booking_fields(cab["id"]))
    FleetDesk.get_booking(staff, booking["id"])

    FleetDesk.update_booking(staff, booking["id"], {"rate_per_km": SetTo(20)})

    assert FleetDesk.get_booking(staff, booking["id"])["total_amount"] == 1000


def test_failed_command_keeps_cache(admin, staff, cab):
    FleetDesk.create_booking(staff, **booking_fields(cab["id"]))
    vehicles = FleetDesk.get_all_vehicles(admin)

    with pytest.raises(ConflictError):
        FleetDesk.delete_vehicle(admin, cab["id"])

    assert cache.get(ALL_VEHICLES) == vehicles
