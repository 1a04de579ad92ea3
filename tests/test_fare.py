import pytest

from fleetbook.services import Fare, derive_fare


def test_reference_trip_amounts():
    assert derive_fare(100, 150, 10, 20, 5) == Fare(total_km=50, total_amount=500, net_amount=475)


@pytest.mark.parametrize(
    "inputs, expected",
    [
        ((0, 0, 10, 0, 0), (0, 0, 0)),
        ((200, 150, 10, 0, 0), (0, 0, 0)),
        ((200, 150, 10, 30, 5), (0, 0, -35)),
        ((100, 110, 5, 40, 30), (10, 50, -20)),
        ((1_000, 1_250, 0, 0, 0), (250, 0, 0)),
        ((12, 1_012, 18, 250, 400), (1_000, 18_000, 17_350)),
    ],
)
def test_derived_amounts(inputs, expected):
    fare = derive_fare(*inputs)
    starting_km, ending_km, rate_per_km, toll_tax, diesel = inputs

    assert tuple(fare) == expected
    assert fare.total_km == max(0, ending_km - starting_km)
    assert fare.total_amount == fare.total_km * rate_per_km
    assert fare.net_amount == fare.total_amount - toll_tax - diesel


def test_derivation_is_repeatable():
    first = derive_fare(40, 95, 12, 15, 10)
    assert all(derive_fare(40, 95, 12, 15, 10) == first for _ in range(5))
