from typing import NamedTuple

FARE_INPUTS = ("starting_km", "ending_km", "rate_per_km", "toll_tax", "diesel_or_gas_by_customer")


class Fare(NamedTuple):
    total_km: int
    total_amount: int
    net_amount: int


def derive_fare(starting_km, ending_km, rate_per_km, toll_tax, diesel_or_gas_by_customer):
    """Distance, gross and net amounts for a trip.

    An odometer reading that goes backwards counts as zero distance. The net
    amount is not clamped and may be negative when deductions exceed the
    gross amount.
    """
    total_km = max(0, ending_km - starting_km)
    total_amount = total_km * rate_per_km
    net_amount = total_amount - toll_tax - diesel_or_gas_by_customer
    return Fare(total_km=total_km, total_amount=total_amount, net_amount=net_amount)
