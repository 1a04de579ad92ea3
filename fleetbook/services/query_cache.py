from fleetbook.extensions import cache

ALL_BOOKINGS = "all_bookings"
AVAILABLE_VEHICLES = "available_vehicles"
ALL_VEHICLES = "all_vehicles"


def user_bookings_key(principal):
    return f"user_bookings:{principal}"


def booking_key(booking_id):
    return f"booking:{booking_id}"


def vehicle_key(vehicle_id):
    return f"vehicle:{vehicle_id}"


def user_role_key(principal):
    return f"user_role:{principal}"


def user_profile_key(principal):
    return f"user_profile:{principal}"


class QueryCache:
    """Read-through cache of serialized query results.

    Values are plain dicts and lists so any Flask-Caching backend can hold
    them. ``None`` results (absent entities) are never stored. Writers never
    update entries in place; they drop the affected keys after committing.
    """

    @staticmethod
    def fetch(key, loader):
        value = cache.get(key)
        if value is None:
            value = loader()
            if value is not None:
                cache.set(key, value)
        return value

    @staticmethod
    def invalidate(*keys):
        unique = [key for key in dict.fromkeys(keys) if key]
        if unique:
            cache.delete_many(*unique)
        return unique
