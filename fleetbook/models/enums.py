import enum

from fleetbook.errors import ValidationError


class _ClosedEnum(str, enum.Enum):
    @classmethod
    def parse(cls, raw, label=None):
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except (TypeError, ValueError) as exc:
            allowed = ", ".join(member.value for member in cls)
            raise ValidationError(f"Invalid {label or cls.__name__}: expected one of {allowed}.") from exc


class VehicleType(_ClosedEnum):
    CAB = "cab"
    VAN = "van"
    TRUCK = "truck"
    BUS = "bus"


class BookingStatus(_ClosedEnum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class UserRole(_ClosedEnum):
    ADMIN = "admin"
    USER = "user"
    GUEST = "guest"
