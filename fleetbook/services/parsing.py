from datetime import datetime, timezone

from fleetbook.errors import ValidationError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Largest value a BIGINT column holds.
MAX_STORED_INT = 2**63 - 1


def ensure_storable(number, label):
    if not -MAX_STORED_INT - 1 <= number <= MAX_STORED_INT:
        raise ValidationError(f"{label} is out of range.")
    return number


def parse_non_negative_int(value, label):
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a non-negative integer.")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{label} must be a non-negative integer.")
    try:
        number = int(str(value).strip()) if isinstance(value, str) else int(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValidationError(f"{label} must be a non-negative integer.") from exc
    if number < 0:
        raise ValidationError(f"{label} must be a non-negative integer.")
    return ensure_storable(number, label)


def parse_text(value, label, max_length=255):
    if not isinstance(value, str):
        raise ValidationError(f"{label} must be text.")
    text = value.strip()
    if len(text) > max_length:
        raise ValidationError(f"{label} must be at most {max_length} characters.")
    return text


def parse_bool(value, label):
    if isinstance(value, bool):
        return value
    raw = str(value).strip().lower()
    if raw in {"true", "1", "yes"}:
        return True
    if raw in {"false", "0", "no"}:
        return False
    raise ValidationError(f"{label} must be true or false.")


def parse_instant_ns(value, label="Date/time"):
    """Accept integer nanoseconds since the epoch or an ISO-8601 string."""
    if isinstance(value, str) and not value.strip().isdigit():
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            moment = datetime.fromisoformat(raw)
        except ValueError as exc:
            raise ValidationError(f"Invalid {label.lower()}.") from exc
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        delta = moment - EPOCH
        instant = (delta.days * 86_400 + delta.seconds) * 1_000_000_000 + delta.microseconds * 1_000
        if instant < 0:
            raise ValidationError(f"{label} must not be before 1970.")
        return ensure_storable(instant, label)
    return parse_non_negative_int(value, label)
