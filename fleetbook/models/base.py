import time

from fleetbook.extensions import db
from sqlalchemy import BigInteger, Integer


# Use BIGINT in PostgreSQL, but INTEGER in SQLite so autoincrement works.
PKType = BigInteger().with_variant(Integer, "sqlite")


def now_ns():
    """Current instant as integer nanoseconds since the Unix epoch."""
    return time.time_ns()


class TimestampMixin:
    created_at = db.Column(db.BigInteger, nullable=False, default=now_ns)
    updated_at = db.Column(db.BigInteger, nullable=False, default=now_ns, onupdate=now_ns)
