from fleetbook.extensions import db
from fleetbook.models.base import PKType, TimestampMixin


class Booking(TimestampMixin, db.Model):
    __tablename__ = "bookings"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    account_id = db.Column(PKType, db.ForeignKey("accounts.id"), nullable=False, index=True)
    # Plain reference: bookings outlive the vehicles they used.
    vehicle_id = db.Column(PKType, nullable=False, index=True)

    status = db.Column(db.String(16), nullable=False, default="active", index=True)
    date_time = db.Column(db.BigInteger, nullable=False)
    pickup_location = db.Column(db.String(255), nullable=False, default="")
    destination = db.Column(db.String(255), nullable=False, default="")
    vehicle_no = db.Column(db.String(64), nullable=False, default="")
    customer_name = db.Column(db.String(120), nullable=False, default="")
    customer_no = db.Column(db.String(32), nullable=False, default="")

    starting_km = db.Column(db.BigInteger, nullable=False, default=0)
    ending_km = db.Column(db.BigInteger, nullable=False, default=0)
    rate_per_km = db.Column(db.BigInteger, nullable=False, default=0)
    toll_tax = db.Column(db.BigInteger, nullable=False, default=0)
    diesel_or_gas_by_customer = db.Column(db.BigInteger, nullable=False, default=0)

    total_km = db.Column(db.BigInteger, nullable=False, default=0)
    total_amount = db.Column(db.BigInteger, nullable=False, default=0)
    net_amount = db.Column(db.BigInteger, nullable=False, default=0)

    account = db.relationship("Account", back_populates="bookings")

    __table_args__ = (
        db.Index("ix_bookings_account_status", "account_id", "status"),
        db.Index("ix_bookings_vehicle_status", "vehicle_id", "status"),
        db.CheckConstraint("status IN ('active', 'completed', 'cancelled')", name="ck_booking_status"),
    )
