from fleetbook.extensions import db
from fleetbook.models.base import PKType, TimestampMixin


class Vehicle(TimestampMixin, db.Model):
    __tablename__ = "vehicles"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    vehicle_type = db.Column(db.String(16), nullable=False, index=True)
    is_available = db.Column(db.Boolean, nullable=False, default=True, index=True)
    current_location = db.Column(db.String(255), nullable=False, default="")

    __table_args__ = (
        db.CheckConstraint("vehicle_type IN ('cab', 'van', 'truck', 'bus')", name="ck_vehicle_type"),
    )
