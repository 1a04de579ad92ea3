from flask_login import UserMixin

from fleetbook.extensions import db
from fleetbook.models.base import PKType, TimestampMixin


class Account(UserMixin, TimestampMixin, db.Model):
    __tablename__ = "accounts"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    principal = db.Column(db.String(255), nullable=False, unique=True, index=True)
    role = db.Column(db.String(16), nullable=False, default="user", index=True)
    name = db.Column(db.String(120), nullable=True)
    title = db.Column(db.String(120), nullable=True)
    last_seen_at = db.Column(db.BigInteger, nullable=True)

    bookings = db.relationship("Booking", back_populates="account", lazy="dynamic")
