"""
Package log model: parcels received at the front desk.
"""

from facilitydesk.extensions import db
from facilitydesk.models.enums import PackageStatus, PackageType, enum_type
from facilitydesk.models.mixins import SerializerMixin


class Package(SerializerMixin, db.Model):
    """
    A parcel held for a resident.

    ``picked_up_at`` is stamped the first time the status becomes
    ``picked_up`` and is never overwritten afterwards.
    """

    __tablename__ = "packages"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    tracking_number = db.Column(db.String(100), nullable=False, index=True)
    recipient_name = db.Column(db.String(200), nullable=False)
    recipient_unit = db.Column(db.String(50), nullable=True)
    recipient_phone = db.Column(db.String(50), nullable=True)
    sender = db.Column(db.String(200), nullable=False)
    package_type = db.Column(
        enum_type(PackageType), nullable=False, default=PackageType.STANDARD
    )
    delivery_date = db.Column(db.Date, nullable=True)
    delivery_time = db.Column(db.Time, nullable=True)
    status = db.Column(
        enum_type(PackageStatus), nullable=False, default=PackageStatus.RECEIVED
    )
    location = db.Column(db.String(100), nullable=True)
    received_by = db.Column(db.String(200), nullable=True)
    picked_up_at = db.Column(db.DateTime, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    def __repr__(self) -> str:
        return f"<Package {self.tracking_number} status={self.status}>"
