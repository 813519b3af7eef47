"""
Asset register model.

An asset is any piece of building equipment that needs periodic
inspection: lifts, escalators, generators, fire pumps.  Certification
dates drive the due-status badges shown on the asset list.
"""

from facilitydesk.extensions import db
from facilitydesk.models.enums import AssetStatus, Priority, enum_type
from facilitydesk.models.mixins import SerializerMixin


class Asset(SerializerMixin, db.Model):
    """
    A physical asset on the property.

    Hard-deleted.  Deleting an asset cascades to its maintenance
    schedules and tasks.
    """

    __tablename__ = "assets"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(200), nullable=False, index=True)
    asset_type = db.Column(db.String(100), nullable=True)
    make_model = db.Column(db.String(200), nullable=True)
    serial_number = db.Column(db.String(100), nullable=True)
    capacity_kg = db.Column(db.Integer, nullable=True)
    capacity_persons = db.Column(db.Integer, nullable=True)
    installation_date = db.Column(db.Date, nullable=True)

    # -- Location ----------------------------------------------------------
    location_building = db.Column(db.String(200), nullable=True)
    location_floor = db.Column(db.String(50), nullable=True)
    location_block = db.Column(db.String(50), nullable=True)

    # -- Certification -----------------------------------------------------
    registration_number = db.Column(db.String(100), nullable=True)
    last_certification_date = db.Column(db.Date, nullable=True)
    next_certification_date = db.Column(db.Date, nullable=True, index=True)
    contractor_name = db.Column(db.String(200), nullable=True)
    competent_person = db.Column(db.String(200), nullable=True)

    status = db.Column(
        enum_type(AssetStatus), nullable=False, default=AssetStatus.ACTIVE
    )
    criticality = db.Column(
        enum_type(Priority), nullable=False, default=Priority.MEDIUM
    )
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )
    updated_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.current_timestamp()
    )

    # -- Relationships -----------------------------------------------------
    schedules = db.relationship(
        "MaintenanceSchedule",
        back_populates="asset",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Asset {self.name}>"
