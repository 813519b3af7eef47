"""Asset request payloads."""

from datetime import date

from pydantic import NonNegativeInt

from facilitydesk.models.enums import AssetStatus, Priority
from facilitydesk.schemas.common import PayloadModel, reject_nulls


class AssetBase(PayloadModel):
    asset_type: str | None = None
    make_model: str | None = None
    serial_number: str | None = None
    capacity_kg: NonNegativeInt | None = None
    capacity_persons: NonNegativeInt | None = None
    installation_date: date | None = None
    location_building: str | None = None
    location_floor: str | None = None
    location_block: str | None = None
    registration_number: str | None = None
    last_certification_date: date | None = None
    next_certification_date: date | None = None
    contractor_name: str | None = None
    competent_person: str | None = None
    notes: str | None = None


class AssetCreate(AssetBase):
    name: str
    status: AssetStatus = AssetStatus.ACTIVE
    criticality: Priority = Priority.MEDIUM


class AssetUpdate(AssetBase):
    name: str | None = None
    status: AssetStatus | None = None
    criticality: Priority | None = None

    _required = reject_nulls("name", "status", "criticality")
