"""Package log request payloads."""

from datetime import date, datetime, time

from facilitydesk.models.enums import PackageStatus, PackageType
from facilitydesk.schemas.common import PayloadModel, naive_utc, reject_nulls


class PackageBase(PayloadModel):
    recipient_unit: str | None = None
    recipient_phone: str | None = None
    delivery_date: date | None = None
    delivery_time: time | None = None
    location: str | None = None
    received_by: str | None = None
    picked_up_at: datetime | None = None
    notes: str | None = None

    _picked_up_utc = naive_utc("picked_up_at")


class PackageCreate(PackageBase):
    tracking_number: str
    recipient_name: str
    sender: str
    package_type: PackageType = PackageType.STANDARD
    status: PackageStatus = PackageStatus.RECEIVED


class PackageUpdate(PackageBase):
    tracking_number: str | None = None
    recipient_name: str | None = None
    sender: str | None = None
    package_type: PackageType | None = None
    status: PackageStatus | None = None

    _required = reject_nulls(
        "tracking_number", "recipient_name", "sender", "package_type", "status"
    )
