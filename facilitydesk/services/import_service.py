"""
Import service — bulk-load assets and staff from CSV uploads.

The header row decides whether a file is usable at all: if a required
column is missing the whole upload is rejected.  After that each data
row is validated on its own; rows that fail are skipped and reported by
line number, and the rows that pass are inserted in a single commit.
"""

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Any

import pydantic

from facilitydesk.exceptions import ImportFileError
from facilitydesk.extensions import db
from facilitydesk.models.asset import Asset
from facilitydesk.models.staff import Staff
from facilitydesk.schemas.asset import AssetCreate
from facilitydesk.schemas.common import format_errors
from facilitydesk.schemas.staff import StaffCreate
from facilitydesk.services import audit_service

logger = logging.getLogger(__name__)

# Field name -> accepted header spellings.  The camelCase names are the
# ones produced by the spreadsheet templates handed out to site offices.
ASSET_COLUMNS: dict[str, tuple[str, ...]] = {
    "name": ("name", "assetName", "asset_name"),
    "asset_type": ("asset_type", "assetType"),
    "make_model": ("make_model", "makeModel"),
    "serial_number": ("serial_number", "serialNumber"),
    "capacity_kg": ("capacity_kg", "capacityKg"),
    "capacity_persons": ("capacity_persons", "capacityPersons"),
    "installation_date": ("installation_date", "installationDate"),
    "location_building": ("location_building", "locationBuilding"),
    "location_floor": ("location_floor", "locationFloor"),
    "location_block": ("location_block", "locationBlock"),
    "registration_number": (
        "registration_number",
        "registrationNumber",
        "doshRegistrationNumber",
    ),
    "last_certification_date": (
        "last_certification_date",
        "lastCertificationDate",
        "lastCfRenewalDate",
    ),
    "next_certification_date": (
        "next_certification_date",
        "nextCertificationDate",
        "nextCfDueDate",
    ),
    "contractor_name": ("contractor_name", "contractorName", "contractorVendorName"),
    "competent_person": (
        "competent_person",
        "competentPerson",
        "competentPersonAssigned",
    ),
    "status": ("status",),
    "criticality": ("criticality",),
    "notes": ("notes",),
}

STAFF_COLUMNS: dict[str, tuple[str, ...]] = {
    "employee_id": ("employee_id", "employeeId"),
    "name": ("name",),
    "email": ("email",),
    "phone": ("phone",),
    "position": ("position",),
    "department": ("department",),
    "hire_date": ("hire_date", "hireDate"),
    "status": ("status",),
}

ASSET_DEFAULTS = {"asset_type": "Lift / Elevator"}
STAFF_DEFAULTS = {"department": "maintenance", "status": "active"}


@dataclass
class ImportResult:
    """Outcome of one CSV upload."""

    entity: str
    inserted: int = 0
    skipped: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity": self.entity,
            "inserted": self.inserted,
            "skipped": self.skipped,
        }


# =========================================================================
# Public entry points
# =========================================================================


def import_assets(stream, user_id: int | None = None) -> ImportResult:
    """Import assets from a CSV upload.  Only ``name`` is required."""
    return _import_rows(
        stream,
        model=Asset,
        schema=AssetCreate,
        columns=ASSET_COLUMNS,
        required=("name",),
        defaults=ASSET_DEFAULTS,
        user_id=user_id,
    )


def import_staff(stream, user_id: int | None = None) -> ImportResult:
    """
    Import staff from a CSV upload.

    ``employee_id``, ``name`` and ``email`` are required.  A duplicate
    employee id fails the whole commit with an ``IntegrityError``.
    """
    return _import_rows(
        stream,
        model=Staff,
        schema=StaffCreate,
        columns=STAFF_COLUMNS,
        required=("employee_id", "name", "email"),
        defaults=STAFF_DEFAULTS,
        user_id=user_id,
    )


# =========================================================================
# Internal helpers
# =========================================================================


def read_csv(stream) -> tuple[list[str], list[tuple[int, dict[str, str]]]]:
    """
    Decode an uploaded file and return its header and numbered rows.

    Line numbers count the header as line 1.  Blank rows are dropped.

    Raises:
        ImportFileError: If the file is not UTF-8 or has no header row.
    """
    raw = stream.read()
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ImportFileError("File is not valid UTF-8 text.") from exc

    reader = csv.DictReader(io.StringIO(raw))
    if not reader.fieldnames:
        raise ImportFileError("File is empty or has no header row.")
    header = [name.strip() for name in reader.fieldnames]
    reader.fieldnames = header

    rows = []
    for row in reader:
        if not any((value or "").strip() for value in row.values() if isinstance(value, str)):
            continue
        # line_num is the physical line just read, so skipped blanks still count.
        rows.append((reader.line_num, row))
    return header, rows


def _resolve_columns(
    header: list[str],
    columns: dict[str, tuple[str, ...]],
    required: tuple[str, ...],
) -> dict[str, str]:
    """Map each known field to the header column that carries it."""
    present = set(header)
    mapping = {}
    for field_name, aliases in columns.items():
        for alias in aliases:
            if alias in present:
                mapping[field_name] = alias
                break

    missing = [name for name in required if name not in mapping]
    if missing:
        raise ImportFileError(
            "Missing required column(s): " + ", ".join(missing)
        )
    return mapping


def _import_rows(
    stream,
    model,
    schema,
    columns: dict[str, tuple[str, ...]],
    required: tuple[str, ...],
    defaults: dict[str, str],
    user_id: int | None,
) -> ImportResult:
    header, rows = read_csv(stream)
    mapping = _resolve_columns(header, columns, required)
    result = ImportResult(entity=model.__tablename__)

    records = []
    for line, row in rows:
        data = {}
        for field_name, column in mapping.items():
            value = (row.get(column) or "").strip()
            if value:
                data[field_name] = value
        for field_name, default in defaults.items():
            data.setdefault(field_name, default)

        try:
            payload = schema.model_validate(data)
        except pydantic.ValidationError as exc:
            result.skipped.append({"line": line, "errors": format_errors(exc)})
            continue
        records.append(model(**payload.model_dump()))

    if records:
        db.session.add_all(records)
        db.session.flush()
        audit_service.log_change(
            user_id=user_id,
            action_type="IMPORT",
            entity_type=model.__tablename__,
            entity_id=None,
            new_value={
                "inserted_ids": [record.id for record in records],
                "skipped_lines": [item["line"] for item in result.skipped],
            },
        )
        db.session.commit()

    result.inserted = len(records)
    if result.skipped:
        logger.warning(
            "CSV import into %s skipped %d row(s)",
            model.__tablename__,
            len(result.skipped),
        )
    logger.info("Imported %d %s record(s)", result.inserted, model.__tablename__)
    return result
