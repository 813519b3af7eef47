"""
Export service — generate CSV and Excel files from register tables.

All export functions return a BytesIO buffer ready to be sent as
a Flask response with the appropriate content type.
"""

import csv
import io
import logging
from datetime import time
from enum import Enum

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from facilitydesk.exceptions import RecordNotFoundError
from facilitydesk.models.asset import Asset
from facilitydesk.models.maintenance import MaintenanceSchedule
from facilitydesk.models.package import Package
from facilitydesk.models.scheduler import Complaint, Job
from facilitydesk.models.staff import Staff
from facilitydesk.models.mixins import to_json_value

logger = logging.getLogger(__name__)

# Excel header styling constants.
_HEADER_FONT = Font(bold=True, color="FFFFFF")
_HEADER_FILL = PatternFill(start_color="2B579A", end_color="2B579A", fill_type="solid")
_HEADER_ALIGN = Alignment(horizontal="center", wrap_text=True)
_DATE_FORMAT = "yyyy-mm-dd"

# Table name -> (model, ordering column, [(column, header), ...]).
EXPORTS = {
    "assets": (
        Asset,
        Asset.name,
        [
            ("name", "Name"),
            ("asset_type", "Type"),
            ("make_model", "Make / Model"),
            ("serial_number", "Serial Number"),
            ("location_building", "Building"),
            ("location_floor", "Floor"),
            ("location_block", "Block"),
            ("registration_number", "Registration No."),
            ("last_certification_date", "Last Certification"),
            ("next_certification_date", "Next Certification"),
            ("contractor_name", "Contractor"),
            ("competent_person", "Competent Person"),
            ("status", "Status"),
            ("criticality", "Criticality"),
        ],
    ),
    "schedules": (
        MaintenanceSchedule,
        MaintenanceSchedule.schedule_name,
        [
            ("schedule_name", "Schedule"),
            ("asset_id", "Asset ID"),
            ("frequency_type", "Frequency"),
            ("frequency_value", "Every"),
            ("start_date", "Start Date"),
            ("end_date", "End Date"),
            ("next_due_date", "Next Due"),
            ("last_completed_date", "Last Completed"),
            ("priority", "Priority"),
            ("estimated_duration", "Duration (min)"),
            ("is_active", "Active"),
        ],
    ),
    "jobs": (
        Job,
        Job.scheduled_date,
        [
            ("work_order_number", "Work Order"),
            ("title", "Title"),
            ("status", "Status"),
            ("scheduled_date", "Date"),
            ("scheduled_start", "Start"),
            ("scheduled_end", "End"),
            ("technician_id", "Technician ID"),
            ("complaint_id", "Complaint ID"),
            ("description", "Description"),
        ],
    ),
    "complaints": (
        Complaint,
        Complaint.created_at,
        [
            ("title", "Title"),
            ("priority", "Priority"),
            ("status", "Status"),
            ("property_unit", "Unit"),
            ("scheduled_date", "Scheduled Date"),
            ("resolved_at", "Resolved At"),
            ("description", "Description"),
        ],
    ),
    "staff": (
        Staff,
        Staff.name,
        [
            ("employee_id", "Employee ID"),
            ("name", "Name"),
            ("email", "Email"),
            ("phone", "Phone"),
            ("position", "Position"),
            ("department", "Department"),
            ("hire_date", "Hire Date"),
            ("status", "Status"),
        ],
    ),
    "packages": (
        Package,
        Package.created_at,
        [
            ("tracking_number", "Tracking Number"),
            ("recipient_name", "Recipient"),
            ("recipient_unit", "Unit"),
            ("sender", "Sender"),
            ("package_type", "Type"),
            ("delivery_date", "Delivered"),
            ("status", "Status"),
            ("location", "Location"),
            ("picked_up_at", "Picked Up At"),
        ],
    ),
}

EXPORT_FORMATS = ("csv", "xlsx")


def _load(table: str):
    if table not in EXPORTS:
        raise RecordNotFoundError("Export table", table)
    model, order_by, columns = EXPORTS[table]
    return model.query.order_by(order_by, model.id).all(), columns


# =========================================================================
# CSV Exports
# =========================================================================

def export_csv(table: str) -> io.BytesIO:
    """
    Export every row of a register table to CSV.

    Args:
        table: One of the keys of ``EXPORTS``.

    Returns:
        BytesIO buffer containing the CSV data (UTF-8 with BOM so Excel
        opens it with the right encoding).

    Raises:
        RecordNotFoundError: If the table is not exportable.
    """
    records, columns = _load(table)
    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow([header for _, header in columns])
    for record in records:
        writer.writerow([
            _csv_value(getattr(record, column)) for column, _ in columns
        ])

    # Convert to bytes for Flask response.
    buffer = io.BytesIO()
    buffer.write(output.getvalue().encode("utf-8-sig"))
    buffer.seek(0)

    logger.info("Exported %d %s row(s) to CSV", len(records), table)
    return buffer


# =========================================================================
# Excel Exports
# =========================================================================

def export_excel(table: str) -> io.BytesIO:
    """
    Export every row of a register table to an Excel workbook.

    Returns:
        BytesIO buffer containing the .xlsx data.
    """
    records, columns = _load(table)
    wb = Workbook()
    ws = wb.active
    ws.title = table.capitalize()

    _write_header_row(ws, [header for _, header in columns])

    for row_idx, record in enumerate(records, start=2):
        for col_idx, (column, _) in enumerate(columns, start=1):
            cell = ws.cell(
                row=row_idx, column=col_idx, value=_excel_value(getattr(record, column))
            )
            if column.endswith("_date"):
                cell.number_format = _DATE_FORMAT

    _auto_fit_columns(ws)

    buffer = io.BytesIO()
    wb.save(buffer)
    buffer.seek(0)

    logger.info("Exported %d %s row(s) to Excel", len(records), table)
    return buffer


# =========================================================================
# Internal helpers
# =========================================================================

def _write_header_row(ws, headers: list[str]) -> None:
    """Write a styled header row to an Excel worksheet."""
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
        cell.alignment = _HEADER_ALIGN


def _auto_fit_columns(ws) -> None:
    """Auto-fit column widths based on content (approximate)."""
    for col in ws.columns:
        max_length = 0
        col_letter = get_column_letter(col[0].column)
        for cell in col:
            if cell.value:
                max_length = max(max_length, len(str(cell.value)))
        ws.column_dimensions[col_letter].width = min(max_length + 4, 40)


def _csv_value(value):
    if value is None:
        return ""
    return to_json_value(value)


def _excel_value(value):
    """Keep dates native for Excel; flatten enums and times to text."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, time):
        return value.strftime("%H:%M")
    return value
