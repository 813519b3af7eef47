"""
Tests for CSV import and CSV / Excel export.
"""

import io
import json

import pytest
from openpyxl import load_workbook

from facilitydesk.exceptions import ImportFileError, RecordNotFoundError
from facilitydesk.models.asset import Asset
from facilitydesk.models.audit import AuditLog
from facilitydesk.models.staff import Staff
from facilitydesk.services import export_service, import_service


def _csv(text: str) -> io.BytesIO:
    return io.BytesIO(text.encode("utf-8"))


class TestImportAssets:
    """Tests for the asset CSV import."""

    def test_spreadsheet_headers_accepted(self, db_session):
        """The camelCase template headers map onto asset fields."""
        result = import_service.import_assets(
            _csv(
                "assetName,doshRegistrationNumber,nextCfDueDate,contractorVendorName\n"
                "Lift A1,PMA-123,2024-06-30,Apex Lifts\n"
            )
        )

        assert result.inserted == 1
        asset = Asset.query.one()
        assert asset.registration_number == "PMA-123"
        assert asset.contractor_name == "Apex Lifts"
        assert asset.asset_type == "Lift / Elevator"

    def test_invalid_rows_skipped_with_line_numbers(self, db_session):
        """Bad rows are reported; good rows are still inserted."""
        result = import_service.import_assets(
            _csv(
                "name,next_certification_date,criticality\n"
                "Lift A1,2024-06-30,high\n"
                ",2024-06-30,low\n"
                "\n"
                "Lift B1,not-a-date,low\n"
                "Lift C1,,critical\n"
            )
        )

        assert result.inserted == 2
        assert [item["line"] for item in result.skipped] == [3, 5]
        assert Asset.query.count() == 2

    def test_import_is_audited_once(self, db_session):
        """A single IMPORT entry lists the inserted ids."""
        import_service.import_assets(_csv("name\nLift A1\nLift B1\n"))
        entry = AuditLog.query.filter_by(action_type="IMPORT").one()
        assert len(json.loads(entry.new_value)["inserted_ids"]) == 2

    def test_missing_required_column(self, db_session):
        """A file without a name column is rejected outright."""
        with pytest.raises(ImportFileError):
            import_service.import_assets(_csv("serial_number\nSN-1\n"))

    def test_empty_file(self, db_session):
        """An empty upload has no header row."""
        with pytest.raises(ImportFileError):
            import_service.import_assets(_csv(""))

    def test_not_utf8(self, db_session):
        """Binary junk is rejected before parsing."""
        with pytest.raises(ImportFileError):
            import_service.import_assets(io.BytesIO(b"name\n\xff\xfe\xfa\n"))


class TestImportStaff:
    """Tests for the staff CSV import."""

    def test_defaults_applied(self, db_session):
        """Department and status default when the columns are absent."""
        result = import_service.import_staff(
            _csv("employeeId,name,email\nEMP010,Daniel Tan,daniel@example.com\n")
        )
        assert result.inserted == 1
        staff = Staff.query.one()
        assert staff.department == "maintenance"
        assert staff.status.value == "active"

    def test_missing_email_column(self, db_session):
        """employee_id, name and email columns are all required."""
        with pytest.raises(ImportFileError):
            import_service.import_staff(_csv("employee_id,name\nEMP010,Daniel\n"))


class TestExport:
    """Tests for register exports."""

    def test_csv_has_bom_and_header(self, asset):
        """CSV starts with a BOM and the display headers."""
        data = export_service.export_csv("assets").getvalue()
        assert data.startswith(b"\xef\xbb\xbf")
        lines = data.decode("utf-8-sig").splitlines()
        assert lines[0].startswith("Name,Type,Make / Model")
        assert lines[1].startswith("Lift A1,")

    def test_excel_styles_header(self, asset):
        """The worksheet carries a bold header and the asset row."""
        workbook = load_workbook(export_service.export_excel("assets"))
        sheet = workbook.active
        assert sheet.title == "Assets"
        assert sheet.cell(row=1, column=1).value == "Name"
        assert sheet.cell(row=1, column=1).font.bold
        assert sheet.cell(row=2, column=1).value == "Lift A1"

    def test_unknown_table(self, db_session):
        """Only the registered tables can be exported."""
        with pytest.raises(RecordNotFoundError):
            export_service.export_csv("users")
