"""
Tests for the assets blueprint: CRUD, pagination, confirmation and import.
"""

import io
from datetime import date, timedelta


def _create(client, **values):
    body = {"name": "Lift A1"}
    body.update(values)
    response = client.post("/assets", json=body)
    assert response.status_code == 201
    return response.get_json()


class TestAssetCrud:
    """Tests for create, read, update and delete."""

    def test_create_returns_badge(self, client):
        """A created asset carries its due badge."""
        due = (date.today() + timedelta(days=10)).isoformat()
        data = _create(client, next_certification_date=due)
        assert data["status"] == "active"
        assert data["criticality"] == "medium"
        assert data["due_status"] == "due_soon"
        assert data["days_until_due"] == 10

    def test_missing_name(self, client):
        """name is required."""
        response = client.post("/assets", json={"asset_type": "Lift"})
        assert response.status_code == 400
        assert any(error.startswith("name:") for error in response.get_json()["errors"])

    def test_unknown_field_rejected(self, client):
        """Unexpected keys are refused."""
        response = client.post("/assets", json={"name": "Lift", "colour": "red"})
        assert response.status_code == 400

    def test_null_name_on_update_rejected(self, client):
        """A required column cannot be nulled by PATCH."""
        asset = _create(client)
        response = client.patch(f"/assets/{asset['id']}", json={"name": None})
        assert response.status_code == 400

    def test_partial_update(self, client):
        """PATCH changes only the sent fields."""
        asset = _create(client, location_building="Tower A")
        response = client.patch(f"/assets/{asset['id']}", json={"status": "retired"})
        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "retired"
        assert data["location_building"] == "Tower A"

    def test_missing_asset_404(self, client):
        """Unknown ids answer 404 with a message."""
        response = client.get("/assets/999")
        assert response.status_code == 404
        assert response.get_json()["error"] == "Asset ID 999 not found."


class TestDeleteConfirmation:
    """Tests for the confirm flag on destructive routes."""

    def test_delete_without_confirm_is_refused(self, client):
        """Nothing is deleted without confirm=true."""
        asset = _create(client)
        response = client.delete(f"/assets/{asset['id']}")
        assert response.status_code == 400
        assert client.get(f"/assets/{asset['id']}").status_code == 200

    def test_delete_with_confirm(self, client):
        """confirm=true deletes the record."""
        asset = _create(client)
        response = client.delete(f"/assets/{asset['id']}?confirm=true")
        assert response.status_code == 204
        assert client.get(f"/assets/{asset['id']}").status_code == 404


class TestPagination:
    """Tests for the list envelope."""

    def test_envelope(self, client):
        """pages is ceil(total / per_page)."""
        for name in ("Lift A1", "Lift B1", "Lift C1"):
            _create(client, name=name)
        data = client.get("/assets?per_page=2&page=2").get_json()
        assert data["total"] == 3
        assert data["pages"] == 2
        assert data["page"] == 2
        assert data["per_page"] == 2
        assert [item["name"] for item in data["items"]] == ["Lift C1"]

    def test_page_past_end_is_empty(self, client):
        """A page beyond the last returns no items, not an error."""
        _create(client)
        data = client.get("/assets?page=5").get_json()
        assert data["items"] == []
        assert data["total"] == 1

    def test_per_page_capped(self, client):
        """per_page above the maximum is clamped."""
        data = client.get("/assets?per_page=1000").get_json()
        assert data["per_page"] == 100

    def test_invalid_page(self, client):
        """page must be a positive integer."""
        assert client.get("/assets?page=0").status_code == 400
        assert client.get("/assets?page=abc").status_code == 400

    def test_invalid_enum_filter(self, client):
        """Unknown filter values are a 400, not an empty list."""
        assert client.get("/assets?status=broken").status_code == 400

    def test_due_filter(self, client):
        """The due filter uses the same bands as the badges."""
        overdue = (date.today() - timedelta(days=1)).isoformat()
        later = (date.today() + timedelta(days=200)).isoformat()
        _create(client, name="Old", next_certification_date=overdue)
        _create(client, name="New", next_certification_date=later)
        data = client.get("/assets?due=overdue").get_json()
        assert [item["name"] for item in data["items"]] == ["Old"]


class TestAssetMetrics:
    """Tests for the metric cards."""

    def test_counts(self, client):
        """Metrics count totals and due bands."""
        soon = (date.today() + timedelta(days=5)).isoformat()
        _create(client, name="A", next_certification_date=soon)
        _create(client, name="B", status="inactive")
        data = client.get("/assets/metrics").get_json()
        assert data["total"] == 2
        assert data["active"] == 1
        assert data["due_soon"] == 1


class TestAssetImport:
    """Tests for the CSV upload route."""

    def _upload(self, client, content: bytes, filename: str = "assets.csv"):
        return client.post(
            "/assets/import",
            data={"file": (io.BytesIO(content), filename)},
            content_type="multipart/form-data",
        )

    def test_import_reports_counts(self, client):
        """Valid rows are inserted and invalid rows listed."""
        response = self._upload(
            client, b"assetName,criticality\nLift A1,high\nLift B1,urgent\n"
        )
        assert response.status_code == 200
        data = response.get_json()
        assert data["inserted"] == 1
        assert data["skipped"][0]["line"] == 3
        assert client.get("/assets").get_json()["total"] == 1

    def test_missing_file(self, client):
        """The file field is required."""
        response = client.post(
            "/assets/import", data={}, content_type="multipart/form-data"
        )
        assert response.status_code == 400

    def test_wrong_extension(self, client):
        """Only .csv uploads are accepted."""
        response = self._upload(client, b"name\nLift A1\n", filename="assets.xlsx")
        assert response.status_code == 400

    def test_missing_required_column(self, client):
        """A header without a name column rejects the file."""
        response = self._upload(client, b"serial_number\nSN-1\n")
        assert response.status_code == 400
        assert "name" in response.get_json()["errors"][0]
