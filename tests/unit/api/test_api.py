"""
Unit tests for the HTTP API.
"""

import logging

import pytest
from fastapi.testclient import TestClient

from tms.api.main import create_app


@pytest.fixture
def client(seeded_config, memory_backend):
    """Return a test client over a seeded, memory-backed app."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level

    app = create_app(config=seeded_config, backend=memory_backend)
    with TestClient(app) as test_client:
        yield test_client

    root.handlers[:] = handlers
    root.setLevel(level)


CUSTOMER = {
    "name": "Acme Freight",
    "contactPerson": "Wile E. Coyote",
    "email": "wile@acme.example",
    "phone": "555-0199",
    "address": "1 Desert Road",
}


class TestHealthEndpoint:
    """Tests for health and info endpoints."""

    def test_health_returns_healthy(self, client):
        """Test health endpoint returns healthy status."""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["environment"] == "test"
        assert "timestamp" in data

    def test_root_returns_api_info(self, client):
        """Test root endpoint returns API info."""
        data = client.get("/").json()

        assert data["name"] == "LogiPro TMS API"
        assert data["version"] == "1.0.0"


class TestEntityEndpoints:
    """Tests for the generic CRUD endpoints."""

    def test_list_page_envelope(self, client):
        """Test listing returns a page of camelCase records."""
        data = client.get("/api/v1/vehicles/").json()

        assert data["total_items"] == 3
        assert data["page"] == 1
        assert data["total_pages"] == 1
        assert "registrationNumber" in data["items"][0]

    def test_list_filters_and_sorts(self, client):
        """Test search, status and sort parameters."""
        data = client.get(
            "/api/v1/vehicles/",
            params={"status": "Available", "sort_key": "name", "sort_direction": "descending"},
        ).json()

        assert [v["name"] for v in data["items"]] == ["Truck 101", "Big Rig 007"]

    def test_list_pagination(self, client):
        """Test page and page_size parameters."""
        data = client.get("/api/v1/vehicles/", params={"page": 2, "page_size": 2}).json()

        assert data["total_pages"] == 2
        assert len(data["items"]) == 1

    def test_invalid_page(self, client):
        """Test page numbers below one are rejected."""
        assert client.get("/api/v1/vehicles/", params={"page": 0}).status_code == 422

    def test_create_and_get(self, client):
        """Test creating a record and reading it back."""
        created = client.post("/api/v1/customers/", json=CUSTOMER)

        assert created.status_code == 201
        customer_id = created.json()["id"]
        fetched = client.get(f"/api/v1/customers/{customer_id}").json()
        assert fetched["contactPerson"] == "Wile E. Coyote"
        assert fetched["createdAt"] == created.json()["createdAt"]

    def test_create_invalid(self, client):
        """Test validation failures return 422 with field details."""
        response = client.post("/api/v1/customers/", json={"name": "Incomplete"})

        assert response.status_code == 422
        fields = {e["field"] for e in response.json()["errors"]}
        assert "email" in fields

    def test_update(self, client):
        """Test PATCH merges fields."""
        response = client.patch("/api/v1/drivers/driver1", json={"status": "On Leave"})

        assert response.status_code == 200
        assert response.json()["status"] == "On Leave"
        assert response.json()["name"] == "John Doe"

    def test_update_read_only(self, client):
        """Test changing a read-only field returns 422."""
        response = client.patch("/api/v1/shipments/ship1", json={"shipmentNumber": "TMS-00000000-0000"})

        assert response.status_code == 422
        assert response.json()["errors"][0]["error_code"] == "READ_ONLY"

    def test_get_not_found(self, client):
        """Test getting a non-existent record returns 404."""
        response = client.get("/api/v1/shipments/non-existent")

        assert response.status_code == 404

    def test_delete(self, client):
        """Test deleting a record."""
        assert client.delete("/api/v1/drivers/driver2").status_code == 204
        assert client.get("/api/v1/drivers/driver2").status_code == 404
        assert client.delete("/api/v1/drivers/driver2").status_code == 404

    def test_create_shipment(self, client):
        """Test shipments get a number, weight and first event."""
        response = client.post(
            "/api/v1/shipments/",
            json={
                "origin": "Boston",
                "destination": "Denver",
                "customerId": "cust2",
                "items": [{"name": "Tools", "quantity": 3, "weightKg": 4}],
            },
        )

        data = response.json()
        assert response.status_code == 201
        assert data["shipmentNumber"].startswith("TMS-")
        assert data["totalWeightKg"] == 12
        assert data["trackingHistory"][0]["status"] == "Pending"


class TestShipmentEndpoints:
    """Tests for shipment-specific endpoints."""

    def test_change_status(self, client):
        """Test a status change appends a tracking event."""
        response = client.post(
            "/api/v1/shipments/ship2/status",
            json={"status": "In Transit", "note": "Picked up", "location": "Los Angeles"},
        )

        history = response.json()["trackingHistory"]
        assert response.status_code == 200
        assert history[-1] == {
            "status": "In Transit",
            "timestamp": history[-1]["timestamp"],
            "location": "Los Angeles",
            "notes": "Picked up",
        }

    def test_change_status_invalid(self, client):
        """Test unknown statuses are rejected."""
        response = client.post("/api/v1/shipments/ship2/status", json={"status": "Lost"})

        assert response.status_code == 422

    def test_change_status_not_found(self, client):
        """Test status changes on a missing shipment return 404."""
        response = client.post("/api/v1/shipments/missing/status", json={"status": "Delivered"})

        assert response.status_code == 404

    def test_proof_of_delivery(self, client):
        """Test attaching a proof-of-delivery image."""
        response = client.post("/api/v1/shipments/ship1/proof-of-delivery", json={"image": "https://img/pod.png"})

        assert response.json()["proofOfDeliveryImage"] == "https://img/pod.png"

    def test_references(self, client):
        """Test display labels for a shipment's references."""
        data = client.get("/api/v1/shipments/ship1/references").json()

        assert data["customer"] == "Global Exports Inc."


class TestDataEndpoints:
    """Tests for export, restore, import and delete-all."""

    def test_export_restore_round_trip(self, client):
        """Test a backup restores to the same counts."""
        document = client.get("/api/v1/data/export").json()
        client.delete("/api/v1/data")

        response = client.post("/api/v1/data/restore", json=document)

        assert response.status_code == 200
        assert response.json()["restored"] == {"shipments": 2, "vehicles": 3, "drivers": 2, "customers": 2}
        assert client.get("/api/v1/data/export").json() == document

    def test_restore_invalid(self, client):
        """Test an invalid backup returns 400 and changes nothing."""
        response = client.post("/api/v1/data/restore", json={"shipments": []})

        assert response.status_code == 400
        assert client.get("/api/v1/shipments/").json()["total_items"] == 2

    def test_template_and_import(self, client):
        """Test the downloaded template imports cleanly."""
        template = client.get("/api/v1/data/template")

        assert template.headers["content-type"].startswith("text/csv")
        response = client.post(
            "/api/v1/data/import/shipments",
            content=template.text.encode("utf-8"),
            headers={"Content-Type": "text/csv"},
        )

        assert response.status_code == 200
        assert response.json()["outcome"] == "complete"
        assert response.json()["imported"] == 1
        assert client.get("/api/v1/shipments/").json()["total_items"] == 3

    def test_import_unreadable(self, client):
        """Test an empty payload fails with 400."""
        response = client.post("/api/v1/data/import/shipments", content=b"", headers={"Content-Type": "text/csv"})

        assert response.status_code == 400
        assert response.json()["outcome"] == "failed"

    def test_delete_all(self, client):
        """Test delete-all leaves every collection empty."""
        assert client.delete("/api/v1/data").status_code == 204

        for kind in ("shipments", "vehicles", "drivers", "customers"):
            assert client.get(f"/api/v1/{kind}/").json()["total_items"] == 0

    def test_dangling_references(self, client):
        """Test dangling references are listed after a delete."""
        client.delete("/api/v1/customers/cust1")

        data = client.get("/api/v1/data/dangling-references").json()

        assert {"kind": "shipments", "entity_id": "ship1", "field": "customer_id", "target_id": "cust1"} in data["references"]


class TestReportEndpoints:
    """Tests for report endpoints."""

    def test_dashboard(self, client):
        """Test dashboard statistics."""
        data = client.get("/api/v1/reports/dashboard").json()

        assert data["total_shipments"] == 2
        assert data["pending_deliveries"] == 1
        assert data["vehicles_by_status"] == {"Available": 2, "In Use": 1}
        assert len(data["shipments_per_month"]) == 12
