"""API tests for cylinder types, cylinders and cylinder movements."""

from datetime import date, timedelta

import pytest
from httpx import AsyncClient


@pytest.fixture
async def type_id(async_client: AsyncClient) -> str:
    response = await async_client.post(
        "/api/cylinder-types",
        json={"name": "Industrial Oxygen 50L", "capacity": 50, "gas_type": "oxygen"},
    )
    assert response.status_code == 201
    return response.json()["id"]


@pytest.fixture
async def cylinder_id(async_client: AsyncClient, type_id: str) -> str:
    response = await async_client.post(
        "/api/cylinders",
        json={
            "serial_number": "OX-0001",
            "cylinder_type_id": type_id,
            "capacity": 50,
            "fill_level": 40,
            "location": "Warehouse A",
            "next_inspection_date": (date.today() + timedelta(days=10)).isoformat(),
        },
    )
    assert response.status_code == 201
    return response.json()["id"]


class TestCylinderTypes:
    async def test_invalid_gas_type(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/cylinder-types", json={"name": "x", "capacity": 10, "gas_type": "plasma"}
        )
        assert response.status_code == 400

    async def test_delete_in_use(self, async_client: AsyncClient, type_id, cylinder_id):
        response = await async_client.delete(f"/api/cylinder-types/{type_id}")

        assert response.status_code == 409
        assert response.json()["error_code"] == "CONFLICT"

    async def test_cylinders_of_type(self, async_client: AsyncClient, type_id, cylinder_id):
        response = await async_client.get(f"/api/cylinder-types/{type_id}/cylinders")

        assert response.status_code == 200
        assert [c["id"] for c in response.json()] == [cylinder_id]


class TestCylinders:
    async def test_detail_is_joined(self, async_client: AsyncClient, cylinder_id):
        response = await async_client.get(f"/api/cylinders/{cylinder_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["type_name"] == "Industrial Oxygen 50L"
        assert body["gas_type"] == "oxygen"
        assert body["fill_percentage"] == 80.0
        assert body["needs_inspection"] is True
        assert body["created_by"] == "system"

    async def test_duplicate_serial(self, async_client: AsyncClient, type_id, cylinder_id):
        response = await async_client.post(
            "/api/cylinders", json={"serial_number": "OX-0001", "cylinder_type_id": type_id}
        )
        assert response.status_code == 409

    async def test_unknown_type(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/cylinders", json={"serial_number": "OX-0002", "cylinder_type_id": "nope"}
        )
        assert response.status_code == 400

    async def test_missing(self, async_client: AsyncClient):
        response = await async_client.get("/api/cylinders/nope")
        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"

    async def test_lookup_by_serial(self, async_client: AsyncClient, cylinder_id):
        response = await async_client.get("/api/cylinders/serial/OX-0001")

        assert response.status_code == 200
        assert response.json()["id"] == cylinder_id
        assert response.json()["type_name"] == "Industrial Oxygen 50L"

    async def test_unknown_serial(self, async_client: AsyncClient, cylinder_id):
        response = await async_client.get("/api/cylinders/serial/OX-9999")
        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"

    async def test_list_filters(self, async_client: AsyncClient, cylinder_id):
        hit = (await async_client.get("/api/cylinders", params={"location": "Warehouse A"})).json()
        miss = (await async_client.get("/api/cylinders", params={"status": "loaned"})).json()

        assert hit["meta"]["total_items"] == 1
        assert miss["data"] == []

    async def test_status_change(self, async_client: AsyncClient, cylinder_id):
        response = await async_client.post(
            f"/api/cylinders/{cylinder_id}/status",
            json={"status": "filled", "performed_by": "bob"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["movement"]["movement_type"] == "fill"
        assert body["movement"]["from_status"] == "available"
        assert body["cylinder"]["status"] == "filled"

        history = (await async_client.get(f"/api/cylinders/{cylinder_id}/movements")).json()
        assert history["meta"]["total_items"] == 1

    async def test_status_change_invalid(self, async_client: AsyncClient, cylinder_id):
        response = await async_client.post(
            f"/api/cylinders/{cylinder_id}/status", json={"status": "vaporised"}
        )
        assert response.status_code == 400

    async def test_update_records_transfer(self, async_client: AsyncClient, cylinder_id):
        response = await async_client.patch(
            f"/api/cylinders/{cylinder_id}",
            json={"status": "maintenance", "notes": "valve check"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["movement"]["movement_type"] == "transfer"
        assert body["changed_fields"] == ["notes", "status"]

    async def test_update_without_status_has_no_movement(
        self, async_client: AsyncClient, cylinder_id
    ):
        response = await async_client.patch(
            f"/api/cylinders/{cylinder_id}", json={"color": "white"}
        )

        assert response.status_code == 200
        assert response.json()["movement"] is None
        assert response.json()["cylinder"]["color"] == "white"

    async def test_stats_and_inspection_due(self, async_client: AsyncClient, cylinder_id):
        stats = (await async_client.get("/api/cylinders/stats")).json()
        due = (await async_client.get("/api/cylinders/inspection-due", params={"days": 30})).json()

        assert stats["total_cylinders"] == 1
        assert stats["by_gas_type"] == {"oxygen": 1}
        assert [c["id"] for c in due] == [cylinder_id]

    async def test_delete(self, async_client: AsyncClient, cylinder_id):
        response = await async_client.delete(f"/api/cylinders/{cylinder_id}")
        assert response.status_code == 200
        assert (await async_client.get(f"/api/cylinders/{cylinder_id}")).status_code == 404


class TestCylinderDocuments:
    async def test_report_pdf(self, async_client: AsyncClient, cylinder_id):
        response = await async_client.get("/api/cylinders/report.pdf")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")

    async def test_export_csv(self, async_client: AsyncClient, cylinder_id):
        response = await async_client.get("/api/cylinders/export.csv")

        assert response.headers["content-type"].startswith("text/csv")
        assert "OX-0001" in response.text

    async def test_qrcode(self, async_client: AsyncClient, cylinder_id):
        response = await async_client.get(f"/api/cylinders/{cylinder_id}/qrcode")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.content.startswith(b"\x89PNG")

    async def test_barcode(self, async_client: AsyncClient, cylinder_id):
        response = await async_client.get(f"/api/cylinders/{cylinder_id}/barcode")

        assert response.status_code == 200
        assert response.content.startswith(b"%PDF")


class TestCylinderMovements:
    async def test_record_and_correct(self, async_client: AsyncClient, cylinder_id):
        created = await async_client.post(
            "/api/cylinder-movements",
            json={
                "cylinder_id": cylinder_id,
                "to_status": "loaned",
                "customer_id": "cust-9",
                "to_location": "Customer site",
            },
        )
        assert created.status_code == 201
        body = created.json()
        assert body["movement"]["movement_type"] == "loan"
        assert body["cylinder"]["location"] == "Customer site"
        movement_id = body["movement"]["id"]

        corrected = await async_client.patch(
            f"/api/cylinder-movements/{movement_id}", json={"invoice_number": "INV-7"}
        )
        assert corrected.status_code == 200
        assert corrected.json()["invoice_number"] == "INV-7"

    async def test_correct_missing(self, async_client: AsyncClient):
        response = await async_client.patch(
            "/api/cylinder-movements/nope", json={"notes": "x"}
        )
        assert response.status_code == 404
