"""Tests for procurement routes: stock receipt, costing and vendor payables."""
import pytest
from fastapi import status


@pytest.fixture
def vendor(make_vendor):
    return make_vendor()


@pytest.fixture
def material(make_raw_material):
    return make_raw_material(current_stock=10, cost_price=5)


def _procure(test_client, vendor_id, material_id, **overrides):
    payload = {
        "vendor_id": vendor_id,
        "procurement_date": "2024-05-01T10:00:00",
        "status": "received",
        "gst_percentage": 10,
        "items": [{"item_id": material_id, "quantity": 10, "unit_price": 7}],
    }
    payload.update(overrides)
    return test_client.post("/api/procurement/raw-material", json=payload)


def _vendor(test_client, vendor_id):
    return test_client.get(f"/api/vendors/{vendor_id}").json()["data"]


def _material(test_client, material_id):
    return test_client.get(f"/api/inventory/raw-materials/{material_id}").json()["data"]


class TestProcurementCreate:
    def test_invalid_type(self, test_client):
        response = test_client.get("/api/procurement/furniture")
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Invalid procurement type"

    def test_received_procurement_updates_stock_and_cost(self, test_client, vendor, material):
        response = _procure(test_client, vendor["id"], material["id"])
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["total_amount"] == 70
        assert data["gst_amount"] == 7
        assert data["grand_total"] == 77
        assert data["payment_status"] == "unpaid"
        assert data["vendor_name"] == vendor["name"]
        assert data["items"][0]["item_name"] == "Steel sheet"

        stock = _material(test_client, material["id"])
        assert stock["current_stock"] == 20
        assert stock["cost_price"] == 6
        assert stock["last_procurement_date"] is not None
        assert _vendor(test_client, vendor["id"])["outstanding_payable"] == 77

    def test_ordered_procurement_leaves_stock(self, test_client, vendor, material):
        response = _procure(test_client, vendor["id"], material["id"], status="ordered")
        assert response.status_code == status.HTTP_201_CREATED
        assert _material(test_client, material["id"])["current_stock"] == 10
        assert _vendor(test_client, vendor["id"])["outstanding_payable"] == 77

    def test_initial_payment(self, test_client, vendor, material):
        response = _procure(test_client, vendor["id"], material["id"], initial_payment={"amount": 27})
        data = response.json()["data"]
        assert data["total_paid"] == 27
        assert data["remaining_amount"] == 50
        assert data["payment_status"] == "partially_paid"
        assert _vendor(test_client, vendor["id"])["outstanding_payable"] == 50

    def test_initial_payment_above_total(self, test_client, vendor, material):
        response = _procure(test_client, vendor["id"], material["id"], initial_payment={"amount": 100})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_invoice_number_unique_per_vendor(self, test_client, make_vendor, vendor, material):
        assert _procure(test_client, vendor["id"], material["id"], invoice_number="B-1").status_code == 201
        duplicate = _procure(test_client, vendor["id"], material["id"], invoice_number="B-1")
        assert duplicate.status_code == status.HTTP_409_CONFLICT
        other_vendor = make_vendor(name="Other")
        assert _procure(test_client, other_vendor["id"], material["id"], invoice_number="B-1").status_code == 201

    def test_unknown_item(self, test_client, vendor):
        response = _procure(test_client, vendor["id"], 999)
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestProcurementPayments:
    def test_payments_settle_the_procurement(self, test_client, vendor, material):
        procurement = _procure(test_client, vendor["id"], material["id"]).json()["data"]
        url = f"/api/procurement/raw-material/{procurement['id']}/payments"

        too_much = test_client.post(url, json={"amount": 80})
        assert too_much.status_code == status.HTTP_400_BAD_REQUEST

        first = test_client.post(url, json={"amount": 30, "payment_method": "upi"})
        assert first.status_code == status.HTTP_201_CREATED
        assert first.json()["data"]["tranche_number"] == 1
        assert first.json()["data"]["party_name"] == vendor["name"]

        second = test_client.post(url, json={"amount": 47})
        assert second.json()["data"]["tranche_number"] == 2

        procurement = test_client.get(f"/api/procurement/raw-material/{procurement['id']}").json()["data"]
        assert procurement["payment_status"] == "fully_paid"
        assert procurement["remaining_amount"] == 0
        assert _vendor(test_client, vendor["id"])["outstanding_payable"] == 0

        payments = test_client.get(url).json()["data"]
        assert [p["amount"] for p in payments] == [30, 47]


class TestProcurementUpdate:
    def test_cancel_reverses_stock_and_payable(self, test_client, vendor, material):
        procurement = _procure(test_client, vendor["id"], material["id"]).json()["data"]

        response = test_client.put(
            f"/api/procurement/raw-material/{procurement['id']}", json={"status": "cancelled"}
        )
        assert response.status_code == status.HTTP_200_OK
        stock = _material(test_client, material["id"])
        assert stock["current_stock"] == 10
        assert stock["cost_price"] == 5
        assert _vendor(test_client, vendor["id"])["outstanding_payable"] == 0

    def test_receiving_an_order_books_stock(self, test_client, vendor, material):
        procurement = _procure(test_client, vendor["id"], material["id"], status="ordered").json()["data"]
        test_client.put(f"/api/procurement/raw-material/{procurement['id']}", json={"status": "received"})
        assert _material(test_client, material["id"])["current_stock"] == 20

    def test_changing_items_moves_totals(self, test_client, vendor, material):
        procurement = _procure(test_client, vendor["id"], material["id"]).json()["data"]
        response = test_client.put(
            f"/api/procurement/raw-material/{procurement['id']}",
            json={"items": [{"item_id": material["id"], "quantity": 5, "unit_price": 7}]},
        )
        assert response.json()["data"]["grand_total"] == 38.5
        assert _material(test_client, material["id"])["current_stock"] == 15
        assert _vendor(test_client, vendor["id"])["outstanding_payable"] == 38.5

    def test_null_for_required_field_is_ignored(self, test_client, vendor, material):
        procurement = _procure(test_client, vendor["id"], material["id"]).json()["data"]
        response = test_client.put(
            f"/api/procurement/raw-material/{procurement['id']}",
            json={"procurement_date": None, "notes": "Second truck"},
        )
        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["procurement_date"] == procurement["procurement_date"]
        assert data["notes"] == "Second truck"
        assert _material(test_client, material["id"])["current_stock"] == 20

    def test_delete_reverses_everything(self, test_client, vendor, material):
        procurement = _procure(test_client, vendor["id"], material["id"], initial_payment={"amount": 20}).json()["data"]
        response = test_client.delete(f"/api/procurement/raw-material/{procurement['id']}")
        assert response.status_code == status.HTTP_200_OK
        assert _material(test_client, material["id"])["current_stock"] == 10
        assert _vendor(test_client, vendor["id"])["outstanding_payable"] == 0
        assert test_client.get("/api/payments").json()["pagination"]["total"] == 0


class TestProcurementStats:
    def test_stats_by_type(self, test_client, vendor, material, make_trading_good):
        _procure(test_client, vendor["id"], material["id"])
        good = make_trading_good()
        test_client.post(
            "/api/procurement/trading-good",
            json={
                "vendor_id": vendor["id"],
                "procurement_date": "2024-05-02T10:00:00",
                "items": [{"item_id": good["id"], "quantity": 1, "unit_price": 23}],
            },
        )
        stats = test_client.get("/api/procurement/stats").json()["data"]
        assert stats["raw_material"]["count"] == 1
        assert stats["trading_good"]["count"] == 1
        assert stats["total_value"] == 100
