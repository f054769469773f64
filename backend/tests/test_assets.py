"""Tests for asset and asset procurement routes."""
import pytest
from fastapi import status


@pytest.fixture
def vendor(make_vendor):
    return make_vendor()


def _payable(test_client, vendor_id):
    return test_client.get(f"/api/vendors/{vendor_id}").json()["data"]["outstanding_payable"]


def _create_asset(test_client, **overrides):
    payload = {
        "name": "Laser printer",
        "category": "office_equipment",
        "purchase_date": "2024-04-01T00:00:00",
        "purchase_price": 1000,
    }
    payload.update(overrides)
    response = test_client.post("/api/assets", json=payload)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()["data"]


class TestAssets:
    def test_current_value_defaults_to_price(self, test_client):
        asset = _create_asset(test_client)
        assert asset["current_value"] == 1000
        assert asset["depreciation"] == 0
        assert asset["payment_status"] == "unpaid"

    def test_payment_details_and_vendor_payable(self, test_client, vendor):
        asset = _create_asset(test_client, vendor_id=vendor["id"], payment_details={"amount": 400})
        assert asset["total_paid"] == 400
        assert asset["remaining_amount"] == 600
        assert asset["payment_status"] == "partially_paid"
        assert asset["vendor_name"] == vendor["name"]
        assert _payable(test_client, vendor["id"]) == 600

    def test_payment_above_price(self, test_client):
        response = test_client.post(
            "/api/assets",
            json={
                "name": "Desk",
                "purchase_date": "2024-04-01T00:00:00",
                "purchase_price": 100,
                "payment_details": {"amount": 150},
            },
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_depreciation_follows_current_value(self, test_client):
        asset = _create_asset(test_client)
        response = test_client.put(f"/api/assets/{asset['id']}", json={"current_value": 800})
        assert response.json()["data"]["depreciation"] == 200

    def test_price_change_moves_vendor_payable(self, test_client, vendor):
        asset = _create_asset(test_client, vendor_id=vendor["id"])
        test_client.put(f"/api/assets/{asset['id']}", json={"purchase_price": 1500})
        assert _payable(test_client, vendor["id"]) == 1500

    def test_delete_clears_payable(self, test_client, vendor):
        asset = _create_asset(test_client, vendor_id=vendor["id"])
        assert test_client.delete(f"/api/assets/{asset['id']}").status_code == status.HTTP_200_OK
        assert _payable(test_client, vendor["id"]) == 0

    def test_vendor_with_assets_cannot_be_deleted(self, test_client, vendor):
        _create_asset(test_client, vendor_id=vendor["id"])
        assert test_client.delete(f"/api/vendors/{vendor['id']}").status_code == status.HTTP_400_BAD_REQUEST

    def test_stats(self, test_client):
        _create_asset(test_client)
        _create_asset(test_client, name="Chair", category="furniture", purchase_price=200, current_value=150)
        stats = test_client.get("/api/assets/stats").json()["data"]
        assert stats["total_assets"] == 2
        assert stats["by_category"] == {"office_equipment": 1, "furniture": 1}
        assert stats["total_investment"] == 1200
        assert stats["total_depreciation"] == 50

    def test_recalculate_payments(self, test_client):
        _create_asset(test_client, payment_details={"amount": 100})
        response = test_client.post("/api/assets/recalculate-payments")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["total_assets"] == 1


class TestAssetProcurement:
    def _procure(self, test_client, vendor_id, **overrides):
        payload = {
            "vendor_id": vendor_id,
            "procurement_date": "2024-04-10T00:00:00",
            "gst_amount": 180,
            "invoice_number": "AP-1",
            "items": [{"asset_name": "Laptop", "category": "electronics", "quantity": 2, "unit_price": 500}],
        }
        payload.update(overrides)
        response = test_client.post("/api/assets/procurement", json=payload)
        assert response.status_code == status.HTTP_201_CREATED, response.text
        return response.json()["data"]

    def test_one_asset_per_unit(self, test_client, vendor):
        procurement = self._procure(test_client, vendor["id"])
        assert procurement["total_amount"] == 1000
        assert procurement["grand_total"] == 1180
        assert len(procurement["asset_ids"]) == 2

        names = sorted(a["name"] for a in test_client.get("/api/assets").json()["data"])
        assert names == ["Laptop (1)", "Laptop (2)"]
        assert _payable(test_client, vendor["id"]) == 1180

    def test_payment_details_reduce_payable(self, test_client, vendor):
        procurement = self._procure(test_client, vendor["id"], payment_details={"amount": 180})
        assert procurement["total_paid"] == 180
        assert procurement["payment_status"] == "partially_paid"
        assert _payable(test_client, vendor["id"]) == 1000

    def test_delete_detaches_assets(self, test_client, vendor):
        procurement = self._procure(test_client, vendor["id"])
        response = test_client.delete(f"/api/assets/procurement/{procurement['id']}")
        assert response.status_code == status.HTTP_200_OK
        assert _payable(test_client, vendor["id"]) == 0

        assets = test_client.get("/api/assets").json()["data"]
        assert len(assets) == 2
        assert all(a["asset_procurement_id"] is None and a["vendor_id"] is None for a in assets)

    def test_unknown_vendor(self, test_client):
        response = test_client.post(
            "/api/assets/procurement",
            json={
                "vendor_id": 999,
                "procurement_date": "2024-04-10T00:00:00",
                "items": [{"asset_name": "Laptop", "unit_price": 500}],
            },
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
