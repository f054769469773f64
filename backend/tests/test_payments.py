"""Tests for the payment ledger routes."""
from fastapi import status


def _vendor_payable(test_client, vendor_id):
    return test_client.get(f"/api/vendors/{vendor_id}").json()["data"]["outstanding_payable"]


class TestPaymentCreate:
    def test_expense_payment_needs_no_party(self, test_client):
        response = test_client.post(
            "/api/payments",
            json={"amount": 250, "transaction_type": "expense", "account_type": "payable"},
        )
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["party_name"] is None
        assert data["payment_date"] is not None

    def test_purchase_payment_requires_party(self, test_client):
        response = test_client.post(
            "/api/payments",
            json={"amount": 250, "transaction_type": "purchase", "account_type": "payable"},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"].startswith("Validation failed")

    def test_tranche_beyond_total(self, test_client):
        response = test_client.post(
            "/api/payments",
            json={
                "amount": 10,
                "transaction_type": "expense",
                "account_type": "payable",
                "tranche_number": 3,
                "total_tranches": 2,
            },
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_sale_payment_updates_sale(self, test_client, make_client, make_trading_good, make_sale):
        client = make_client()
        good = make_trading_good()
        sale = make_sale(client["id"], [{"item_id": good["id"], "item_type": "trading_good", "quantity": 2, "unit_price": 100}])

        response = test_client.post(
            "/api/payments",
            json={
                "amount": 150,
                "transaction_type": "sale",
                "account_type": "receivable",
                "party_id": client["id"],
                "party_type": "client",
                "sale_id": sale["id"],
            },
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["data"]["party_name"] == client["name"]

        sale = test_client.get(f"/api/sales/{sale['id']}").json()["data"]
        assert sale["total_paid"] == 150
        assert sale["status"] == "partially_paid"

        payment_id = response.json()["data"]["id"]
        assert test_client.delete(f"/api/payments/{payment_id}").status_code == status.HTTP_200_OK
        sale = test_client.get(f"/api/sales/{sale['id']}").json()["data"]
        assert sale["total_paid"] == 0
        assert sale["status"] == "pending"
        assert test_client.get(f"/api/clients/{client['id']}").json()["data"]["outstanding_balance"] == 200

    def test_plain_vendor_payment_reduces_payable(self, test_client, make_vendor):
        vendor = make_vendor()
        test_client.post(
            "/api/assets",
            json={"name": "Forklift", "purchase_date": "2024-05-01T00:00:00", "purchase_price": 1000, "vendor_id": vendor["id"]},
        )
        assert _vendor_payable(test_client, vendor["id"]) == 1000

        response = test_client.post(
            "/api/payments",
            json={
                "amount": 300,
                "transaction_type": "purchase",
                "account_type": "payable",
                "party_id": vendor["id"],
                "party_type": "vendor",
            },
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert _vendor_payable(test_client, vendor["id"]) == 700

        payment_id = response.json()["data"]["id"]
        test_client.put(f"/api/payments/{payment_id}", json={"amount": 400})
        assert _vendor_payable(test_client, vendor["id"]) == 600

        test_client.delete(f"/api/payments/{payment_id}")
        assert _vendor_payable(test_client, vendor["id"]) == 1000


class TestPaymentListing:
    def test_filters_and_stats(self, test_client):
        for amount, method in ((100, "cash"), (50, "upi")):
            test_client.post(
                "/api/payments",
                json={"amount": amount, "payment_method": method, "transaction_type": "expense", "account_type": "payable"},
            )

        response = test_client.get("/api/payments", params={"transaction_type": "expense"})
        assert response.json()["pagination"]["total"] == 2
        response = test_client.get("/api/payments", params={"transaction_type": "sale"})
        assert response.json()["pagination"]["total"] == 0

        stats = test_client.get("/api/payments/stats").json()["data"]
        assert stats["total_amount"] == 150
        assert stats["count"] == 2
        assert stats["average_amount"] == 75
        assert stats["by_payment_method"] == {"cash": 100, "upi": 50}
        assert len(stats["daily_trend"]) == 30
        assert stats["daily_trend"][-1]["amount"] == 150

    def test_missing_payment(self, test_client):
        assert test_client.get("/api/payments/999").status_code == status.HTTP_404_NOT_FOUND


class TestPaymentLimits:
    def _asset(self, test_client, vendor_id):
        response = test_client.post(
            "/api/assets",
            json={"name": "Forklift", "purchase_date": "2024-05-01T00:00:00", "purchase_price": 1000, "vendor_id": vendor_id},
        )
        return response.json()["data"]

    def _asset_payment(self, vendor_id, **fields):
        payload = {
            "amount": 500,
            "transaction_type": "purchase",
            "account_type": "payable",
            "party_id": vendor_id,
            "party_type": "vendor",
        }
        payload.update(fields)
        return payload

    def test_asset_payment_cannot_exceed_price(self, test_client, make_vendor):
        vendor = make_vendor()
        asset = self._asset(test_client, vendor["id"])

        response = test_client.post("/api/payments", json=self._asset_payment(vendor["id"], amount=5000, asset_id=asset["id"]))
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Payment amount exceeds remaining amount"

        asset = test_client.get(f"/api/assets/{asset['id']}").json()["data"]
        assert asset["total_paid"] == 0
        assert _vendor_payable(test_client, vendor["id"]) == 1000

    def test_asset_payment_increase_is_capped(self, test_client, make_vendor):
        vendor = make_vendor()
        asset = self._asset(test_client, vendor["id"])
        response = test_client.post("/api/payments", json=self._asset_payment(vendor["id"], asset_id=asset["id"]))
        assert response.status_code == status.HTTP_201_CREATED
        payment_id = response.json()["data"]["id"]

        response = test_client.put(f"/api/payments/{payment_id}", json={"amount": 1200})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = test_client.put(f"/api/payments/{payment_id}", json={"amount": 1000})
        assert response.status_code == status.HTTP_200_OK
        asset = test_client.get(f"/api/assets/{asset['id']}").json()["data"]
        assert asset["total_paid"] == 1000
        assert asset["payment_status"] == "fully_paid"

    def test_asset_procurement_payment_cannot_exceed_total(self, test_client, make_vendor):
        vendor = make_vendor()
        response = test_client.post(
            "/api/assets/procurement",
            json={
                "vendor_id": vendor["id"],
                "procurement_date": "2024-04-10T00:00:00",
                "items": [{"asset_name": "Laptop", "category": "electronics", "quantity": 2, "unit_price": 500}],
            },
        )
        procurement = response.json()["data"]

        response = test_client.post(
            "/api/payments",
            json=self._asset_payment(vendor["id"], amount=1500, asset_procurement_id=procurement["id"]),
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert _vendor_payable(test_client, vendor["id"]) == 1000

    def test_expense_payment_amount_is_owned_by_expense(self, test_client):
        expense = test_client.post(
            "/api/expenses",
            json={"date": "2024-05-03T00:00:00", "category": "rent", "description": "Office rent", "amount": 15000},
        ).json()["data"]

        response = test_client.put(f"/api/payments/{expense['payment_id']}", json={"amount": 9000})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        response = test_client.put(f"/api/payments/{expense['payment_id']}", json={"payment_date": "2024-06-01T00:00:00"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = test_client.put(f"/api/payments/{expense['payment_id']}", json={"notes": "Paid by cheque"})
        assert response.status_code == status.HTTP_200_OK
        payment = test_client.get(f"/api/payments/{expense['payment_id']}").json()["data"]
        assert payment["amount"] == 15000
        assert payment["notes"] == "Paid by cheque"
