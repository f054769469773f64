"""Tests for the dashboard figures."""
from fastapi import status


class TestDashboard:
    def test_empty_dashboard(self, test_client):
        response = test_client.get("/api/analytics/dashboard")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["total_sales"] == 0
        assert data["recent_sales"] == []
        assert data["low_stock_items"] == {"raw_materials": [], "trading_goods": []}

    def test_dashboard_figures(
        self, test_client, make_client, make_vendor, make_raw_material, make_trading_good, make_sale
    ):
        client = make_client(name="Sharma Traders")
        vendor = make_vendor()
        steel = make_raw_material(name="Steel sheet", current_stock=1, reorder_level=5, cost_price=5)
        bulb = make_trading_good(current_stock=10, cost_price=80, selling_price=100)
        shelf = test_client.post(
            "/api/inventory/finished-goods",
            json={
                "name": "Steel shelf",
                "sku": "SHELF-1",
                "current_stock": 5,
                "selling_price": 50,
                "components": [{"raw_material_id": steel["id"], "quantity_required": 2}],
            },
        ).json()["data"]

        make_sale(
            client["id"],
            [
                {"item_id": bulb["id"], "item_type": "trading_good", "quantity": 3, "unit_price": 100},
                {"item_id": shelf["id"], "item_type": "finished_good", "quantity": 1, "unit_price": 50},
            ],
            initial_payment={"amount": 150},
        )
        cancelled = make_sale(
            client["id"],
            [{"item_id": bulb["id"], "item_type": "trading_good", "quantity": 1, "unit_price": 100}],
        )
        test_client.put(f"/api/sales/{cancelled['id']}/status", json={"status": "cancelled"})

        test_client.post(
            "/api/assets",
            json={"name": "Lathe", "purchase_date": "2024-01-01T00:00:00", "purchase_price": 2000, "vendor_id": vendor["id"]},
        )
        test_client.post(
            "/api/expenses",
            json={"date": "2024-05-01T00:00:00", "category": "rent", "description": "Rent", "amount": 500},
        )
        test_client.post(
            "/api/loan-accounts",
            json={
                "bank_name": "State Bank",
                "account_number": "LN-9",
                "loan_type": "term",
                "principal_amount": 7000,
                "interest_rate": 9,
                "start_date": "2024-01-01T00:00:00",
            },
        )

        data = test_client.get("/api/analytics/dashboard").json()["data"]
        assert data["total_sales"] == 350
        assert data["pending_receivables"] == 200
        assert data["cost_of_goods_sold"] == 250
        assert data["net_profit"] == 100
        assert data["pending_payables"] == 2000
        assert data["total_assets"] == 2000
        assert data["outstanding_loans"] == 7000
        assert data["total_expenses"] == 500
        assert len(data["recent_sales"]) == 2
        assert data["recent_sales"][0]["client_name"] == "Sharma Traders"
        assert [i["name"] for i in data["low_stock_items"]["raw_materials"]] == ["Steel sheet"]
        assert data["low_stock_items"]["trading_goods"] == []
