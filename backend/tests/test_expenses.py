"""Tests for expense routes and their mirrored payments."""
from fastapi import status


def _create_expense(test_client, **overrides):
    payload = {
        "date": "2024-05-03T00:00:00",
        "category": "rent",
        "description": "Office rent",
        "amount": 15000,
        "receipt_number": "R-1",
    }
    payload.update(overrides)
    response = test_client.post("/api/expenses", json=payload)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()["data"]


class TestExpenseRoutes:
    def test_expense_records_a_payment(self, test_client):
        expense = _create_expense(test_client)
        assert expense["payment_id"] is not None

        payment = test_client.get(f"/api/payments/{expense['payment_id']}").json()["data"]
        assert payment["transaction_type"] == "expense"
        assert payment["account_type"] == "payable"
        assert payment["amount"] == 15000
        assert payment["expense_id"] == expense["id"]
        assert payment["notes"] == "Expense: Office rent (Receipt: R-1)"

    def test_update_keeps_payment_in_step(self, test_client):
        expense = _create_expense(test_client)
        response = test_client.put(
            f"/api/expenses/{expense['id']}", json={"amount": 16000, "payment_method": "bank_transfer"}
        )
        assert response.status_code == status.HTTP_200_OK

        payment = test_client.get(f"/api/payments/{expense['payment_id']}").json()["data"]
        assert payment["amount"] == 16000
        assert payment["payment_method"] == "bank_transfer"

    def test_delete_removes_payment(self, test_client):
        expense = _create_expense(test_client)
        assert test_client.delete(f"/api/expenses/{expense['id']}").status_code == status.HTTP_200_OK
        assert test_client.get(f"/api/payments/{expense['payment_id']}").status_code == status.HTTP_404_NOT_FOUND

    def test_invalid_category(self, test_client):
        response = test_client.post(
            "/api/expenses",
            json={"date": "2024-05-03T00:00:00", "category": "parties", "description": "x", "amount": 1},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_filter_and_stats(self, test_client):
        _create_expense(test_client)
        _create_expense(test_client, category="utilities", description="Electricity", amount=3000)

        response = test_client.get("/api/expenses", params={"category": "utilities"})
        assert [e["description"] for e in response.json()["data"]] == ["Electricity"]

        response = test_client.get(
            "/api/expenses", params={"start_date": "2024-06-01T00:00:00"}
        )
        assert response.json()["pagination"]["total"] == 0

        stats = test_client.get("/api/expenses/stats").json()["data"]
        assert stats["total_amount"] == 18000
        assert stats["count"] == 2
        assert stats["by_category"] == {"rent": 15000, "utilities": 3000}
