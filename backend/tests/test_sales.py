"""Tests for sale routes: stock, client balance, payments and status."""
import pytest
from fastapi import status


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def good(make_trading_good):
    return make_trading_good(current_stock=10, cost_price=80, selling_price=100)


def _line(good, quantity=3, unit_price=100):
    return [{"item_id": good["id"], "item_type": "trading_good", "quantity": quantity, "unit_price": unit_price}]


def _stock(test_client, good):
    return test_client.get(f"/api/inventory/trading-goods/{good['id']}").json()["data"]["current_stock"]


def _balance(test_client, client):
    return test_client.get(f"/api/clients/{client['id']}").json()["data"]["outstanding_balance"]


class TestSaleCreate:
    def test_create_sale(self, test_client, make_sale, client, good):
        sale = make_sale(client["id"], _line(good), gst_percentage=18)

        assert sale["invoice_number"].startswith("INV-")
        assert sale["invoice_number"].endswith("-00001")
        assert sale["subtotal"] == 300
        assert sale["gst_amount"] == 54
        assert sale["grand_total"] == 354
        assert sale["status"] == "pending"
        assert sale["payment_status"] == "unpaid"
        assert sale["client_name"] == client["name"]
        assert sale["items"][0]["item_name"] == "LED bulb"
        assert _stock(test_client, good) == 7
        assert _balance(test_client, client) == 354

    def test_discount_is_taken_before_gst(self, make_sale, client, good):
        sale = make_sale(client["id"], _line(good), discount=50, gst_percentage=18)
        assert sale["gst_amount"] == 45
        assert sale["grand_total"] == 295

    def test_discount_above_subtotal(self, test_client, client, good):
        response = test_client.post(
            "/api/sales",
            json={"client_id": client["id"], "sale_date": "2024-05-01T10:00:00", "items": _line(good), "discount": 500},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_insufficient_stock(self, test_client, client, good):
        response = test_client.post(
            "/api/sales",
            json={"client_id": client["id"], "sale_date": "2024-05-01T10:00:00", "items": _line(good, quantity=11)},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Insufficient stock for LED bulb. Available: 10, Requested: 11"
        assert _stock(test_client, good) == 10

    def test_unknown_client(self, test_client, good):
        response = test_client.post(
            "/api/sales",
            json={"client_id": 999, "sale_date": "2024-05-01T10:00:00", "items": _line(good)},
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_duplicate_invoice_number(self, test_client, make_sale, client, good):
        make_sale(client["id"], _line(good, quantity=1), invoice_number="INV-CUSTOM")
        response = test_client.post(
            "/api/sales",
            json={
                "client_id": client["id"],
                "sale_date": "2024-05-01T10:00:00",
                "items": _line(good, quantity=1),
                "invoice_number": "INV-CUSTOM",
            },
        )
        assert response.status_code == status.HTTP_409_CONFLICT

    def test_initial_payment(self, test_client, make_sale, client, good):
        sale = make_sale(client["id"], _line(good), initial_payment={"amount": 100, "payment_method": "upi"})
        assert sale["total_paid"] == 100
        assert sale["remaining_amount"] == 200
        assert sale["status"] == "partially_paid"
        assert _balance(test_client, client) == 200


class TestSalePayments:
    def test_payments_complete_the_sale(self, test_client, make_sale, client, good):
        sale = make_sale(client["id"], _line(good))
        url = f"/api/sales/{sale['id']}/payments"

        assert test_client.post(url, json={"amount": 500}).status_code == status.HTTP_400_BAD_REQUEST

        response = test_client.post(url, json={"amount": 120})
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["data"]["party_type"] == "client"
        assert _balance(test_client, client) == 180

        test_client.post(url, json={"amount": 180})
        sale_status = test_client.get(f"/api/sales/{sale['id']}/status").json()["data"]
        assert sale_status["status"] == "completed"
        assert sale_status["payment_status"] == "fully_paid"
        assert sale_status["remaining_amount"] == 0
        assert _balance(test_client, client) == 0
        assert len(test_client.get(url).json()["data"]) == 2


class TestSaleStatus:
    def test_cancel_and_reactivate(self, test_client, make_sale, client, good):
        sale = make_sale(client["id"], _line(good))
        url = f"/api/sales/{sale['id']}/status"

        response = test_client.put(url, json={"status": "cancelled"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["status"] == "cancelled"
        assert _stock(test_client, good) == 10
        assert _balance(test_client, client) == 0

        payment = test_client.post(f"/api/sales/{sale['id']}/payments", json={"amount": 10})
        assert payment.status_code == status.HTTP_400_BAD_REQUEST

        response = test_client.put(url, json={"status": "pending"})
        assert response.json()["data"]["status"] == "pending"
        assert _stock(test_client, good) == 7
        assert _balance(test_client, client) == 300

    def test_payment_statuses_cannot_be_set(self, test_client, make_sale, client, good):
        sale = make_sale(client["id"], _line(good))
        response = test_client.put(f"/api/sales/{sale['id']}/status", json={"status": "completed"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestSaleUpdateDelete:
    def test_update_items_moves_stock(self, test_client, make_sale, client, good):
        sale = make_sale(client["id"], _line(good))
        response = test_client.put(f"/api/sales/{sale['id']}", json={"items": _line(good, quantity=5)})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["grand_total"] == 500
        assert _stock(test_client, good) == 5
        assert _balance(test_client, client) == 500

    def test_update_cannot_oversell(self, test_client, make_sale, client, good):
        sale = make_sale(client["id"], _line(good))
        response = test_client.put(f"/api/sales/{sale['id']}", json={"items": _line(good, quantity=11)})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert _stock(test_client, good) == 7

    def test_null_for_required_field_is_ignored(self, test_client, make_sale, client, good):
        sale = make_sale(client["id"], _line(good))
        response = test_client.put(f"/api/sales/{sale['id']}", json={"sale_date": None, "notes": "Rush order"})
        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["sale_date"] == sale["sale_date"]
        assert data["notes"] == "Rush order"

    def test_move_sale_to_another_client(self, test_client, make_sale, make_client, client, good):
        sale = make_sale(client["id"], _line(good))
        other = make_client(name="Other")
        test_client.put(f"/api/sales/{sale['id']}", json={"client_id": other["id"]})
        assert _balance(test_client, client) == 0
        assert _balance(test_client, other) == 300

    def test_delete_restores_stock(self, test_client, make_sale, client, good):
        sale = make_sale(client["id"], _line(good), initial_payment={"amount": 50})
        response = test_client.delete(f"/api/sales/{sale['id']}")
        assert response.status_code == status.HTTP_200_OK
        assert _stock(test_client, good) == 10
        assert _balance(test_client, client) == 0
        assert test_client.get("/api/payments").json()["pagination"]["total"] == 0


class TestSaleListing:
    def test_filter_and_stats(self, test_client, make_sale, client, good):
        make_sale(client["id"], _line(good, quantity=1))
        paid = make_sale(client["id"], _line(good, quantity=1), initial_payment={"amount": 100})

        response = test_client.get("/api/sales", params={"payment_status": "fully_paid"})
        assert [s["id"] for s in response.json()["data"]] == [paid["id"]]

        stats = test_client.get("/api/sales/stats").json()["data"]
        assert stats["total_sales"] == 2
        assert stats["total_revenue"] == 200
        assert stats["total_outstanding"] == 100
        assert stats["average_sale_value"] == 100
