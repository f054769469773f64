"""Tests for client and vendor routes."""
from fastapi import status


class TestClientRoutes:
    """Client CRUD and envelope tests"""

    def test_create_client(self, test_client):
        response = test_client.post(
            "/api/clients",
            json={"name": "  Sharma Traders ", "email": "Accounts@Sharma.IN", "phone": "9876543210"},
        )
        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["success"] is True
        assert body["data"]["name"] == "Sharma Traders"
        assert body["data"]["email"] == "accounts@sharma.in"
        assert body["data"]["outstanding_balance"] == 0
        assert body["data"]["status"] == "active"

    def test_duplicate_email_conflicts(self, test_client, make_client):
        make_client(email="dup@example.com")
        response = test_client.post("/api/clients", json={"name": "Other", "email": "dup@example.com"})
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json() == {"success": False, "error": "email already exists"}

    def test_invalid_phone_is_rejected(self, test_client):
        response = test_client.post(
            "/api/clients", json={"name": "Bad", "email": "bad@example.com", "phone": "12345"}
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["success"] is False
        assert "phone" in response.json()["error"]

    def test_get_missing_client(self, test_client):
        response = test_client.get("/api/clients/999")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "Client not found"

    def test_list_pagination_and_search(self, test_client, make_client):
        make_client(name="Alpha Stores")
        make_client(name="Beta Stores")
        make_client(name="Gamma Mart")

        response = test_client.get("/api/clients", params={"limit": 2})
        body = response.json()
        assert response.status_code == status.HTTP_200_OK
        assert len(body["data"]) == 2
        assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "total_pages": 2}

        response = test_client.get("/api/clients", params={"search": "stores"})
        names = sorted(c["name"] for c in response.json()["data"])
        assert names == ["Alpha Stores", "Beta Stores"]

    def test_invalid_sort_field(self, test_client):
        response = test_client.get("/api/clients", params={"sort_by": "nope"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update_client(self, test_client, make_client):
        client = make_client()
        response = test_client.put(f"/api/clients/{client['id']}", json={"name": "Renamed", "email": None})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["name"] == "Renamed"
        assert response.json()["data"]["email"] == client["email"]

    def test_delete_client(self, test_client, make_client):
        client = make_client()
        response = test_client.delete(f"/api/clients/{client['id']}")
        assert response.status_code == status.HTTP_200_OK
        assert test_client.get(f"/api/clients/{client['id']}").status_code == status.HTTP_404_NOT_FOUND

    def test_client_with_sales_cannot_be_deleted(self, test_client, make_client, make_trading_good, make_sale):
        client = make_client()
        good = make_trading_good()
        make_sale(client["id"], [{"item_id": good["id"], "item_type": "trading_good", "quantity": 1, "unit_price": 100}])

        response = test_client.delete(f"/api/clients/{client['id']}")
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Cannot delete client with 1 sale(s)"


class TestVendorRoutes:
    """Vendor CRUD tests"""

    def test_raw_material_types_are_deduplicated(self, make_vendor):
        vendor = make_vendor(raw_material_types=["Steel", " Steel ", "Copper"])
        assert vendor["raw_material_types"] == ["Steel", "Copper"]
        assert vendor["outstanding_payable"] == 0

    def test_vendor_with_procurement_cannot_be_deleted(self, test_client, make_vendor, make_raw_material):
        vendor = make_vendor()
        material = make_raw_material()
        test_client.post(
            "/api/procurement/raw-material",
            json={
                "vendor_id": vendor["id"],
                "procurement_date": "2024-05-01T10:00:00",
                "items": [{"item_id": material["id"], "quantity": 1, "unit_price": 5}],
            },
        )
        response = test_client.delete(f"/api/vendors/{vendor['id']}")
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"].startswith("Cannot delete vendor referenced by")

    def test_delete_unused_vendor(self, test_client, make_vendor):
        vendor = make_vendor()
        assert test_client.delete(f"/api/vendors/{vendor['id']}").status_code == status.HTTP_200_OK


class TestRawMaterialTypes:
    def test_name_is_unique(self, test_client):
        first = test_client.post("/api/settings/raw-material-types", json={"name": "Steel"})
        assert first.status_code == status.HTTP_201_CREATED
        second = test_client.post("/api/settings/raw-material-types", json={"name": "Steel"})
        assert second.status_code == status.HTTP_409_CONFLICT


class TestUnknownRoutes:
    def test_unknown_route_uses_error_envelope(self, test_client):
        response = test_client.get("/api/nowhere")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["success"] is False
