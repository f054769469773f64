"""Tests for the inventory routes."""
from fastapi import status


class TestRawMaterials:
    def test_create_and_low_stock_flag(self, make_raw_material):
        material = make_raw_material(current_stock=1, reorder_level=5)
        assert material["is_low_stock"] is True
        assert material["intended_for_name"] is None

    def test_low_stock_filter(self, test_client, make_raw_material):
        make_raw_material(name="Copper wire", current_stock=1, reorder_level=5)
        make_raw_material(name="Zinc", current_stock=50, reorder_level=5)

        response = test_client.get("/api/inventory/raw-materials", params={"low_stock": True})
        assert response.status_code == status.HTTP_200_OK
        assert [m["name"] for m in response.json()["data"]] == ["Copper wire"]

    def test_intended_for_must_exist(self, test_client):
        response = test_client.post(
            "/api/inventory/raw-materials",
            json={"name": "Resin", "intended_for_id": 42},
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_material_in_bill_of_materials_cannot_be_deleted(self, test_client, make_raw_material):
        material = make_raw_material()
        test_client.post(
            "/api/inventory/finished-goods",
            json={
                "name": "Steel shelf",
                "sku": "shelf-1",
                "selling_price": 50,
                "components": [{"raw_material_id": material["id"], "quantity_required": 2}],
            },
        )
        response = test_client.delete(f"/api/inventory/raw-materials/{material['id']}")
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "finished good" in response.json()["error"]


class TestTradingGoods:
    def test_sku_normalised_and_margin(self, make_trading_good):
        good = make_trading_good(sku=" led-x ", cost_price=100, selling_price=125)
        assert good["sku"] == "LED-X"
        assert good["profit_margin"] == 25.0

    def test_selling_price_below_cost(self, test_client):
        response = test_client.post(
            "/api/inventory/trading-goods",
            json={"name": "Fan", "sku": "FAN-1", "cost_price": 100, "selling_price": 90},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Selling price cannot be less than cost price"

    def test_duplicate_sku(self, test_client, make_trading_good):
        make_trading_good(sku="FAN-1")
        response = test_client.post(
            "/api/inventory/trading-goods",
            json={"name": "Fan", "sku": "fan-1", "cost_price": 10, "selling_price": 20},
        )
        assert response.status_code == status.HTTP_409_CONFLICT

    def test_update_checks_price_against_stored_cost(self, test_client, make_trading_good):
        good = make_trading_good(cost_price=80, selling_price=100)
        response = test_client.put(f"/api/inventory/trading-goods/{good['id']}", json={"selling_price": 70})
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestFinishedGoods:
    def _create(self, test_client, material_id, **overrides):
        payload = {
            "name": "Steel shelf",
            "sku": "SHELF-1",
            "selling_price": 50,
            "components": [{"raw_material_id": material_id, "quantity_required": 2}],
        }
        payload.update(overrides)
        response = test_client.post("/api/inventory/finished-goods", json=payload)
        assert response.status_code == status.HTTP_201_CREATED, response.text
        return response.json()["data"]

    def test_components_carry_material_names(self, test_client, make_raw_material):
        material = make_raw_material(name="Steel sheet")
        good = self._create(test_client, material["id"])
        assert good["components"][0]["raw_material_name"] == "Steel sheet"
        assert good["components"][0]["unit"] == "kg"
        assert good["components"][0]["quantity_required"] == 2

    def test_duplicate_component_rejected(self, test_client, make_raw_material):
        material = make_raw_material()
        response = test_client.post(
            "/api/inventory/finished-goods",
            json={
                "name": "Shelf",
                "sku": "SHELF-2",
                "components": [
                    {"raw_material_id": material["id"], "quantity_required": 1},
                    {"raw_material_id": material["id"], "quantity_required": 2},
                ],
            },
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_produce_consumes_raw_materials(self, test_client, make_raw_material):
        material = make_raw_material(current_stock=10)
        good = self._create(test_client, material["id"])

        response = test_client.post(f"/api/inventory/finished-goods/{good['id']}/produce", json={"quantity": 3})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["current_stock"] == 3
        assert response.json()["data"]["last_manufacture_date"] is not None

        material = test_client.get(f"/api/inventory/raw-materials/{material['id']}").json()["data"]
        assert material["current_stock"] == 4

    def test_produce_with_insufficient_stock_changes_nothing(self, test_client, make_raw_material):
        material = make_raw_material(current_stock=3)
        good = self._create(test_client, material["id"])

        response = test_client.post(f"/api/inventory/finished-goods/{good['id']}/produce", json={"quantity": 2})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"].startswith("Insufficient stock for Steel sheet")

        material = test_client.get(f"/api/inventory/raw-materials/{material['id']}").json()["data"]
        assert material["current_stock"] == 3

    def test_delete_clears_intended_for(self, test_client, make_raw_material):
        good = self._create(test_client, make_raw_material()["id"])
        material = make_raw_material(name="Paint", intended_for_id=good["id"])
        assert material["intended_for_name"] == "Steel shelf"

        assert test_client.delete(f"/api/inventory/finished-goods/{good['id']}").status_code == status.HTTP_200_OK
        material = test_client.get(f"/api/inventory/raw-materials/{material['id']}").json()["data"]
        assert material["intended_for_id"] is None
