"""Tests for health, audit log and system routes."""
import os

from fastapi import status

from pocketbooks.core.config import settings
from pocketbooks.services.scheduler import cleanup_old_backups


class TestHealth:
    def test_root_health(self, test_client):
        response = test_client.get("/health")
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"status": "ok"}

    def test_api_health_reports_database(self, test_client):
        response = test_client.get("/api/health")
        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"]["connected"] is True
        assert "clients" in body["database"]["tables"]
        assert body["application"]["status"] == "running"


class TestAuditLogs:
    def test_sale_lifecycle_is_logged(self, test_client, make_client, make_trading_good, make_sale):
        client = make_client()
        good = make_trading_good()
        sale = make_sale(client["id"], [{"item_id": good["id"], "item_type": "trading_good", "quantity": 1, "unit_price": 100}])
        test_client.put(f"/api/sales/{sale['id']}/status", json={"status": "cancelled"})

        response = test_client.get("/api/audit-logs", params={"entity_type": "sale", "entity_id": sale["id"]})
        assert response.status_code == status.HTTP_200_OK
        actions = sorted(log["action"] for log in response.json()["data"])
        assert actions == ["CREATE", "STATUS_CHANGE"]

        log_id = response.json()["data"][0]["id"]
        assert test_client.get(f"/api/audit-logs/{log_id}").json()["data"]["entity_type"] == "sale"

    def test_action_filter(self, test_client):
        response = test_client.get("/api/audit-logs", params={"action": "DELETE"})
        assert response.json()["pagination"]["total"] == 0


class TestSystem:
    def test_scheduler_status_when_disabled(self, test_client):
        response = test_client.get("/api/system/scheduler")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["running"] is False

    def test_manual_backup_copies_database(self, test_client, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "DATABASE_URI", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
        response = test_client.post("/api/system/backup")
        assert response.status_code == status.HTTP_201_CREATED
        backup = response.json()["data"]
        assert backup["filename"].startswith("backup_")
        assert os.path.dirname(backup["path"]) == str(tmp_path / "backups")
        assert os.path.getsize(backup["path"]) == backup["size"] > 0

    def test_manual_backup_without_database_file(self, test_client, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "DATABASE_URI", f"sqlite+aiosqlite:///{tmp_path / 'missing.db'}")
        response = test_client.post("/api/system/backup")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"].startswith("Database file not found")

    def test_cleanup_keeps_newest_backups(self, tmp_path):
        for i in range(5):
            path = tmp_path / f"auto_backup_2024050{i}_000000.db"
            path.write_bytes(b"")
            os.utime(path, (1_700_000_000 + i, 1_700_000_000 + i))
        (tmp_path / "backup_manual.db").write_bytes(b"")

        assert cleanup_old_backups(str(tmp_path), keep_count=2) == 3
        assert sorted(os.listdir(tmp_path)) == [
            "auto_backup_20240503_000000.db",
            "auto_backup_20240504_000000.db",
            "backup_manual.db",
        ]
