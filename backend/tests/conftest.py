"""Pytest configuration and shared fixtures."""
import asyncio
import itertools
import os
import tempfile

_tmp = tempfile.mkdtemp(prefix="pocketbooks-tests-")
os.environ.setdefault("DATABASE_URI", f"sqlite:///{_tmp}/unused.db")
os.environ.setdefault("LOG_DIR", os.path.join(_tmp, "logs"))
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("AUTO_BACKUP_ENABLED", "false")
os.environ.setdefault("ASSET_RECALC_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from pocketbooks.core.deps import get_db
from pocketbooks.db.init_db import ensure_tables_exist
from pocketbooks.main import app

_emails = itertools.count(1)
_skus = itertools.count(1)


@pytest.fixture
def test_client(tmp_path):
    """FastAPI test client backed by a fresh SQLite file."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    asyncio.run(ensure_tables_exist(engine))
    TestingSession = sessionmaker(
        bind=engine, class_=AsyncSession, autoflush=False, expire_on_commit=False
    )

    async def override_get_db():
        async with TestingSession() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
    asyncio.run(engine.dispose())


def _created(response):
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def make_client(test_client):
    """Create a client through the API and return its data."""
    def _make(**overrides):
        payload = {
            "name": "Sharma Traders",
            "email": f"client{next(_emails)}@example.com",
            "phone": "9876543210",
        }
        payload.update(overrides)
        return _created(test_client.post("/api/clients", json=payload))
    return _make


@pytest.fixture
def make_vendor(test_client):
    def _make(**overrides):
        payload = {
            "name": "Gupta Supplies",
            "email": f"vendor{next(_emails)}@example.com",
            "raw_material_types": ["Steel"],
        }
        payload.update(overrides)
        return _created(test_client.post("/api/vendors", json=payload))
    return _make


@pytest.fixture
def make_raw_material(test_client):
    def _make(**overrides):
        payload = {
            "name": "Steel sheet",
            "unit": "kg",
            "current_stock": 10,
            "reorder_level": 2,
            "cost_price": 5,
        }
        payload.update(overrides)
        return _created(test_client.post("/api/inventory/raw-materials", json=payload))
    return _make


@pytest.fixture
def make_trading_good(test_client):
    def _make(**overrides):
        payload = {
            "name": "LED bulb",
            "sku": f"led-{next(_skus)}",
            "unit": "piece",
            "current_stock": 10,
            "reorder_level": 2,
            "cost_price": 80,
            "selling_price": 100,
        }
        payload.update(overrides)
        return _created(test_client.post("/api/inventory/trading-goods", json=payload))
    return _make


@pytest.fixture
def make_sale(test_client):
    def _make(client_id, items, **overrides):
        payload = {
            "client_id": client_id,
            "sale_date": "2024-05-01T10:00:00",
            "items": items,
        }
        payload.update(overrides)
        return _created(test_client.post("/api/sales", json=payload))
    return _make
