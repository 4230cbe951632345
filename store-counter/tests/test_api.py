"""
Tests for the HTTP API (`api/main.py` and routers).

Exercises the routes end to end against an in-memory store.
"""

from __future__ import annotations

import json
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from conftest import FakeClock, MemoryMedium, local
from api.main import create_app
from api.models import ProductRequest, SummaryResponse
from services.counter_service import StoreCounter


@pytest.fixture
def client(counter: StoreCounter):
    with TestClient(create_app(counter)) as test_client:
        yield test_client


def test_health_reports_storage_state(
    client: TestClient, primary: MemoryMedium, secondary: MemoryMedium
) -> None:
    assert client.get("/health").json()["storage"] == "ok"

    primary.fail_writes = True
    secondary.fail_writes = True
    assert client.post("/api/v1/sales", json={"product_id": "1"}).status_code == 201

    assert client.get("/health").json()["storage"] == "degraded"


def test_list_products(client: TestClient) -> None:
    body = client.get("/api/v1/products").json()

    assert body["total_count"] == 6
    assert body["items"][0]["name"] == "Coffee"
    assert Decimal(body["items"][0]["price"]) == Decimal("4.00")


def test_product_crud(client: TestClient) -> None:
    created = client.post("/api/v1/products", json={"name": "Muffin", "cost": "1.20", "price": "3.25"})
    assert created.status_code == 201
    product_id = created.json()["id"]

    edited = client.put(
        f"/api/v1/products/{product_id}",
        json={"name": "Blueberry Muffin", "cost": "1.30", "price": "3.50", "color": "#4455aa"},
    )
    assert edited.status_code == 200
    assert edited.json()["name"] == "Blueberry Muffin"

    assert client.delete(f"/api/v1/products/{product_id}").status_code == 204
    assert client.delete(f"/api/v1/products/{product_id}").status_code == 404
    assert client.put(f"/api/v1/products/{product_id}", json={"name": "X", "cost": 1, "price": 1}).status_code == 404


def test_product_validation(client: TestClient) -> None:
    assert client.post("/api/v1/products", json={"name": "", "cost": 1, "price": 1}).status_code == 422
    assert client.post("/api/v1/products", json={"name": "X", "cost": -1, "price": 1}).status_code == 422
    assert client.post("/api/v1/products", json={"name": "   ", "cost": 1, "price": 1}).status_code == 400
    assert client.post("/api/v1/products", json={"name": "X", "cost": "1e400", "price": 1}).status_code == 422
    too_precise = {"name": "X", "cost": 1, "price": "1.123456789012345678901"}
    assert client.post("/api/v1/products", json=too_precise).status_code == 400
    assert client.get("/api/v1/products").json()["total_count"] == 6


def test_record_and_undo_sale(client: TestClient) -> None:
    recorded = client.post("/api/v1/sales", json={"product_id": "1"})
    assert recorded.status_code == 201
    body = recorded.json()
    assert body["sale"]["product_name"] == "Coffee"
    assert body["undo_depth"] == 1
    assert body["message"] == "Sold: Coffee - $4.00"

    assert client.get("/api/v1/sales/undo").json()["undo_depth"] == 1

    undone = client.post("/api/v1/sales/undo").json()
    assert undone["undone"]["id"] == body["sale"]["id"]
    assert undone["undo_depth"] == 0

    nothing = client.post("/api/v1/sales/undo")
    assert nothing.status_code == 200
    assert nothing.json()["undone"] is None


def test_record_unknown_product_returns_404(client: TestClient, counter: StoreCounter) -> None:
    response = client.post("/api/v1/sales", json={"product_id": "missing"})

    assert response.status_code == 404
    assert counter.state.sales == []


def test_clear_requires_confirmation(client: TestClient, counter: StoreCounter) -> None:
    client.post("/api/v1/sales", json={"product_id": "1"})

    assert client.delete("/api/v1/sales").status_code == 400
    assert len(counter.state.sales) == 1

    cleared = client.delete("/api/v1/sales", params={"confirm": "true"})
    assert cleared.status_code == 200
    assert cleared.json()["removed"] == 1
    assert counter.state.sales == []
    assert client.post("/api/v1/sales/undo").json()["undone"] is None


def test_stats(client: TestClient, clock: FakeClock) -> None:
    clock.now = local(2025, 1, 15, 9, 0)
    client.post("/api/v1/sales", json={"product_id": "1"})
    clock.now = local(2025, 1, 15, 10, 0)

    body = client.get("/api/v1/stats", params={"period": "daily"}).json()

    assert body["period"] == "daily"
    assert body["item_count"] == 1
    assert Decimal(body["revenue"]) == Decimal("4.00")
    assert Decimal(body["cost"]) == Decimal("1.50")
    assert Decimal(body["profit"]) == Decimal("2.50")
    assert body["formatted"] == {"revenue": "$4.00", "cost": "$1.50", "profit": "$2.50"}
    assert len(body["recent_sales"]) == 1

    assert client.get("/api/v1/stats", params={"period": "yearly"}).status_code == 400


def test_export_and_import(client: TestClient, counter: StoreCounter) -> None:
    client.post("/api/v1/sales", json={"product_id": "2"})

    exported = client.get("/api/v1/backup")
    assert exported.status_code == 200
    assert "store-counter-backup-2025-01-15.json" in exported.headers["content-disposition"]
    data = exported.json()
    assert set(data) == {"products", "sales", "exportDate"}

    client.post("/api/v1/sales", json={"product_id": "3"})
    imported = client.post("/api/v1/backup", content=json.dumps({"sales": data["sales"]}))

    assert imported.status_code == 200
    assert imported.json()["sales_replaced"] is True
    assert imported.json()["products_replaced"] is False
    assert [s.product_id for s in counter.state.sales] == ["2"]
    assert len(counter.state.undo) == 0


def test_import_rejects_malformed_payload(client: TestClient, counter: StoreCounter) -> None:
    client.post("/api/v1/sales", json={"product_id": "2"})

    response = client.post("/api/v1/backup", content=b"{broken")

    assert response.status_code == 400
    assert len(counter.state.sales) == 1
    assert len(counter.state.undo) == 1


def test_models_publish_schema_examples() -> None:
    assert ProductRequest.model_json_schema()["example"]["name"] == "Coffee"
    assert SummaryResponse.model_json_schema()["example"]["period"] == "daily"
