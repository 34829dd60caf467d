"""
Test suite for the hub callback surface.

Covers:
  - create-order and cancel-order dispatch to registered handlers
  - payload validation at the boundary
  - error envelope for handler failures

Run with:
    pytest tests/test_hub_server.py -v
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from brokerbridge.hub import CancelOrderRequest, CreateOrderRequest, HubServer
from brokerbridge.settlement import Side

ORDER_BODY = {
    "id": "order-1",
    "exchange": "binance",
    "symbol": "ETH-USDT",
    "side": "buy",
    "price": "2.5",
    "amount": "10",
}


@dataclass
class OrderRecord:
    id: str
    status: str


@pytest.fixture
def server():
    return HubServer()


@pytest.fixture
def client(server):
    app = FastAPI()
    app.include_router(server.router)
    return TestClient(app)


class TestCreateOrder:

    def test_handler_receives_parsed_request(self, server, client):
        received = []

        async def create(request):
            received.append(request)
            return {"id": request.id, "status": "NEW"}

        server.set_create_order_handler(create)
        response = client.post("/api/order", json=ORDER_BODY)

        assert response.status_code == 200
        assert response.json() == {"id": "order-1", "status": "NEW"}
        assert received == [CreateOrderRequest(
            id="order-1",
            exchange="binance",
            symbol="ETH-USDT",
            side=Side.BUY,
            price=Decimal("2.5"),
            amount=Decimal("10"),
        )]

    def test_dataclass_result_is_serialized(self, server, client):
        async def create(request):
            return OrderRecord(id=request.id, status="NEW")

        server.set_create_order_handler(create)
        response = client.post("/api/order", json=ORDER_BODY)
        assert response.json() == {"id": "order-1", "status": "NEW"}

    def test_handler_failure_returns_envelope(self, server, client, caplog):
        async def create(request):
            raise RuntimeError("exchange offline")

        server.set_create_order_handler(create)
        with caplog.at_level(logging.ERROR):
            response = client.post("/api/order", json=ORDER_BODY)

        assert response.status_code == 400
        assert response.json() == {"code": 1000, "message": "exchange offline"}
        assert "exchange offline" in caplog.text

    @pytest.mark.parametrize("changes", [
        {"side": "hold"},
        {"symbol": "ETHUSDT"},
        {"price": "-1"},
        {"amount": "abc"},
        {"id": None},
    ])
    def test_invalid_payload(self, server, client, changes):
        called = []

        async def create(request):
            called.append(request)

        server.set_create_order_handler(create)
        response = client.post("/api/order", json={**ORDER_BODY, **changes})

        assert response.status_code == 400
        assert response.json()["code"] == 1000
        assert called == []

    @pytest.mark.parametrize("content, message", [
        ("[1, 2]", "Payload must be a JSON object, got list"),
        ('"order"', "Payload must be a JSON object, got str"),
        ("not json", "Body is not valid JSON"),
        ("", "Body is not valid JSON"),
    ])
    def test_non_object_body(self, server, client, content, message):
        called = []

        async def create(request):
            called.append(request)

        server.set_create_order_handler(create)
        response = client.post(
            "/api/order", content=content, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"code": 1000, "message": message}
        assert called == []

    def test_missing_handler(self, client):
        response = client.post("/api/order", json=ORDER_BODY)
        assert response.status_code == 400
        assert response.json() == {"code": 1000, "message": "No create order handler registered"}

    def test_side_is_case_insensitive(self):
        assert CreateOrderRequest.from_dict({**ORDER_BODY, "side": "SELL"}).side is Side.SELL


class TestCancelOrder:

    def test_cancel(self, server, client):
        received = []

        async def cancel(request):
            received.append(request)
            return {"id": request.id, "status": "CANCELED"}

        server.set_cancel_order_handler(cancel)
        response = client.request("DELETE", "/api/order", json={"id": "order-1"})

        assert response.status_code == 200
        assert response.json() == {"id": "order-1", "status": "CANCELED"}
        assert received == [CancelOrderRequest(id="order-1")]

    def test_cancel_without_id(self, server, client):
        async def cancel(request):
            return {}

        server.set_cancel_order_handler(cancel)
        response = client.request("DELETE", "/api/order", json={})
        assert response.status_code == 400
        assert response.json() == {"code": 1000, "message": "'id' not found in body"}

    def test_cancel_with_array_body(self, server, client):
        async def cancel(request):
            return {}

        server.set_cancel_order_handler(cancel)
        response = client.request("DELETE", "/api/order", content="[1, 2]")
        assert response.status_code == 400
        assert response.json()["code"] == 1000


class TestMounting:

    def test_mounts_on_app(self):
        app = FastAPI()
        server = HubServer(app, prefix="/callbacks")

        async def cancel(request):
            return {"id": request.id}

        server.set_cancel_order_handler(cancel)
        response = TestClient(app).request("DELETE", "/callbacks/order", json={"id": "7"})
        assert response.json() == {"id": "7"}
