"""
Shared fixtures: an order service over an in-process mock MongoDB collection,
and a TestClient for the API with that service injected
"""
import uuid
from datetime import timezone

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from dependencies import get_order_service
from server import app, rate_limiter
from services.order_service import OrderService
from services.order_store import OrderStore

UNIT_PRICE = 350


@pytest.fixture
def collection():
    """Fresh mock collection per test"""
    mongo = AsyncMongoMockClient()
    return mongo[f"test_{uuid.uuid4().hex[:8]}"]["orders"]


@pytest.fixture
def store(collection):
    return OrderStore(collection)


@pytest.fixture
def service(store):
    return OrderService(store, unit_price=UNIT_PRICE, tz=timezone.utc)


@pytest.fixture
def api_client(service):
    """TestClient against the real app, backed by the mock store"""
    app.dependency_overrides[get_order_service] = lambda: service
    rate_limiter.reset()
    client = TestClient(app)
    client.headers.update({"Content-Type": "application/json"})
    yield client
    app.dependency_overrides.clear()
    rate_limiter.reset()


@pytest.fixture
def order_payload():
    return {
        "customer_name": "Sara",
        "customer_phone": "0101234567",
        "customer_address": "Cairo",
    }
