"""
Shared fixtures.

Settings are read at import time, so the required environment is set before
any orderdesk module is imported. The ERP backend is an in-memory fake served
through httpx.MockTransport; tokens are minted with python-jose.
"""

import json
import os
from datetime import datetime, timedelta, timezone

os.environ.setdefault("ERP_API_BASE_URL", "http://erp.test")
os.environ.setdefault("JWT_SECRET", "test-secret")

import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt

from orderdesk.cart_store import CartStore, get_cart_store
from orderdesk.core.config import get_settings
from orderdesk.core.erp_client import get_erp_client
from orderdesk.main import app

SALES_PERMISSIONS = ["create_sales_order", "view_customers", "view_products"]


class FakeErp:
    """Minimal stand-in for the ERP REST backend."""

    def __init__(self):
        self.products: dict[int, dict] = {}
        self.customers: dict[int, dict] = {}
        self.created_orders: list[dict] = []
        self.next_order_id = 501
        self.order_response: httpx.Response | None = None
        self.fail_transport = False
        self.on_create = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if self.fail_transport:
            raise httpx.ConnectError("connection refused", request=request)

        parts = request.url.path.strip("/").split("/")

        if request.method == "GET" and len(parts) == 2 and parts[0] in ("products", "customers"):
            table = self.products if parts[0] == "products" else self.customers
            item = table.get(int(parts[1]))
            if item is None:
                return httpx.Response(404, json={"success": False, "message": "Not found"})
            return httpx.Response(200, json={"success": True, "data": item})

        if request.method == "POST" and parts == ["sales-orders"]:
            if self.order_response is not None:
                return self.order_response
            if self.on_create is not None:
                self.on_create()
            body = json.loads(request.content)
            self.created_orders.append(body)
            order_id = self.next_order_id
            self.next_order_id += 1
            return httpx.Response(
                201,
                json={"success": True, "data": {"id": order_id, "orderCode": f"DH{order_id:05d}"}},
            )

        return httpx.Response(404, json={"message": "Unknown route"})


@pytest.fixture
def erp():
    fake = FakeErp()
    fake.products[1] = {
        "id": 1,
        "productCode": "SP001",
        "productName": "Green tea 500ml",
        "sellingPriceRetail": 100000,
        "taxRate": 10,
    }
    fake.products[2] = {
        "id": 2,
        "productCode": "SP002",
        "productName": "Rice 5kg",
        "sellingPriceRetail": "150000",
        "taxRate": None,
    }
    fake.customers[10] = {
        "id": 10,
        "customerCode": "KH010",
        "customerName": "Minh Anh Trading",
        "creditLimit": 1000000,
        "currentDebt": 900000,
    }
    return fake


@pytest.fixture
def store():
    return CartStore()


@pytest.fixture
def client(erp, store):
    settings = get_settings()

    def override_erp_client():
        with httpx.Client(
            base_url=settings.ERP_API_BASE_URL,
            transport=httpx.MockTransport(erp),
        ) as erp_client:
            yield erp_client

    app.dependency_overrides[get_erp_client] = override_erp_client
    app.dependency_overrides[get_cart_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_token(
    sub="7",
    permissions=None,
    role_key="sales_staff",
    warehouse_id=None,
    expires_in=timedelta(hours=1),
    **extra,
) -> str:
    settings = get_settings()
    claims = {
        "sub": sub,
        "email": "operator@example.com",
        "fullName": "Le Thu Ha",
        "permissions": SALES_PERMISSIONS if permissions is None else permissions,
        "role": {"roleKey": role_key},
        "exp": datetime.now(timezone.utc) + expires_in,
        **extra,
    }
    if warehouse_id is not None:
        claims["warehouseId"] = warehouse_id
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return bearer(make_token())
