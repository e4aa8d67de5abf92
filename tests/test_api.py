"""Tests for API endpoints"""
import time

import pytest
from fastapi.testclient import TestClient

from api.index import app
from shopflow.flow import get_session_registry


@pytest.fixture
def client():
    """Test client; the context keeps one event loop alive across requests"""
    with TestClient(app) as test_client:
        yield test_client
    get_session_registry().clear()


def auth(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def token(client):
    response = client.post("/api/session")
    assert response.status_code == 200
    return response.json()["session_token"]


@pytest.fixture
def logged_in(client, token):
    response = client.post(
        "/api/auth/login",
        json={"email": "letrongthien@gmail.com", "password": "1"},
        headers=auth(token),
    )
    assert response.status_code == 200
    return token


@pytest.fixture
def cart_open(client, logged_in):
    for product_id in ("5", "5", "6"):
        client.post("/api/listing/cart", json={"product_id": product_id}, headers=auth(logged_in))
    response = client.post("/api/listing/open-cart", headers=auth(logged_in))
    assert response.status_code == 200
    return logged_in


def test_health_check(client):
    """Test health check endpoint"""
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_create_session(client):
    response = client.post("/api/session", json={"language": "vi"})
    data = response.json()
    assert data["screen"] == "login"
    assert data["language"] == "vi"
    assert data["session_token"]


def test_requests_without_session(client):
    assert client.get("/api/cart").status_code == 401
    assert client.get("/api/cart", headers=auth("unknown")).status_code == 401
    assert client.get("/api/cart", headers={"Authorization": "Basic abc"}).status_code == 401


def test_get_products(client):
    response = client.get("/api/products")
    assert response.status_code == 200
    assert len(response.json()["products"]) > 0


def test_login_success(client, token):
    response = client.post(
        "/api/auth/login",
        json={"email": "letrongthien@gmail.com", "password": "1"},
        headers=auth(token),
    )
    assert response.status_code == 200
    assert response.json()["screen"] == "listing"


def test_login_wrong_password(client, token):
    response = client.post(
        "/api/auth/login",
        json={"email": "letrongthien@gmail.com", "password": "wrong"},
        headers=auth(token),
    )
    assert response.status_code == 401
    detail = response.json()["detail"]
    assert detail["code"] == "invalid_credentials"
    assert detail["screen"] == "login"
    assert detail["notices"][0]["key"] == "auth.invalid_credentials"


def test_login_incomplete(client, token):
    response = client.post("/api/auth/login", json={"email": "", "password": "x"}, headers=auth(token))
    assert response.status_code == 401
    assert response.json()["detail"]["code"] == "incomplete_input"


def test_listing_requires_login(client, token):
    response = client.post("/api/listing/cart", json={"product_id": "1"}, headers=auth(token))
    assert response.status_code == 409


def test_add_unknown_product(client, logged_in):
    response = client.post("/api/listing/cart", json={"product_id": "999"}, headers=auth(logged_in))
    assert response.status_code == 404


def test_open_empty_cart(client, logged_in):
    response = client.post("/api/listing/open-cart", headers=auth(logged_in))
    data = response.json()
    assert data["screen"] == "cart"
    assert data["cart"]["state"] == "empty"
    assert data["notices"][0]["key"] == "cart.empty"


def test_cart_operations(client, cart_open):
    response = client.get("/api/cart", headers=auth(cart_open))
    assert response.json()["cart"]["display_total"] == "$25.50"
    assert response.json()["cart"]["total_label"] == "Total: $25.50"

    response = client.patch("/api/cart/items/6", json={"direction": "increase"}, headers=auth(cart_open))
    assert response.json()["cart"]["display_total"] == "$31.00"

    response = client.patch("/api/cart/items/6", json={"direction": "decrease"}, headers=auth(cart_open))
    response = client.patch("/api/cart/items/6", json={"direction": "decrease"}, headers=auth(cart_open))
    assert response.json()["cart"]["items"][1]["quantity"] == 1

    response = client.delete("/api/cart/items/5", headers=auth(cart_open))
    data = response.json()
    assert data["removed"] is True
    assert data["notices"][0]["key"] == "cart.item_removed"
    assert [item["id"] for item in data["cart"]["items"]] == ["6"]

    response = client.delete("/api/cart/items/5", headers=auth(cart_open))
    assert response.json()["removed"] is False


def test_invalid_direction(client, cart_open):
    response = client.patch("/api/cart/items/6", json={"direction": "up"}, headers=auth(cart_open))
    assert response.status_code == 422


def test_close_cart_returns_to_listing(client, cart_open):
    client.patch("/api/cart/items/6", json={"direction": "increase"}, headers=auth(cart_open))
    response = client.post("/api/cart/close", headers=auth(cart_open))
    assert response.json()["screen"] == "listing"

    items = client.get("/api/listing/cart", headers=auth(cart_open)).json()["items"]
    # Unified sync mode in the test environment
    assert [(item["id"], item["quantity"]) for item in items] == [("5", 2), ("6", 2)]


def test_checkout_then_return_to_login(client, cart_open):
    response = client.post("/api/cart/checkout", headers=auth(cart_open))
    assert response.status_code == 200
    data = response.json()
    assert data["checkout"]["total_amount"] == "25.50"
    assert data["cart"]["state"] == "empty"
    assert data["screen"] == "cart"
    assert data["notices"][0]["key"] == "checkout.success"

    response = client.post("/api/cart/checkout", headers=auth(cart_open))
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "empty_cart"

    # Checkout delay is 50 ms in the test environment
    deadline = time.monotonic() + 2
    status = 200
    while time.monotonic() < deadline:
        status = client.get("/api/cart", headers=auth(cart_open)).status_code
        if status == 409:
            break
        time.sleep(0.05)
    assert status == 409

    response = client.post(
        "/api/auth/login",
        json={"email": "letrongthien@gmail.com", "password": "1"},
        headers=auth(cart_open),
    )
    assert response.json()["screen"] == "listing"


def test_close_session(client, token):
    assert client.delete("/api/session", headers=auth(token)).json() == {"ok": True}
    assert client.get("/api/cart", headers=auth(token)).status_code == 401
