from __future__ import annotations

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from conftest import FakeRedisClient
from storefront.data.database import get_db
from storefront.data.redis_client import get_redis
from storefront.data.seed import seed
from storefront.domain.errors import BackendError
from storefront.main import create_app
from storefront.services.order_service import OrderService
from storefront.utils.settings import ADMIN_TOKEN

ADMIN = {"X-Admin-Token": ADMIN_TOKEN}
SESSION = {"X-Session-Id": "browser-session-1"}


@pytest.fixture
def client(session_factory, fake_redis: FakeRedisClient):
    seed(session_factory)
    app = create_app()

    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_redis] = lambda: fake_redis
    return TestClient(app)


@pytest.fixture
def shirt(client: TestClient) -> dict:
    category = client.post("/admin/categories", json={"name": "Roupas"}, headers=ADMIN).json()
    response = client.post(
        "/admin/products",
        json={
            "name": "Camiseta",
            "price": "10.00",
            "category_id": category["id"],
            "images": [{"url": "https://img/shirt.png"}],
            "variation_groups": [
                {
                    "name": "Tamanho",
                    "required": True,
                    "options": [{"name": "P"}, {"name": "G", "price_modifier": "2.00"}],
                }
            ],
        },
        headers=ADMIN,
    )
    assert response.status_code == 201
    return response.json()


def _configure_store(client: TestClient) -> None:
    response = client.patch(
        "/admin/settings",
        json={
            "store_name": "Loja Teste",
            "whatsapp_number": "(11) 98765-4321",
            "delivery": {"pickup": {"enabled": True}, "fixed_rate": {"enabled": True, "fee": "5.00"}},
        },
        headers=ADMIN,
    )
    assert response.status_code == 200


def _selection(product: dict, option_name: str) -> dict:
    group = product["variation_groups"][0]
    option = next(o for o in group["options"] if o["name"] == option_name)
    return {"group_id": group["id"], "option_id": option["id"]}


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_admin_routes_require_token(client: TestClient) -> None:
    assert client.get("/admin/orders").status_code == 403
    assert client.get("/admin/settings", headers={"X-Admin-Token": "wrong"}).status_code == 403
    assert client.get("/admin/settings", headers=ADMIN).json()["store_name"] == "Nome da Loja Padrão"


def test_cart_requires_session_header(client: TestClient) -> None:
    assert client.get("/cart").status_code == 422


def test_public_catalog(client: TestClient, shirt: dict) -> None:
    products = client.get("/products").json()
    assert [p["name"] for p in products] == ["Camiseta"]
    assert client.get(f"/products/{shirt['id']}").json()["category_name"] == "Roupas"
    assert [c["name"] for c in client.get("/categories").json()] == ["Roupas"]

    client.post(f"/admin/products/{shirt['id']}/toggle", headers=ADMIN)
    assert client.get("/products").json() == []
    assert client.get(f"/products/{shirt['id']}").status_code == 404


def test_add_to_cart_validation(client: TestClient, shirt: dict) -> None:
    missing_required = client.post("/cart/items", json={"product_id": shirt["id"], "quantity": 1}, headers=SESSION)
    assert missing_required.status_code == 400

    unknown = client.post("/cart/items", json={"product_id": "nope", "quantity": 1}, headers=SESSION)
    assert unknown.status_code == 404

    bad_option = client.post(
        "/cart/items",
        json={"product_id": shirt["id"], "selections": [{"group_id": "x", "option_id": "y"}]},
        headers=SESSION,
    )
    assert bad_option.status_code == 400

    zero = client.post("/cart/items", json={"product_id": shirt["id"], "quantity": 0}, headers=SESSION)
    assert zero.status_code == 422


def test_cart_lines_merge_and_update(client: TestClient, shirt: dict) -> None:
    body = {"product_id": shirt["id"], "quantity": 1, "selections": [_selection(shirt, "G")]}
    client.post("/cart/items", json=body, headers=SESSION)
    cart = client.post("/cart/items", json={**body, "quantity": 2}, headers=SESSION).json()

    assert len(cart["items"]) == 1
    assert Decimal(cart["subtotal"]) == Decimal("36.00")

    item_id = cart["items"][0]["id"]
    cart = client.patch(f"/cart/items/{item_id}", json={"quantity": 1}, headers=SESSION).json()
    assert Decimal(cart["subtotal"]) == Decimal("12.00")

    cart = client.delete(f"/cart/items/{item_id}", headers=SESSION).json()
    assert cart["items"] == []
    assert client.delete(f"/cart/items/{item_id}", headers=SESSION).status_code == 200


def test_full_checkout_to_whatsapp(client: TestClient, shirt: dict) -> None:
    _configure_store(client)
    client.post(
        "/cart/items",
        json={"product_id": shirt["id"], "quantity": 3, "selections": [_selection(shirt, "G")]},
        headers=SESSION,
    )

    state = client.get("/checkout", headers=SESSION).json()
    assert state["delivery_type"] == "pickup"

    client.post("/checkout/next", headers=SESSION)
    state = client.put("/checkout/delivery", json={"delivery_type": "fixedRate"}, headers=SESSION).json()
    assert Decimal(state["total"]) == Decimal("41.00")
    assert client.post("/checkout/next", headers=SESSION).json()["step"] == "customer_info"

    client.patch("/checkout/form", json={"name": "Maria Silva", "phone": "11987654321"}, headers=SESSION)
    invalid = client.post("/checkout/submit", json={"street": ""}, headers=SESSION)
    assert invalid.status_code == 422
    assert "street" in invalid.json()["detail"]["errors"]

    response = client.post(
        "/checkout/submit",
        json={"street": "Rua das Flores", "number": "123", "district": "Centro", "notes": "Portão azul"},
        headers=SESSION,
    )
    assert response.status_code == 201
    payload = response.json()
    assert Decimal(payload["total"]) == Decimal("41.00")
    assert payload["whatsapp_url"].startswith("https://wa.me/11987654321?text=")
    assert Decimal(payload["order"]["items"][0]["total_price"]) == Decimal("36.00")

    assert client.get("/cart", headers=SESSION).json()["items"] == []

    orders = client.get("/admin/orders", headers=ADMIN).json()
    assert [o["order_number"] for o in orders] == [payload["order_number"]]
    assert orders[0]["whatsapp_sent"] is True

    order_id = orders[0]["id"]
    updated = client.patch(f"/admin/orders/{order_id}/status", json={"status": "processing"}, headers=ADMIN)
    assert updated.json()["status"] == "processing"
    assert client.get("/admin/orders?status=new", headers=ADMIN).json() == []


def test_submit_while_in_flight_returns_conflict(client: TestClient, shirt: dict, fake_redis: FakeRedisClient) -> None:
    fake_redis.set("checkout:browser-session-1:submit", "other", nx=True, ex=30)

    response = client.post("/checkout/submit", headers=SESSION)

    assert response.status_code == 409


def test_submit_without_store_number_is_rejected(client: TestClient, shirt: dict) -> None:
    client.post(
        "/cart/items",
        json={"product_id": shirt["id"], "selections": [_selection(shirt, "P")]},
        headers=SESSION,
    )
    client.patch(
        "/admin/settings",
        json={"delivery": {"pickup": {"enabled": True}}},
        headers=ADMIN,
    )
    client.post("/checkout/next", headers=SESSION)
    client.post("/checkout/next", headers=SESSION)

    response = client.post(
        "/checkout/submit",
        json={"name": "Maria Silva", "phone": "(11) 98765-4321"},
        headers=SESSION,
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "WhatsApp da loja não configurado."
    assert client.get("/admin/orders", headers=ADMIN).json() == []


def test_submit_backend_failure_returns_bad_gateway(monkeypatch, client: TestClient, shirt: dict) -> None:
    _configure_store(client)
    client.post(
        "/cart/items",
        json={"product_id": shirt["id"], "selections": [_selection(shirt, "P")]},
        headers=SESSION,
    )
    client.post("/checkout/next", headers=SESSION)
    client.post("/checkout/next", headers=SESSION)

    def _create_fails(self, order):
        raise BackendError("Erro ao salvar pedido.")

    monkeypatch.setattr(OrderService, "create_order", _create_fails)

    response = client.post(
        "/checkout/submit",
        json={"name": "Maria Silva", "phone": "(11) 98765-4321"},
        headers=SESSION,
    )

    assert response.status_code == 502
    assert len(client.get("/cart", headers=SESSION).json()["items"]) == 1


def test_neighborhood_admin_endpoints(client: TestClient) -> None:
    created = client.post("/admin/settings/neighborhoods", json={"name": "Centro", "fee": "4.00"}, headers=ADMIN)
    assert created.status_code == 201
    hood_id = created.json()["id"]

    store = client.get("/store").json()
    assert store["delivery"]["neighborhood_rates"]["enabled"] is True

    assert client.patch(
        f"/admin/settings/neighborhoods/{hood_id}", json={"fee": "6.00"}, headers=ADMIN
    ).json()["fee"] == "6.00"
    assert client.delete(f"/admin/settings/neighborhoods/{hood_id}", headers=ADMIN).status_code == 204
    assert client.delete(f"/admin/settings/neighborhoods/{hood_id}", headers=ADMIN).status_code == 404
