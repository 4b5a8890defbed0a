"""Integration tests for the HTTP API.

The app runs against a temporary SQLite file; only the payment gateway's
outbound calls are replaced.
"""

import json
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_payment_gateway, reset_dependencies
from api.main import app
from core.infrastructure.adapters.chapa import ChapaClient, SIGNATURE_HEADER, compute_signature
from core.settings import get_app_settings


WEBHOOK_SECRET = "api-webhook-secret"
ADMIN_EMAIL = "admin@mesob.test"
ADMIN_PASSWORD = "admin-pass-123"


@pytest.fixture
def gateway_mock():
    return AsyncMock(
        return_value={"status": "success", "data": {"checkout_url": "https://checkout.chapa.co/x"}}
    )


@pytest.fixture
def test_client(tmp_path, monkeypatch, gateway_mock):
    """FastAPI test client on a fresh database with a bootstrap admin."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    monkeypatch.setenv("ADMIN_EMAIL", ADMIN_EMAIL)
    monkeypatch.setenv("ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.setenv("JWT_SECRET", "api-test-secret")
    monkeypatch.setenv("CHAPA_WEBHOOK_SECRET", WEBHOOK_SECRET)
    monkeypatch.setenv("CHAPA_VERIFY_TRANSACTIONS", "false")
    monkeypatch.setenv("MESOB_TELEGRAM_ENABLED", "false")
    get_app_settings.cache_clear()
    reset_dependencies()

    gateway = ChapaClient(get_app_settings().chapa)
    gateway.initialize_transaction = gateway_mock
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
    get_app_settings.cache_clear()
    reset_dependencies()


def _register(client, email, role="BUYER", **extra):
    response = client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": "secret123", "name": email.split("@")[0], "role": role, **extra},
    )
    assert response.status_code == 201, response.text
    return response.json()


def _auth(token_body):
    return {"Authorization": f"Bearer {token_body['access_token']}"}


def _admin_headers(client):
    response = client.post("/api/v1/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200, response.text
    return _auth(response.json())


# ========================================================================
# HEALTH / AUTH
# ========================================================================

def test_health_endpoints(test_client: TestClient):
    assert test_client.get("/health").json()["status"] == "healthy"

    ready = test_client.get("/health/ready")
    assert ready.status_code == 200
    assert ready.json()["checks"]["database"] == "ok"


def test_register_login_and_profile(test_client: TestClient):
    registered = _register(
        test_client, "tigist@mesob.test", role="PRODUCER", business_name="Tigist Spices", location="Harar"
    )
    assert registered["token_type"] == "bearer"
    assert registered["user"]["role"] == "PRODUCER"
    assert registered["user"]["producer_id"]

    me = test_client.get("/api/v1/auth/me", headers=_auth(registered))
    assert me.status_code == 200
    assert me.json()["business_name"] == "Tigist Spices"

    duplicate = test_client.post(
        "/api/v1/auth/register",
        json={"email": "tigist@mesob.test", "password": "secret123", "name": "T"},
    )
    assert duplicate.status_code == 409
    assert duplicate.json()["path"] == "/api/v1/auth/register"

    bad_login = test_client.post(
        "/api/v1/auth/login", json={"email": "tigist@mesob.test", "password": "wrong"}
    )
    assert bad_login.status_code == 401


def test_admin_cannot_self_register(test_client: TestClient):
    response = test_client.post(
        "/api/v1/auth/register",
        json={"email": "sneaky@mesob.test", "password": "secret123", "name": "S", "role": "ADMIN"},
    )
    assert response.status_code == 400


def test_authentication_and_roles_are_enforced(test_client: TestClient):
    assert test_client.get("/api/v1/orders/my/orders").status_code == 401
    assert test_client.get(
        "/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"}
    ).status_code == 401

    buyer = _register(test_client, "buyer@mesob.test")
    response = test_client.post(
        "/api/v1/products", json={"name": "Honey", "price": "10.00"}, headers=_auth(buyer)
    )
    assert response.status_code == 403
    assert test_client.get("/api/v1/payouts", headers=_auth(buyer)).status_code == 403


def test_unknown_order_is_404(test_client: TestClient):
    buyer = _register(test_client, "buyer@mesob.test")

    response = test_client.get("/api/v1/orders/does-not-exist", headers=_auth(buyer))

    assert response.status_code == 404
    assert response.json()["path"] == "/api/v1/orders/does-not-exist"


# ========================================================================
# FULL FLOW
# ========================================================================

def test_order_payment_and_payout_flow(test_client: TestClient, gateway_mock):
    admin = _admin_headers(test_client)
    producer = _register(test_client, "almaz@mesob.test", role="PRODUCER", business_name="Almaz Honey")
    grower = _register(test_client, "dawit@mesob.test", role="PRODUCER", business_name="Dawit Farm")
    buyer = _register(test_client, "hanna@mesob.test")

    # Catalog
    product = test_client.post(
        "/api/v1/products",
        json={
            "name": "Forest Honey",
            "category": "honey",
            "price": "120.00",
            "quantity_available": 10,
            "shares": [
                {"producer_id": producer["user"]["producer_id"], "share_percentage": "75"},
                {"producer_id": grower["user"]["producer_id"], "share_percentage": "25", "role": "BEEKEEPER"},
            ],
        },
        headers=_auth(producer),
    )
    assert product.status_code == 201, product.text
    product_id = product.json()["id"]

    listing = test_client.get("/api/v1/products", params={"category": "honey"})
    assert listing.json()["pagination"]["total_count"] == 1

    # Order
    order = test_client.post(
        "/api/v1/orders",
        json={"items": [{"product_id": product_id, "quantity": 2}]},
        headers=_auth(buyer),
    )
    assert order.status_code == 201, order.text
    order_body = order.json()
    order_id = order_body["id"]
    assert Decimal(str(order_body["total_amount"])) == Decimal("240.00")
    splits = {s["producer_id"]: s for s in order_body["producer_splits"]}
    assert Decimal(str(splits[producer["user"]["producer_id"]]["producer_amount"])) == Decimal("162.00")
    assert Decimal(str(splits[grower["user"]["producer_id"]]["producer_amount"])) == Decimal("54.00")

    stock = test_client.get(f"/api/v1/products/{product_id}").json()["quantity_available"]
    assert stock == 8

    # Payment
    intent = test_client.post(
        "/api/v1/payments/create-intent", json={"order_id": order_id}, headers=_auth(buyer)
    )
    assert intent.status_code == 201, intent.text
    tx_ref = intent.json()["tx_ref"]
    assert gateway_mock.await_args.args[0]["amount"] == "240"

    body = json.dumps({"tx_ref": tx_ref, "status": "success", "amount": "240"}).encode()
    rejected = test_client.post(
        "/api/v1/payments/webhook/chapa", content=body, headers={SIGNATURE_HEADER: "bad"}
    )
    assert rejected.status_code == 401

    webhook = test_client.post(
        "/api/v1/payments/webhook/chapa",
        content=body,
        headers={SIGNATURE_HEADER: compute_signature(WEBHOOK_SECRET, body), "Content-Type": "application/json"},
    )
    assert webhook.status_code == 200
    assert webhook.json()["payment_status"] == "CONFIRMED"

    status = test_client.get(f"/api/v1/payments/{order_id}/status", headers=_auth(buyer))
    assert status.json()["status"] == "CONFIRMED"

    # Earnings and payouts
    earnings = test_client.get("/api/v1/payouts/my-earnings", headers=_auth(producer)).json()
    assert Decimal(str(earnings["pending"])) == Decimal("162.00")

    pending = test_client.get("/api/v1/payouts/pending", headers=admin).json()["payouts"]
    assert len(pending) == 2
    batch_id = next(
        p["id"] for p in pending if p["producer_id"] == producer["user"]["producer_id"]
    )

    hidden = test_client.get(f"/api/v1/payouts/{batch_id}", headers=_auth(grower))
    assert hidden.status_code == 404

    early = test_client.post(
        f"/api/v1/payouts/{batch_id}/complete", json={"reference": "CBE-1"}, headers=admin
    )
    assert early.status_code == 409

    assert test_client.post(f"/api/v1/payouts/{batch_id}/process", headers=admin).status_code == 200
    completed = test_client.post(
        f"/api/v1/payouts/{batch_id}/complete",
        json={"reference": "CBE-1", "method": "MOBILE_MONEY"},
        headers=admin,
    )
    assert completed.status_code == 200, completed.text
    assert completed.json()["status"] == "COMPLETED"
    assert completed.json()["payout_method"] == "MOBILE_MONEY"

    my_payouts = test_client.get("/api/v1/payouts/my-payouts", headers=_auth(producer)).json()
    assert [p["status"] for p in my_payouts["payouts"]] == ["COMPLETED"]

    earnings = test_client.get("/api/v1/payouts/my-earnings", headers=_auth(producer)).json()
    assert Decimal(str(earnings["completed"])) == Decimal("162.00")
    assert Decimal(str(earnings["pending"])) == Decimal("0.00")

    completed_list = test_client.get(
        "/api/v1/payouts", params={"status": "COMPLETED"}, headers=admin
    ).json()["payouts"]
    assert [p["id"] for p in completed_list] == [batch_id]

    # Notifications
    unread = test_client.get("/api/v1/notifications/unread-count", headers=_auth(producer)).json()
    assert unread["unread_count"] >= 1
    marked = test_client.post("/api/v1/notifications/read-all", headers=_auth(producer)).json()
    assert marked["updated"] == unread["unread_count"]
    assert test_client.get(
        "/api/v1/notifications/unread-count", headers=_auth(producer)
    ).json()["unread_count"] == 0


def test_cancel_and_dispute_endpoints(test_client: TestClient):
    admin = _admin_headers(test_client)
    producer = _register(test_client, "almaz@mesob.test", role="PRODUCER")
    buyer = _register(test_client, "hanna@mesob.test")

    product_id = test_client.post(
        "/api/v1/products",
        json={"name": "Berbere 250g", "price": "80.00", "quantity_available": 3},
        headers=_auth(producer),
    ).json()["id"]

    def place():
        response = test_client.post(
            "/api/v1/orders",
            json={"items": [{"product_id": product_id, "quantity": 1}]},
            headers=_auth(buyer),
        )
        assert response.status_code == 201, response.text
        return response.json()["id"]

    # Buyer cancellation restores stock
    first = place()
    cancelled = test_client.post(
        f"/api/v1/orders/{first}/cancel", json={"reason": "Ordered twice"}, headers=_auth(buyer)
    )
    assert cancelled.status_code == 200
    assert cancelled.json()["delivery_status"] == "CANCELLED"
    assert test_client.get(f"/api/v1/products/{product_id}").json()["quantity_available"] == 3

    history = test_client.get(f"/api/v1/orders/{first}/history", headers=_auth(buyer)).json()
    assert [h["status"] for h in history] == ["PENDING", "CANCELLED"]

    # Stock overflow
    overflow = test_client.post(
        "/api/v1/orders",
        json={"items": [{"product_id": product_id, "quantity": 4}]},
        headers=_auth(buyer),
    )
    assert overflow.status_code == 409

    # Dispute on a confirmed order
    second = place()
    pending_dispute = test_client.post(
        "/api/v1/disputes", json={"order_id": second, "reason": "Too early"}, headers=_auth(buyer)
    )
    assert pending_dispute.status_code == 400

    confirmed = test_client.put(
        f"/api/v1/orders/{second}/status", json={"status": "CONFIRMED"}, headers=_auth(producer)
    )
    assert confirmed.status_code == 200
    assert test_client.post(f"/api/v1/orders/{second}/cancel", headers=_auth(buyer)).status_code == 409

    dispute = test_client.post(
        "/api/v1/disputes",
        json={"order_id": second, "reason": "Wrong blend", "description": "Got mitmita"},
        headers=_auth(buyer),
    )
    assert dispute.status_code == 201, dispute.text
    dispute_id = dispute.json()["id"]

    message = test_client.post(
        f"/api/v1/disputes/{dispute_id}/messages", json={"content": "Will replace it"}, headers=_auth(producer)
    )
    assert message.status_code == 200
    assert test_client.put(
        f"/api/v1/disputes/{dispute_id}/status", json={"status": "CLOSED"}, headers=_auth(buyer)
    ).status_code == 403

    resolved = test_client.put(
        f"/api/v1/disputes/{dispute_id}/status",
        json={"status": "RESOLVED", "resolution": "Refunded", "refund_amount": "80.00"},
        headers=admin,
    )
    assert resolved.status_code == 200, resolved.text
    assert resolved.json()["status"] == "RESOLVED"

    order = test_client.get(f"/api/v1/orders/{second}", headers=admin).json()
    assert order["payment_status"] == "REFUNDED"
    assert {s["payout_status"] for s in order["producer_splits"]} == {"CANCELLED"}

    disputes = test_client.get("/api/v1/disputes", headers=admin).json()
    assert disputes["pagination"]["total_count"] == 1

    orders = test_client.get("/api/v1/orders", params={"status": "CANCELLED"}, headers=admin).json()
    assert [o["id"] for o in orders["orders"]] == [first]


# ========================================================================
# REVIEWS / BANK ACCOUNTS
# ========================================================================

def _signed_webhook(client, payload):
    body = json.dumps(payload).encode()
    return client.post(
        "/api/v1/payments/webhook/chapa",
        content=body,
        headers={SIGNATURE_HEADER: compute_signature(WEBHOOK_SECRET, body), "Content-Type": "application/json"},
    )


def _paid_order(client, buyer, product_id, quantity=1, amount=None):
    order = client.post(
        "/api/v1/orders",
        json={"items": [{"product_id": product_id, "quantity": quantity}]},
        headers=_auth(buyer),
    )
    assert order.status_code == 201, order.text
    order_id = order.json()["id"]
    intent = client.post("/api/v1/payments/create-intent", json={"order_id": order_id}, headers=_auth(buyer))
    assert intent.status_code == 201, intent.text
    payload = {"tx_ref": intent.json()["tx_ref"], "status": "success"}
    if amount is not None:
        payload["amount"] = amount
    webhook = _signed_webhook(client, payload)
    assert webhook.status_code == 200, webhook.text
    return order_id, webhook.json()


def test_review_endpoints(test_client: TestClient):
    producer = _register(test_client, "almaz@mesob.test", role="PRODUCER", business_name="Almaz Honey")
    buyer = _register(test_client, "hanna@mesob.test")
    stranger = _register(test_client, "yonas@mesob.test")
    product_id = test_client.post(
        "/api/v1/products",
        json={"name": "Forest Honey", "price": "120.00", "quantity_available": 5},
        headers=_auth(producer),
    ).json()["id"]

    unpaid = test_client.post(
        "/api/v1/reviews", json={"product_id": product_id, "rating": 5}, headers=_auth(buyer)
    )
    assert unpaid.status_code == 403

    _, result = _paid_order(test_client, buyer, product_id, amount="120")
    assert result["payment_status"] == "CONFIRMED"

    out_of_range = test_client.post(
        "/api/v1/reviews", json={"product_id": product_id, "rating": 6}, headers=_auth(buyer)
    )
    assert out_of_range.status_code == 422

    created = test_client.post(
        "/api/v1/reviews",
        json={"product_id": product_id, "rating": 4, "comment": "Dark and rich"},
        headers=_auth(buyer),
    )
    assert created.status_code == 201, created.text
    review_id = created.json()["id"]

    duplicate = test_client.post(
        "/api/v1/reviews", json={"product_id": product_id, "rating": 5}, headers=_auth(buyer)
    )
    assert duplicate.status_code == 409

    listing = test_client.get(f"/api/v1/reviews/product/{product_id}").json()
    assert [r["id"] for r in listing["reviews"]] == [review_id]
    assert listing["stats"]["total"] == 1

    stats = test_client.get(f"/api/v1/reviews/product/{product_id}/stats").json()
    assert Decimal(str(stats["average"])) == Decimal("4.0")
    assert stats["distribution"]["4"] == 1

    product = test_client.get(f"/api/v1/products/{product_id}").json()
    assert Decimal(str(product["average_rating"])) == Decimal("4.0")
    assert product["review_count"] == 1

    assert test_client.put(
        f"/api/v1/reviews/{review_id}", json={"rating": 1}, headers=_auth(stranger)
    ).status_code == 403
    edited = test_client.put(f"/api/v1/reviews/{review_id}", json={"rating": 5}, headers=_auth(buyer))
    assert edited.status_code == 200
    assert edited.json()["rating"] == 5

    mine = test_client.get("/api/v1/reviews/my-reviews", headers=_auth(buyer)).json()
    assert [r["id"] for r in mine["reviews"]] == [review_id]

    producer_view = test_client.get("/api/v1/reviews/producer/my-reviews", headers=_auth(producer)).json()
    assert Decimal(str(producer_view["stats"]["average"])) == Decimal("5.0")

    assert test_client.delete(f"/api/v1/reviews/{review_id}", headers=_auth(buyer)).status_code == 204
    assert test_client.get(f"/api/v1/products/{product_id}").json()["review_count"] == 0


def test_bank_account_endpoints_feed_payout_completion(test_client: TestClient):
    admin = _admin_headers(test_client)
    producer = _register(test_client, "almaz@mesob.test", role="PRODUCER", business_name="Almaz Honey")
    buyer = _register(test_client, "hanna@mesob.test")
    producer_id = producer["user"]["producer_id"]

    banks = test_client.get("/api/v1/bank-accounts/banks/list").json()
    assert "Telebirr" in banks

    wallet = test_client.post(
        "/api/v1/bank-accounts",
        json={
            "bank_name": "Telebirr",
            "account_number": "0911225678",
            "account_name": "Almaz Bekele",
            "account_type": "MOBILE_WALLET",
        },
        headers=_auth(producer),
    )
    assert wallet.status_code == 201, wallet.text
    assert wallet.json()["is_primary"] is True

    assert test_client.post(
        "/api/v1/bank-accounts",
        json={"bank_name": "Awash Bank", "account_number": "1", "account_name": "A"},
        headers=_auth(buyer),
    ).status_code == 403

    mine = test_client.get("/api/v1/bank-accounts/my-accounts", headers=_auth(producer)).json()
    assert [a["id"] for a in mine["accounts"]] == [wallet.json()["id"]]
    admin_view = test_client.get(
        f"/api/v1/bank-accounts/admin/producer/{producer_id}", headers=admin
    ).json()
    assert [a["id"] for a in admin_view["accounts"]] == [wallet.json()["id"]]

    product_id = test_client.post(
        "/api/v1/products",
        json={"name": "Forest Honey", "price": "100.00", "quantity_available": 5},
        headers=_auth(producer),
    ).json()["id"]
    _paid_order(test_client, buyer, product_id, amount="100")

    batch_id = test_client.get("/api/v1/payouts/pending", headers=admin).json()["payouts"][0]["id"]
    assert test_client.post(f"/api/v1/payouts/{batch_id}/process", headers=admin).status_code == 200
    completed = test_client.post(
        f"/api/v1/payouts/{batch_id}/complete", json={"reference": "TB-77"}, headers=admin
    )
    assert completed.status_code == 200, completed.text
    assert completed.json()["payout_method"] == "MOBILE_MONEY"
    assert completed.json()["payout_destination"] == "Telebirr ***5678 (Almaz Bekele)"


def test_webhook_without_amount_fails_payment(test_client: TestClient):
    producer = _register(test_client, "almaz@mesob.test", role="PRODUCER")
    buyer = _register(test_client, "hanna@mesob.test")
    product_id = test_client.post(
        "/api/v1/products",
        json={"name": "Shiro 500g", "price": "60.00", "quantity_available": 5},
        headers=_auth(producer),
    ).json()["id"]

    order_id, result = _paid_order(test_client, buyer, product_id)

    assert result["payment_status"] == "FAILED"
    order = test_client.get(f"/api/v1/orders/{order_id}", headers=_auth(buyer)).json()
    assert order["payment_status"] == "FAILED"


def test_resolved_dispute_cannot_be_resolved_again(test_client: TestClient):
    admin = _admin_headers(test_client)
    producer = _register(test_client, "almaz@mesob.test", role="PRODUCER")
    buyer = _register(test_client, "hanna@mesob.test")
    product_id = test_client.post(
        "/api/v1/products",
        json={"name": "Mitmita 100g", "price": "40.00", "quantity_available": 5},
        headers=_auth(producer),
    ).json()["id"]
    order_id, _ = _paid_order(test_client, buyer, product_id, amount="40")
    assert test_client.put(
        f"/api/v1/orders/{order_id}/status", json={"status": "CONFIRMED"}, headers=_auth(producer)
    ).status_code == 200

    dispute_id = test_client.post(
        "/api/v1/disputes", json={"order_id": order_id, "reason": "Stale"}, headers=_auth(buyer)
    ).json()["id"]
    first = test_client.put(
        f"/api/v1/disputes/{dispute_id}/status",
        json={"status": "RESOLVED", "refund_amount": "40.00"},
        headers=admin,
    )
    assert first.status_code == 200, first.text

    again = test_client.put(
        f"/api/v1/disputes/{dispute_id}/status",
        json={"status": "RESOLVED", "refund_amount": "40.00"},
        headers=admin,
    )
    assert again.status_code == 409
