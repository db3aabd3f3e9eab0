import pytest

from app.config import settings
from app.core.errors import PaymentError
from app.models.payment import Payment


pytestmark = pytest.mark.asyncio


async def test_create_payment_persists_order(client, create_user, auth_headers, monkeypatch):
    user, _ = await create_user()
    captured = {}

    async def fake_gateway(amount: int, receipt: str, notes: dict):
        captured.update(amount=amount, receipt=receipt, notes=notes)
        return {"id": "order_TEST123", "amount": amount, "currency": "INR",
                "receipt": receipt, "status": "created", "notes": notes}

    monkeypatch.setattr("app.services.payments._create_gateway_order", fake_gateway)
    monkeypatch.setattr(settings, "razorpay_key_id", "rzp_test_key")

    resp = await client.post("/api/v1/payment/create", headers=auth_headers(user), json={"planType": "Gold"})
    data = resp.json()["data"]
    assert resp.status_code == 200
    assert data["orderId"] == "order_TEST123"
    assert data["amount"] == 70000
    assert data["keyId"] == "rzp_test_key"
    assert captured["notes"]["planType"] == "gold"
    assert captured["notes"]["emailId"] == user.email

    stored = await Payment.get(order_id="order_TEST123")
    assert str(stored.user_id) == str(user.id)
    assert stored.status == "created"


async def test_unknown_plan_is_rejected(client, create_user, auth_headers):
    user, _ = await create_user()
    resp = await client.post("/api/v1/payment/create", headers=auth_headers(user), json={"planType": "platinum"})
    assert resp.status_code == 400
    assert await Payment.all().count() == 0


async def test_gateway_failure_maps_to_502(client, create_user, auth_headers, monkeypatch):
    user, _ = await create_user()

    async def broken_gateway(amount, receipt, notes):
        raise PaymentError("Could not create payment order")

    monkeypatch.setattr("app.services.payments._create_gateway_order", broken_gateway)

    resp = await client.post("/api/v1/payment/create", headers=auth_headers(user), json={"planType": "silver"})
    assert resp.status_code == 502
    assert resp.json()["error"]["code"] == "PAYMENT_FAILED"


async def test_gateway_not_configured(client, create_user, auth_headers, monkeypatch):
    user, _ = await create_user()
    monkeypatch.setattr(settings, "razorpay_key_id", None)

    resp = await client.post("/api/v1/payment/create", headers=auth_headers(user), json={"planType": "silver"})
    assert resp.status_code == 502
