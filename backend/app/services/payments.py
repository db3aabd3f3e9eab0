# app/services/payments.py
"""
Membership orders on the Razorpay Orders API.

Configuration source: app.config.settings
- razorpay_key_id / razorpay_key_secret: API credentials (basic auth)
- razorpay_api_base: API base URL
"""
import logging
import uuid

import httpx

from app.config import settings
from app.core.errors import PaymentError, ValidationError
from app.models.payment import Payment
from app.models.user import User

logger = logging.getLogger("uvicorn.error")

# Plan prices in INR (whole rupees)
MEMBERSHIP_AMOUNT = {
    "silver": 300,
    "gold": 700,
}
CURRENCY = "INR"


async def _create_gateway_order(amount: int, receipt: str, notes: dict) -> dict:
    if not settings.razorpay_key_id or not settings.razorpay_key_secret:
        raise PaymentError("Payment gateway is not configured")
    url = f"{settings.razorpay_api_base}/orders"
    payload = {"amount": amount, "currency": CURRENCY, "receipt": receipt, "notes": notes}
    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            resp = await client.post(
                url,
                json=payload,
                auth=(settings.razorpay_key_id, settings.razorpay_key_secret),
            )
            resp.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning("[payments] order creation failed: %r", e)
        raise PaymentError("Could not create payment order")
    return resp.json()


async def create_membership_order(user: User, plan_type: str) -> Payment:
    """
    Create a gateway order for `plan_type` and persist it as a Payment.

    Raises:
        ValidationError: unknown plan
        PaymentError: gateway unconfigured or failing
    """
    plan = (plan_type or "").strip().lower()
    if plan not in MEMBERSHIP_AMOUNT:
        raise ValidationError("planType must be one of: " + ", ".join(MEMBERSHIP_AMOUNT))

    notes = {
        "firstName": user.first_name,
        "lastName": user.last_name,
        "emailId": user.email,
        "planType": plan,
    }
    receipt = f"rcpt_{uuid.uuid4().hex[:16]}"
    order = await _create_gateway_order(MEMBERSHIP_AMOUNT[plan] * 100, receipt, notes)  # Amount in paise

    payment = await Payment.create(
        user_id=user.id,
        order_id=order["id"],
        amount=order.get("amount", MEMBERSHIP_AMOUNT[plan] * 100),
        currency=order.get("currency", CURRENCY),
        receipt=order.get("receipt", receipt),
        status=order.get("status", "created"),
        notes=order.get("notes") or notes,
    )
    logger.info("[payments] order %s created for user %s (%s)", payment.order_id, user.id, plan)
    return payment


def payment_to_dict(p: Payment) -> dict:
    return {
        "id": str(p.id),
        "userId": str(p.user_id),
        "orderId": p.order_id,
        "paymentId": p.payment_id,
        "amount": p.amount,
        "currency": p.currency,
        "receipt": p.receipt,
        "status": p.status,
        "notes": p.notes,
        "keyId": settings.razorpay_key_id,
    }
