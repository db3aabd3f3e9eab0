# app/api/v1/routers/payment.py
from fastapi import APIRouter, Depends
from app.api.v1.deps import get_current_user
from app.models.user import User
from app.schemas.payment import CreatePaymentIn
from app.services import payments

router = APIRouter(prefix="/payment", tags=["payment"])

@router.post("/create")
async def create_payment(body: CreatePaymentIn, user: User = Depends(get_current_user)):
    """
    Create a membership order on the payment gateway.

    Returns:
        dict: Stored order (amount in paise) plus the public gateway keyId the
        frontend checkout needs

    Error codes:
        - VALIDATION_ERROR (400): Unknown planType
        - PAYMENT_FAILED (502): Gateway not configured or unavailable
    """
    payment = await payments.create_membership_order(user, body.planType)
    return {"success": True, "data": payments.payment_to_dict(payment)}
