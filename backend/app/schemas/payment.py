# app/schemas/payment.py
from pydantic import BaseModel

class CreatePaymentIn(BaseModel):
    """Request model for creating a membership order."""
    planType: str  # silver / gold
