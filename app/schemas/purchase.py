# app/schemas/purchase.py
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from app.models.purchase import PurchaseStatus


class PurchaseRequest(BaseModel):
    course_id: int


class PurchaseResponse(BaseModel):
    id: int
    course_id: int
    user_id: str
    amount: Decimal
    status: PurchaseStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CheckoutEnvelope(BaseModel):
    success: bool = True
    session_url: str
    purchase_id: int
    status: PurchaseStatus


class PurchaseEnvelope(BaseModel):
    success: bool = True
    purchase: PurchaseResponse
