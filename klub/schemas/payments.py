import uuid
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field

PaymentMethod = Literal["credit_card", "debit_card", "paypal", "apple_pay", "google_pay", "cash"]
PaymentStatus = Literal["pending", "completed", "failed"]


class PaymentCreate(BaseModel):
    bill_id: uuid.UUID
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    payment_method: PaymentMethod
    user_id: Optional[uuid.UUID] = None
    status: PaymentStatus = "pending"

    class Config:
        extra = "forbid"


class PaymentUpdate(BaseModel):
    amount: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    payment_method: Optional[PaymentMethod] = None
    status: Optional[PaymentStatus] = None

    class Config:
        extra = "forbid"


class PaymentResponse(BaseModel):
    id: uuid.UUID
    bill_id: uuid.UUID
    user_id: Optional[uuid.UUID]
    amount: float
    payment_method: str
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
