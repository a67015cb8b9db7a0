import uuid
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field

from klub.services.split import SplitPolicy

BillStatus = Literal["open", "paid", "closed"]


class BillItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    price: float = Field(..., ge=0, allow_inf_nan=False, description="Unit price")
    quantity: int = Field(default=1, ge=1)

    class Config:
        extra = "forbid"


class BillItemsCreate(BaseModel):
    items: list[BillItemCreate] = Field(..., min_length=1)

    class Config:
        extra = "forbid"


class BillItemResponse(BaseModel):
    id: uuid.UUID
    bill_id: uuid.UUID
    name: str
    price: float
    quantity: int
    line_total: float
    assigned_to: list[uuid.UUID]
    created_at: datetime

    class Config:
        from_attributes = True


class BillCreate(BaseModel):
    restaurant_id: uuid.UUID
    table_number: int = Field(..., gt=0)
    items: list[BillItemCreate] = []

    class Config:
        extra = "forbid"


class BillUpdate(BaseModel):
    table_number: Optional[int] = Field(default=None, gt=0)
    status: Optional[BillStatus] = None  # administrative override

    class Config:
        extra = "forbid"


class BillResponse(BaseModel):
    id: uuid.UUID
    restaurant_id: uuid.UUID
    table_number: int
    total_amount: float
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ParticipantCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = Field(default=None, max_length=100)
    user_id: Optional[uuid.UUID] = None

    class Config:
        extra = "forbid"


class ParticipantResponse(BaseModel):
    id: uuid.UUID
    bill_id: uuid.UUID
    name: str
    email: Optional[str]
    user_id: Optional[uuid.UUID]
    position: int
    joined_at: datetime

    class Config:
        from_attributes = True


class BillDetailResponse(BillResponse):
    items: list[BillItemResponse]
    participants: list[ParticipantResponse]


class AssignmentUpdate(BaseModel):
    participant_ids: list[uuid.UUID]

    class Config:
        extra = "forbid"


class SplitShare(BaseModel):
    participant_id: uuid.UUID
    name: str
    amount: float


class SplitResponse(BaseModel):
    bill_id: uuid.UUID
    policy: SplitPolicy
    total_amount: float
    shares: list[SplitShare]


class BalanceResponse(BaseModel):
    bill_id: uuid.UUID
    total_amount: float
    paid_amount: float
    remaining_amount: float
    suggested_payment: float
    status: str
