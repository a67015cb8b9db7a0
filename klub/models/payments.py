import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, func
from sqlmodel import SQLModel, Field, Relationship
from typing import TYPE_CHECKING

from klub.core.config import settings

if TYPE_CHECKING:
    from klub.models.bills import Bill


class Payment(SQLModel, table=True):
    __tablename__ = "payments"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        sa_column_kwargs={"nullable": False}
    )
    bill_id: uuid.UUID = Field(foreign_key="bills.id", nullable=False, index=True)
    user_id: uuid.UUID | None = Field(default=None, nullable=True, index=True)
    amount: float = Field(nullable=False)
    payment_method: str = Field(max_length=20, nullable=False)  # credit_card, debit_card, paypal, apple_pay, google_pay, cash
    status: str = Field(default="pending", max_length=20, nullable=False)  # pending, completed, failed
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    )

    # Relationships
    bill: "Bill" = Relationship(back_populates="payments")
