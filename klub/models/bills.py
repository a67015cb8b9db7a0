import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, func
from sqlmodel import SQLModel, Field, Relationship
from typing import TYPE_CHECKING

from klub.core.config import settings

if TYPE_CHECKING:
    from klub.models.restaurants import Restaurant
    from klub.models.bill_items import BillItem
    from klub.models.participants import Participant
    from klub.models.payments import Payment


class Bill(SQLModel, table=True):
    __tablename__ = "bills"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        sa_column_kwargs={"nullable": False}
    )
    restaurant_id: uuid.UUID = Field(foreign_key="restaurants.id", nullable=False, index=True)
    table_number: int = Field(nullable=False)
    total_amount: float = Field(default=0.0, nullable=False)  # sum of item line totals
    status: str = Field(default="open", max_length=20, nullable=False)  # open, paid, closed
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    )

    # Relationships
    restaurant: "Restaurant" = Relationship(back_populates="bills")
    items: list["BillItem"] = Relationship(
        back_populates="bill",
        sa_relationship_kwargs={"cascade": "all, delete", "order_by": "BillItem.created_at"}
    )
    participants: list["Participant"] = Relationship(
        back_populates="bill",
        sa_relationship_kwargs={"cascade": "all, delete", "order_by": "Participant.position"}
    )
    payments: list["Payment"] = Relationship(
        back_populates="bill",
        sa_relationship_kwargs={"cascade": "all, delete"}
    )
