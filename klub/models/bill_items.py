import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, func
from sqlmodel import SQLModel, Field, Relationship
from typing import TYPE_CHECKING

from klub.core.config import settings

if TYPE_CHECKING:
    from klub.models.bills import Bill
    from klub.models.item_assignments import ItemAssignment


class BillItem(SQLModel, table=True):
    __tablename__ = "bill_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        sa_column_kwargs={"nullable": False}
    )
    bill_id: uuid.UUID = Field(foreign_key="bills.id", nullable=False, index=True)
    name: str = Field(max_length=200, nullable=False)
    price: float = Field(nullable=False)  # unit price
    quantity: int = Field(default=1, nullable=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )

    # Relationships
    bill: "Bill" = Relationship(back_populates="items")
    assignments: list["ItemAssignment"] = Relationship(
        back_populates="bill_item",
        sa_relationship_kwargs={"cascade": "all, delete"}
    )

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    @property
    def assigned_to(self) -> list[uuid.UUID]:
        return [a.participant_id for a in self.assignments]
