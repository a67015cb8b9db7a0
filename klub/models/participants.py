import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, func, UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship
from typing import TYPE_CHECKING

from klub.core.config import settings

if TYPE_CHECKING:
    from klub.models.bills import Bill
    from klub.models.item_assignments import ItemAssignment


class Participant(SQLModel, table=True):
    __tablename__ = "participants"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        sa_column_kwargs={"nullable": False}
    )
    bill_id: uuid.UUID = Field(foreign_key="bills.id", nullable=False, index=True)
    name: str = Field(max_length=100, nullable=False)
    email: str | None = Field(default=None, max_length=100, nullable=True)
    user_id: uuid.UUID | None = Field(default=None, nullable=True)
    position: int = Field(nullable=False)  # join order; lowest is the bill owner
    joined_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )

    __table_args__ = (
        UniqueConstraint("bill_id", "position", name="uq_participants_bill_position"),
    )

    # Relationships
    bill: "Bill" = Relationship(back_populates="participants")
    assignments: list["ItemAssignment"] = Relationship(
        back_populates="participant",
        sa_relationship_kwargs={"cascade": "all, delete"}
    )
