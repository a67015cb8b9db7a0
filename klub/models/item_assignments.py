import uuid
from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from klub.models.bill_items import BillItem
    from klub.models.participants import Participant


class ItemAssignment(SQLModel, table=True):
    __tablename__ = "item_assignments"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        sa_column_kwargs={"nullable": False}
    )
    bill_item_id: uuid.UUID = Field(foreign_key="bill_items.id", nullable=False, index=True)
    participant_id: uuid.UUID = Field(foreign_key="participants.id", nullable=False, index=True)

    # Unique constraint on (bill_item_id, participant_id)
    __table_args__ = (
        UniqueConstraint("bill_item_id", "participant_id", name="uq_item_assignments_item_participant"),
    )

    # Relationships
    bill_item: "BillItem" = Relationship(back_populates="assignments")
    participant: "Participant" = Relationship(back_populates="assignments")
