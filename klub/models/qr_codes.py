import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, func
from sqlmodel import SQLModel, Field, Relationship
from typing import TYPE_CHECKING

from klub.core.config import settings

if TYPE_CHECKING:
    from klub.models.restaurants import Restaurant


class QRCode(SQLModel, table=True):
    """A printed table code. Rows are never updated once created."""

    __tablename__ = "qr_codes"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        sa_column_kwargs={"nullable": False}
    )
    restaurant_id: uuid.UUID = Field(foreign_key="restaurants.id", nullable=False, index=True)
    table_number: int = Field(nullable=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )

    # Relationships
    restaurant: "Restaurant" = Relationship(back_populates="qr_codes")
