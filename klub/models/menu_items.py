import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, func
from sqlmodel import SQLModel, Field, Relationship
from typing import TYPE_CHECKING

from klub.core.config import settings

if TYPE_CHECKING:
    from klub.models.restaurants import Restaurant


class MenuItem(SQLModel, table=True):
    __tablename__ = "menu_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        sa_column_kwargs={"nullable": False}
    )
    restaurant_id: uuid.UUID = Field(foreign_key="restaurants.id", nullable=False, index=True)
    name: str = Field(max_length=200, nullable=False)
    description: str | None = Field(default=None, nullable=True)
    price: float = Field(nullable=False)
    category: str = Field(default="Other", max_length=50, nullable=False)
    is_available: bool = Field(default=True, nullable=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )

    # Relationships
    restaurant: "Restaurant" = Relationship(back_populates="menu_items")
