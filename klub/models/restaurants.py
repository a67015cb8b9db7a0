import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, func
from sqlmodel import SQLModel, Field, Relationship
from typing import TYPE_CHECKING

from klub.core.config import settings

if TYPE_CHECKING:
    from klub.models.qr_codes import QRCode
    from klub.models.menu_items import MenuItem
    from klub.models.bills import Bill


class Restaurant(SQLModel, table=True):
    __tablename__ = "restaurants"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        sa_column_kwargs={"nullable": False}
    )
    name: str = Field(max_length=100, nullable=False)
    address: str | None = Field(default=None, nullable=True)
    phone: str | None = Field(default=None, max_length=30, nullable=True)
    email: str | None = Field(default=None, max_length=100, nullable=True)
    cuisine: str | None = Field(default=None, max_length=50, nullable=True)
    description: str | None = Field(default=None, nullable=True)
    logo_url: str | None = Field(default=None, max_length=500, nullable=True)
    owner_id: uuid.UUID | None = Field(default=None, nullable=True, index=True)  # identity-provider user id
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    )

    # Relationships
    qr_codes: list["QRCode"] = Relationship(
        back_populates="restaurant",
        sa_relationship_kwargs={"cascade": "all, delete"}
    )
    menu_items: list["MenuItem"] = Relationship(
        back_populates="restaurant",
        sa_relationship_kwargs={"cascade": "all, delete"}
    )
    bills: list["Bill"] = Relationship(back_populates="restaurant")
