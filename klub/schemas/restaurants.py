import uuid
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class RestaurantCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    address: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=30)
    email: Optional[str] = Field(default=None, max_length=100)
    cuisine: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = None
    logo_url: Optional[str] = Field(default=None, max_length=500)

    class Config:
        extra = "forbid"


class RestaurantUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    address: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=30)
    email: Optional[str] = Field(default=None, max_length=100)
    cuisine: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = None
    logo_url: Optional[str] = Field(default=None, max_length=500)

    class Config:
        extra = "forbid"


class RestaurantResponse(BaseModel):
    id: uuid.UUID
    name: str
    address: Optional[str]
    phone: Optional[str]
    email: Optional[str]
    cuisine: Optional[str]
    description: Optional[str]
    logo_url: Optional[str]
    owner_id: Optional[uuid.UUID]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class QRCodeCreate(BaseModel):
    table_number: int = Field(..., gt=0, alias="tableNumber")

    class Config:
        extra = "forbid"
        populate_by_name = True


class QRCodeResponse(BaseModel):
    id: uuid.UUID
    restaurant_id: uuid.UUID
    table_number: int
    created_at: datetime
    qr_url: str  # web scan link
    deep_link: str  # payload printed on the code


class MenuItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: float = Field(..., ge=0, allow_inf_nan=False)
    category: str = Field(default="Other", min_length=1, max_length=50)
    is_available: bool = True

    class Config:
        extra = "forbid"


class MenuItemResponse(BaseModel):
    id: uuid.UUID
    restaurant_id: uuid.UUID
    name: str
    description: Optional[str]
    price: float
    category: str
    is_available: bool
    created_at: datetime

    class Config:
        from_attributes = True
