import uuid
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class ProfileCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=100)
    name: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)

    class Config:
        extra = "forbid"


class ProfileUpdate(BaseModel):
    email: Optional[str] = Field(default=None, min_length=3, max_length=100)
    name: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)

    class Config:
        extra = "forbid"


class ProfileResponse(BaseModel):
    id: uuid.UUID
    email: str
    name: Optional[str]
    phone: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MeResponse(BaseModel):
    """Identity of the caller as seen by the API."""
    user_id: uuid.UUID
    email: Optional[str]
    role: str
    profile: Optional[ProfileResponse] = None
