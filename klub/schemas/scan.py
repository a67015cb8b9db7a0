from pydantic import BaseModel, Field

from klub.schemas.bills import BillResponse
from klub.schemas.restaurants import RestaurantResponse


class ScanRequest(BaseModel):
    payload: str = Field(..., description="Raw text read from the table QR code")

    class Config:
        extra = "forbid"


class ScanResponse(BaseModel):
    restaurant: RestaurantResponse
    table_number: int
    open_bills: list[BillResponse]
