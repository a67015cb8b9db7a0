import logging
import uuid
from fastapi import APIRouter

from klub.api.deps import SessionDep, get_restaurant_or_404
from klub.core.exceptions import NotFound
from klub.crud import bills as crud_bills
from klub.schemas.bills import BillResponse
from klub.schemas.restaurants import RestaurantResponse
from klub.schemas.scan import ScanRequest, ScanResponse
from klub.services import qr_payload

router = APIRouter(prefix="/scan", tags=["scan"])

logger = logging.getLogger(__name__)


@router.post("", response_model=ScanResponse)
def resolve_scan(scan_data: ScanRequest, db: SessionDep):
    """Resolve a scanned table code to its restaurant and the table's open bills."""
    table = qr_payload.decode(scan_data.payload)
    logger.info(f"[Scan] Restaurant {table.restaurant_id} table {table.table_number}")

    try:
        restaurant_id = uuid.UUID(table.restaurant_id)
    except ValueError:
        raise NotFound("Restaurant not found", details=table.restaurant_id)

    restaurant = get_restaurant_or_404(db, restaurant_id)
    open_bills = crud_bills.list_bills(
        db,
        restaurant_id=restaurant.id,
        table_number=table.table_number,
        status="open",
    )

    return ScanResponse(
        restaurant=RestaurantResponse.model_validate(restaurant),
        table_number=table.table_number,
        open_bills=[BillResponse.model_validate(bill) for bill in open_bills],
    )
