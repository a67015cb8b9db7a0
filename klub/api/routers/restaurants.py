import uuid
from typing import Optional
from fastapi import APIRouter, Query, Response

from klub.api.deps import (
    RestaurantOwner,
    SessionDep,
    ensure_manages_restaurant,
    get_restaurant_or_404,
)
from klub.core.exceptions import NotFound
from klub.crud import restaurants as crud_restaurants
from klub.schemas.restaurants import (
    MenuItemCreate,
    MenuItemResponse,
    QRCodeCreate,
    QRCodeResponse,
    RestaurantCreate,
    RestaurantResponse,
    RestaurantUpdate,
)
from klub.services import qr_payload
from klub.services.qr_image import render_png

router = APIRouter(prefix="/restaurant", tags=["restaurants"])


def _qr_response(qr_code) -> QRCodeResponse:
    return QRCodeResponse(
        id=qr_code.id,
        restaurant_id=qr_code.restaurant_id,
        table_number=qr_code.table_number,
        created_at=qr_code.created_at,
        qr_url=qr_payload.encode_scan_url(qr_code.restaurant_id, qr_code.table_number),
        deep_link=qr_payload.encode(qr_code.restaurant_id, qr_code.table_number),
    )


@router.get("", response_model=list[RestaurantResponse])
def list_restaurants(db: SessionDep):
    """List all restaurants."""
    return crud_restaurants.list_restaurants(db)


@router.get("/{restaurant_id}", response_model=RestaurantResponse)
def get_restaurant(restaurant_id: uuid.UUID, db: SessionDep):
    """Get restaurant details."""
    return get_restaurant_or_404(db, restaurant_id)


@router.post("", response_model=RestaurantResponse, status_code=201)
def create_restaurant(restaurant_data: RestaurantCreate, auth: RestaurantOwner, db: SessionDep):
    """Create a restaurant owned by the calling account."""
    return crud_restaurants.create_restaurant(db, restaurant_data, owner_id=auth.user_id)


@router.put("/{restaurant_id}", response_model=RestaurantResponse)
def update_restaurant(
    restaurant_id: uuid.UUID,
    restaurant_data: RestaurantUpdate,
    auth: RestaurantOwner,
    db: SessionDep
):
    """Update a restaurant."""
    restaurant = get_restaurant_or_404(db, restaurant_id)
    ensure_manages_restaurant(auth, restaurant)
    return crud_restaurants.update_restaurant(db, restaurant, restaurant_data)


@router.delete("/{restaurant_id}", status_code=204)
def delete_restaurant(restaurant_id: uuid.UUID, auth: RestaurantOwner, db: SessionDep):
    """Delete a restaurant with its QR codes and menu."""
    restaurant = get_restaurant_or_404(db, restaurant_id)
    ensure_manages_restaurant(auth, restaurant)
    crud_restaurants.delete_restaurant(db, restaurant)
    return Response(status_code=204)


@router.post("/{restaurant_id}/qr-codes", response_model=QRCodeResponse, status_code=201)
def create_qr_code(
    restaurant_id: uuid.UUID,
    qr_data: QRCodeCreate,
    auth: RestaurantOwner,
    db: SessionDep
):
    """Register a QR code for a table and return its scannable links."""
    restaurant = get_restaurant_or_404(db, restaurant_id)
    ensure_manages_restaurant(auth, restaurant)
    qr_code = crud_restaurants.create_qr_code(db, restaurant, qr_data.table_number)
    return _qr_response(qr_code)


@router.get("/{restaurant_id}/qr-codes", response_model=list[QRCodeResponse])
def list_qr_codes(restaurant_id: uuid.UUID, db: SessionDep):
    """List the table QR codes of a restaurant."""
    get_restaurant_or_404(db, restaurant_id)
    return [_qr_response(qr) for qr in crud_restaurants.list_qr_codes(db, restaurant_id)]


@router.get(
    "/{restaurant_id}/qr-codes/{qr_code_id}/image",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}},
)
def get_qr_code_image(restaurant_id: uuid.UUID, qr_code_id: uuid.UUID, db: SessionDep):
    """Render a table QR code as PNG.

    The image encodes the web scan URL so phone cameras open the frontend directly.
    """
    qr_code = crud_restaurants.get_qr_code(db, restaurant_id, qr_code_id)
    if qr_code is None:
        raise NotFound("QR code not found")

    data = qr_payload.encode_scan_url(qr_code.restaurant_id, qr_code.table_number)
    return Response(
        content=render_png(data),
        media_type="image/png",
        headers={"Content-Disposition": f'inline; filename="table-{qr_code.table_number}-qr.png"'},
    )


@router.get("/{restaurant_id}/menu", response_model=list[MenuItemResponse])
def get_menu(
    restaurant_id: uuid.UUID,
    db: SessionDep,
    category: Optional[str] = Query(None, description="Only items of this category")
):
    """Get the restaurant's menu."""
    get_restaurant_or_404(db, restaurant_id)
    return crud_restaurants.list_menu_items(db, restaurant_id, category=category)


@router.post("/{restaurant_id}/menu", response_model=MenuItemResponse, status_code=201)
def add_menu_item(
    restaurant_id: uuid.UUID,
    item_data: MenuItemCreate,
    auth: RestaurantOwner,
    db: SessionDep
):
    """Add an item to the restaurant's menu."""
    restaurant = get_restaurant_or_404(db, restaurant_id)
    ensure_manages_restaurant(auth, restaurant)
    return crud_restaurants.create_menu_item(db, restaurant, item_data)
