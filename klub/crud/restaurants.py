import logging
import uuid
from typing import Optional
from sqlmodel import select, Session

from klub.core.exceptions import ValidationError
from klub.models.bills import Bill
from klub.models.menu_items import MenuItem
from klub.models.qr_codes import QRCode
from klub.models.restaurants import Restaurant
from klub.schemas.restaurants import MenuItemCreate, RestaurantCreate, RestaurantUpdate

logger = logging.getLogger(__name__)


def list_restaurants(db: Session) -> list[Restaurant]:
    """Get all restaurants."""
    return db.exec(select(Restaurant).order_by(Restaurant.name)).all()


def get_restaurant_by_id(
    db: Session,
    restaurant_id: uuid.UUID
) -> Restaurant | None:
    """Get a restaurant by its ID."""
    return db.get(Restaurant, restaurant_id)


def create_restaurant(
    db: Session,
    restaurant_data: RestaurantCreate,
    owner_id: uuid.UUID | None = None
) -> Restaurant:
    """Create a restaurant owned by the given identity-provider user."""
    restaurant = Restaurant(**restaurant_data.model_dump(), owner_id=owner_id)
    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    logger.info(f"[Restaurant] Created {restaurant.id} ({restaurant.name}) for owner {owner_id}")
    return restaurant


def update_restaurant(
    db: Session,
    restaurant: Restaurant,
    restaurant_data: RestaurantUpdate
) -> Restaurant:
    """Apply the fields present in restaurant_data."""
    for field, value in restaurant_data.model_dump(exclude_unset=True).items():
        if field == "name" and value is None:
            raise ValidationError("Restaurant name is required")
        setattr(restaurant, field, value)

    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    return restaurant


def delete_restaurant(db: Session, restaurant: Restaurant) -> None:
    """Delete a restaurant with its QR codes and menu. Refused while bills exist."""
    has_bills = db.exec(
        select(Bill.id).where(Bill.restaurant_id == restaurant.id)
    ).first()
    if has_bills is not None:
        raise ValidationError(
            "Restaurant has bills and cannot be deleted",
            details=f"Close and delete the bills of restaurant {restaurant.id} first",
        )

    db.delete(restaurant)
    db.commit()
    logger.info(f"[Restaurant] Deleted {restaurant.id}")


def create_qr_code(
    db: Session,
    restaurant: Restaurant,
    table_number: int
) -> QRCode:
    """Register a QR code for one of the restaurant's tables."""
    qr_code = QRCode(restaurant_id=restaurant.id, table_number=table_number)
    db.add(qr_code)
    db.commit()
    db.refresh(qr_code)
    logger.info(f"[QR] Created code {qr_code.id} for restaurant {restaurant.id} table {table_number}")
    return qr_code


def list_qr_codes(db: Session, restaurant_id: uuid.UUID) -> list[QRCode]:
    """Get all QR codes of a restaurant, by table number."""
    return db.exec(
        select(QRCode)
        .where(QRCode.restaurant_id == restaurant_id)
        .order_by(QRCode.table_number, QRCode.created_at)
    ).all()


def get_qr_code(
    db: Session,
    restaurant_id: uuid.UUID,
    qr_code_id: uuid.UUID
) -> QRCode | None:
    """Get a QR code, only if it belongs to the restaurant."""
    qr_code = db.get(QRCode, qr_code_id)
    if qr_code is None or qr_code.restaurant_id != restaurant_id:
        return None
    return qr_code


def list_menu_items(
    db: Session,
    restaurant_id: uuid.UUID,
    category: Optional[str] = None
) -> list[MenuItem]:
    """Get the menu of a restaurant, optionally for a single category."""
    query = select(MenuItem).where(MenuItem.restaurant_id == restaurant_id)
    if category:
        query = query.where(MenuItem.category == category)
    return db.exec(query.order_by(MenuItem.category, MenuItem.name)).all()


def create_menu_item(
    db: Session,
    restaurant: Restaurant,
    item_data: MenuItemCreate
) -> MenuItem:
    """Add an item to a restaurant's menu."""
    menu_item = MenuItem(restaurant_id=restaurant.id, **item_data.model_dump())
    db.add(menu_item)
    db.commit()
    db.refresh(menu_item)
    return menu_item
