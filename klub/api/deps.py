from typing import Annotated, Optional
from sqlmodel import Session
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from klub.core.exceptions import NotFound
from klub.core.security import AuthContext, auth_context_from_payload, decode_access_token
from klub.crud import bills as crud_bills
from klub.crud import restaurants as crud_restaurants
from klub.db.session import get_db
from klub.models.bills import Bill
from klub.models.restaurants import Restaurant

security = HTTPBearer(auto_error=False)

SessionDep = Annotated[Session, Depends(get_db)]


def get_auth_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthContext:
    """Build the caller's AuthContext from the identity-provider bearer token."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    auth = auth_context_from_payload(payload)
    if auth is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return auth


CurrentAuth = Annotated[AuthContext, Depends(get_auth_context)]


def require_restaurant_owner(auth: CurrentAuth) -> AuthContext:
    """Only restaurant owners (and admins) may manage restaurants."""
    if not auth.can_manage_restaurants:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Restaurant owner account required",
        )
    return auth


RestaurantOwner = Annotated[AuthContext, Depends(require_restaurant_owner)]


def ensure_manages_restaurant(auth: AuthContext, restaurant: Restaurant) -> None:
    """Raise 403 unless auth owns the restaurant or is an admin."""
    if auth.role == "admin":
        return
    if restaurant.owner_id != auth.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not manage this restaurant",
        )


def get_restaurant_or_404(db: Session, restaurant_id) -> Restaurant:
    restaurant = crud_restaurants.get_restaurant_by_id(db, restaurant_id)
    if restaurant is None:
        raise NotFound("Restaurant not found")
    return restaurant


def get_bill_or_404(db: Session, bill_id) -> Bill:
    bill = crud_bills.get_bill_by_id(db, bill_id)
    if bill is None:
        raise NotFound("Bill not found")
    return bill
