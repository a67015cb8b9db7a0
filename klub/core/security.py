import uuid
from typing import Literal, Optional

import jwt
from pydantic import BaseModel

from klub.core.config import settings

Role = Literal["customer", "restaurant_owner", "admin"]


class AuthContext(BaseModel):
    """Caller identity extracted from an identity-provider access token."""

    user_id: uuid.UUID
    email: Optional[str] = None
    role: Role = "customer"

    @property
    def can_manage_restaurants(self) -> bool:
        return self.role in ("restaurant_owner", "admin")


def decode_access_token(token: str) -> Optional[dict]:
    """Decode and verify a JWT access token."""
    options = {"verify_aud": settings.AUTH_JWT_AUDIENCE is not None}
    try:
        payload = jwt.decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.AUTH_JWT_AUDIENCE,
            options=options,
        )
        return payload
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def auth_context_from_payload(payload: dict) -> Optional[AuthContext]:
    """Build an AuthContext from decoded claims; None if the subject is unusable."""
    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        user_id = uuid.UUID(str(subject))
    except (ValueError, TypeError):
        return None

    metadata = payload.get("user_metadata") or {}
    role = metadata.get("role") or "customer"
    if role not in ("customer", "restaurant_owner", "admin"):
        role = "customer"

    return AuthContext(user_id=user_id, email=payload.get("email"), role=role)
