import uuid
from datetime import datetime, timedelta, timezone

import jwt
from fastapi.testclient import TestClient

from klub.core.config import settings


def make_token(user_id: uuid.UUID | None = None, role: str = "customer", email: str | None = None, **claims) -> str:
    payload = {
        "sub": str(user_id or uuid.uuid4()),
        "email": email,
        "user_metadata": {"role": role},
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
        **claims,
    }
    return jwt.encode(payload, settings.AUTH_JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def owner_headers(user_id: uuid.UUID | None = None) -> dict:
    return auth_headers(make_token(user_id, role="restaurant_owner"))


def create_restaurant(client: TestClient, headers: dict | None = None, name: str = "La Picada") -> dict:
    resp = client.post("/api/restaurant", json={"name": name}, headers=headers or owner_headers())
    assert resp.status_code == 201
    return resp.json()


def create_bill(client: TestClient, restaurant_id: str, table_number: int = 7, items: list[dict] | None = None) -> dict:
    resp = client.post(
        "/api/bill",
        json={"restaurant_id": restaurant_id, "table_number": table_number, "items": items or []},
    )
    assert resp.status_code == 201
    return resp.json()


def join(client: TestClient, bill_id: str, name: str) -> dict:
    resp = client.post(f"/api/bill/{bill_id}/participants", json={"name": name})
    assert resp.status_code == 201
    return resp.json()


def pay(client: TestClient, bill_id: str, amount: float, status: str = "completed", method: str = "credit_card") -> dict:
    resp = client.post(
        "/api/payment",
        json={"bill_id": bill_id, "amount": amount, "payment_method": method, "status": status},
    )
    assert resp.status_code == 201
    return resp.json()
