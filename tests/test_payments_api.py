import uuid

from sqlmodel import Session

from klub.crud import payments as crud_payments
from klub.models.bills import Bill
from klub.schemas.payments import PaymentCreate
from tests.utils import create_bill, create_restaurant, pay

THIRTY = [{"name": "Menu del día", "price": 10.0, "quantity": 3}]


def _bill_status(client, bill_id):
    return client.get(f"/api/bill/{bill_id}").json()["status"]


def _remaining(client, bill_id):
    return client.get(f"/api/bill/{bill_id}/balance").json()["remaining_amount"]


def test_completed_payments_settle_the_bill(client):
    restaurant = create_restaurant(client)
    bill = create_bill(client, restaurant["id"], items=THIRTY)
    assert bill["total_amount"] == 30.0

    pay(client, bill["id"], 10.0)
    assert _remaining(client, bill["id"]) == 20.0
    assert _bill_status(client, bill["id"]) == "open"

    pay(client, bill["id"], 20.0)
    assert _remaining(client, bill["id"]) == 0
    assert _bill_status(client, bill["id"]) == "paid"


def test_pending_payment_does_not_affect_balance(client):
    restaurant = create_restaurant(client)
    bill = create_bill(client, restaurant["id"], items=THIRTY)

    payment = pay(client, bill["id"], 1000.0, status="pending")
    assert payment["status"] == "pending"
    assert _remaining(client, bill["id"]) == 30.0
    assert _bill_status(client, bill["id"]) == "open"


def test_payment_status_defaults_to_pending(client):
    restaurant = create_restaurant(client)
    bill = create_bill(client, restaurant["id"], items=THIRTY)
    resp = client.post("/api/payment", json={"bill_id": bill["id"], "amount": 30.0, "payment_method": "cash"})
    assert resp.status_code == 201
    assert resp.json()["status"] == "pending"
    assert _bill_status(client, bill["id"]) == "open"


def test_completing_pending_payment_settles_the_bill(client):
    restaurant = create_restaurant(client)
    bill = create_bill(client, restaurant["id"], items=THIRTY)
    pay(client, bill["id"], 10.0)
    pending = pay(client, bill["id"], 20.0, status="pending")

    resp = client.put(f"/api/payment/{pending['id']}", json={"status": "completed"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "completed"
    assert _bill_status(client, bill["id"]) == "paid"

    balance = client.get(f"/api/bill/{bill['id']}/balance").json()
    assert balance["paid_amount"] == 30.0


def test_failed_payment_does_not_settle(client):
    restaurant = create_restaurant(client)
    bill = create_bill(client, restaurant["id"], items=THIRTY)
    pending = pay(client, bill["id"], 30.0, status="pending")

    resp = client.put(f"/api/payment/{pending['id']}", json={"status": "failed"})
    assert resp.status_code == 200
    assert _bill_status(client, bill["id"]) == "open"
    assert _remaining(client, bill["id"]) == 30.0


def test_overpayment_is_accepted(client):
    restaurant = create_restaurant(client)
    bill = create_bill(client, restaurant["id"], items=THIRTY)
    payment = pay(client, bill["id"], 45.0)
    assert payment["amount"] == 45.0
    assert _bill_status(client, bill["id"]) == "paid"
    assert _remaining(client, bill["id"]) == 0


def test_payment_validation(client):
    restaurant = create_restaurant(client)
    bill = create_bill(client, restaurant["id"], items=THIRTY)

    for body in [
        {"bill_id": bill["id"], "payment_method": "cash"},
        {"bill_id": bill["id"], "amount": 0, "payment_method": "cash"},
        {"bill_id": bill["id"], "amount": 10, "payment_method": "bitcoin"},
        {"bill_id": bill["id"], "amount": 10, "payment_method": "cash", "status": "refunded"},
        {"amount": 10, "payment_method": "cash"},
    ]:
        resp = client.post("/api/payment", json=body)
        assert resp.status_code == 400, body

    resp = client.put(f"/api/payment/{uuid.uuid4()}", json={"status": "completed"})
    assert resp.status_code == 404


def test_payment_for_unknown_bill(client):
    resp = client.post(
        "/api/payment",
        json={"bill_id": str(uuid.uuid4()), "amount": 10.0, "payment_method": "cash"},
    )
    assert resp.status_code == 404


def test_update_rejects_null_amount(client):
    restaurant = create_restaurant(client)
    bill = create_bill(client, restaurant["id"], items=THIRTY)
    pending = pay(client, bill["id"], 10.0, status="pending")
    resp = client.put(f"/api/payment/{pending['id']}", json={"amount": None})
    assert resp.status_code == 400


def test_payment_lookups(client):
    restaurant = create_restaurant(client)
    bill = create_bill(client, restaurant["id"], items=THIRTY)
    user_id = str(uuid.uuid4())
    resp = client.post(
        "/api/payment",
        json={"bill_id": bill["id"], "amount": 5.0, "payment_method": "apple_pay", "user_id": user_id},
    )
    payment = resp.json()
    pay(client, bill["id"], 5.0)

    assert client.get(f"/api/payment/{payment['id']}").json()["user_id"] == user_id
    assert len(client.get(f"/api/payment/bill/{bill['id']}").json()) == 2
    assert [p["id"] for p in client.get(f"/api/payment/user/{user_id}").json()] == [payment["id"]]
    assert len(client.get("/api/payment").json()) == 2


def test_delete_payment(client):
    restaurant = create_restaurant(client)
    bill = create_bill(client, restaurant["id"], items=THIRTY)
    pending = pay(client, bill["id"], 10.0, status="pending")
    completed = pay(client, bill["id"], 10.0)

    assert client.delete(f"/api/payment/{pending['id']}").status_code == 204
    assert client.get(f"/api/payment/{pending['id']}").status_code == 404

    resp = client.delete(f"/api/payment/{completed['id']}")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Completed payments cannot be deleted"


def test_non_finite_amounts_are_rejected(client):
    restaurant = create_restaurant(client)
    bill = create_bill(client, restaurant["id"], items=THIRTY)

    for amount in ["Infinity", "NaN"]:
        resp = client.post(
            "/api/payment",
            content=(
                f'{{"bill_id": "{bill["id"]}", "amount": {amount}, '
                '"payment_method": "cash", "status": "completed"}'
            ),
            headers={"content-type": "application/json"},
        )
        assert resp.status_code == 400, amount
        assert resp.json()["error"] == "Invalid request body"

    assert _bill_status(client, bill["id"]) == "open"
    assert _remaining(client, bill["id"]) == 30.0

    resp = client.post(
        "/api/bill",
        content=(
            f'{{"restaurant_id": "{restaurant["id"]}", "table_number": 2, '
            '"items": [{"name": "Agua", "price": NaN}]}'
        ),
        headers={"content-type": "application/json"},
    )
    assert resp.status_code == 400


def test_payment_reconciles_against_current_bill_total(client, engine):
    restaurant = create_restaurant(client)
    bill = create_bill(client, restaurant["id"], items=[{"name": "Menu del día", "price": 10.0}])
    bill_id = uuid.UUID(bill["id"])

    with Session(engine) as session, Session(engine) as other:
        stale = session.get(Bill, bill_id)
        assert stale.total_amount == 10.0

        fresh = other.get(Bill, bill_id)
        fresh.total_amount = 30.0
        other.add(fresh)
        other.commit()

        crud_payments.create_payment(
            session,
            PaymentCreate(bill_id=bill_id, amount=10.0, payment_method="cash", status="completed"),
        )

    assert _bill_status(client, bill["id"]) == "open"
    assert _remaining(client, bill["id"]) == 20.0
