import uuid
from fastapi import APIRouter, Response

from klub.api.deps import SessionDep, get_bill_or_404
from klub.core.exceptions import NotFound
from klub.crud import payments as crud_payments
from klub.schemas.payments import PaymentCreate, PaymentResponse, PaymentUpdate

router = APIRouter(prefix="/payment", tags=["payments"])


def _get_payment_or_404(db, payment_id: uuid.UUID):
    payment = crud_payments.get_payment_by_id(db, payment_id)
    if payment is None:
        raise NotFound("Payment not found")
    return payment


@router.get("", response_model=list[PaymentResponse])
def list_payments(db: SessionDep):
    """List all payments."""
    return crud_payments.list_payments(db)


@router.get("/bill/{bill_id}", response_model=list[PaymentResponse])
def get_bill_payments(bill_id: uuid.UUID, db: SessionDep):
    """Get payments recorded against a bill."""
    return crud_payments.get_bill_payments(db, bill_id)


@router.get("/user/{user_id}", response_model=list[PaymentResponse])
def get_user_payments(user_id: uuid.UUID, db: SessionDep):
    """Get payments made by a user."""
    return crud_payments.get_user_payments(db, user_id)


@router.get("/{payment_id}", response_model=PaymentResponse)
def get_payment(payment_id: uuid.UUID, db: SessionDep):
    """Get payment details."""
    return _get_payment_or_404(db, payment_id)


@router.post("", response_model=PaymentResponse, status_code=201)
def create_payment(payment_data: PaymentCreate, db: SessionDep):
    """Record a payment. A completed payment that covers the bill marks it paid."""
    get_bill_or_404(db, payment_data.bill_id)
    return crud_payments.create_payment(db, payment_data)


@router.put("/{payment_id}", response_model=PaymentResponse)
def update_payment(payment_id: uuid.UUID, payment_data: PaymentUpdate, db: SessionDep):
    """Update a payment. Completing it re-checks whether the bill is paid."""
    payment = _get_payment_or_404(db, payment_id)
    return crud_payments.update_payment(db, payment, payment_data)


@router.delete("/{payment_id}", status_code=204)
def delete_payment(payment_id: uuid.UUID, db: SessionDep):
    """Delete a payment that never completed."""
    payment = _get_payment_or_404(db, payment_id)
    crud_payments.delete_payment(db, payment)
    return Response(status_code=204)
