"""
Payment reconciliation.

Compares the completed payments recorded against a bill with its total and
decides whether the bill is settled. Only payments with status "completed"
count; pending and failed payments never move the balance.
"""
import uuid
from typing import Iterable, Protocol

from pydantic import BaseModel

PAID_TOLERANCE = 1e-9


class PaymentLike(Protocol):
    id: uuid.UUID
    amount: float
    status: str


class BillBalance(BaseModel):
    total_amount: float
    paid_amount: float
    remaining_amount: float
    status: str

    @property
    def is_paid(self) -> bool:
        return self.status == "paid"


def paid_amount(payments: Iterable[PaymentLike]) -> float:
    return sum(p.amount for p in payments if p.status == "completed")


def remaining_amount(total_amount: float, payments: Iterable[PaymentLike]) -> float:
    return max(0.0, total_amount - paid_amount(payments))


def suggested_amount(total_amount: float, payments: Iterable[PaymentLike]) -> float:
    """Amount a payment form should pre-fill; never more than what is left."""
    return round(remaining_amount(total_amount, payments), 2)


def bill_balance(total_amount: float, status: str, payments: Iterable[PaymentLike]) -> BillBalance:
    """Current balance of a bill; the status is reported as stored."""
    paid = paid_amount(payments)
    return BillBalance(
        total_amount=total_amount,
        paid_amount=paid,
        remaining_amount=max(0.0, total_amount - paid),
        status=status,
    )


def reconcile(total_amount: float, status: str, payments: Iterable[PaymentLike]) -> BillBalance:
    """Balance of a bill with the open -> paid transition applied when covered."""
    balance = bill_balance(total_amount, status, payments)
    if status == "open" and balance.paid_amount + PAID_TOLERANCE >= total_amount:
        balance.status = "paid"
    return balance


def record_payment(
    total_amount: float,
    status: str,
    payments: Iterable[PaymentLike],
    payment: PaymentLike,
) -> BillBalance:
    """Reconcile a bill after a payment is created or changes status.

    The payment replaces any existing entry with the same id, so calling this
    for a pending -> completed transition counts the payment exactly once.
    Amounts are recorded as given; overpayment is accepted.
    """
    others = [p for p in payments if p.id != payment.id]
    return reconcile(total_amount, status, [*others, payment])
