import logging
import uuid
from sqlalchemy import update
from sqlmodel import select, Session

from klub.core.exceptions import NotFound, ValidationError
from klub.models.bills import Bill
from klub.models.payments import Payment
from klub.schemas.payments import PaymentCreate, PaymentUpdate
from klub.services.reconciliation import BillBalance, bill_balance, record_payment

logger = logging.getLogger(__name__)


def list_payments(db: Session) -> list[Payment]:
    """Get all payments."""
    return db.exec(select(Payment).order_by(Payment.created_at)).all()


def get_payment_by_id(db: Session, payment_id: uuid.UUID) -> Payment | None:
    """Get payment by ID."""
    return db.get(Payment, payment_id)


def get_bill_payments(db: Session, bill_id: uuid.UUID) -> list[Payment]:
    """Get all payments recorded against a bill."""
    return db.exec(
        select(Payment)
        .where(Payment.bill_id == bill_id)
        .order_by(Payment.created_at)
    ).all()


def get_user_payments(db: Session, user_id: uuid.UUID) -> list[Payment]:
    """Get all payments made by a user."""
    return db.exec(
        select(Payment)
        .where(Payment.user_id == user_id)
        .order_by(Payment.created_at)
    ).all()


def _lock_bill(db: Session, bill_id: uuid.UUID) -> Bill:
    """Load the bill row with a write lock held until the transaction ends.

    Payments for the same bill are serialized on this lock, so the
    completed-payment sum read afterwards cannot miss a concurrent payment.
    """
    bill = db.exec(
        select(Bill)
        .where(Bill.id == bill_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).first()
    if bill is None:
        raise NotFound("Bill not found")
    return bill


def _settle(db: Session, bill: Bill, payment: Payment) -> BillBalance:
    """Reconcile the locked bill with payment included; flips it to paid if covered."""
    db.flush()
    balance = record_payment(
        bill.total_amount,
        bill.status,
        get_bill_payments(db, bill.id),
        payment,
    )

    if balance.is_paid and bill.status == "open":
        # Compare-and-swap: only an open bill may become paid
        result = db.execute(
            update(Bill)
            .where(Bill.id == bill.id, Bill.status == "open")
            .values(status="paid")
        )
        if result.rowcount:
            logger.info(
                f"[Payment] Bill {bill.id} fully paid: "
                f"{balance.paid_amount:.2f} of {balance.total_amount:.2f}"
            )
    return balance


def create_payment(db: Session, payment_data: PaymentCreate) -> Payment:
    """Record a payment and mark the bill paid once completed payments cover it.

    The amount is stored as given; an overpayment is accepted.
    """
    bill = _lock_bill(db, payment_data.bill_id)

    payment = Payment(**payment_data.model_dump())
    db.add(payment)
    logger.info(
        f"[Payment] {payment_data.status} {payment_data.payment_method} payment of "
        f"{payment_data.amount:.2f} for bill {bill.id}"
    )

    if payment.status == "completed":
        _settle(db, bill, payment)

    db.commit()
    db.refresh(payment)
    return payment


def update_payment(db: Session, payment: Payment, payment_data: PaymentUpdate) -> Payment:
    """Update a payment; moving it into completed re-runs reconciliation."""
    updates = payment_data.model_dump(exclude_unset=True)
    for field in ("amount", "payment_method", "status"):
        if field in updates and updates[field] is None:
            raise ValidationError(f"Payment {field} cannot be null")

    previous_status = payment.status
    if updates.get("status", previous_status) == "completed":
        bill = _lock_bill(db, payment.bill_id)
        db.refresh(payment)
        previous_status = payment.status
        for field, value in updates.items():
            setattr(payment, field, value)
        db.add(payment)
        _settle(db, bill, payment)
    else:
        for field, value in updates.items():
            setattr(payment, field, value)
        db.add(payment)

    db.commit()
    db.refresh(payment)
    if previous_status != payment.status:
        logger.info(f"[Payment] {payment.id} status {previous_status} -> {payment.status}")
    return payment


def delete_payment(db: Session, payment: Payment) -> None:
    """Delete a pending or failed payment. Completed payments are kept for reconciliation."""
    if payment.status == "completed":
        raise ValidationError(
            "Completed payments cannot be deleted",
            details="Mark the payment as failed instead",
        )
    db.delete(payment)
    db.commit()


def get_bill_balance(db: Session, bill: Bill) -> BillBalance:
    """Paid and remaining amounts of a bill, without changing it."""
    return bill_balance(bill.total_amount, bill.status, get_bill_payments(db, bill.id))
