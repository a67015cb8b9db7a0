import logging
import uuid
from typing import Optional
from sqlalchemy import func
from sqlmodel import select, Session

from klub.core.exceptions import DanglingParticipantReference, NotFound, ValidationError
from klub.models.bill_items import BillItem
from klub.models.bills import Bill
from klub.models.item_assignments import ItemAssignment
from klub.models.participants import Participant
from klub.schemas.bills import BillCreate, BillItemCreate, BillUpdate, ParticipantCreate
from klub.services.aggregate import BillAggregate, build_aggregate

logger = logging.getLogger(__name__)


def list_bills(
    db: Session,
    restaurant_id: Optional[uuid.UUID] = None,
    table_number: Optional[int] = None,
    status: Optional[str] = None
) -> list[Bill]:
    """List bills with optional filters, newest first."""
    query = select(Bill)

    if restaurant_id:
        query = query.where(Bill.restaurant_id == restaurant_id)

    if table_number is not None:
        query = query.where(Bill.table_number == table_number)

    if status:
        query = query.where(Bill.status == status)

    return db.exec(query.order_by(Bill.created_at.desc())).all()


def get_bill_by_id(db: Session, bill_id: uuid.UUID) -> Bill | None:
    """Get bill by ID."""
    return db.get(Bill, bill_id)


def recompute_total(db: Session, bill: Bill) -> float:
    """Set bill.total_amount to the sum of its item line totals. Does not commit."""
    db.flush()
    total = db.exec(
        select(func.coalesce(func.sum(BillItem.price * BillItem.quantity), 0.0))
        .where(BillItem.bill_id == bill.id)
    ).one()
    bill.total_amount = float(total)
    db.add(bill)
    logger.info(f"[Bill] Total for {bill.id} recomputed: {bill.total_amount:.2f}")
    return bill.total_amount


def _add_items(db: Session, bill: Bill, items: list[BillItemCreate]) -> list[BillItem]:
    created = []
    for item_data in items:
        item = BillItem(bill_id=bill.id, **item_data.model_dump())
        db.add(item)
        created.append(item)
    return created


def create_bill(db: Session, bill_data: BillCreate) -> Bill:
    """Open a bill for a table, with its initial items, in one transaction."""
    bill = Bill(
        restaurant_id=bill_data.restaurant_id,
        table_number=bill_data.table_number,
        status="open",
    )
    db.add(bill)
    db.flush()

    _add_items(db, bill, bill_data.items)
    recompute_total(db, bill)

    db.commit()
    db.refresh(bill)
    logger.info(
        f"[Bill] Opened {bill.id} for restaurant {bill.restaurant_id} "
        f"table {bill.table_number} with {len(bill_data.items)} item(s)"
    )
    return bill


def update_bill(db: Session, bill: Bill, bill_data: BillUpdate) -> Bill:
    """Update table number and/or status. A status here is an administrative override."""
    if bill_data.table_number is not None:
        bill.table_number = bill_data.table_number

    if bill_data.status and bill_data.status != bill.status:
        logger.warning(f"[Bill] Status of {bill.id} overridden: {bill.status} -> {bill_data.status}")
        bill.status = bill_data.status
        if bill.status == "open":
            # Reopened bills must satisfy the item total invariant again
            recompute_total(db, bill)

    db.add(bill)
    db.commit()
    db.refresh(bill)
    return bill


def delete_bill(db: Session, bill: Bill) -> None:
    """Delete a bill with its items, participants and payments."""
    db.delete(bill)
    db.commit()
    logger.info(f"[Bill] Deleted {bill.id}")


def get_bill_items(db: Session, bill_id: uuid.UUID) -> list[BillItem]:
    """Get all items of a bill."""
    return db.exec(
        select(BillItem)
        .where(BillItem.bill_id == bill_id)
        .order_by(BillItem.created_at)
    ).all()


def add_bill_items(db: Session, bill: Bill, items: list[BillItemCreate]) -> list[BillItem]:
    """Add items to an open bill and recompute its total in the same transaction."""
    if bill.status != "open":
        raise ValidationError("Items can only be added to open bills", details=f"Bill status is {bill.status}")

    created = _add_items(db, bill, items)
    recompute_total(db, bill)
    db.commit()

    for item in created:
        db.refresh(item)
    return created


def delete_bill_item(db: Session, bill: Bill, item_id: uuid.UUID) -> None:
    """Remove an item (and its assignments) from an open bill."""
    item = db.get(BillItem, item_id)
    if item is None or item.bill_id != bill.id:
        raise NotFound("Bill item not found")
    if bill.status != "open":
        raise ValidationError("Items can only be removed from open bills", details=f"Bill status is {bill.status}")

    db.delete(item)
    recompute_total(db, bill)
    db.commit()


def get_participants(db: Session, bill_id: uuid.UUID) -> list[Participant]:
    """Get the participants of a bill in join order."""
    return db.exec(
        select(Participant)
        .where(Participant.bill_id == bill_id)
        .order_by(Participant.position)
    ).all()


def add_participant(db: Session, bill: Bill, participant_data: ParticipantCreate) -> Participant:
    """Join a bill. The first participant to join becomes the bill's default payer."""
    last_position = db.exec(
        select(func.max(Participant.position)).where(Participant.bill_id == bill.id)
    ).one()
    participant = Participant(
        bill_id=bill.id,
        position=0 if last_position is None else last_position + 1,
        **participant_data.model_dump(),
    )
    db.add(participant)
    db.commit()
    db.refresh(participant)
    logger.info(f"[Bill] Participant {participant.id} ({participant.name}) joined bill {bill.id}")
    return participant


def remove_participant(db: Session, bill: Bill, participant_id: uuid.UUID) -> None:
    """Remove a participant and every item assignment they had."""
    participant = db.get(Participant, participant_id)
    if participant is None or participant.bill_id != bill.id:
        raise NotFound("Participant not found")

    assignments = db.exec(
        select(ItemAssignment).where(ItemAssignment.participant_id == participant_id)
    ).all()
    for assignment in assignments:
        db.delete(assignment)

    db.delete(participant)
    db.commit()
    logger.info(
        f"[Bill] Participant {participant_id} left bill {bill.id}; "
        f"{len(assignments)} assignment(s) released"
    )


def get_bill_assignments(db: Session, bill_id: uuid.UUID) -> list[ItemAssignment]:
    """Get all item assignments for a bill (via join with BillItem)."""
    return db.exec(
        select(ItemAssignment)
        .join(BillItem, BillItem.id == ItemAssignment.bill_item_id)
        .where(BillItem.bill_id == bill_id)
    ).all()


def set_item_assignments(
    db: Session,
    bill: Bill,
    item_id: uuid.UUID,
    participant_ids: list[uuid.UUID]
) -> BillItem:
    """Replace the set of participants an item is split across.

    An empty list unassigns the item, which charges it to the default
    participant under an itemized split.
    """
    item = db.get(BillItem, item_id)
    if item is None or item.bill_id != bill.id:
        raise NotFound("Bill item not found")

    wanted = list(dict.fromkeys(participant_ids))
    known = {p.id for p in get_participants(db, bill.id)}
    unknown = [pid for pid in wanted if pid not in known]
    if unknown:
        raise DanglingParticipantReference(
            details="Unknown participant(s): " + ", ".join(str(pid) for pid in unknown)
        )

    current = db.exec(
        select(ItemAssignment).where(ItemAssignment.bill_item_id == item.id)
    ).all()
    for assignment in current:
        if assignment.participant_id not in wanted:
            db.delete(assignment)

    already = {a.participant_id for a in current}
    for participant_id in wanted:
        if participant_id not in already:
            db.add(ItemAssignment(bill_item_id=item.id, participant_id=participant_id))

    db.commit()
    db.refresh(item)
    return item


def load_aggregate(db: Session, bill: Bill) -> BillAggregate:
    """Read the bill, its items, participants and assignments into one aggregate."""
    return build_aggregate(
        bill,
        get_bill_items(db, bill.id),
        get_participants(db, bill.id),
        get_bill_assignments(db, bill.id),
    )
