import uuid
from typing import Optional
from fastapi import APIRouter, Query, Response

from klub.api.deps import SessionDep, get_bill_or_404, get_restaurant_or_404
from klub.crud import bills as crud_bills
from klub.crud import payments as crud_payments
from klub.schemas.bills import (
    AssignmentUpdate,
    BalanceResponse,
    BillCreate,
    BillDetailResponse,
    BillItemResponse,
    BillItemsCreate,
    BillResponse,
    BillStatus,
    BillUpdate,
    ParticipantCreate,
    ParticipantResponse,
    SplitResponse,
    SplitShare,
)
from klub.services.split import SplitPolicy, calculate_split, round_shares

router = APIRouter(prefix="/bill", tags=["bills"])


@router.get("", response_model=list[BillResponse])
def list_bills(
    db: SessionDep,
    restaurant_id: Optional[uuid.UUID] = Query(None, description="Filter by restaurant"),
    table_number: Optional[int] = Query(None, gt=0, description="Filter by table"),
    status: Optional[BillStatus] = Query(None, description="Filter by status"),
):
    """List bills with optional filters."""
    return crud_bills.list_bills(db, restaurant_id=restaurant_id, table_number=table_number, status=status)


@router.get("/{bill_id}", response_model=BillDetailResponse)
def get_bill(bill_id: uuid.UUID, db: SessionDep):
    """Get a bill with its items and participants."""
    return get_bill_or_404(db, bill_id)


@router.post("", response_model=BillDetailResponse, status_code=201)
def create_bill(bill_data: BillCreate, db: SessionDep):
    """Open a bill for a restaurant table. The total is computed from the items."""
    get_restaurant_or_404(db, bill_data.restaurant_id)
    return crud_bills.create_bill(db, bill_data)


@router.put("/{bill_id}", response_model=BillResponse)
def update_bill(bill_id: uuid.UUID, bill_data: BillUpdate, db: SessionDep):
    """Update a bill's table or override its status."""
    bill = get_bill_or_404(db, bill_id)
    return crud_bills.update_bill(db, bill, bill_data)


@router.delete("/{bill_id}", status_code=204)
def delete_bill(bill_id: uuid.UUID, db: SessionDep):
    """Delete a bill and everything attached to it."""
    bill = get_bill_or_404(db, bill_id)
    crud_bills.delete_bill(db, bill)
    return Response(status_code=204)


@router.get("/{bill_id}/items", response_model=list[BillItemResponse])
def get_bill_items(bill_id: uuid.UUID, db: SessionDep):
    """Get the items of a bill."""
    get_bill_or_404(db, bill_id)
    return crud_bills.get_bill_items(db, bill_id)


@router.post("/{bill_id}/items", response_model=list[BillItemResponse], status_code=201)
def add_bill_items(bill_id: uuid.UUID, items_data: BillItemsCreate, db: SessionDep):
    """Add items to a bill and recompute its total."""
    bill = get_bill_or_404(db, bill_id)
    return crud_bills.add_bill_items(db, bill, items_data.items)


@router.delete("/{bill_id}/items/{item_id}", status_code=204)
def delete_bill_item(bill_id: uuid.UUID, item_id: uuid.UUID, db: SessionDep):
    """Remove an item from a bill and recompute its total."""
    bill = get_bill_or_404(db, bill_id)
    crud_bills.delete_bill_item(db, bill, item_id)
    return Response(status_code=204)


@router.put("/{bill_id}/items/{item_id}/assignments", response_model=BillItemResponse)
def set_item_assignments(
    bill_id: uuid.UUID,
    item_id: uuid.UUID,
    assignment_data: AssignmentUpdate,
    db: SessionDep
):
    """Replace the participants an item is split across."""
    bill = get_bill_or_404(db, bill_id)
    return crud_bills.set_item_assignments(db, bill, item_id, assignment_data.participant_ids)


@router.get("/{bill_id}/participants", response_model=list[ParticipantResponse])
def get_participants(bill_id: uuid.UUID, db: SessionDep):
    """Get the participants of a bill in join order."""
    get_bill_or_404(db, bill_id)
    return crud_bills.get_participants(db, bill_id)


@router.post("/{bill_id}/participants", response_model=ParticipantResponse, status_code=201)
def join_bill(bill_id: uuid.UUID, participant_data: ParticipantCreate, db: SessionDep):
    """Join a bill through its invitation link."""
    bill = get_bill_or_404(db, bill_id)
    return crud_bills.add_participant(db, bill, participant_data)


@router.delete("/{bill_id}/participants/{participant_id}", status_code=204)
def remove_participant(bill_id: uuid.UUID, participant_id: uuid.UUID, db: SessionDep):
    """Remove a participant and release their item assignments."""
    bill = get_bill_or_404(db, bill_id)
    crud_bills.remove_participant(db, bill, participant_id)
    return Response(status_code=204)


@router.get("/{bill_id}/split", response_model=SplitResponse)
def get_split(
    bill_id: uuid.UUID,
    db: SessionDep,
    policy: SplitPolicy = Query(SplitPolicy.EQUAL, description="equal or itemized"),
):
    """Compute what each participant owes under a split policy."""
    bill = get_bill_or_404(db, bill_id)
    aggregate = crud_bills.load_aggregate(db, bill)
    owed = round_shares(aggregate, calculate_split(aggregate, policy))

    return SplitResponse(
        bill_id=bill.id,
        policy=policy,
        total_amount=round(aggregate.computed_total, 2),
        shares=[
            SplitShare(participant_id=p.id, name=p.name, amount=owed[p.id])
            for p in aggregate.participants
        ],
    )


@router.get("/{bill_id}/balance", response_model=BalanceResponse)
def get_balance(bill_id: uuid.UUID, db: SessionDep):
    """Paid and remaining amounts, with the amount a payment form should suggest."""
    bill = get_bill_or_404(db, bill_id)
    balance = crud_payments.get_bill_balance(db, bill)

    return BalanceResponse(
        bill_id=bill.id,
        total_amount=balance.total_amount,
        paid_amount=balance.paid_amount,
        remaining_amount=balance.remaining_amount,
        suggested_payment=round(balance.remaining_amount, 2),
        status=balance.status,
    )
