"""
In-memory view of a bill joined with its items, participants and item
assignments. The split calculator and reconciliation operate on this shape
rather than on ORM rows.
"""
import uuid
from collections import defaultdict
from typing import Iterable

from pydantic import BaseModel, ConfigDict

from klub.core.exceptions import DanglingParticipantReference


class ParticipantRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    name: str
    email: str | None = None


class ItemLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    name: str
    price: float
    quantity: int = 1
    assigned_to: tuple[uuid.UUID, ...] = ()

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class BillAggregate(BaseModel):
    model_config = ConfigDict(frozen=True)

    bill_id: uuid.UUID
    total_amount: float
    status: str = "open"
    items: tuple[ItemLine, ...] = ()
    participants: tuple[ParticipantRef, ...] = ()

    @property
    def computed_total(self) -> float:
        return sum(item.line_total for item in self.items)

    @property
    def default_participant(self) -> ParticipantRef | None:
        """Participant that absorbs unassigned items (the bill owner)."""
        return self.participants[0] if self.participants else None

    def participant_ids(self) -> set[uuid.UUID]:
        return {p.id for p in self.participants}


def check_references(items: Iterable[ItemLine], participant_ids: set[uuid.UUID]) -> None:
    """Raise DanglingParticipantReference if any item points outside participant_ids."""
    for item in items:
        unknown = [pid for pid in item.assigned_to if pid not in participant_ids]
        if unknown:
            raise DanglingParticipantReference(
                details=f"Item {item.id} references unknown participant(s): "
                        + ", ".join(str(pid) for pid in unknown)
            )


def build_aggregate(bill, items, participants, assignments) -> BillAggregate:
    """Assemble a BillAggregate from storage rows.

    Args:
        bill: Bill row
        items: BillItem rows belonging to the bill
        participants: Participant rows belonging to the bill
        assignments: ItemAssignment rows for the bill's items

    Returns:
        A consistent, immutable aggregate. Participants are ordered by join
        position so the first one is the default participant.
    """
    assigned: dict[uuid.UUID, list[uuid.UUID]] = defaultdict(list)
    for assignment in assignments:
        assigned[assignment.bill_item_id].append(assignment.participant_id)

    ordered = sorted(participants, key=lambda p: p.position)
    participant_refs = tuple(
        ParticipantRef(id=p.id, name=p.name, email=p.email) for p in ordered
    )
    item_lines = tuple(
        ItemLine(
            id=item.id,
            name=item.name,
            price=item.price,
            quantity=item.quantity,
            assigned_to=tuple(assigned.get(item.id, ())),
        )
        for item in items
    )

    check_references(item_lines, {p.id for p in participant_refs})

    return BillAggregate(
        bill_id=bill.id,
        total_amount=bill.total_amount,
        status=bill.status,
        items=item_lines,
        participants=participant_refs,
    )
