import uuid
from enum import Enum

from klub.core.exceptions import InvalidSplitState, NotFound
from klub.services.aggregate import BillAggregate


class SplitPolicy(str, Enum):
    EQUAL = "equal"
    ITEMIZED = "itemized"


def calculate_equal_split(aggregate: BillAggregate) -> dict[uuid.UUID, float]:
    """Every participant owes total / participant_count."""
    if not aggregate.participants:
        raise InvalidSplitState()

    total = aggregate.computed_total
    share = total / len(aggregate.participants)
    return {p.id: share for p in aggregate.participants}


def calculate_itemized_split(aggregate: BillAggregate) -> dict[uuid.UUID, float]:
    """Each item's line total is divided evenly among its assignees.

    Items nobody is assigned to are charged in full to the default
    participant (the first one to join the bill).
    """
    default = aggregate.default_participant
    if default is None:
        raise InvalidSplitState()

    owed = {p.id: 0.0 for p in aggregate.participants}
    for item in aggregate.items:
        line_total = item.line_total
        if not item.assigned_to:
            owed[default.id] += line_total
            continue

        per_person = line_total / len(item.assigned_to)
        for participant_id in item.assigned_to:
            # KeyError here means the aggregate skipped reference checks
            owed[participant_id] += per_person

    return owed


def calculate_split(aggregate: BillAggregate, policy: SplitPolicy | str) -> dict[uuid.UUID, float]:
    """Partition the bill's computed total among its participants."""
    policy = SplitPolicy(policy)
    if policy is SplitPolicy.EQUAL:
        return calculate_equal_split(aggregate)
    return calculate_itemized_split(aggregate)


def remove_participant(aggregate: BillAggregate, participant_id: uuid.UUID) -> BillAggregate:
    """Return a copy of the aggregate without the participant or its assignments."""
    if participant_id not in aggregate.participant_ids():
        raise NotFound("Participant not found")

    participants = tuple(p for p in aggregate.participants if p.id != participant_id)
    items = tuple(
        item.model_copy(
            update={"assigned_to": tuple(pid for pid in item.assigned_to if pid != participant_id)}
        )
        for item in aggregate.items
    )
    return aggregate.model_copy(update={"participants": participants, "items": items})


def round_shares(aggregate: BillAggregate, owed: dict[uuid.UUID, float]) -> dict[uuid.UUID, float]:
    """Round shares to cents so they still add up to the rounded bill total.

    Cents lost or gained by rounding go to the default participant.
    """
    default = aggregate.default_participant
    if default is None:
        raise InvalidSplitState()

    total_cents = round(aggregate.computed_total * 100)
    cents = {pid: round(amount * 100) for pid, amount in owed.items()}
    cents[default.id] += total_cents - sum(cents.values())
    return {pid: c / 100 for pid, c in cents.items()}
