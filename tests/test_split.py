import math
import uuid

import pytest

from klub.core.exceptions import InvalidSplitState, NotFound
from klub.services.aggregate import BillAggregate, ItemLine, ParticipantRef
from klub.services.split import SplitPolicy, calculate_split, remove_participant, round_shares

A = ParticipantRef(id=uuid.uuid4(), name="Ana")
B = ParticipantRef(id=uuid.uuid4(), name="Beto")
C = ParticipantRef(id=uuid.uuid4(), name="Caro")


def _item(price, quantity=1, assigned_to=()):
    return ItemLine(id=uuid.uuid4(), name="item", price=price, quantity=quantity, assigned_to=tuple(p.id for p in assigned_to))


def _aggregate(items, participants):
    return BillAggregate(
        bill_id=uuid.uuid4(),
        total_amount=sum(i.line_total for i in items),
        items=tuple(items),
        participants=tuple(participants),
    )


def test_equal_split_table_scenario():
    aggregate = _aggregate([_item(12.0), _item(4.0, quantity=2)], [A, B])
    owed = calculate_split(aggregate, SplitPolicy.EQUAL)
    assert aggregate.computed_total == 20.0
    assert owed == {A.id: 10.0, B.id: 10.0}


@pytest.mark.parametrize("count", [1, 2, 3, 7])
def test_equal_split_sums_to_total(count):
    participants = [ParticipantRef(id=uuid.uuid4(), name=f"p{i}") for i in range(count)]
    aggregate = _aggregate([_item(10.0), _item(3.33, quantity=3)], participants)
    owed = calculate_split(aggregate, "equal")

    assert math.isclose(sum(owed.values()), aggregate.computed_total)
    for amount in owed.values():
        assert math.isclose(amount, aggregate.computed_total / count)


def test_unassigned_item_goes_to_default_participant():
    aggregate = _aggregate([_item(10.0)], [A, B])
    owed = calculate_split(aggregate, SplitPolicy.ITEMIZED)
    assert owed == {A.id: 10.0, B.id: 0.0}


def test_itemized_split_divides_among_assignees():
    items = [
        _item(12.0, assigned_to=[B]),
        _item(4.0, quantity=2, assigned_to=[A, B]),
        _item(9.0, assigned_to=[A, B, C]),
        _item(5.0),
    ]
    aggregate = _aggregate(items, [A, B, C])
    owed = calculate_split(aggregate, SplitPolicy.ITEMIZED)

    assert math.isclose(owed[A.id], 4.0 + 3.0 + 5.0)
    assert math.isclose(owed[B.id], 12.0 + 4.0 + 3.0)
    assert math.isclose(owed[C.id], 3.0)
    assert math.isclose(sum(owed.values()), aggregate.computed_total)


def test_split_is_idempotent():
    aggregate = _aggregate([_item(7.5, assigned_to=[B]), _item(2.25, quantity=4)], [A, B, C])
    for policy in SplitPolicy:
        assert calculate_split(aggregate, policy) == calculate_split(aggregate, policy)


def test_split_without_participants_fails():
    aggregate = _aggregate([_item(10.0)], [])
    with pytest.raises(InvalidSplitState):
        calculate_split(aggregate, SplitPolicy.EQUAL)
    with pytest.raises(InvalidSplitState):
        calculate_split(aggregate, SplitPolicy.ITEMIZED)


def test_unknown_policy_is_rejected():
    aggregate = _aggregate([_item(10.0)], [A])
    with pytest.raises(ValueError):
        calculate_split(aggregate, "by_weight")


def test_remove_participant_reassigns_their_items():
    shared = _item(6.0, assigned_to=[B, C])
    only_b = _item(8.0, assigned_to=[B])
    aggregate = _aggregate([shared, only_b], [A, B, C])

    reduced = remove_participant(aggregate, B.id)
    owed = calculate_split(reduced, SplitPolicy.ITEMIZED)

    assert B.id not in owed
    assert owed[C.id] == 6.0
    assert owed[A.id] == 8.0
    assert all(B.id not in item.assigned_to for item in reduced.items)
    assert math.isclose(sum(owed.values()), aggregate.computed_total)


def test_removing_default_participant_promotes_next():
    aggregate = _aggregate([_item(10.0)], [A, B])
    reduced = remove_participant(aggregate, A.id)
    assert reduced.default_participant == B
    assert calculate_split(reduced, SplitPolicy.ITEMIZED) == {B.id: 10.0}


def test_remove_unknown_participant():
    aggregate = _aggregate([_item(10.0)], [A])
    with pytest.raises(NotFound):
        remove_participant(aggregate, uuid.uuid4())


def test_rounded_shares_give_leftover_cents_to_default_participant():
    aggregate = _aggregate([_item(10.0)], [A, B, C])
    shares = round_shares(aggregate, calculate_split(aggregate, SplitPolicy.EQUAL))
    assert shares == {A.id: 3.34, B.id: 3.33, C.id: 3.33}

    aggregate = _aggregate([_item(20.0)], [A, B, C])
    shares = round_shares(aggregate, calculate_split(aggregate, SplitPolicy.EQUAL))
    assert shares == {A.id: 6.66, B.id: 6.67, C.id: 6.67}


def test_rounded_shares_without_participants_fails():
    aggregate = _aggregate([_item(10.0)], [])
    with pytest.raises(InvalidSplitState):
        round_shares(aggregate, {})
