import uuid
from types import SimpleNamespace

import pytest

from klub.core.exceptions import DanglingParticipantReference
from klub.services.aggregate import build_aggregate


def _bill(total=20.0):
    return SimpleNamespace(id=uuid.uuid4(), total_amount=total, status="open")


def _participant(name, position):
    return SimpleNamespace(id=uuid.uuid4(), name=name, email=None, position=position)


def _item(price, quantity=1):
    return SimpleNamespace(id=uuid.uuid4(), name="item", price=price, quantity=quantity)


def test_build_aggregate_orders_participants_by_position():
    late = _participant("Late", 3)
    first = _participant("First", 0)
    aggregate = build_aggregate(_bill(), [], [late, first], [])

    assert [p.name for p in aggregate.participants] == ["First", "Late"]
    assert aggregate.default_participant.id == first.id


def test_build_aggregate_groups_assignments():
    ana = _participant("Ana", 0)
    beto = _participant("Beto", 1)
    burger = _item(12.0)
    fries = _item(4.0, quantity=2)
    assignments = [
        SimpleNamespace(bill_item_id=fries.id, participant_id=ana.id),
        SimpleNamespace(bill_item_id=fries.id, participant_id=beto.id),
    ]

    aggregate = build_aggregate(_bill(), [burger, fries], [ana, beto], assignments)
    lines = {line.id: line for line in aggregate.items}

    assert lines[burger.id].assigned_to == ()
    assert set(lines[fries.id].assigned_to) == {ana.id, beto.id}
    assert aggregate.computed_total == 20.0


def test_build_aggregate_rejects_dangling_assignment():
    ana = _participant("Ana", 0)
    burger = _item(12.0)
    assignments = [SimpleNamespace(bill_item_id=burger.id, participant_id=uuid.uuid4())]

    with pytest.raises(DanglingParticipantReference):
        build_aggregate(_bill(), [burger], [ana], assignments)
