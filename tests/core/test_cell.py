"""
Tests for derived-value cells and their effect parts.
"""

import pytest
from skirmish.core.cell import AnonymousPart, DerivedValueCell, PartResult
from skirmish.core.error_handling import GoneError


class Owner:
    def __init__(self, level=1):
        self.level = level


@pytest.fixture
def owner():
    return Owner(level=3)


def test_constant_base_without_parts(owner):
    """Test that a cell without parts returns its base."""
    cell = DerivedValueCell(owner, 7, name="constant")
    assert cell.get() == 7
    assert len(cell) == 0


def test_derived_base_reads_owner(owner):
    """Test that a callable base is recomputed from the owner on every read."""
    cell = DerivedValueCell(owner, lambda o: o.level * 2)
    assert cell.get() == 6
    owner.level = 5
    assert cell.get() == 10


def test_parts_fold_in_insertion_order(owner):
    """Test that parts apply in the order they were inserted."""
    cell = DerivedValueCell(owner, 2)
    cell.insert(AnonymousPart(lambda o, v: v + 1, "plus one"))
    cell.insert(AnonymousPart(lambda o, v: v * 10, "times ten"))
    assert cell.get() == 30

    reversed_cell = DerivedValueCell(owner, 2)
    reversed_cell.insert(AnonymousPart(lambda o, v: v * 10, "times ten"))
    reversed_cell.insert(AnonymousPart(lambda o, v: v + 1, "plus one"))
    assert reversed_cell.get() == 21


def test_self_deleting_part_applies_once(owner):
    """Test that a part asking for removal still applies on that read."""
    cell = DerivedValueCell(owner, 1)
    cell.insert(AnonymousPart(lambda o, v: PartResult(v + 100, delete_self=True)))
    assert cell.get() == 101
    assert cell.get() == 1
    assert len(cell) == 0


def test_value_is_never_cached(owner):
    """Test that the base rule runs again on each read."""
    calls = []

    def base(o):
        calls.append(o)
        return len(calls)

    cell = DerivedValueCell(owner, base)
    assert cell.get() == 1
    assert cell.get() == 2
    assert cell.base() == 3


def test_remove_and_clear(owner):
    """Test removing a specific part and clearing the stack."""
    cell = DerivedValueCell(owner, 0)
    first = cell.insert(AnonymousPart(lambda o, v: v + 1))
    cell.insert(AnonymousPart(lambda o, v: v + 2))
    assert cell.remove(first) is True
    assert cell.remove(first) is False
    assert cell.get() == 2
    cell.clear()
    assert cell.get() == 0
    assert cell.parts() == []


def test_part_receives_owner(owner):
    """Test that parts are computed against the owning entity."""
    cell = DerivedValueCell(owner, 0)
    cell.insert(AnonymousPart(lambda o, v: v + o.level))
    assert cell.get() == 3


def test_gone_owner_raises():
    """Test that reading a cell whose owner was collected fails loudly."""
    owner = Owner()
    cell = DerivedValueCell(owner, lambda o: o.level)
    del owner
    with pytest.raises(GoneError):
        cell.get()
