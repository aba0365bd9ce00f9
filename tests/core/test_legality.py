"""
Tests for legal and illegal action outcomes.
"""

import pytest
from skirmish.core.error_handling import SkirmishError
from skirmish.core.legality import (
    NO_ACTIONS_LEFT_IN_TURN,
    OUT_OF_BOUNDS,
    SPACE_OCCUPIED,
    Illegal,
    Legal,
    Reason,
    legal_if,
)


def test_legal_carries_its_value():
    """Test that a legal outcome unwraps to its value."""
    outcome = Legal(42)
    assert outcome.is_legal()
    assert not outcome.is_illegal()
    assert outcome.unwrap() == 42
    assert outcome == Legal(42)
    assert outcome != Legal(41)


def test_illegal_carries_its_reason():
    """Test that an illegal outcome exposes a stable reason id."""
    outcome = Illegal(OUT_OF_BOUNDS)
    assert outcome.is_illegal()
    assert not outcome.is_legal()
    assert outcome.reason.id == "OUT_OF_BOUNDS"
    assert outcome == Illegal(Reason(id="OUT_OF_BOUNDS"))
    assert outcome != Illegal(SPACE_OCCUPIED)
    assert repr(outcome) == "Illegal(OUT_OF_BOUNDS)"


def test_unwrap_illegal_raises():
    """Test that unwrapping an illegal outcome raises."""
    with pytest.raises(SkirmishError, match="NO_ACTIONS_LEFT_IN_TURN"):
        Illegal(NO_ACTIONS_LEFT_IN_TURN).unwrap()


def test_legal_if():
    """Test turning a condition into an outcome."""
    assert legal_if(True, SPACE_OCCUPIED) == Legal(None)
    assert legal_if(False, SPACE_OCCUPIED) == Illegal(SPACE_OCCUPIED)


def test_outcomes_are_hashable():
    """Test that equal outcomes hash alike, legal or not."""
    outcomes = {Legal(None), Legal(None), Legal(3), Illegal(SPACE_OCCUPIED), Illegal(SPACE_OCCUPIED)}
    assert outcomes == {Legal(None), Legal(3), Illegal(SPACE_OCCUPIED)}
    assert hash(Legal(3)) == hash(Legal(3))


def test_reason_requires_an_id():
    """Test that an empty reason id is rejected."""
    with pytest.raises(ValueError):
        Reason(id="")
