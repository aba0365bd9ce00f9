"""
Tests for lifespans and lifespan-bound slots.
"""

import weakref

import pytest
from skirmish.core.error_handling import (
    GoneError,
    InvalidInputError,
    require_in_range,
    require_positive_int,
    resolve_ref,
)
from skirmish.core.lifespan import Lifespan, RSlot


class Cause:
    pass


class Timed:
    def __init__(self, lifespan):
        self.lifespan = lifespan

    def is_alive(self):
        return self.lifespan.is_alive()


def test_lifespan_follows_its_cause():
    """Test that a lifespan ends when its cause is collected."""
    cause = Cause()
    lifespan = Lifespan.of(cause)
    assert lifespan.is_alive()
    assert lifespan.cause() is cause
    del cause
    assert not lifespan.is_alive()
    assert lifespan.cause() is None


def test_indefinite_lifespan():
    """Test that an indefinite lifespan never ends."""
    lifespan = Lifespan.indefinite()
    assert lifespan.is_indefinite
    assert lifespan.is_alive()
    assert lifespan.cause() is None


def test_slot_drops_dead_values():
    """Test that a slot never returns a value whose cause is gone."""
    cause = Cause()
    slot = RSlot(Timed(Lifespan.of(cause)))
    assert slot.get() is not None
    del cause
    assert slot.get() is None
    assert slot.is_empty()


def test_slot_replace_returns_previous_live_value():
    """Test that replacing returns only a value that is still alive."""
    first = Timed(Lifespan.indefinite())
    second = Timed(Lifespan.indefinite())
    slot = RSlot(first)
    assert slot.replace(second) is first
    assert slot.take() is second
    assert slot.take() is None


def test_resolve_ref_raises_when_gone():
    """Test that a dead back-reference raises a descriptive error."""
    cause = Cause()
    ref = weakref.ref(cause)
    assert resolve_ref(ref, "cause") is cause
    del cause
    with pytest.raises(GoneError, match="cause"):
        resolve_ref(ref, "cause")


def test_validation_helpers():
    """Test the shared integer validators."""
    assert require_positive_int(3, "count") == 3
    with pytest.raises(InvalidInputError):
        require_positive_int(0, "count")
    with pytest.raises(InvalidInputError):
        require_positive_int(True, "count")
    assert require_in_range(5, 1, 5, "score") == 5
    with pytest.raises(InvalidInputError):
        require_in_range(6, 1, 5, "score")
