"""
Tests for the console and formatting helpers.
"""

import pytest
from skirmish.core.utils import ccapture, get_stat_modifier, prettify_modifier


@pytest.mark.parametrize("score, modifier", [(1, -5), (9, -1), (10, 0), (11, 0), (18, 4), (30, 10)])
def test_stat_modifier(score, modifier):
    """Test the score to modifier formula."""
    assert get_stat_modifier(score) == modifier


@pytest.mark.parametrize("value, text", [(3, "+3"), (-2, "-2"), (0, "±0")])
def test_prettify_modifier(value, text):
    """Test signed modifier formatting."""
    assert prettify_modifier(value) == text


def test_capture_returns_printed_text():
    """Test capturing console output as a string."""
    assert ccapture("Round 1") == "Round 1"
