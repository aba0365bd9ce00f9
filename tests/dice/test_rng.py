"""
Tests for the seedable dice source.
"""

import threading

import pytest
from skirmish.core.constants import SEED_ENV_VAR
from skirmish.core.error_handling import UnseededRollError
from skirmish.dice import D6, D10, D20, clear_seed, get_seed, reset_thread_rng, set_seed
from skirmish.dice import rng


def _reseed(seed):
    clear_seed()
    set_seed(seed)
    reset_thread_rng()


def test_seed_is_set_only_once():
    """Test that a second seed does not replace the first."""
    assert get_seed() == 0
    assert set_seed(1234) is False
    assert get_seed() == 0
    clear_seed()
    assert set_seed(1234) is True
    assert get_seed() == 1234


def test_seed_zero_rolls():
    """Test the faces and total rolled under seed 0."""
    tree = (D6 + D10 - 2 * 10 + D10 * 13).evaluate()
    assert str(tree) == "4 + 7 - 20 + 1 * 13"
    assert tree.result() == 4
    assert [rng.roll_die(20) for _ in range(2)] == [9, 17]


def test_same_seed_same_rolls():
    """Test that reseeding replays the exact same faces."""
    expr = D6 + D10 - 2 * 10 + D10 * 13
    _reseed(0)
    first = expr.evaluate()
    _reseed(0)
    second = expr.evaluate()
    assert str(first) == str(second)
    assert first.result() == second.result()


def test_rolls_stay_within_die_faces():
    """Test that every face lies between 1 and the number of sides."""
    faces = {rng.roll_die(6) for _ in range(300)}
    assert faces == {1, 2, 3, 4, 5, 6}


def test_unseeded_roll_fails_under_pytest(monkeypatch):
    """Test that rolling without a seed in a test raises."""
    monkeypatch.delenv(SEED_ENV_VAR, raising=False)
    clear_seed()
    reset_thread_rng()
    with pytest.raises(UnseededRollError):
        D20.evaluate()


def test_seed_from_environment(monkeypatch):
    """Test that the environment variable seeds the dice."""
    monkeypatch.setenv(SEED_ENV_VAR, "42")
    clear_seed()
    reset_thread_rng()
    D20.evaluate()
    assert get_seed() == 42


def test_threads_draw_the_same_stream():
    """Test that each thread replays the stream of the shared seed."""
    results = {}

    def roll(name):
        results[name] = [rng.roll_die(20) for _ in range(5)]

    threads = [threading.Thread(target=roll, args=(name,)) for name in ("a", "b")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert results["a"] == results["b"]
    assert len(results["a"]) == 5
