"""
Random number module for the dice.

All dice go through one seedable source. The seed is process-wide and may be
set only once; each thread then draws from its own generator built from that
seed, so two runs with the same seed roll the same faces.

Rolling before a seed is set fails loudly under pytest. Outside of tests a
warning is logged and a random seed is chosen.
"""

import os
import random
import threading
from typing import Optional

from catchery import log_warning

from ..core.constants import SEED_ENV_VAR
from ..core.error_handling import UnseededRollError

_seed_lock = threading.Lock()
_seed: Optional[int] = None
# Bumped whenever the seed is cleared, so stale per-thread generators rebuild.
_generation = 0
_local = threading.local()


def set_seed(seed: int) -> bool:
    """
    Sets the process-wide dice seed.

    Args:
        seed (int):
            The seed to use.

    Returns:
        bool:
            True if the seed was set, False if a seed was already in place.

    """
    global _seed
    with _seed_lock:
        if _seed is not None:
            return False
        _seed = int(seed)
        return True


def random_seed() -> bool:
    """Sets a random process-wide seed, with the same rules as ``set_seed``."""
    return set_seed(random.SystemRandom().getrandbits(64))


def get_seed() -> Optional[int]:
    with _seed_lock:
        return _seed


def clear_seed() -> None:
    """
    Forgets the seed and every thread's generator.

    Meant for test harnesses that need a fresh, deterministic stream.
    """
    global _seed, _generation
    with _seed_lock:
        _seed = None
        _generation += 1


def reset_thread_rng() -> None:
    """Restarts the calling thread's stream from the current seed."""
    _local.__dict__.pop("rng", None)


def _seed_from_env() -> Optional[int]:
    raw = os.environ.get(SEED_ENV_VAR)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        log_warning(
            f"Ignoring non-integer {SEED_ENV_VAR}",
            {"value": raw},
        )
        return None


def _resolve_seed() -> int:
    seed = get_seed()
    if seed is not None:
        return seed
    env_seed = _seed_from_env()
    if env_seed is not None:
        set_seed(env_seed)
        return get_seed()  # type: ignore[return-value]
    if "PYTEST_CURRENT_TEST" in os.environ:
        raise UnseededRollError(
            "Dice were rolled in a test without a seed. "
            "Call dice.set_seed(..) or dice.random_seed() first."
        )
    log_warning(
        "Dice seed has not been explicitly set, using a random one",
        {"hint": "call set_seed(..) or random_seed()", "env": SEED_ENV_VAR},
    )
    random_seed()
    return get_seed()  # type: ignore[return-value]


def _thread_rng() -> random.Random:
    rng = getattr(_local, "rng", None)
    if rng is None or getattr(_local, "generation", None) != _generation:
        rng = random.Random(_resolve_seed())
        _local.rng = rng
        _local.generation = _generation
    return rng


def roll_die(sides: int) -> int:
    """
    Rolls a single die.

    Args:
        sides (int):
            Number of faces, at least 1.

    Returns:
        int:
            A face between 1 and ``sides``, inclusive.

    """
    return _thread_rng().randint(1, sides)
