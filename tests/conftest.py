"""
Shared fixtures for the engine tests.
"""

import pytest
from skirmish.core.constants import Ability, Size
from skirmish.dice import clear_seed, reset_thread_rng, set_seed
from skirmish.stats import ChallengeRating, CreatureType, StatBlock


@pytest.fixture(autouse=True)
def seeded_dice():
    """Every test rolls from the same fresh stream."""
    clear_seed()
    set_seed(0)
    reset_thread_rng()
    yield
    clear_seed()
    reset_thread_rng()


@pytest.fixture
def make_stat_block():
    """Builds monster stat blocks with every score at 10 unless given."""

    def make(
        name="Goblin",
        *,
        scores=None,
        max_hp=10,
        ac=12,
        cr="1/4",
        speeds=None,
        proficiency_bonus=None,
        size=Size.SMALL,
    ):
        all_scores = {ability: 10 for ability in Ability}
        all_scores.update(scores or {})
        return StatBlock(
            name,
            CreatureType.monster(ChallengeRating.parse(cr)),
            size,
            all_scores,
            max_hp=max_hp,
            ac=ac,
            speeds=speeds,
            proficiency_bonus=proficiency_bonus,
        )

    return make
