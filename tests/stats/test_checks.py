"""
Tests for ability checks, skill checks and saving throws.
"""

import pytest
from skirmish.core.constants import Ability, Skill
from skirmish.stats import DC, AdvantagePart, Check, Proficiency, RollOutcome, Save


@pytest.fixture
def rogue(make_stat_block):
    return make_stat_block(
        "Rogue",
        scores={Ability.DEXTERITY: 14, Ability.WISDOM: 8},
        proficiency_bonus=3,
    )


def test_active_check_rolls_a_d20(rogue, mocker):
    """Test that an active check adds the modifier to a d20."""
    mocker.patch("skirmish.dice.rng.roll_die", return_value=12)
    outcome = rogue.check(Check.active(DC(14), Ability.DEXTERITY))
    assert outcome.total == 14
    assert outcome.is_pass()
    assert outcome.roll_outcome is RollOutcome.PASS


def test_check_below_dc_fails(rogue, mocker):
    """Test that a total under the DC fails."""
    mocker.patch("skirmish.dice.rng.roll_die", return_value=12)
    outcome = rogue.check(Check.active(DC.MEDIUM, Ability.DEXTERITY))
    assert outcome.is_fail()


def test_passive_check_does_not_roll(rogue, mocker):
    """Test that a passive check is 10 plus the modifier."""
    roll = mocker.patch("skirmish.dice.rng.roll_die")
    outcome = rogue.check(Check.passive_check(DC.EASY, Skill.PERCEPTION))
    assert outcome.total == 9
    assert outcome.is_fail()
    roll.assert_not_called()


def test_skill_check_with_proficiency(rogue, mocker):
    """Test that proficiency adds the proficiency bonus to a skill."""
    rogue.skills[Skill.STEALTH].insert(Proficiency())
    mocker.patch("skirmish.dice.rng.roll_die", return_value=10)
    outcome = rogue.check(Check.active(DC.MEDIUM, Skill.STEALTH))
    assert outcome.total == 15
    assert outcome.is_pass()


def test_unknown_dc_is_indeterminate(rogue, mocker):
    """Test that a check against an unknown DC has no verdict."""
    mocker.patch("skirmish.dice.rng.roll_die", return_value=20)
    outcome = rogue.check(Check.active(DC.UNKNOWN, Ability.STRENGTH))
    assert outcome.roll_outcome is RollOutcome.INDETERMINATE
    assert not outcome.is_pass()
    assert not outcome.is_fail()


def test_save_uses_the_save_cell(rogue, mocker):
    """Test that advantage on a saving throw rolls twice and keeps the best."""
    rogue.saves[Ability.WISDOM].insert(AdvantagePart())
    mocker.patch("skirmish.dice.rng.roll_die", side_effect=[3, 17])
    outcome = rogue.save(Save(DC.MEDIUM, Ability.WISDOM))
    assert outcome.total == 16
    assert outcome.is_pass()


def test_dc_presets():
    """Test the typical difficulty classes."""
    assert DC.VERY_EASY.value == 5
    assert DC.MEDIUM == DC(15)
    assert DC.IMPOSSIBLE.value == 30
    assert repr(DC.HARD) == "DC(20)"
    assert repr(DC.UNKNOWN) == "DC(Unknown)"
    assert not DC.UNKNOWN.is_known()
