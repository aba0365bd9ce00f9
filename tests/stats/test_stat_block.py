"""
Tests for stat blocks and the cells they expose.
"""

import pytest
from skirmish.core.cell import AnonymousPart
from skirmish.core.constants import Ability, Size, Skill, SpeedType
from skirmish.core.error_handling import InvalidInputError, UnsupportedMovementError
from skirmish.core.lifespan import Lifespan
from skirmish.dice import D20, Add, Advantage, Constant, Die
from skirmish.stats import (
    AbilityScore,
    AdvantagePart,
    Bonus,
    ChallengeRating,
    CreatureType,
    DisadvantagePart,
    Override,
    Proficiency,
    StatBlock,
)
from skirmish.stats.ac import ACPart


class Blessing:
    pass


@pytest.fixture
def scout(make_stat_block):
    return make_stat_block("Scout", scores={Ability.DEXTERITY: 14}, cr=5)


def test_missing_score_is_rejected():
    """Test that all six ability scores are required."""
    with pytest.raises(InvalidInputError, match="CHARISMA"):
        StatBlock(
            "Incomplete",
            CreatureType.monster(ChallengeRating.parse(1)),
            Size.MEDIUM,
            {ability: 10 for ability in Ability if ability is not Ability.CHARISMA},
            max_hp=5,
        )


def test_player_needs_a_proficiency_bonus():
    """Test that a player without a proficiency bonus is rejected."""
    scores = {ability: AbilityScore(10) for ability in Ability}
    with pytest.raises(InvalidInputError):
        StatBlock("Hero", CreatureType.player(), Size.MEDIUM, scores, max_hp=12)
    hero = StatBlock(
        "Hero", CreatureType.player(), Size.MEDIUM, scores, max_hp=12, proficiency_bonus=2
    )
    assert hero.proficiency_bonus.get() == Constant(2)
    assert hero.creature_type.is_player()


def test_monster_proficiency_follows_cr(scout):
    """Test that a monster derives its proficiency bonus from its CR."""
    assert scout.proficiency_bonus.get() == Constant(3)
    assert scout.creature_type.xp() == 1800


def test_modifiers_follow_scores(scout):
    """Test that modifiers are recomputed when a score changes."""
    assert scout.score(Ability.DEXTERITY) == 14
    assert scout.modifier(Ability.DEXTERITY) == Constant(2)
    part = scout.scores[Ability.DEXTERITY].insert(Override(18))
    assert scout.modifier(Ability.DEXTERITY) == Constant(4)
    assert scout.skill(Skill.ACROBATICS) == Constant(4)
    scout.scores[Ability.DEXTERITY].remove(part)
    assert scout.modifier(Ability.DEXTERITY) == Constant(2)


def test_skill_parts(scout):
    """Test proficiency and listed bonuses on skills."""
    assert scout.skill(Skill.STEALTH) == Constant(2)
    scout.skills[Skill.STEALTH].insert(Proficiency())
    assert scout.skill(Skill.STEALTH).result() == 5
    scout.skills[Skill.PERCEPTION].insert(Override(6))
    assert scout.skill(Skill.PERCEPTION) == Constant(6)


def test_limited_bonus_expires_after_its_uses(scout):
    """Test that a bonus with limited uses disappears once spent."""
    cell = scout.skills[Skill.ATHLETICS]
    cell.insert(Bonus(Constant(2), uses=2))
    assert cell.get().result() == 2
    assert cell.get().result() == 2
    assert cell.get().result() == 0
    assert len(cell) == 0


def test_advantage_lasts_while_its_cause_lives(scout):
    """Test that advantage from a cause ends with it."""
    blessing = Blessing()
    scout.saves[Ability.DEXTERITY].insert(AdvantagePart(Lifespan.of(blessing)))
    assert str(scout.saves[Ability.DEXTERITY].get()) == "Adv(d20) + 2"
    del blessing
    assert str(scout.saves[Ability.DEXTERITY].get()) == "d20 + 2"


def test_advantage_and_disadvantage_cancel(scout):
    """Test that advantage and disadvantage together leave a plain d20."""
    cell = scout.saves[Ability.DEXTERITY]
    cell.insert(AdvantagePart())
    cell.insert(DisadvantagePart())
    cell.insert(AdvantagePart())
    assert cell.get() == Add(Die(1, 20, both_adv_dis=True), Constant(2))


def test_armor_class(scout):
    """Test hitting against the armor class."""
    assert scout.ac.value() == 12
    assert scout.ac.does_hit(12)
    assert not scout.ac.does_hit(11)
    scout.ac.insert(AnonymousPart(lambda owner, base: ACPart(base.ac + 2), "shield"))
    assert scout.ac.value() == 14


def test_speeds(make_stat_block):
    """Test movement speeds by mode."""
    walker = make_stat_block("Walker")
    assert walker.speeds.of_type(SpeedType.WALKING) == 30
    assert not walker.speeds.has(SpeedType.FLYING)
    assert str(walker.speeds) == "30 ft."

    flier = make_stat_block("Flier", speeds={SpeedType.WALKING: 20, "flying": 60})
    assert flier.speeds.of_type(SpeedType.FLYING) == 60
    assert str(flier.speeds) == "20 ft., fly 60 ft."
    with pytest.raises(UnsupportedMovementError):
        flier.speeds.of_type(SpeedType.CRAWLING)


def test_crawling_speed_rejected(make_stat_block):
    """Test that crawling cannot be given a speed of its own."""
    with pytest.raises(InvalidInputError):
        make_stat_block("Worm", speeds={SpeedType.CRAWLING: 10})


def test_initiative_adds_dexterity(scout, mocker):
    """Test rolling initiative."""
    mocker.patch("skirmish.dice.rng.roll_die", return_value=15)
    assert scout.initiative.get() == Add(D20, Constant(2))
    assert scout.roll_initiative().result() == 17


def test_advantage_on_initiative(scout, mocker):
    """Test that initiative cells take parts like any other stat."""
    scout.initiative.insert(AdvantagePart())
    mocker.patch("skirmish.dice.rng.roll_die", side_effect=[4, 11])
    assert scout.initiative.get() == Add(Advantage(20), Constant(2))
    assert scout.roll_initiative().result() == 13
