"""
Tests for melee attacks and the actions a turn allows.
"""

import pytest
from pydantic import ValidationError
from skirmish.combat import (
    AttackRoll,
    Combat,
    Hit,
    MeleeAttackAction,
    NoHit,
    Point,
    Range,
    SimpleArena,
    Targeting,
    make_attack,
)
from skirmish.core.constants import DamageType
from skirmish.core.legality import NO_ACTIONS_LEFT_IN_TURN, NO_ONE_TO_TARGET, Illegal
from skirmish.dice import Add, Constant, Criticality, Die, EvalAdd, Modifier, Roll
from skirmish.stats import DamageResult, Resistance

EAST = Point(5, 0)


@pytest.fixture
def bite():
    return MeleeAttackAction(name="Bite", to_hit=4, damage=[("1d6 + 2", "piercing")])


@pytest.fixture
def combat():
    return Combat(SimpleArena.factory(50, 50))


@pytest.fixture
def wolf(combat, make_stat_block):
    return combat.add_combatant("Wolf", make_stat_block("Wolf"), Point(10, 10), 20)


@pytest.fixture
def bandit(combat, make_stat_block):
    stats = make_stat_block("Bandit", max_hp=20, ac=12)
    return combat.add_combatant("Bandit", stats, Point(15, 10), 10)


@pytest.fixture
def turn(combat, wolf, bandit):
    combat.step()
    return combat.current_turn()


def test_attack_definition(bite):
    """Test the conversions applied to an attack definition."""
    assert bite.to_hit == Constant(4)
    assert bite.to_hit_expr() == Add(Die(1, 20), Constant(4))
    assert bite.range == Range.reach()
    assert bite.targeting is Targeting.SINGLE
    assert bite.damage_parts() == [(Add(Die(1, 6), Constant(2)), DamageType.PIERCING)]
    assert str(bite) == (
        "Bite. Melee Weapon Attack: d20 + 4 to hit, Reach 5ft., one target. "
        "Hit: d6 + 2 Piercing damage."
    )


def test_attack_ranges():
    """Test reading and formatting attack ranges."""
    assert str(Range.parse("reach")) == "Reach 5ft."
    assert str(Range.parse(30)) == "range 30 ft."
    assert str(Range.parse([20, 60])) == "range 20/60 ft."
    assert Targeting.parse("one") is Targeting.SINGLE
    with pytest.raises(ValueError):
        Range.parse("far")


@pytest.mark.parametrize(
    "fields",
    [
        {"name": "Bite", "damage": []},
        {"name": "", "damage": [("1", "piercing")]},
        {"name": "Bite", "damage": [("1", "plasma")]},
        {"name": "Bite", "damage": [("1d", "piercing")]},
        {"name": "Bite", "targeting": "everyone", "damage": [("1", "piercing")]},
    ],
)
def test_invalid_attack_definitions(fields):
    """Test that malformed attacks are rejected."""
    with pytest.raises(ValidationError):
        MeleeAttackAction(**fields)


def test_hit_deals_damage(wolf, bandit, bite, mocker):
    """Test that meeting the armor class deals the rolled damage."""
    mocker.patch("skirmish.dice.rng.roll_die", side_effect=[8, 3])
    result = make_attack(bite, wolf, EAST).unwrap()
    assert isinstance(result, Hit)
    assert result.is_hit()
    assert result.to_hit.total() == 12
    assert result.taken.total() == 5
    assert result.target() is bandit
    assert result.attacker() is wolf
    assert bandit.stats.hp() == 15


def test_miss_deals_nothing(wolf, bandit, bite, mocker):
    """Test that a roll under the armor class misses."""
    mocker.patch("skirmish.dice.rng.roll_die", side_effect=[7])
    result = make_attack(bite, wolf, EAST).unwrap()
    assert isinstance(result, NoHit)
    assert not result.is_hit()
    assert bandit.stats.hp() == 20


def test_natural_one_always_misses(wolf, bandit, mocker):
    """Test that a natural 1 misses whatever the bonus."""
    sure_thing = MeleeAttackAction(name="Claw", to_hit=30, damage=[(5, "slashing")])
    mocker.patch("skirmish.dice.rng.roll_die", side_effect=[1])
    result = make_attack(sure_thing, wolf, EAST).unwrap()
    assert isinstance(result, NoHit)
    assert result.to_hit.criticality() is Criticality.FAILURE


def test_bonus_die_showing_one_still_hits(wolf, bandit, mocker):
    """Test that only the d20 decides a critical miss, not a bonus d4."""
    blessed = MeleeAttackAction(name="Bite", to_hit="4 + d4", damage=[("1d6 + 2", "piercing")])
    mocker.patch("skirmish.dice.rng.roll_die", side_effect=[15, 1, 3])
    result = make_attack(blessed, wolf, EAST).unwrap()
    assert isinstance(result, Hit)
    assert result.to_hit.criticality() is None
    assert result.to_hit.total() == 20
    assert bandit.stats.hp() == 15


def test_critical_hit_doubles_dice_only(wolf, bandit, mocker):
    """Test that a natural 20 doubles damage dice but not modifiers."""
    maul = MeleeAttackAction(name="Maul", damage=[("2d6 + 2", "bludgeoning")])
    roll = mocker.patch("skirmish.dice.rng.roll_die", side_effect=[20, 3, 4, 5, 6])
    result = make_attack(maul, wolf, EAST).unwrap()
    assert result.to_hit.criticality() is Criticality.SUCCESS
    assert result.taken.total() == 20
    assert roll.call_count == 5
    assert bandit.stats.hp() == 0
    assert result.taken.result is DamageResult.UNCONSCIOUS


def test_damage_goes_through_resistance(wolf, bandit, bite, mocker):
    """Test that the target's resistances reduce the damage taken."""
    bandit.stats.damage_effectors.add_effect(DamageType.PIERCING, Resistance())
    mocker.patch("skirmish.dice.rng.roll_die", side_effect=[15, 3])
    result = make_attack(bite, wolf, EAST).unwrap()
    assert result.damage.total() == 5
    assert result.taken.total() == 2
    assert bandit.stats.hp() == 18


def test_damage_remembers_the_attacker(wolf, bandit, bite, mocker):
    """Test that damage parts point back at whoever dealt them."""
    mocker.patch("skirmish.dice.rng.roll_die", side_effect=[15, 3])
    result = make_attack(bite, wolf, EAST).unwrap()
    assert result.damage.parts[0].cause.actor.resolve() is wolf


def test_empty_square_has_no_target(wolf, bite, mocker):
    """Test attacking a square with no one in it."""
    roll = mocker.patch("skirmish.dice.rng.roll_die")
    assert make_attack(bite, wolf, Point(0, 5)) == Illegal(NO_ONE_TO_TARGET)
    roll.assert_not_called()


def test_custom_target_selector(wolf, bandit, bite):
    """Test that the target selector decides who is attacked."""
    seen = []

    def refuse(occupants, attacker):
        seen.append((list(occupants), attacker))
        return None

    assert make_attack(bite, wolf, EAST, refuse) == Illegal(NO_ONE_TO_TARGET)
    assert seen == [([bandit], wolf)]


def test_turn_allows_one_action(turn, bite, bandit, mocker):
    """Test that a second attack in the same turn is refused."""
    mocker.patch("skirmish.dice.rng.roll_die", side_effect=[15, 3])
    assert turn.attack(bite, EAST).is_legal()
    assert turn.actions.used() == 1
    assert turn.attack(bite, EAST) == Illegal(NO_ACTIONS_LEFT_IN_TURN)
    assert bandit.stats.hp() == 15


def test_attacking_nobody_keeps_the_action(turn, bite):
    """Test that an illegal attack does not use up the action."""
    assert turn.attack(bite, Point(-5, 0)) == Illegal(NO_ONE_TO_TARGET)
    assert turn.actions.used() == 0
    assert turn.actions.can_use().is_legal()


def test_attack_roll_formatting():
    """Test the textual form of attack rolls."""
    assert str(AttackRoll(EvalAdd(Roll((20,), 20), Modifier(4)))) == "Critical(Success, 20 + 4)"
    assert str(AttackRoll(EvalAdd(Roll((12,)), Modifier(4)))) == "12 + 4"
    assert AttackRoll(EvalAdd(Roll((12,)), Modifier(4))).total() == 16
