"""
Tests for applying, removing and resisting conditions.
"""

import pytest
from skirmish.core.constants import Ability, Condition
from skirmish.core.lifespan import Lifespan
from skirmish.dice import D20, Add, Constant, Disadvantage
from skirmish.stats import (
    ConditionApplication,
    DisadvantagePart,
    register_condition_effect,
    unregister_condition_effect,
)


class Charm:
    pass


@pytest.fixture
def creature(make_stat_block):
    return make_stat_block("Scout")


@pytest.fixture
def poisoned_effect():
    """Poison imposes disadvantage on Dexterity saves while it lasts."""
    seen = []

    def effect(stat_block, lifespan):
        seen.append(lifespan)
        stat_block.saves[Ability.DEXTERITY].insert(DisadvantagePart(lifespan))

    register_condition_effect(Condition.POISONED, effect)
    yield seen
    unregister_condition_effect(Condition.POISONED)


def test_apply_and_remove(creature):
    """Test that an applied condition can be queried and removed."""
    result = creature.apply(ConditionApplication(Condition.PRONE))
    assert result.is_successful()
    assert creature.has_condition(Condition.PRONE)
    assert creature.health.conditions.active() == [Condition.PRONE]
    removed = creature.remove_condition(Condition.PRONE)
    assert removed.condition is Condition.PRONE
    assert not creature.has_condition(Condition.PRONE)


def test_condition_ends_with_its_cause(creature):
    """Test that a condition lasts only as long as its cause."""
    charm = Charm()
    creature.apply(ConditionApplication(Condition.CHARMED, Lifespan.of(charm)))
    assert creature.has_condition(Condition.CHARMED)
    del charm
    assert not creature.has_condition(Condition.CHARMED)


def test_reapplying_replaces_the_previous_application(creature):
    """Test that a condition slot holds one application at a time."""
    first = ConditionApplication(Condition.PRONE)
    second = ConditionApplication(Condition.PRONE)
    assert creature.health.conditions.apply(first) is None
    assert creature.health.conditions.apply(second) is first
    assert creature.health.conditions.get(Condition.PRONE) is second


def test_condition_effect_lasts_while_applied(creature, poisoned_effect):
    """Test that the registered effect applies and expires with the condition."""
    assert creature.saves[Ability.DEXTERITY].get() == Add(D20, Constant(0))
    creature.apply(ConditionApplication(Condition.POISONED))
    assert len(poisoned_effect) == 1
    assert creature.saves[Ability.DEXTERITY].get() == Add(Disadvantage(20), Constant(0))

    creature.remove_condition(Condition.POISONED)
    assert not poisoned_effect[0].is_alive()
    assert creature.saves[Ability.DEXTERITY].get() == Add(D20, Constant(0))
    assert len(creature.saves[Ability.DEXTERITY]) == 0


def test_immunity_blocks_condition(creature):
    """Test that an immune creature refuses the condition, naming the cause."""
    charm = Charm()
    creature.condition_immunities.add_immunity(Condition.CHARMED, Lifespan.of(charm))
    result = creature.apply(ConditionApplication(Condition.CHARMED))
    assert not result.is_successful()
    assert result.blocked_by.cause() is charm
    assert not creature.has_condition(Condition.CHARMED)
    assert creature.condition_immunities.immunities() == [Condition.CHARMED]


def test_immunity_ends_with_its_cause(creature):
    """Test that a condition immunity lapses with whatever granted it."""
    charm = Charm()
    creature.condition_immunities.add_immunity(Condition.CHARMED, Lifespan.of(charm))
    del charm
    assert creature.apply(ConditionApplication(Condition.CHARMED)).is_successful()
    assert creature.has_condition(Condition.CHARMED)
