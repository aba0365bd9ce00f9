"""
Tests for loading stat blocks from documents.
"""

import json

import pytest
from skirmish.core.constants import Ability, Condition, DamageType, Size, Skill, SpeedType
from skirmish.core.error_handling import StatBlockDocumentError
from skirmish.dice import D6, Constant
from skirmish.stats import load_stat_block, load_stat_block_file


@pytest.fixture
def goblin_data():
    return {
        "name": "Goblin",
        "type": {"type": "monster", "cr": "1/4"},
        "size": "small",
        "scores": {"str": 8, "dex": 14, "con": 10, "int": 10, "wis": 8, "cha": 8},
        "skills": {"stealth": "+6", "perception": "P"},
        "damage_effectors": {"fire": "R", "poison": "immunity"},
        "condition_immunities": {"charmed": "I"},
        "speeds": {"walking": 30, "flying": 60},
        "health": {"max_hp": 7, "hit_dice": ["2d6"]},
        "ac": "15",
    }


def test_load_full_document(goblin_data):
    """Test building a stat block from a complete document."""
    goblin = load_stat_block(goblin_data)
    assert goblin.name == "Goblin"
    assert goblin.size is Size.SMALL
    assert str(goblin.creature_type.cr) == "1/4"
    assert goblin.creature_type.xp() == 50
    assert goblin.score(Ability.DEXTERITY) == 14
    assert goblin.skill(Skill.STEALTH) == Constant(6)
    assert goblin.skill(Skill.PERCEPTION).result() == 1
    assert goblin.damage_effectors.handling(DamageType.FIRE).resistance
    assert goblin.damage_effectors.handling(DamageType.POISON).immunity
    assert goblin.condition_immunities.immunities() == [Condition.CHARMED]
    assert goblin.speeds.of_type(SpeedType.FLYING) == 60
    assert goblin.health.hit_dice.available() == [D6, D6]
    assert goblin.hp() == 7
    assert goblin.ac.value() == 15


def test_long_names_and_defaults(goblin_data):
    """Test full score names, a bare walking speed and optional sections."""
    goblin_data["scores"] = {
        "strength": 8,
        "dexterity": 14,
        "constitution": 10,
        "intelligence": 10,
        "wisdom": 8,
        "charisma": 8,
    }
    goblin_data["speeds"] = 25
    for key in ("skills", "damage_effectors", "condition_immunities"):
        del goblin_data[key]
    goblin = load_stat_block(goblin_data)
    assert goblin.speeds.of_type(SpeedType.WALKING) == 25
    assert not goblin.speeds.has(SpeedType.FLYING)
    assert goblin.skill(Skill.STEALTH) == Constant(2)


def test_max_hp_dice_are_rolled_once(goblin_data, mocker):
    """Test that a dice string for max HP is rolled on load."""
    goblin_data["health"]["max_hp"] = "2d6"
    roll = mocker.patch("skirmish.dice.rng.roll_die", return_value=4)
    goblin = load_stat_block(goblin_data)
    assert goblin.max_hp() == 8
    assert goblin.max_hp() == 8
    assert roll.call_count == 2


def test_cr_zero_needs_xp(goblin_data):
    """Test that a CR 0 monster must list its XP."""
    goblin_data["type"] = {"type": "monster", "cr": 0}
    with pytest.raises(StatBlockDocumentError, match="XP could not be determined"):
        load_stat_block(goblin_data)
    goblin_data["type"]["xp"] = 10
    assert load_stat_block(goblin_data).creature_type.xp() == 10


def test_player_document(goblin_data):
    """Test that players need a proficiency bonus and have no CR."""
    goblin_data["type"] = {"type": "player"}
    with pytest.raises(StatBlockDocumentError):
        load_stat_block(goblin_data)
    goblin_data["proficiency_bonus"] = 2
    hero = load_stat_block(goblin_data)
    assert hero.creature_type.is_player()
    assert hero.skill(Skill.PERCEPTION).result() == 1


@pytest.mark.parametrize(
    "section, value",
    [
        ("scores", {"str": 31, "dex": 14, "con": 10, "int": 10, "wis": 8, "cha": 8}),
        ("scores", {"str": 8}),
        ("skills", {"stealth": "X"}),
        ("skills", {"flying": "P"}),
        ("damage_effectors", {"fire": "Q"}),
        ("damage_effectors", {"plasma": "R"}),
        ("condition_immunities", {"charmed": "R"}),
        ("speeds", {"flying": 60}),
        ("speeds", 0),
        ("health", {"max_hp": "2d"}),
        ("health", {"max_hp": 7, "hit_dice": ["d8 + 1"]}),
        ("ac", "x"),
        ("size", "colossal"),
        ("type", {"type": "monster"}),
        ("type", {"type": "monster", "cr": "1/3"}),
        ("type", {"type": "player", "cr": 1}),
    ],
)
def test_invalid_documents(goblin_data, section, value):
    """Test that invalid sections are reported as document errors."""
    goblin_data[section] = value
    with pytest.raises(StatBlockDocumentError):
        load_stat_block(goblin_data)


def test_load_from_file(goblin_data, tmp_path):
    """Test loading a stat block from a JSON file."""
    path = tmp_path / "goblin.json"
    path.write_text(json.dumps(goblin_data), encoding="utf-8")
    assert load_stat_block_file(path).name == "Goblin"


def test_load_from_bad_files(tmp_path):
    """Test that unreadable or malformed files raise document errors."""
    with pytest.raises(StatBlockDocumentError):
        load_stat_block_file(tmp_path / "missing.json")
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(StatBlockDocumentError):
        load_stat_block_file(broken)
    listing = tmp_path / "list.json"
    listing.write_text("[]", encoding="utf-8")
    with pytest.raises(StatBlockDocumentError):
        load_stat_block_file(listing)
