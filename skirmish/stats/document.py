"""
Stat block document module for the engine.

Reads stat blocks from plain data (usually loaded from JSON), validates
them with pydantic and builds a fully constructed ``StatBlock``.

A minimal document looks like::

    {
        "name": "Goblin",
        "type": {"type": "monster", "cr": "1/4"},
        "size": "small",
        "scores": {"str": 8, "dex": 14, "con": 10, "int": 10, "wis": 8, "cha": 8},
        "skills": {"stealth": "+6"},
        "health": {"max_hp": "2d6", "hit_dice": ["2d6"]},
        "ac": 15,
        "speeds": 30
    }
"""

import json
from pathlib import Path
from typing import Any, Literal, Optional, Union

from catchery import log_warning
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError

from ..core.constants import Ability, Condition, DamageType, Size, Skill, SpeedType
from ..core.error_handling import InvalidInputError, StatBlockDocumentError
from ..dice.expr import Constant, DExpr, Die
from ..dice.parser import parse_dice
from .abilities import AbilityScore
from .cr import ChallengeRating
from .health import HitDie
from .parts import Immunity, Override, Proficiency, Resistance, Vulnerability
from .stat_block import CreatureType, StatBlock

_PROFICIENT = ("p", "proficiency", "proficient")

_DAMAGE_RESPONSES = {
    "r": Resistance,
    "resistance": Resistance,
    "v": Vulnerability,
    "vulnerability": Vulnerability,
    "i": Immunity,
    "immunity": Immunity,
}

_CONDITION_RESPONSES = ("i", "immunity")


def _enum_key(enum_class: Any, key: str) -> Any:
    """Looks up an enum member from a loose key such as ``"sleight of hand"``."""
    normalized = key.strip().upper().replace(" ", "_").replace("-", "_")
    try:
        return enum_class[normalized]
    except KeyError:
        raise ValueError(f"Unknown {enum_class.__name__.lower()}: '{key}'") from None


def _dice_or_int(value: Union[int, str], what: str) -> DExpr:
    if isinstance(value, int):
        return Constant(value)
    try:
        return parse_dice(value)
    except InvalidInputError as e:
        raise ValueError(f"Invalid {what}: {e}") from e


class CreatureTypeDocument(BaseModel):
    """Either ``{"type": "player"}`` or ``{"type": "monster", "cr": ...}``."""

    type: Literal["player", "monster"] = Field(
        description="Whether the creature is a player character or a monster.",
    )
    cr: Optional[Union[int, float, str]] = Field(
        default=None,
        description="The challenge rating of a monster, e.g. 5, '1/4' or 0.5.",
    )
    xp: Optional[int] = Field(
        default=None,
        description="Experience value; defaults to the one of the challenge rating.",
    )

    _cr: Optional[ChallengeRating] = PrivateAttr(default=None)

    def model_post_init(self, _: Any) -> None:
        if self.type == "player":
            if self.cr is not None or self.xp is not None:
                raise ValueError("Players have no challenge rating nor XP.")
            return
        if self.cr is None:
            raise ValueError("Monsters need a challenge rating ('cr').")
        self._cr = ChallengeRating.parse(self.cr)
        if self.xp is None and self._cr.xp() is None:
            raise ValueError(
                "An XP could not be determined for this monster's CR. "
                "Please manually add an 'xp' field for this monster."
            )
        if self.xp is not None and self.xp < 0:
            raise ValueError("xp must be a non-negative integer.")

    def build(self) -> CreatureType:
        if self._cr is None:
            return CreatureType.player()
        return CreatureType.monster(self._cr, self.xp)


class ScoresDocument(BaseModel):
    """The six ability scores, by full name or 3-letter alias."""

    model_config = ConfigDict(populate_by_name=True)

    strength: int = Field(alias="str", description="Strength score.")
    dexterity: int = Field(alias="dex", description="Dexterity score.")
    constitution: int = Field(alias="con", description="Constitution score.")
    intelligence: int = Field(alias="int", description="Intelligence score.")
    wisdom: int = Field(alias="wis", description="Wisdom score.")
    charisma: int = Field(alias="cha", description="Charisma score.")

    def model_post_init(self, _: Any) -> None:
        # Validates the range of every score.
        self.build()

    def build(self) -> dict[Ability, AbilityScore]:
        return {
            ability: AbilityScore(getattr(self, ability.name.lower()))
            for ability in Ability
        }


class HealthDocument(BaseModel):
    """Hit point maximum and hit dice."""

    max_hp: Union[int, str] = Field(
        description="The hit point maximum, or a dice string rolled once on load.",
    )
    hit_dice: list[str] = Field(
        default_factory=list,
        description="Hit dice, e.g. ['3d8', 'd10'].",
    )

    _max_hp: Optional[DExpr] = PrivateAttr(default=None)
    _hit_dice: list[Die] = PrivateAttr(default_factory=list)

    def model_post_init(self, _: Any) -> None:
        self._max_hp = _dice_or_int(self.max_hp, "max_hp")
        for text in self.hit_dice:
            expr = _dice_or_int(text, "hit die")
            if not isinstance(expr, Die) or expr.both_adv_dis:
                raise ValueError(f"Hit dice must be plain dice such as '3d8', got '{text}'.")
            self._hit_dice.extend(Die(1, expr.sides) for _ in range(expr.count))

    def roll_max_hp(self) -> int:
        """Resolves the hit point maximum, never below 1."""
        assert self._max_hp is not None
        return max(1, self._max_hp.result())

    def dice(self) -> list[Die]:
        return list(self._hit_dice)


class SpeedsDocument(BaseModel):
    """Speeds in feet; walking is mandatory."""

    walking: int = Field(description="Walking speed.")
    burrowing: Optional[int] = Field(default=None, description="Burrowing speed.")
    climbing: Optional[int] = Field(default=None, description="Climbing speed.")
    flying: Optional[int] = Field(default=None, description="Flying speed.")
    swimming: Optional[int] = Field(default=None, description="Swimming speed.")

    def model_post_init(self, _: Any) -> None:
        for mode, speed in self.build().items():
            if speed is not None and speed <= 0:
                raise ValueError(f"{mode.display_name} speed must be positive, got {speed}.")

    def build(self) -> dict[SpeedType, Optional[int]]:
        return {
            SpeedType.WALKING: self.walking,
            SpeedType.BURROWING: self.burrowing,
            SpeedType.CLIMBING: self.climbing,
            SpeedType.FLYING: self.flying,
            SpeedType.SWIMMING: self.swimming,
        }


class StatBlockDocument(BaseModel):
    """A complete stat block, as written in a data file."""

    name: str = Field(description="The creature's name.")
    type: CreatureTypeDocument = Field(description="Player or monster.")
    size: str = Field(description="The creature's size, e.g. 'medium'.")
    scores: ScoresDocument = Field(description="The six ability scores.")
    skills: dict[str, Union[int, str]] = Field(
        default_factory=dict,
        description="Skill proficiencies ('P') or listed bonuses (4 or '+4').",
    )
    damage_effectors: dict[str, str] = Field(
        default_factory=dict,
        description="Damage resistances ('R'), vulnerabilities ('V') and immunities ('I').",
    )
    condition_immunities: dict[str, str] = Field(
        default_factory=dict,
        description="Condition immunities ('I').",
    )
    speeds: Union[int, SpeedsDocument] = Field(
        default=30,
        description="A walking speed, or every speed by movement mode.",
    )
    health: HealthDocument = Field(description="Hit points and hit dice.")
    ac: Union[int, str] = Field(description="The armor class, as a number or dice string.")
    proficiency_bonus: Optional[int] = Field(
        default=None,
        description="A fixed proficiency bonus; monsters derive it from their CR.",
    )

    _size: Size = PrivateAttr(default=Size.MEDIUM)
    _skills: dict[Skill, Union[int, None]] = PrivateAttr(default_factory=dict)
    _damage: dict[DamageType, Any] = PrivateAttr(default_factory=dict)
    _conditions: list[Condition] = PrivateAttr(default_factory=list)
    _ac: Optional[DExpr] = PrivateAttr(default=None)

    def model_post_init(self, _: Any) -> None:
        if not self.name.strip():
            raise ValueError("name must be a non-empty string.")
        self._size = _enum_key(Size, self.size)

        for key, value in self.skills.items():
            skill = _enum_key(Skill, key)
            if isinstance(value, str) and value.strip().lower() in _PROFICIENT:
                # None marks proficiency.
                self._skills[skill] = None
                continue
            try:
                self._skills[skill] = int(value)
            except ValueError:
                raise ValueError(
                    f"Skill '{key}' must be 'P' (proficiency) or a bonus, got '{value}'."
                ) from None

        for key, value in self.damage_effectors.items():
            part = _DAMAGE_RESPONSES.get(value.strip().lower())
            if part is None:
                raise ValueError(
                    f"Damage response for '{key}' must be R, V or I, got '{value}'."
                )
            self._damage[_enum_key(DamageType, key)] = part

        for key, value in self.condition_immunities.items():
            if value.strip().lower() not in _CONDITION_RESPONSES:
                raise ValueError(
                    f"Condition response for '{key}' must be I (immunity), got '{value}'."
                )
            self._conditions.append(_enum_key(Condition, key))

        if isinstance(self.speeds, int) and self.speeds <= 0:
            raise ValueError(f"Walking speed must be positive, got {self.speeds}.")
        self._ac = _dice_or_int(self.ac, "ac")

        if self.type.type == "player" and self.proficiency_bonus is None:
            raise ValueError("Players need an explicit proficiency_bonus.")

    def _speeds(self) -> dict[SpeedType, Optional[int]]:
        if isinstance(self.speeds, int):
            return {SpeedType.WALKING: self.speeds}
        return self.speeds.build()

    def build(self) -> StatBlock:
        """
        Builds the stat block described by this document.

        A dice string for ``max_hp`` is rolled here, once.

        Returns:
            StatBlock:
                The fully constructed stat block, at full hit points.

        """
        assert self._ac is not None
        stat_block = StatBlock(
            self.name,
            self.type.build(),
            self._size,
            self.scores.build(),
            max_hp=self.health.roll_max_hp(),
            ac=self._ac,
            speeds=self._speeds(),
            proficiency_bonus=self.proficiency_bonus,
        )
        for skill, bonus in self._skills.items():
            part = Proficiency() if bonus is None else Override(bonus)
            stat_block.skills[skill].insert(part)
        for damage_type, part_class in self._damage.items():
            stat_block.damage_effectors.add_effect(damage_type, part_class())
        for condition in self._conditions:
            stat_block.condition_immunities.add_immunity(condition)
        for die in self.health.dice():
            stat_block.health.hit_dice.add(HitDie(die))
        return stat_block


def load_stat_block(data: dict[str, Any]) -> StatBlock:
    """
    Validates a stat block document and builds it.

    Args:
        data (dict[str, Any]):
            The document, usually parsed from JSON.

    Returns:
        StatBlock:
            The constructed stat block.

    Raises:
        StatBlockDocumentError:
            If the document is invalid.

    """
    name = data.get("name", "<unnamed>") if isinstance(data, dict) else "<invalid>"
    try:
        return StatBlockDocument.model_validate(data).build()
    except (ValidationError, InvalidInputError) as e:
        log_warning(
            f"Invalid stat block document '{name}'",
            {"error": str(e)},
        )
        raise StatBlockDocumentError(f"Stat block '{name}' is invalid: {e}") from e


def load_stat_block_file(filepath: Path) -> StatBlock:
    """
    Loads a stat block from a JSON file.

    Args:
        filepath (Path):
            Path of the JSON document.

    Returns:
        StatBlock:
            The constructed stat block.

    Raises:
        StatBlockDocumentError:
            If the file is missing, is not valid JSON, or holds an invalid
            document.

    """
    try:
        with open(filepath, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise StatBlockDocumentError(f"File {filepath} raised an error: {e}") from e
    if not isinstance(data, dict):
        raise StatBlockDocumentError(
            f"Expected an object in {filepath}, got {type(data).__name__}"
        )
    return load_stat_block(data)
