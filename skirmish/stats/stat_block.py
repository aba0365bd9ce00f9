"""
Stat block module for the engine.

A ``StatBlock`` gathers every derived-value cell of one creature (ability
scores and modifiers, skills, saving throws, armor class, proficiency bonus,
speeds, damage and condition handling) together with its health.

Construction is atomic: every cell is created inside ``__init__`` against a
weak reference to the block, and hit points are only filled in once all
cells exist.
"""

import threading
from typing import Optional, Union

from ..core.cell import DerivedValueCell
from ..core.constants import Ability, Condition, Size, Skill, SpeedType
from ..core.error_handling import InvalidInputError
from ..core.lifespan import Lifespan
from ..core.utils import get_stat_modifier
from ..dice.expr import D20, Constant, DExpr
from ..dice.tree import EvalTree
from .abilities import AbilityScore
from .ac import ACPart, ArmorClass
from .checks import Check, Outcome, Save
from .conditions import (
    ConditionApplication,
    ConditionApplicationResult,
    ConditionImmunities,
)
from .cr import ChallengeRating
from .damage import Damage, DamageEffectors
from .health import DamageTaken, DeathSaveOutcome, Health, TempHP
from .speed import Speeds

DexprCell = DerivedValueCell["StatBlock", DExpr]


class CreatureType:
    """Either a player character, or a monster with a challenge rating."""

    __slots__ = ("cr", "_xp")

    def __init__(self, cr: Optional[ChallengeRating] = None, xp: Optional[int] = None) -> None:
        self.cr = cr
        self._xp = xp

    @classmethod
    def player(cls) -> "CreatureType":
        return cls()

    @classmethod
    def monster(cls, cr: ChallengeRating, xp: Optional[int] = None) -> "CreatureType":
        return cls(cr, xp)

    def is_player(self) -> bool:
        return self.cr is None

    def is_monster(self) -> bool:
        return self.cr is not None

    def xp(self) -> Optional[int]:
        """Returns the listed experience value, falling back to the CR table."""
        if self._xp is not None:
            return self._xp
        return self.cr.xp() if self.cr is not None else None

    def __repr__(self) -> str:
        if self.cr is None:
            return "Player"
        return f"Monster(CR {self.cr}, {self.xp()} XP)"


def _modifier_cell_base(ability: Ability):
    def modifier(stats: "StatBlock") -> DExpr:
        return Constant(get_stat_modifier(stats.scores[ability].get().result()))

    return modifier


def _skill_cell_base(skill: Skill):
    def skill_modifier(stats: "StatBlock") -> DExpr:
        return stats.modifiers[skill.base].get()

    return skill_modifier


def _save_cell_base(ability: Ability):
    def saving_throw(stats: "StatBlock") -> DExpr:
        return D20 + stats.modifiers[ability].get()

    return saving_throw


def _proficiency_from_cr(stats: "StatBlock") -> DExpr:
    return Constant(stats.creature_type.cr.proficiency_bonus())  # type: ignore[union-attr]


def _initiative_base(stats: "StatBlock") -> DExpr:
    return D20 + stats.modifiers[Ability.DEXTERITY].get()


class StatBlock:
    """All the statistics of one creature."""

    def __init__(
        self,
        name: str,
        creature_type: CreatureType,
        size: Size,
        scores: dict[Ability, Union[AbilityScore, int]],
        *,
        max_hp: int,
        ac: Union[DExpr, int] = 10,
        speeds: Optional[dict] = None,
        proficiency_bonus: Optional[int] = None,
    ) -> None:
        """
        Builds a stat block.

        Args:
            name (str):
                The creature's name.
            creature_type (CreatureType):
                Player or monster (with its challenge rating).
            size (Size):
                The creature's size.
            scores (dict[Ability, AbilityScore | int]):
                All six ability scores.
            max_hp (int):
                The hit point maximum.
            ac (DExpr | int):
                The base armor class.
            speeds (dict[SpeedType, int] | None):
                Movement speeds in feet; walking defaults to 30.
            proficiency_bonus (int | None):
                A fixed proficiency bonus. Monsters derive it from their
                challenge rating when omitted; players must provide one.

        Raises:
            InvalidInputError:
                If a score is missing or invalid, or a player has no
                proficiency bonus.

        """
        missing = [ability.name for ability in Ability if ability not in scores]
        if missing:
            raise InvalidInputError(f"Missing ability scores: {', '.join(missing)}")
        if proficiency_bonus is None and creature_type.is_player():
            raise InvalidInputError(
                f"Player '{name}' needs an explicit proficiency bonus"
            )

        self.name = name
        self.creature_type = creature_type
        self.size = size
        self._lock = threading.RLock()
        self._dead = False

        validated = {
            ability: score if isinstance(score, AbilityScore) else AbilityScore(score)
            for ability, score in scores.items()
        }
        self.scores: dict[Ability, DexprCell] = {
            ability: DerivedValueCell(
                self, Constant(validated[ability].value), name=f"score:{ability.short_name}"
            )
            for ability in Ability
        }
        self.modifiers: dict[Ability, DexprCell] = {
            ability: DerivedValueCell(
                self, _modifier_cell_base(ability), name=f"modifier:{ability.short_name}"
            )
            for ability in Ability
        }
        self.skills: dict[Skill, DexprCell] = {
            skill: DerivedValueCell(self, _skill_cell_base(skill), name=f"skill:{skill.name}")
            for skill in Skill
        }
        self.saves: dict[Ability, DexprCell] = {
            ability: DerivedValueCell(
                self, _save_cell_base(ability), name=f"save:{ability.short_name}"
            )
            for ability in Ability
        }
        self.proficiency_bonus: DexprCell = DerivedValueCell(
            self,
            Constant(proficiency_bonus) if proficiency_bonus is not None else _proficiency_from_cr,
            name="proficiency_bonus",
        )
        self.initiative: DexprCell = DerivedValueCell(self, _initiative_base, name="initiative")

        ac_expr = Constant(ac) if isinstance(ac, int) else ac
        self.ac = ArmorClass(self, ACPart(ac_expr))
        self.speeds = Speeds(self, **_speed_kwargs(speeds))
        self.damage_effectors = DamageEffectors(self)
        self.condition_immunities = ConditionImmunities(self)
        self.health = Health(self, DerivedValueCell(self, max_hp, name="max_hp"))

        # Every cell exists; the block may now be read.
        self.health.hp.current = self.health.max_hp()

    # ---- Health ----

    def hp(self) -> int:
        return self.health.current_hp()

    def max_hp(self) -> int:
        return self.health.max_hp()

    def temp_hp(self) -> Optional[int]:
        return self.health.hp.temp_hp()

    def heal(self, amount: int) -> None:
        self.health.hp.heal(amount)

    def damage(self, damage: Damage) -> DamageTaken:
        """Makes this creature take damage, returning what was taken."""
        return self.health.take_damage(damage)

    def grant_temp_hp(self, amount: int, cause: Optional[Lifespan] = None) -> bool:
        return self.health.hp.grant_temporary(TempHP(amount, cause))

    def is_dead(self) -> bool:
        with self._lock:
            return self._dead

    def mark_dead(self) -> None:
        with self._lock:
            self._dead = True

    # ---- Conditions ----

    def apply(self, application: ConditionApplication) -> ConditionApplicationResult:
        """Applies a condition to this creature unless it is immune."""
        return self.health.apply_condition(application)

    def remove_condition(self, condition: Condition) -> Optional[ConditionApplication]:
        return self.health.conditions.remove(condition)

    def has_condition(self, condition: Condition) -> bool:
        return self.health.conditions.has(condition)

    # ---- Scores, checks and saves ----

    def score(self, ability: Ability) -> int:
        return self.scores[ability].get().result()

    def modifier(self, ability: Ability) -> DExpr:
        return self.modifiers[ability].get()

    def skill(self, skill: Skill) -> DExpr:
        return self.skills[skill].get()

    def check(self, check: Check) -> Outcome:
        """
        Makes an ability or skill check.

        Args:
            check (Check):
                The check to make.

        Returns:
            Outcome:
                The roll, and whether it met the DC.

        """
        if isinstance(check.metric, Skill):
            modifier = self.skill(check.metric)
        else:
            modifier = self.modifier(check.metric)
        if check.passive:
            roll = (10 + modifier).evaluate()
        else:
            roll = (D20 + modifier).evaluate()
        return Outcome.of(check, roll)

    def save(self, save: Save) -> Outcome:
        """Makes a saving throw, including any bonuses or advantage on it."""
        return Outcome.of(save, self.saves[save.ability].get().evaluate())

    def roll_initiative(self) -> EvalTree:
        return self.initiative.get().evaluate()

    def roll_death_save(self) -> tuple[Optional[EvalTree], Optional[DeathSaveOutcome]]:
        """Rolls a death saving throw; see ``HP.roll_death_save``."""
        return self.health.hp.roll_death_save()

    def __repr__(self) -> str:
        return f"StatBlock({self.name}, {self.creature_type!r}, HP {self.health.hp})"


def _speed_kwargs(speeds: Optional[dict]) -> dict[str, Optional[int]]:
    if speeds is None:
        return {"walking": 30}
    kwargs: dict[str, Optional[int]] = {}
    for mode, value in speeds.items():
        mode = mode if isinstance(mode, SpeedType) else SpeedType[str(mode).upper()]
        if mode is SpeedType.CRAWLING:
            raise InvalidInputError("Crawling cannot be given a speed")
        kwargs[mode.name.lower()] = value
    return kwargs
