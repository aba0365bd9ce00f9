"""
Health module for the engine.

Handles hit points, temporary hit points, death saving throws and hit dice,
and the transition from taking damage to falling unconscious or dying.
"""

import threading
import weakref
from collections import Counter
from typing import TYPE_CHECKING, Optional

from catchery import log_debug

from ..core.cell import DerivedValueCell
from ..core.constants import Condition, NiceEnum
from ..core.error_handling import InvalidInputError, TooManyDiceError, resolve_ref
from ..core.lifespan import Lifespan, RSlot
from ..dice.expr import D20, DExpr, Die, sum_exprs
from ..dice.tree import EvalTree
from .conditions import ConditionApplication, ConditionApplicationResult, ConditionStatus
from .damage import Damage

if TYPE_CHECKING:
    from .stat_block import StatBlock


class DamageResult(NiceEnum):
    """What happened to a creature after taking damage."""

    NOTHING = "NOTHING"
    UNCONSCIOUS = "UNCONSCIOUS"
    DEATH = "DEATH"


class DeathSaveOutcome(NiceEnum):
    """How a run of death saving throws ended."""

    STABILIZED = "STABILIZED"
    DEATH = "DEATH"
    # A natural 20 on the save: the creature regains 1 hit point.
    REVIVED = "REVIVED"


class TempHP:
    """
    Temporary hit points: a buffer absorbing damage before real hit points,
    lasting as long as their cause.
    """

    def __init__(self, amount: int, lifespan: Optional[Lifespan] = None) -> None:
        self.amount = amount
        self.lifespan = lifespan if lifespan is not None else Lifespan.indefinite()

    def is_alive(self) -> bool:
        return self.lifespan.is_alive()

    def __repr__(self) -> str:
        return f"TempHP({self.amount})"


class DeathSaves:
    """Successes and failures of the death saving throws in progress."""

    LIMIT = 3

    def __init__(self) -> None:
        self.successes = 0
        self.failures = 0

    def record_success(self) -> Optional[DeathSaveOutcome]:
        self.successes = min(self.LIMIT, self.successes + 1)
        if self.successes >= self.LIMIT:
            return DeathSaveOutcome.STABILIZED
        return None

    def record_failure(self, count: int = 1) -> Optional[DeathSaveOutcome]:
        """
        Records failed saves; a natural 1 counts as two.

        Args:
            count (int):
                Number of failures to record.

        Returns:
            DeathSaveOutcome | None:
                DEATH once three failures are reached, None otherwise.

        """
        self.failures = min(self.LIMIT, self.failures + count)
        if self.failures >= self.LIMIT:
            return DeathSaveOutcome.DEATH
        return None

    def __str__(self) -> str:
        def marks(count: int) -> str:
            return "".join("◈" if i < count else "◇" for i in range(self.LIMIT))

        return f"DeathSaves(S{marks(self.successes)} F{marks(self.failures)})"


class HP:
    """Current, maximum and temporary hit points of a creature."""

    def __init__(self, owner: "StatBlock", max_hp: DerivedValueCell["StatBlock", int]) -> None:
        self._owner = weakref.ref(owner)
        self._lock = threading.RLock()
        # Set to the maximum once the stat block is fully built.
        self.current = 0
        self.max = max_hp
        self.temp: RSlot[TempHP] = RSlot()
        self.death_saves: Optional[DeathSaves] = None

    def _stat_block(self) -> "StatBlock":
        return resolve_ref(self._owner, "stat block")

    def max_hp(self) -> int:
        return self.max.get()

    def temp_hp(self) -> Optional[int]:
        temp = self.temp.get()
        return temp.amount if temp is not None else None

    def damage(self, amount: int) -> DamageResult:
        """
        Removes hit points, draining temporary hit points first.

        Args:
            amount (int):
                The damage to take, already reduced by resistances.

        Returns:
            DamageResult:
                DEATH if the damage left over after reaching 0 HP is at least
                the hit point maximum, UNCONSCIOUS if the creature dropped to
                0 HP otherwise, NOTHING if it is still standing or was
                already dead.

        """
        stat_block = self._stat_block()
        with self._lock:
            if stat_block.is_dead():
                return DamageResult.NOTHING
            temp = self.temp.get()
            if temp is not None:
                if temp.amount > amount:
                    temp.amount -= amount
                    amount = 0
                else:
                    amount -= temp.amount
                    self.temp.take()
            if amount <= 0:
                return DamageResult.NOTHING

            excess: Optional[int] = None
            if amount >= self.current:
                excess = amount - self.current
                self.current = 0
            else:
                self.current -= amount

            if excess is None:
                return DamageResult.NOTHING

            if excess >= self.max_hp():
                stat_block.mark_dead()
                self.death_saves = None
                log_debug(
                    f"{stat_block.name} died from massive damage",
                    {"excess": excess, "max_hp": self.max_hp()},
                )
                return DamageResult.DEATH

            self.death_saves = DeathSaves()
            stat_block.apply(ConditionApplication(Condition.UNCONSCIOUS))
            log_debug(
                f"{stat_block.name} dropped to 0 HP",
                {"excess": excess, "max_hp": self.max_hp()},
            )
            return DamageResult.UNCONSCIOUS

    def heal(self, amount: int) -> None:
        """
        Restores hit points up to the maximum; the dead cannot be healed.

        Regaining any hit points ends the death saves and wakes the creature.
        """
        stat_block = self._stat_block()
        with self._lock:
            if stat_block.is_dead():
                return
            self.death_saves = None
            self.current = min(self.current + amount, self.max_hp())
            if self.current > 0:
                stat_block.remove_condition(Condition.UNCONSCIOUS)

    def roll_death_save(self) -> tuple[Optional[EvalTree], Optional[DeathSaveOutcome]]:
        """
        Rolls a death saving throw, if one is in progress.

        A 10 or higher succeeds and a 1 counts as two failures. On a 20 the
        creature regains 1 hit point, which ends the saves.

        Returns:
            tuple[EvalTree | None, DeathSaveOutcome | None]:
                The roll (None if no saves are in progress) and how the saves
                ended, if they did.

        """
        stat_block = self._stat_block()
        with self._lock:
            death_saves = self.death_saves
            if death_saves is None or stat_block.is_dead():
                return None, None
            roll = D20.evaluate()
            face = roll.result()
            outcome: Optional[DeathSaveOutcome]
            if face == 20:
                self.heal(1)
                outcome = DeathSaveOutcome.REVIVED
            elif face == 1:
                outcome = death_saves.record_failure(2)
            elif face >= 10:
                outcome = death_saves.record_success()
            else:
                outcome = death_saves.record_failure()

            if outcome is DeathSaveOutcome.DEATH:
                stat_block.mark_dead()
                self.death_saves = None
            elif outcome is DeathSaveOutcome.STABILIZED:
                self.death_saves = None
        log_debug(
            f"{stat_block.name} rolled a death save",
            {"roll": face, "saves": str(death_saves), "outcome": str(outcome)},
        )
        return roll, outcome

    def grant_temporary(self, temp: TempHP) -> bool:
        """
        Grants temporary hit points.

        Temporary hit points never add up: the larger amount is kept, and a
        grant only replaces the current buffer when it is strictly larger.

        Args:
            temp (TempHP):
                The new temporary hit points.

        Returns:
            bool:
                True if the new temporary hit points were taken.

        """
        with self._lock:
            existing = self.temp.get()
            if existing is not None and existing.amount >= temp.amount:
                return False
            self.temp.replace(temp)
            return True

    def __str__(self) -> str:
        temp = self.temp_hp()
        suffix = f" (+{temp} temp)" if temp else ""
        return f"{self.current}/{self.max_hp()}{suffix}"


class HitDie:
    """A single hit die, spent when resting."""

    def __init__(self, die: Die, lifespan: Optional[Lifespan] = None, used: bool = False) -> None:
        self.die = die
        self.lifespan = lifespan if lifespan is not None else Lifespan.indefinite()
        self.used = used

    def is_alive(self) -> bool:
        return self.lifespan.is_alive()

    def __repr__(self) -> str:
        return f"HitDie({self.die}{', used' if self.used else ''})"


class HitDice:
    """The hit dice of a creature."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._dice: list[HitDie] = []

    def _live(self) -> list[HitDie]:
        self._dice = [hit_die for hit_die in self._dice if hit_die.is_alive()]
        return self._dice

    def add(self, hit_die: HitDie) -> None:
        with self._lock:
            self._dice.append(hit_die)

    def available(self) -> list[Die]:
        with self._lock:
            return [hit_die.die for hit_die in self._live() if not hit_die.used]

    def used(self) -> list[Die]:
        with self._lock:
            return [hit_die.die for hit_die in self._live() if hit_die.used]

    def use_dice(self, dice: list[Die]) -> DExpr:
        """
        Spends hit dice.

        Args:
            dice (list[Die]):
                The dice to spend, e.g. ``[D8, D8]``.

        Returns:
            DExpr:
                The sum of the spent dice, ready to roll.

        Raises:
            TooManyDiceError:
                If more dice of any size are requested than are available.
                No die is spent in that case.

        """
        with self._lock:
            available = Counter(self.available())
            wanted = Counter(dice)
            for die, count in wanted.items():
                if available[die] < count:
                    raise TooManyDiceError(
                        f"Requested {count} x {die}, only {available[die]} available"
                    )
            spent: list[DExpr] = []
            for hit_die in self._live():
                if hit_die.used or wanted[hit_die.die] <= 0:
                    continue
                hit_die.used = True
                wanted[hit_die.die] -= 1
                spent.append(hit_die.die)
            total = sum_exprs(spent)
            if total is None:
                raise InvalidInputError("No hit dice were requested")
            return total

    def __repr__(self) -> str:
        available = Counter(str(die) for die in self.available())
        used = Counter(str(die) for die in self.used())
        return f"HitDice(available={dict(available)}, used={dict(used)})"


class DamageTaken:
    """The damage a creature actually took, and what it did to them."""

    def __init__(self, who: "StatBlock", taken: Damage, result: DamageResult) -> None:
        self._who = weakref.ref(who)
        self.taken = taken
        self.result = result

    def who(self) -> "StatBlock":
        return resolve_ref(self._who, "damaged creature")

    def total(self) -> int:
        return self.taken.total()

    def __repr__(self) -> str:
        return f"DamageTaken({self.taken}, total={self.total()}, {self.result})"


class Health:
    """Hit points, conditions and hit dice of a creature."""

    def __init__(self, owner: "StatBlock", max_hp: DerivedValueCell["StatBlock", int]) -> None:
        self._owner = weakref.ref(owner)
        self.hp = HP(owner, max_hp)
        self.conditions = ConditionStatus(owner)
        self.hit_dice = HitDice()

    def current_hp(self) -> int:
        return self.hp.current

    def max_hp(self) -> int:
        return self.hp.max_hp()

    def apply_condition(self, application: ConditionApplication) -> ConditionApplicationResult:
        """Applies a condition unless the creature is immune to it."""
        stat_block = resolve_ref(self._owner, "stat block")
        result = stat_block.condition_immunities.is_immune(application.condition)
        if result.is_successful():
            self.conditions.apply(application)
        return result

    def take_damage(self, damage: Damage) -> DamageTaken:
        """
        Runs damage through the creature's handling, then removes hit points.

        Args:
            damage (Damage):
                The incoming damage.

        Returns:
            DamageTaken:
                The damage after resistances, and its outcome.

        """
        stat_block = resolve_ref(self._owner, "stat block")
        taken = stat_block.damage_effectors.calculate(damage)
        result = self.hp.damage(taken.total())
        return DamageTaken(stat_block, taken, result)
