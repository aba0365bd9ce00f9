"""
Conditions module for the engine.

Tracks which conditions a creature currently suffers from, which ones it is
immune to, and the effect each condition has when applied.
"""

import weakref
from typing import TYPE_CHECKING, Callable, Optional

from catchery import log_debug
from pydantic import BaseModel, ConfigDict, Field

from ..core.cell import DerivedValueCell
from ..core.constants import Condition
from ..core.error_handling import resolve_ref
from ..core.lifespan import Lifespan, RSlot
from .parts import ConditionImmunityPart

if TYPE_CHECKING:
    from .stat_block import StatBlock

ConditionEffect = Callable[["StatBlock", Lifespan], None]


def _no_effect(stat_block: "StatBlock", lifespan: Lifespan) -> None:
    return None


_CONDITION_EFFECTS: dict[Condition, ConditionEffect] = {}


def register_condition_effect(condition: Condition, effect: ConditionEffect) -> None:
    """
    Registers the function run whenever a condition is applied.

    The function receives the affected stat block and a lifespan that ends
    when the condition is removed or replaced; parts it installs should be
    tied to that lifespan.

    Args:
        condition (Condition):
            The condition to attach the effect to.
        effect (Callable[[StatBlock, Lifespan], None]):
            The effect function.

    """
    _CONDITION_EFFECTS[condition] = effect


def unregister_condition_effect(condition: Condition) -> None:
    _CONDITION_EFFECTS.pop(condition, None)


def condition_effect(condition: Condition) -> ConditionEffect:
    return _CONDITION_EFFECTS.get(condition, _no_effect)


class ConditionApplication:
    """An instance of a condition applied to a creature."""

    def __init__(self, condition: Condition, lifespan: Optional[Lifespan] = None) -> None:
        self.condition = condition
        self.lifespan = lifespan if lifespan is not None else Lifespan.indefinite()

    def is_alive(self) -> bool:
        return self.lifespan.is_alive()

    def __repr__(self) -> str:
        return f"ConditionApplication({self.condition.name}, {self.lifespan!r})"


class ConditionApplicationResult:
    """Whether a condition took hold, and if not, what prevented it."""

    __slots__ = ("blocked_by",)

    def __init__(self, blocked_by: Optional[Lifespan] = None) -> None:
        self.blocked_by = blocked_by

    @classmethod
    def successful(cls) -> "ConditionApplicationResult":
        return cls(None)

    @classmethod
    def unsuccessful(cls, lifespan: Lifespan) -> "ConditionApplicationResult":
        return cls(lifespan)

    def is_successful(self) -> bool:
        return self.blocked_by is None

    def __repr__(self) -> str:
        if self.blocked_by is None:
            return "Successful"
        return f"Unsuccessful({self.blocked_by!r})"


class ConditionStatus:
    """One slot per condition, holding its current application."""

    def __init__(self, owner: "StatBlock") -> None:
        self._owner = weakref.ref(owner)
        self._slots: dict[Condition, RSlot[ConditionApplication]] = {
            condition: RSlot() for condition in Condition
        }

    def apply(self, application: ConditionApplication) -> Optional[ConditionApplication]:
        """
        Applies a condition, replacing whatever occupied its slot, then runs
        the condition's effect.

        Immunity must already have been checked.

        Args:
            application (ConditionApplication):
                The condition and how long it lasts.

        Returns:
            ConditionApplication | None:
                The application that was replaced, if any.

        """
        owner = resolve_ref(self._owner, "stat block")
        previous = self._slots[application.condition].replace(application)
        condition_effect(application.condition)(owner, Lifespan.of(application))
        return previous

    def remove(self, condition: Condition) -> Optional[ConditionApplication]:
        return self._slots[condition].take()

    def get(self, condition: Condition) -> Optional[ConditionApplication]:
        return self._slots[condition].get()

    def has(self, condition: Condition) -> bool:
        return not self._slots[condition].is_empty()

    def active(self) -> list[Condition]:
        """Returns every condition currently applied, in index order."""
        return [condition for condition in Condition if self.has(condition)]

    def __repr__(self) -> str:
        return f"ConditionStatus({', '.join(c.name for c in self.active())})"


class ConditionImmunity(BaseModel):
    """Whether a creature is immune to a condition, and because of what."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    immune: bool = Field(default=False, description="Whether the creature is immune.")
    lifespan: Lifespan = Field(
        default_factory=Lifespan.indefinite,
        description="The cause of the immunity.",
    )

    def immune_because(self, lifespan: Lifespan) -> "ConditionImmunity":
        return ConditionImmunity(immune=True, lifespan=lifespan)


class ConditionImmunities:
    """One cell of ``ConditionImmunity`` per condition."""

    def __init__(self, owner: "StatBlock") -> None:
        self.cells: dict[Condition, DerivedValueCell["StatBlock", ConditionImmunity]] = {
            condition: DerivedValueCell(
                owner, ConditionImmunity(), name=f"immunity:{condition.name}"
            )
            for condition in Condition
        }

    def add_immunity(
        self, condition: Condition, cause: Optional[Lifespan] = None
    ) -> ConditionImmunityPart:
        part = ConditionImmunityPart(cause)
        self.cells[condition].insert(part)
        return part

    def is_immune(self, condition: Condition) -> ConditionApplicationResult:
        """
        Checks whether a condition can be applied.

        Args:
            condition (Condition):
                The condition to check.

        Returns:
            ConditionApplicationResult:
                Successful when the condition may be applied, otherwise
                unsuccessful with the lifespan of whatever grants immunity.

        """
        immunity = self.cells[condition].get()
        if immunity.immune:
            log_debug(
                f"Condition {condition.name} blocked by immunity",
                {"condition": condition.name, "cause": repr(immunity.lifespan)},
            )
            return ConditionApplicationResult.unsuccessful(immunity.lifespan)
        return ConditionApplicationResult.successful()

    def immunities(self) -> list[Condition]:
        return [c for c in Condition if self.cells[c].get().immune]
