"""
Effect parts module for the engine.

Effect parts are the units stacked onto a stat block's derived-value cells:
proficiency, overrides, advantage and disadvantage, limited bonuses, and
the damage and condition handling flags. Each part returns the new value and
whether it should be removed from its cell after this read.
"""

from typing import TYPE_CHECKING, Any, Optional

from ..core.cell import PartResult
from ..core.error_handling import require_positive_int
from ..core.lifespan import Lifespan
from ..dice.expr import Constant, DExpr

if TYPE_CHECKING:
    from .conditions import ConditionImmunity
    from .damage import DamageHandling
    from .stat_block import StatBlock


class EffectPart:
    """Base class of every effect part."""

    def compute(self, owner: "StatBlock", value: Any) -> PartResult:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


# ---- Dice valued parts ----


class Proficiency(EffectPart):
    """Adds the owner's proficiency bonus."""

    def compute(self, owner: "StatBlock", value: DExpr) -> PartResult:
        return PartResult(value + owner.proficiency_bonus.get())


class Override(EffectPart):
    """Replaces the value with a flat number, e.g. a listed skill bonus."""

    def __init__(self, value: int) -> None:
        self.value = value

    def compute(self, owner: "StatBlock", value: DExpr) -> PartResult:
        return PartResult(Constant(self.value))

    def __repr__(self) -> str:
        return f"Override({self.value})"


class _CausedPart(EffectPart):
    """A part that only applies while its cause is alive."""

    def __init__(self, cause: Optional[Lifespan] = None) -> None:
        self.cause = cause if cause is not None else Lifespan.indefinite()

    def apply(self, value: DExpr) -> DExpr:
        raise NotImplementedError

    def compute(self, owner: "StatBlock", value: DExpr) -> PartResult:
        if not self.cause.is_alive():
            return PartResult(value, delete_self=True)
        return PartResult(self.apply(value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.cause!r})"


class AdvantagePart(_CausedPart):
    """Grants advantage while its cause lives."""

    def apply(self, value: DExpr) -> DExpr:
        return value.advantage()


class DisadvantagePart(_CausedPart):
    """Imposes disadvantage while its cause lives."""

    def apply(self, value: DExpr) -> DExpr:
        return value.disadvantage()


class Bonus(_CausedPart):
    """
    Adds a bonus while its cause lives, optionally for a limited number of
    reads.

    The read that spends the last use still receives the bonus.
    """

    def __init__(
        self,
        bonus: DExpr,
        cause: Optional[Lifespan] = None,
        uses: Optional[int] = None,
    ) -> None:
        super().__init__(cause)
        if uses is not None:
            require_positive_int(uses, "bonus uses", {"bonus": str(bonus)})
        self.bonus = bonus
        self.uses = uses

    def apply(self, value: DExpr) -> DExpr:
        return value + self.bonus

    def compute(self, owner: "StatBlock", value: DExpr) -> PartResult:
        if not self.cause.is_alive():
            return PartResult(value, delete_self=True)
        value = self.apply(value)
        if self.uses is None:
            return PartResult(value)
        self.uses -= 1
        return PartResult(value, delete_self=self.uses == 0)

    def __repr__(self) -> str:
        return f"Bonus({self.bonus}, uses={self.uses})"


# ---- Damage handling parts ----


class Resistance(EffectPart):
    """Halves damage of the kind it is attached to."""

    def compute(self, owner: "StatBlock", value: "DamageHandling") -> PartResult:
        return PartResult(value.model_copy(update={"resistance": True}))


class Vulnerability(EffectPart):
    """Doubles damage of the kind it is attached to."""

    def compute(self, owner: "StatBlock", value: "DamageHandling") -> PartResult:
        return PartResult(value.model_copy(update={"vulnerability": True}))


class Immunity(EffectPart):
    """Negates damage of the kind it is attached to."""

    def compute(self, owner: "StatBlock", value: "DamageHandling") -> PartResult:
        return PartResult(value.model_copy(update={"immunity": True}))


# ---- Condition immunity ----


class ConditionImmunityPart(EffectPart):
    """Makes the owner immune to one condition, remembering why."""

    def __init__(self, cause: Optional[Lifespan] = None) -> None:
        self.cause = cause if cause is not None else Lifespan.indefinite()

    def compute(self, owner: "StatBlock", value: "ConditionImmunity") -> PartResult:
        if not self.cause.is_alive():
            return PartResult(value, delete_self=True)
        return PartResult(value.immune_because(self.cause))

    def __repr__(self) -> str:
        return f"ConditionImmunityPart({self.cause!r})"
