"""
Checks module for the engine.

Provides difficulty classes, ability and skill checks (active or passive) and
saving throws, and the outcome of rolling them.
"""

from typing import Any, Optional, Union

from ..core.constants import Ability, NiceEnum, Skill
from ..dice.tree import EvalTree


class DC:
    """A Difficulty Class, or an unknown one decided later by the GM."""

    __slots__ = ("value",)

    VERY_EASY: "DC"
    EASY: "DC"
    MEDIUM: "DC"
    HARD: "DC"
    VERY_HARD: "DC"
    IMPOSSIBLE: "DC"
    UNKNOWN: "DC"

    def __init__(self, value: Optional[int]) -> None:
        self.value = value

    @classmethod
    def known(cls, value: int) -> "DC":
        return cls(int(value))

    def is_known(self) -> bool:
        return self.value is not None

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, DC):
            return self.value == other.value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    def __repr__(self) -> str:
        return f"DC({'Unknown' if self.value is None else self.value})"


# Typical difficulty classes.
DC.VERY_EASY = DC(5)
DC.EASY = DC(10)
DC.MEDIUM = DC(15)
DC.HARD = DC(20)
DC.VERY_HARD = DC(25)
DC.IMPOSSIBLE = DC(30)
DC.UNKNOWN = DC(None)


class RollOutcome(NiceEnum):
    """Whether a check or save met its DC."""

    PASS = "PASS"
    FAIL = "FAIL"
    INDETERMINATE = "INDETERMINATE"

    @classmethod
    def against(cls, dc: DC, total: int) -> "RollOutcome":
        """Meeting or beating the DC passes."""
        if dc.value is None:
            return cls.INDETERMINATE
        return cls.PASS if total >= dc.value else cls.FAIL


class Check:
    """An ability or skill check against a DC."""

    def __init__(self, dc: DC, metric: Union[Ability, Skill], passive: bool = False) -> None:
        """
        Creates a check.

        Args:
            dc (DC):
                The difficulty class to meet.
            metric (Ability | Skill):
                What is being checked.
            passive (bool):
                Passive checks use ``10 + modifier`` instead of rolling.

        """
        self.dc = dc
        self.metric = metric
        self.passive = passive

    @classmethod
    def active(cls, dc: DC, metric: Union[Ability, Skill]) -> "Check":
        return cls(dc, metric)

    @classmethod
    def passive_check(cls, dc: DC, metric: Union[Ability, Skill]) -> "Check":
        return cls(dc, metric, passive=True)

    def __repr__(self) -> str:
        kind = "Passive, " if self.passive else ""
        return f"Check({kind}{self.metric.name}, {self.dc!r})"


class Save:
    """A saving throw of one ability against a DC."""

    def __init__(self, dc: DC, ability: Ability) -> None:
        self.dc = dc
        self.ability = ability

    def __repr__(self) -> str:
        return f"Save({self.ability.name}, {self.dc!r})"


class Outcome:
    """The roll of a check or save, and whether it met the DC."""

    def __init__(self, cause: Union[Check, Save], roll_outcome: RollOutcome, roll: EvalTree) -> None:
        self.cause = cause
        self.roll_outcome = roll_outcome
        self.roll = roll

    @classmethod
    def of(cls, cause: Union[Check, Save], roll: EvalTree) -> "Outcome":
        return cls(cause, RollOutcome.against(cause.dc, roll.result()), roll)

    @property
    def total(self) -> int:
        return self.roll.result()

    def is_pass(self) -> bool:
        return self.roll_outcome is RollOutcome.PASS

    def is_fail(self) -> bool:
        return self.roll_outcome is RollOutcome.FAIL

    def __repr__(self) -> str:
        return (
            f"Outcome({self.cause!r}, {self.roll_outcome.display_name}, "
            f"{self.roll} = {self.total})"
        )
