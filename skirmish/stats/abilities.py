"""
Ability score module for the engine.

Provides the validated ``AbilityScore`` value type and the score-to-modifier
rule shared by checks, saves and skills.
"""

from typing import Any

from ..core.constants import ABILITY_SCORE_RANGE
from ..core.error_handling import InvalidAbilityScoreError, require_in_range
from ..core.utils import get_stat_modifier, prettify_modifier


class AbilityScore:
    """An ability score, always within the valid 1 to 30 range."""

    __slots__ = ("value",)

    def __init__(self, value: int) -> None:
        """
        Creates a validated ability score.

        Args:
            value (int):
                The raw score.

        Raises:
            InvalidAbilityScoreError:
                If the score is not an integer between 1 and 30.

        """
        low, high = ABILITY_SCORE_RANGE
        self.value = require_in_range(
            value, low, high, "ability score", error=InvalidAbilityScoreError
        )

    def modifier(self) -> int:
        """Returns ``floor((score - 10) / 2)``."""
        return get_stat_modifier(self.value)

    def __int__(self) -> int:
        return self.value

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, AbilityScore):
            return self.value == other.value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return f"{self.value} ({prettify_modifier(self.modifier())})"

    def __repr__(self) -> str:
        return f"AbilityScore({self.value})"
