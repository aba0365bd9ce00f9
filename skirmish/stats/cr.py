"""
Challenge rating module for the engine.

A ``ChallengeRating`` is an index into the fixed rating table, from which a
monster's proficiency bonus and experience value are read.
"""

from fractions import Fraction
from functools import total_ordering
from typing import Any, Optional, Union

from ..core.error_handling import InvalidChallengeRatingError
from ..core.logging import log_error

_LABELS: tuple[str, ...] = ("0", "1/8", "1/4", "1/2") + tuple(
    str(n) for n in range(1, 31)
)

_PROFICIENCY_BONUS: tuple[int, ...] = (
    2, 2, 2, 2, 2, 2, 2, 2,
    3, 3, 3, 3,
    4, 4, 4, 4,
    5, 5, 5, 5,
    6, 6, 6, 6,
    7, 7, 7, 7,
    8, 8, 8, 8,
    9, 9,
)  # fmt: skip

# Experience points by rating; CR 0 is worth 0 or 10 XP depending on the
# creature, so it has no default.
_XP: tuple[Optional[int], ...] = (
    None, 25, 50, 100,
    200, 450, 700, 1100, 1800, 2300, 2900, 3900, 5000, 5900,
    7200, 8400, 10000, 11500, 13000, 15000, 18000, 20000, 22000, 25000,
    33000, 41000, 50000, 62000, 75000, 90000, 105000, 120000, 135000, 155000,
)  # fmt: skip


@total_ordering
class ChallengeRating:
    """A rating from the challenge rating table, ordered by difficulty."""

    __slots__ = ("index",)

    def __init__(self, index: int) -> None:
        if not 0 <= index < len(_LABELS):
            raise InvalidChallengeRatingError(f"Invalid challenge rating index: {index}")
        self.index = index

    @classmethod
    def parse(cls, value: Union[str, int, float]) -> "ChallengeRating":
        """
        Reads a rating written as ``"1/4"``, ``0.25``, ``"5"`` or ``5``.

        Args:
            value (str | int | float):
                The rating to parse.

        Returns:
            ChallengeRating:
                The matching rating.

        Raises:
            InvalidChallengeRatingError:
                If the value is not part of the rating table.

        """
        try:
            if isinstance(value, bool):
                raise ValueError(value)
            if isinstance(value, str):
                fraction = Fraction(value.strip())
            else:
                fraction = Fraction(value).limit_denominator(8)
        except (ValueError, ZeroDivisionError, TypeError):
            fraction = None
        if fraction is not None:
            label = str(fraction)
            if label in _LABELS:
                return cls(_LABELS.index(label))
        log_error(
            f"Unknown challenge rating: {value!r}",
            {"value": value, "valid": ", ".join(_LABELS)},
        )
        raise InvalidChallengeRatingError(f"Invalid challenge rating: {value!r}")

    @classmethod
    def all(cls) -> list["ChallengeRating"]:
        return [cls(index) for index in range(len(_LABELS))]

    def proficiency_bonus(self) -> int:
        return _PROFICIENCY_BONUS[self.index]

    def xp(self) -> Optional[int]:
        """Returns the experience value, or None for CR 0."""
        return _XP[self.index]

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, ChallengeRating):
            return self.index == other.index
        return NotImplemented

    def __lt__(self, other: Any) -> bool:
        if isinstance(other, ChallengeRating):
            return self.index < other.index
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.index)

    def __str__(self) -> str:
        return _LABELS[self.index]

    def __repr__(self) -> str:
        return f"CR({self})"
