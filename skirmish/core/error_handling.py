"""
Centralized error types and validation helpers.

Illegal game actions are not errors: they are reported as ``Illegal``
values (see ``skirmish.core.legality``). The exceptions below cover
malformed input and broken internal references.
"""

import weakref
from typing import Any, Optional, TypeVar

from .logging import log_error

T = TypeVar("T")


class SkirmishError(Exception):
    """Base class for every error raised by the engine."""


class InvalidInputError(SkirmishError, ValueError):
    """Raised when a dice string, stat document or value is malformed."""


class DiceParseError(InvalidInputError):
    """Raised when a dice expression cannot be parsed."""

    def __init__(self, message: str, text: str, position: int) -> None:
        self.text = text
        self.position = position
        super().__init__(f"{message} at position {position} in '{text}'")


class StatBlockDocumentError(InvalidInputError):
    """Raised when a stat block document fails validation."""


class InvalidAbilityScoreError(InvalidInputError):
    """Raised when an ability score falls outside its valid range."""


class InvalidChallengeRatingError(InvalidInputError):
    """Raised when a challenge rating is not part of the rating table."""


class GoneError(SkirmishError, RuntimeError):
    """Raised when a non-owning back-reference no longer resolves."""

    def __init__(self, what: str) -> None:
        self.what = what
        super().__init__(f"The {what} this object refers to no longer exists")


class UnseededRollError(SkirmishError, RuntimeError):
    """Raised when dice are rolled under test without an explicit seed."""


class UnsupportedMovementError(SkirmishError, NotImplementedError):
    """Raised for movement the engine cannot model (crawling, vertical moves)."""


class TooManyDiceError(SkirmishError, ValueError):
    """Raised when more hit dice are requested than are available."""


def resolve_ref(ref: Optional["weakref.ReferenceType[T]"], what: str) -> T:
    """
    Resolves a weak reference or fails loudly.

    Args:
        ref (weakref.ref | None):
            The weak reference to resolve.
        what (str):
            Human-readable name of the referent, used in the error.

    Returns:
        T:
            The live referent.

    Raises:
        GoneError:
            If the referent has been garbage collected.

    """
    target = ref() if ref is not None else None
    if target is None:
        raise GoneError(what)
    return target


# ==============================================================================
# VALIDATION HELPERS
# ==============================================================================


def require_positive_int(
    value: Any, param_name: str, context: Optional[dict[str, Any]] = None
) -> int:
    """
    Validates that a value is a strictly positive integer.

    Args:
        value: The value to validate
        param_name: Human-readable parameter name for error messages
        context: Additional context for logging

    Returns:
        int: The validated integer

    Raises:
        InvalidInputError: If validation fails
    """
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        log_error(
            f"{param_name} must be a positive integer, got: {value}",
            {**(context or {}), "param_name": param_name, "value": value},
        )
        raise InvalidInputError(f"Invalid {param_name}: {value}")
    return value


def require_in_range(
    value: Any,
    low: int,
    high: int,
    param_name: str,
    context: Optional[dict[str, Any]] = None,
    error: type[InvalidInputError] = InvalidInputError,
) -> int:
    """
    Validates that a value is an integer within an inclusive range.

    Args:
        value: The value to validate
        low: Minimum allowed value (inclusive)
        high: Maximum allowed value (inclusive)
        param_name: Human-readable parameter name for error messages
        context: Additional context for logging
        error: The exception type to raise

    Returns:
        int: The validated integer

    Raises:
        InvalidInputError: If validation fails
    """
    if (
        isinstance(value, bool)
        or not isinstance(value, int)
        or not (low <= value <= high)
    ):
        log_error(
            f"{param_name} must be an integer between {low} and {high}, got: {value}",
            {
                **(context or {}),
                "param_name": param_name,
                "value": value,
                "min_val": low,
                "max_val": high,
            },
        )
        raise error(f"Invalid {param_name}: {value} (expected {low} to {high})")
    return value
