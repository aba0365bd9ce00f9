"""
Core module for the Skirmish combat engine.

This module provides the shared infrastructure used by every other part of
the engine: constants and enumerations, logging, the error taxonomy, the
Legal/Illegal outcome type, lifespans and derived-value cells.
"""

from .cell import AnonymousPart, DerivedValueCell, PartResult
from .error_handling import (
    DiceParseError,
    GoneError,
    InvalidAbilityScoreError,
    InvalidChallengeRatingError,
    InvalidInputError,
    SkirmishError,
    StatBlockDocumentError,
    TooManyDiceError,
    UnseededRollError,
    UnsupportedMovementError,
)
from .legality import Illegal, Legal, Legality, Reason, legal_if
from .lifespan import Lifespan, RSlot

__all__ = [
    "AnonymousPart",
    "DerivedValueCell",
    "PartResult",
    "DiceParseError",
    "GoneError",
    "InvalidAbilityScoreError",
    "InvalidChallengeRatingError",
    "InvalidInputError",
    "SkirmishError",
    "StatBlockDocumentError",
    "TooManyDiceError",
    "UnseededRollError",
    "UnsupportedMovementError",
    "Illegal",
    "Legal",
    "Legality",
    "Reason",
    "legal_if",
    "Lifespan",
    "RSlot",
]
