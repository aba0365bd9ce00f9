"""
Stats module for the Skirmish combat engine.

This module contains everything describing a single creature: ability
scores and challenge ratings, the effect parts stacked onto its stats,
damage handling, conditions, health, checks and saves, armor class, speeds,
the stat block tying them together and the loader reading it from data.
"""

# Import scores and ratings
from .abilities import AbilityScore
from .cr import ChallengeRating

# Import effect parts
from .parts import (
    AdvantagePart,
    Bonus,
    ConditionImmunityPart,
    DisadvantagePart,
    EffectPart,
    Immunity,
    Override,
    Proficiency,
    Resistance,
    Vulnerability,
)

# Import damage and conditions
from .damage import (
    Damage,
    DamageActor,
    DamageCause,
    DamageEffectors,
    DamageHandling,
    DamagePart,
    DamageSource,
    is_non_magical,
    with_immunity,
    with_resistance,
    with_vulnerability,
)
from .conditions import (
    ConditionApplication,
    ConditionApplicationResult,
    ConditionImmunities,
    ConditionImmunity,
    ConditionStatus,
    condition_effect,
    register_condition_effect,
    unregister_condition_effect,
)

# Import health
from .health import (
    DamageResult,
    DamageTaken,
    DeathSaveOutcome,
    DeathSaves,
    HP,
    Health,
    HitDice,
    HitDie,
    TempHP,
)

# Import checks, armor class and speeds
from .checks import DC, Check, Outcome, RollOutcome, Save
from .ac import ACPart, ArmorClass
from .speed import SPEED_MODES, Speeds

# Import the stat block and its loader
from .stat_block import CreatureType, StatBlock
from .document import StatBlockDocument, load_stat_block, load_stat_block_file

__all__ = [
    "AbilityScore",
    "ChallengeRating",
    "AdvantagePart",
    "Bonus",
    "ConditionImmunityPart",
    "DisadvantagePart",
    "EffectPart",
    "Immunity",
    "Override",
    "Proficiency",
    "Resistance",
    "Vulnerability",
    "Damage",
    "DamageActor",
    "DamageCause",
    "DamageEffectors",
    "DamageHandling",
    "DamagePart",
    "DamageSource",
    "is_non_magical",
    "with_immunity",
    "with_resistance",
    "with_vulnerability",
    "ConditionApplication",
    "ConditionApplicationResult",
    "ConditionImmunities",
    "ConditionImmunity",
    "ConditionStatus",
    "condition_effect",
    "register_condition_effect",
    "unregister_condition_effect",
    "DamageResult",
    "DamageTaken",
    "DeathSaveOutcome",
    "DeathSaves",
    "HP",
    "Health",
    "HitDice",
    "HitDie",
    "TempHP",
    "DC",
    "Check",
    "Outcome",
    "RollOutcome",
    "Save",
    "ACPart",
    "ArmorClass",
    "SPEED_MODES",
    "Speeds",
    "CreatureType",
    "StatBlock",
    "StatBlockDocument",
    "load_stat_block",
    "load_stat_block_file",
]
