"""
Combat module for the Skirmish combat engine.

This module runs encounters: geometry and the arena, the initiative roster
and turn state machine, movement budgets, attack resolution and rich combat
reports.
"""

# Import geometry and the arena
from .geometry import (
    AreaOfEffect,
    Cuboid,
    Point,
    Shape,
    grid_round,
    grid_round_point,
    resolve_distance,
)
from .arena import Arena, SimpleArena, Square

# Import attacks and turns
from .attack import (
    AttackResult,
    AttackRoll,
    Hit,
    MeleeAttackAction,
    NoHit,
    Range,
    TargetSelector,
    Targeting,
    first_occupant,
    make_attack,
)
from .movement import MovementCtx
from .turn import ActionCtx, TurnCtx

# Import the combat itself
from .initiative import Initiative, InitiativeOrdering, InitiativeRoll
from .combat import Combat, Combatant
from .report import print_attack, print_initiative, render_attack, render_initiative

__all__ = [
    "AreaOfEffect",
    "Cuboid",
    "Point",
    "Shape",
    "grid_round",
    "grid_round_point",
    "resolve_distance",
    "Arena",
    "SimpleArena",
    "Square",
    "AttackResult",
    "AttackRoll",
    "Hit",
    "MeleeAttackAction",
    "NoHit",
    "Range",
    "TargetSelector",
    "Targeting",
    "first_occupant",
    "make_attack",
    "MovementCtx",
    "ActionCtx",
    "TurnCtx",
    "Initiative",
    "InitiativeOrdering",
    "InitiativeRoll",
    "Combat",
    "Combatant",
    "print_attack",
    "print_initiative",
    "render_attack",
    "render_initiative",
]
