"""
Dice module for the Skirmish combat engine.

This module contains the symbolic dice algebra: expressions built from dice
and constants, their evaluation into rolled trees, the dice string parser,
critical roll detection and the seedable random source all rolls go through.
"""

# Import the expression algebra
from .expr import (
    D4,
    D6,
    D8,
    D10,
    D12,
    D20,
    D100,
    Add,
    Advantage,
    Constant,
    DExpr,
    Die,
    Disadvantage,
    Div,
    Mul,
    Sub,
    sum_exprs,
)

# Import the evaluated trees
from .tree import (
    AdvantageRoll,
    DisadvantageRoll,
    EvalAdd,
    EvalDiv,
    EvalMul,
    EvalSub,
    EvalTree,
    Modifier,
    Roll,
    describe,
)

# Import parsing and criticality
from .critical import Criticality, classify
from .parser import parse_dice

# Import the random source
from .rng import clear_seed, get_seed, random_seed, reset_thread_rng, set_seed

__all__ = [
    "D4",
    "D6",
    "D8",
    "D10",
    "D12",
    "D20",
    "D100",
    "Add",
    "Advantage",
    "Constant",
    "DExpr",
    "Die",
    "Disadvantage",
    "Div",
    "Mul",
    "Sub",
    "sum_exprs",
    "AdvantageRoll",
    "DisadvantageRoll",
    "EvalAdd",
    "EvalDiv",
    "EvalMul",
    "EvalSub",
    "EvalTree",
    "Modifier",
    "Roll",
    "describe",
    "Criticality",
    "classify",
    "parse_dice",
    "clear_seed",
    "get_seed",
    "random_seed",
    "reset_thread_rng",
    "set_seed",
]
