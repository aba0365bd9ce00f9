"""
Critical roll module for the engine.

Decides whether a rolled attack is a critical success (a natural 20) or a
critical failure (a natural 1), looking at the d20 faces in the evaluated
tree rather than at the total.
"""

from typing import Optional

from ..core.constants import NiceEnum
from .tree import AdvantageRoll, DisadvantageRoll, EvalBinary, EvalTree, Roll

CRIT_SUCCESS_FACE = 20
CRIT_FAILURE_FACE = 1
CRIT_DIE_SIDES = 20


class Criticality(NiceEnum):
    """Outcome of a roll that came up a natural 20 or a natural 1."""

    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"

    @property
    def color(self) -> str:
        return "bold green" if self is Criticality.SUCCESS else "bold red"

    def colorize(self, message: str) -> str:
        return f"[{self.color}]{message}[/]"


def _classify_faces(first: int, second: int, keep_high: bool) -> Optional[Criticality]:
    faces = (first, second)
    if keep_high:
        # One 20 is enough; failing needs both dice on 1.
        if CRIT_SUCCESS_FACE in faces:
            return Criticality.SUCCESS
        if faces == (CRIT_FAILURE_FACE, CRIT_FAILURE_FACE):
            return Criticality.FAILURE
        return None
    if faces == (CRIT_SUCCESS_FACE, CRIT_SUCCESS_FACE):
        return Criticality.SUCCESS
    if faces == (CRIT_FAILURE_FACE, CRIT_FAILURE_FACE):
        return Criticality.FAILURE
    return None


def classify(tree: EvalTree) -> Optional[Criticality]:
    """
    Classifies an evaluated to-hit roll.

    Args:
        tree (EvalTree):
            The evaluated roll, usually ``d20 + modifiers``.

    Returns:
        Criticality | None:
            SUCCESS or FAILURE when a lone d20 (or a d20 advantage or
            disadvantage pair) shows a natural 20 or 1, None otherwise.
            Other dice never make a roll critical.

    """
    if isinstance(tree, Roll):
        if tree.sides != CRIT_DIE_SIDES or len(tree.faces) != 1:
            return None
        if tree.faces[0] == CRIT_SUCCESS_FACE:
            return Criticality.SUCCESS
        if tree.faces[0] == CRIT_FAILURE_FACE:
            return Criticality.FAILURE
        return None
    if isinstance(tree, (AdvantageRoll, DisadvantageRoll)) and tree.sides != CRIT_DIE_SIDES:
        return None
    if isinstance(tree, AdvantageRoll):
        return _classify_faces(tree.first, tree.second, keep_high=True)
    if isinstance(tree, DisadvantageRoll):
        return _classify_faces(tree.first, tree.second, keep_high=False)
    if isinstance(tree, EvalBinary):
        found = classify(tree.lhs)
        return found if found is not None else classify(tree.rhs)
    return None
