"""
Turn module for the engine.

A ``TurnCtx`` is created each time a combatant's turn begins, and holds the
movement and actions it has left.
"""

from __future__ import annotations

import threading
import weakref
from typing import TYPE_CHECKING, Callable, Optional

from catchery import log_debug

from ..core.constants import MAX_ACTIONS_PER_TURN
from ..core.error_handling import resolve_ref
from ..core.legality import NO_ACTIONS_LEFT_IN_TURN, Legality, legal_if
from .attack import AttackResult, MeleeAttackAction, first_occupant, make_attack
from .geometry import Point
from .movement import MovementCtx

if TYPE_CHECKING:
    from .combat import Combatant


class ActionCtx:
    """Actions taken during one turn."""

    def __init__(self, maximum: int = MAX_ACTIONS_PER_TURN) -> None:
        self._lock = threading.RLock()
        self._used = 0
        self.maximum = maximum

    def can_use(self) -> Legality[None]:
        with self._lock:
            return legal_if(self._used < self.maximum, NO_ACTIONS_LEFT_IN_TURN)

    def mark_used(self) -> None:
        with self._lock:
            self._used += 1

    def used(self) -> int:
        with self._lock:
            return self._used

    def __repr__(self) -> str:
        return f"ActionCtx({self.used()}/{self.maximum})"


class TurnCtx:
    """The turn of one combatant."""

    def __init__(self, combatant: "Combatant") -> None:
        self._combatant = weakref.ref(combatant)
        self.movement = MovementCtx(combatant)
        self.actions = ActionCtx()

    def combatant(self) -> "Combatant":
        return resolve_ref(self._combatant, "combatant of this turn")

    def attack(
        self,
        action: MeleeAttackAction,
        delta: Point,
        select_target: Optional[Callable] = None,
    ) -> Legality[AttackResult]:
        """
        Attacks whoever stands at ``delta`` from the combatant, using up an
        action.

        Args:
            action (MeleeAttackAction):
                The attack to make.
            delta (Point):
                Offset of the targeted square from the attacker.
            select_target (Callable | None):
                Picks the target among the square's occupants; the first
                occupant by default.

        Returns:
            Legality[AttackResult]:
                The attack result, NO_ACTIONS_LEFT_IN_TURN when the action
                budget is spent, or NO_ONE_TO_TARGET when the square is
                empty. Only a legal attack uses up an action.

        """
        allowed = self.actions.can_use()
        if allowed.is_illegal():
            return allowed
        result = make_attack(action, self.combatant(), delta, select_target or first_occupant)
        if result.is_legal():
            self.actions.mark_used()
        log_debug(
            f"{self.combatant().name} attacked with {action.name}",
            {"result": repr(result), "actions_used": self.actions.used()},
        )
        return result

    def __repr__(self) -> str:
        name = self._combatant()
        return f"TurnCtx({name.name if name else '<gone>'}, {self.movement!r}, {self.actions!r})"
