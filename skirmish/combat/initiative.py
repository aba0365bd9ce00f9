"""
Initiative module for the engine.

Keeps the combatants of a combat in initiative order, highest roll first,
and tracks whose turn it is and how many rounds have passed.
"""

from __future__ import annotations

import threading
from functools import cmp_to_key
from typing import TYPE_CHECKING, Iterable, Optional

from catchery import log_debug

from ..core.constants import NiceEnum
from ..core.error_handling import SkirmishError
from .turn import TurnCtx

if TYPE_CHECKING:
    from .combat import Combatant


class InitiativeOrdering(NiceEnum):
    """How combatants with the same roll are ordered."""

    # Whoever was in the roster first stays first.
    STABLE = "STABLE"


class InitiativeRoll:
    """The total of an initiative roll."""

    __slots__ = ("value",)

    def __init__(self, value: int) -> None:
        self.value = int(value)

    def compare(self, other: "InitiativeRoll", ordering: InitiativeOrdering) -> int:
        """
        Compares two rolls under an ordering policy.

        Returns:
            int:
                Negative, zero or positive, as the rolls compare.

        """
        if ordering is InitiativeOrdering.STABLE:
            return (self.value > other.value) - (self.value < other.value)
        raise SkirmishError(f"Unknown initiative ordering: {ordering}")

    def __eq__(self, other: object) -> bool:
        if isinstance(other, InitiativeRoll):
            return self.value == other.value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    def __int__(self) -> int:
        return self.value

    def __repr__(self) -> str:
        return f"InitiativeRoll({self.value})"


class Initiative:
    """
    The members of a combat, always sorted in initiative order.

    Once two combatants have been compared, the outcome is cached for that
    pair, so their relative order never flips on later sorts.
    """

    def __init__(self, ordering: InitiativeOrdering = InitiativeOrdering.STABLE) -> None:
        self.ordering = ordering
        self._lock = threading.RLock()
        self._members: list["Combatant"] = []
        self._orderings: dict[tuple[int, int], int] = {}
        self._turn: Optional[TurnCtx] = None
        self._current = 0
        self._rounds = 0

    def _compare(self, lhs: "Combatant", rhs: "Combatant") -> int:
        key = (id(lhs), id(rhs))
        cached = self._orderings.get(key)
        if cached is not None:
            return cached
        # Highest initiative first.
        result = -lhs.initiative.compare(rhs.initiative, self.ordering)
        self._orderings[key] = result
        return result

    def _sort(self) -> None:
        self._members.sort(key=cmp_to_key(self._compare))

    def add(self, member: "Combatant") -> None:
        """Adds a combatant, then restores initiative order."""
        with self._lock:
            self._members.append(member)
            self._sort()
        log_debug(
            f"{member.name} joined initiative",
            {"roll": member.initiative.value, "members": len(self)},
        )

    def extend(self, members: Iterable["Combatant"]) -> None:
        """Adds many combatants at once."""
        with self._lock:
            self._members.extend(members)
            self._sort()

    def as_list(self) -> list["Combatant"]:
        with self._lock:
            return list(self._members)

    def __len__(self) -> int:
        with self._lock:
            return len(self._members)

    def is_empty(self) -> bool:
        return len(self) == 0

    @property
    def rounds(self) -> int:
        with self._lock:
            return self._rounds

    @property
    def current_index(self) -> int:
        with self._lock:
            return self._current

    def current(self) -> "Combatant":
        """
        Returns the combatant whose turn it is.

        Raises:
            SkirmishError:
                If the roster is empty.

        """
        with self._lock:
            if not self._members:
                raise SkirmishError("There is no one in initiative")
            return self._members[self._current]

    def current_turn(self) -> Optional[TurnCtx]:
        with self._lock:
            return self._turn

    def step(self) -> None:
        """Starts the current combatant's turn, unless it has already started."""
        with self._lock:
            if self._turn is None:
                self._turn = TurnCtx(self.current())

    def advance_turn(self) -> TurnCtx:
        """
        Moves on to the next combatant, starting a new round after the last.

        Returns:
            TurnCtx:
                The fresh turn of the combatant now acting.

        """
        with self._lock:
            self._current += 1
            if self._current >= len(self._members):
                self._current = 0
                self._rounds += 1
                log_debug("New round", {"round": self._rounds})
            self._turn = TurnCtx(self.current())
            log_debug(
                f"{self._turn.combatant().name}'s turn",
                {"index": self._current, "round": self._rounds},
            )
            return self._turn

    def __repr__(self) -> str:
        names = ", ".join(f"{m.name} ({m.initiative.value})" for m in self.as_list())
        return f"Initiative([{names}], round={self.rounds})"
