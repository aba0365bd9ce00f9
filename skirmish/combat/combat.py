"""
Combat module for the engine.

A ``Combat`` owns its initiative roster and its arena. Combatants point back
to their combat through a weak reference.
"""

from __future__ import annotations

import threading
import weakref
from typing import TYPE_CHECKING, Callable, Optional

from catchery import log_debug

from ..core.error_handling import resolve_ref
from ..stats.stat_block import StatBlock
from .geometry import Point
from .initiative import Initiative, InitiativeOrdering, InitiativeRoll

if TYPE_CHECKING:
    from .arena import Arena
    from .turn import TurnCtx


class Combatant:
    """A creature taking part in a combat."""

    def __init__(
        self,
        combat: "Combat",
        name: str,
        initiative: InitiativeRoll,
        stats: StatBlock,
        position: Point,
    ) -> None:
        """
        Creates a combatant.

        Args:
            combat (Combat):
                The combat joined. Only a weak reference is kept.
            name (str):
                Name shown in the roster.
            initiative (InitiativeRoll):
                The combatant's initiative.
            stats (StatBlock):
                The combatant's statistics, owned by the combatant.
            position (Point):
                Where the combatant stands, in feet.

        """
        self._combat = weakref.ref(combat)
        self.name = name
        self.initiative = initiative
        self.stats = stats
        self._position = position
        self._lock = threading.RLock()

    def combat_ref(self) -> "Combat":
        return resolve_ref(self._combat, "combat of this combatant")

    def position(self) -> Point:
        with self._lock:
            return self._position

    def set_position(self, position: Point) -> Point:
        """Moves the combatant, returning where it was."""
        with self._lock:
            old, self._position = self._position, position
            return old

    def __repr__(self) -> str:
        return f"Combatant({self.name}, {self.initiative.value}, at {self.position()})"


class Combat:
    """An encounter: the combatants in initiative order and their arena."""

    def __init__(
        self,
        arena_factory: Callable[["Combat"], "Arena"],
        ordering: InitiativeOrdering = InitiativeOrdering.STABLE,
    ) -> None:
        """
        Creates a combat.

        Args:
            arena_factory (Callable[[Combat], Arena]):
                Builds the arena from the combat it belongs to, e.g.
                ``SimpleArena.factory(60, 60)``.
            ordering (InitiativeOrdering):
                How ties in initiative are broken.

        """
        self.initiative = Initiative(ordering)
        self.arena: "Arena" = arena_factory(self)

    def add_combatant(
        self,
        name: str,
        stats: StatBlock,
        position: Point,
        initiative: Optional[int] = None,
    ) -> Combatant:
        """
        Adds a combatant to the combat.

        Args:
            name (str):
                The combatant's name.
            stats (StatBlock):
                Its statistics.
            position (Point):
                Where it starts.
            initiative (int | None):
                A fixed initiative; rolled from the stat block when omitted.

        Returns:
            Combatant:
                The new combatant, already in initiative order.

        """
        if initiative is None:
            initiative = stats.roll_initiative().result()
        combatant = Combatant(self, name, InitiativeRoll(initiative), stats, position)
        self.initiative.add(combatant)
        log_debug(
            f"{name} entered combat",
            {"initiative": initiative, "position": str(position)},
        )
        return combatant

    def combatants(self) -> list[Combatant]:
        return self.initiative.as_list()

    def __len__(self) -> int:
        return len(self.initiative)

    def is_empty(self) -> bool:
        return len(self) == 0

    def step(self) -> None:
        """Prompts whoever's turn it is; does not change whose turn it is."""
        self.initiative.step()

    def advance_turn(self) -> "TurnCtx":
        return self.initiative.advance_turn()

    def current(self) -> Combatant:
        return self.initiative.current()

    def current_turn(self) -> Optional["TurnCtx"]:
        return self.initiative.current_turn()

    @property
    def rounds(self) -> int:
        return self.initiative.rounds

    def __repr__(self) -> str:
        return f"Combat({self.initiative!r}, {self.arena!r})"
