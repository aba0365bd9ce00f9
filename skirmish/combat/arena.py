"""
Arena module for the engine.

The arena answers two questions for the rest of combat: what is in a
square, and whether a creature of some size may enter it. ``SimpleArena``
is a walled rectangle with no obstacles.
"""

from __future__ import annotations

import threading
import weakref
from typing import TYPE_CHECKING, Protocol

from ..core.constants import Size
from ..core.error_handling import resolve_ref
from ..core.legality import OUT_OF_BOUNDS, SPACE_OCCUPIED, Illegal, Legality, legal_if
from .geometry import AreaOfEffect, Point, grid_round, grid_round_point

if TYPE_CHECKING:
    from .combat import Combat, Combatant


class Square:
    """The combatants and areas of effect found at one grid square."""

    __slots__ = ("combatants", "effects")

    def __init__(
        self,
        combatants: list["Combatant"] | None = None,
        effects: list[AreaOfEffect] | None = None,
    ) -> None:
        self.combatants = combatants or []
        self.effects = effects or []

    def is_empty(self) -> bool:
        return not self.combatants

    def __repr__(self) -> str:
        names = ", ".join(c.name for c in self.combatants)
        return f"Square([{names}], effects={len(self.effects)})"


class Arena(Protocol):
    """The spatial side of a combat."""

    def at(self, point: Point) -> Square:
        """What is in the square at this location?"""
        ...

    def is_passable(self, point: Point, size: Size) -> Legality[None]:
        """Can a creature of this size move into this square?"""
        ...


class SimpleArena:
    """
    A rectangular arena from (0, 0) to (width, height), in feet.

    It has walls on its edges and nothing else: no obstacles and no
    difficult terrain.
    """

    def __init__(self, combat: "Combat", width: float, height: float) -> None:
        """
        Creates the arena of a combat.

        Args:
            combat (Combat):
                The combat this arena belongs to. Only a weak reference is
                kept.
            width (float):
                Extent along x, in feet.
            height (float):
                Extent along y, in feet.

        """
        self._combat = weakref.ref(combat)
        self.width = width
        self.height = height
        self._lock = threading.RLock()
        self._effects: list[AreaOfEffect] = []

    @classmethod
    def factory(cls, width: float, height: float):
        """Returns a constructor suitable for ``Combat(arena_factory=...)``."""

        def build(combat: "Combat") -> "SimpleArena":
            return cls(combat, width, height)

        return build

    def combat(self) -> "Combat":
        return resolve_ref(self._combat, "combat of this arena")

    def add_effect(self, aoe: AreaOfEffect) -> None:
        with self._lock:
            self._effects.append(aoe)

    def effects(self) -> list[AreaOfEffect]:
        with self._lock:
            self._effects = [aoe for aoe in self._effects if aoe.is_alive()]
            return list(self._effects)

    def at(self, point: Point) -> Square:
        grid_point = grid_round_point(point)
        combatants = [
            combatant
            for combatant in self.combat().initiative.as_list()
            if grid_round_point(combatant.position()) == grid_point
        ]
        effects = [aoe for aoe in self.effects() if aoe.contains(point)]
        return Square(combatants, effects)

    def is_passable(self, point: Point, size: Size) -> Legality[None]:
        in_arena = 0 <= grid_round(point.x) < self.width and 0 <= grid_round(point.y) < self.height
        if not in_arena:
            return Illegal(OUT_OF_BOUNDS)
        # TODO: Let allies through, and check the squares a large creature spans.
        return legal_if(self.at(point).is_empty(), SPACE_OCCUPIED)

    def __repr__(self) -> str:
        return f"SimpleArena({self.width:g} x {self.height:g} ft.)"
