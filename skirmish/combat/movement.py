"""
Movement module for the engine.

Tracks the movement a combatant spends during its turn. Switching between
speeds is allowed, but movement already spent in any mode is taken off the
speed of the new mode.
"""

from __future__ import annotations

import threading
import weakref
from typing import TYPE_CHECKING

from catchery import log_debug

from ..core.constants import SpeedType
from ..core.error_handling import InvalidInputError, UnsupportedMovementError, resolve_ref
from ..core.legality import (
    CANNOT_USE_MODE,
    NOT_ENOUGH_MOVEMENT_LEFT,
    Illegal,
    Legal,
    Legality,
)
from ..stats.speed import SPEED_MODES
from .geometry import Point, resolve_distance

if TYPE_CHECKING:
    from .combat import Combatant


class MovementCtx:
    """Movement spent per mode during one turn."""

    def __init__(self, combatant: "Combatant") -> None:
        self._combatant = weakref.ref(combatant)
        self._lock = threading.RLock()
        self._used: dict[SpeedType, int] = {mode: 0 for mode in SPEED_MODES}

    def combatant(self) -> "Combatant":
        return resolve_ref(self._combatant, "moving combatant")

    def used(self) -> int:
        """Total movement spent this turn, across all modes."""
        with self._lock:
            return sum(self._used.values())

    def used_by(self, mode: SpeedType) -> int:
        if mode is SpeedType.CRAWLING:
            return 0
        with self._lock:
            return self._used[mode]

    def _speed(self, mode: SpeedType) -> int | None:
        if mode is SpeedType.CRAWLING:
            raise UnsupportedMovementError("Crawling is not supported")
        return self.combatant().stats.speeds.of_type(mode)

    def any_movement_left(self, mode: SpeedType) -> Legality[None]:
        """Checks whether any movement is left in a mode."""
        speed = self._speed(mode)
        if speed is None:
            return Illegal(CANNOT_USE_MODE)
        if speed <= self.used():
            return Illegal(NOT_ENOUGH_MOVEMENT_LEFT)
        return Legal(None)

    def try_move(self, mode: SpeedType, displacement: Point) -> Legality[None]:
        """
        Tries to move the combatant by a displacement.

        Args:
            mode (SpeedType):
                The movement mode used.
            displacement (Point):
                The move, in feet. Must lie on the ground plane (z = 0).

        Returns:
            Legality[None]:
                Legal if the combatant moved. Illegal with CANNOT_USE_MODE
                when it has no speed of that mode, NOT_ENOUGH_MOVEMENT_LEFT
                when the move exceeds what is left of it, or whatever reason
                the arena gives for refusing the destination.

        Raises:
            UnsupportedMovementError:
                For crawling, or a move with a vertical component.
            InvalidInputError:
                If the move does not cover a whole number of feet.

        """
        speed = self._speed(mode)
        if speed is None:
            return Illegal(CANNOT_USE_MODE)

        distance = resolve_distance(displacement)
        if distance != int(distance):
            raise InvalidInputError(f"Movement must cover whole feet, got {distance:g}")
        feet = int(distance)

        combatant = self.combatant()
        combat = combatant.combat_ref()
        with self._lock:
            if feet > speed - self.used():
                return Illegal(NOT_ENOUGH_MOVEMENT_LEFT)
            destination = combatant.position() + displacement
            passable = combat.arena.is_passable(destination, combatant.stats.size)
            if passable.is_illegal():
                return passable
            self._used[mode] += feet
            combatant.set_position(destination)
        log_debug(
            f"{combatant.name} moved",
            {"mode": mode.name, "feet": feet, "to": str(destination), "used": self.used()},
        )
        return Legal(None)

    def __repr__(self) -> str:
        spent = ", ".join(f"{m.name.lower()}={v}" for m, v in self._used.items() if v)
        return f"MovementCtx({spent or 'none'})"
