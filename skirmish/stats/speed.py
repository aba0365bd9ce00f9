"""
Speed module for the engine.

Provides the movement speeds of a creature, one derived-value cell per
movement mode.
"""

from typing import TYPE_CHECKING, Optional

from ..core.cell import DerivedValueCell
from ..core.constants import SpeedType
from ..core.error_handling import UnsupportedMovementError

if TYPE_CHECKING:
    from .stat_block import StatBlock

# Modes a creature may have a dedicated speed for.
SPEED_MODES: tuple[SpeedType, ...] = (
    SpeedType.WALKING,
    SpeedType.BURROWING,
    SpeedType.CLIMBING,
    SpeedType.FLYING,
    SpeedType.SWIMMING,
)

_SHORT_NAMES = {
    SpeedType.BURROWING: "burrow",
    SpeedType.CLIMBING: "climb",
    SpeedType.FLYING: "fly",
    SpeedType.SWIMMING: "swim",
}


class Speeds:
    """Speeds in feet; a mode without a speed is None."""

    def __init__(
        self,
        owner: "StatBlock",
        walking: Optional[int] = None,
        burrowing: Optional[int] = None,
        climbing: Optional[int] = None,
        flying: Optional[int] = None,
        swimming: Optional[int] = None,
    ) -> None:
        initial = dict(zip(SPEED_MODES, (walking, burrowing, climbing, flying, swimming)))
        self.cells: dict[SpeedType, DerivedValueCell["StatBlock", Optional[int]]] = {
            mode: DerivedValueCell(owner, initial[mode], name=f"speed:{mode.name}")
            for mode in SPEED_MODES
        }

    def of_type(self, mode: SpeedType) -> Optional[int]:
        """
        Gets the speed of a movement mode.

        Args:
            mode (SpeedType):
                The movement mode.

        Returns:
            int | None:
                The speed in feet, or None if the creature lacks that mode.

        Raises:
            UnsupportedMovementError:
                For crawling, which has no speed of its own.

        """
        if mode is SpeedType.CRAWLING:
            raise UnsupportedMovementError("Crawling has no dedicated speed")
        return self.cells[mode].get()

    def has(self, mode: SpeedType) -> bool:
        return self.of_type(mode) is not None

    def __str__(self) -> str:
        walking = self.of_type(SpeedType.WALKING) or 0
        parts = [f"{walking} ft."]
        for mode, short in _SHORT_NAMES.items():
            speed = self.of_type(mode)
            if speed is not None:
                parts.append(f"{short} {speed} ft.")
        return ", ".join(parts)
