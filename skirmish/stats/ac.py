"""
Armor class module for the engine.
"""

from typing import TYPE_CHECKING, Optional

from ..core.cell import DerivedValueCell
from ..core.lifespan import Lifespan
from ..dice.expr import DExpr

if TYPE_CHECKING:
    from .stat_block import StatBlock


class ACPart:
    """An armor class value and what grants it (armor, natural armor, a spell)."""

    def __init__(self, ac: DExpr, source: Optional[Lifespan] = None) -> None:
        self.ac = ac
        self.source = source if source is not None else Lifespan.indefinite()

    def __repr__(self) -> str:
        return f"ACPart({self.ac})"


class ArmorClass(DerivedValueCell["StatBlock", ACPart]):
    """The armor class of a creature, as a stack of AC parts."""

    def __init__(self, owner: "StatBlock", base: ACPart) -> None:
        super().__init__(owner, base, name="ac")

    def value(self) -> int:
        return self.get().ac.result()

    def does_hit(self, to_hit: int) -> bool:
        """An attack hits when its roll meets or beats the armor class."""
        return to_hit >= self.value()
