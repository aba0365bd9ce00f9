"""
Evaluated dice module for the engine.

An ``EvalTree`` mirrors the shape of the dice expression it came from, with
every die replaced by the faces actually rolled. Reducing it to a number is
deferred to ``result()``, so the tree doubles as a record of the roll.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, ClassVar, Optional

DIE_STYLE = "bright_blue"
MODIFIER_STYLE = "gold1"


class BinaryOp(Enum):
    """Arithmetic operators allowed in dice expressions."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def is_additive(self) -> bool:
        return self in (BinaryOp.ADD, BinaryOp.SUB)


def needs_brackets(child: Optional[BinaryOp], parent: BinaryOp, right: bool) -> bool:
    """
    Decides whether a sub-expression must be parenthesised.

    Args:
        child (BinaryOp | None):
            Operator at the root of the sub-expression, None for leaves.
        parent (BinaryOp):
            Operator the sub-expression is an operand of.
        right (bool):
            Whether the sub-expression is the right-hand operand.

    Returns:
        bool:
            True when precedence or associativity demands brackets.

    """
    if child is None:
        return False
    if child.is_additive:
        if parent is BinaryOp.ADD:
            return False
        if parent is BinaryOp.SUB:
            return right
        return True
    # Multiplicative child.
    return parent is BinaryOp.DIV and right


def trunc_div(lhs: int, rhs: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(lhs) // abs(rhs)
    return quotient if (lhs >= 0) == (rhs >= 0) else -quotient


def _die_markup(text: str) -> str:
    return f"[{DIE_STYLE}]{text}[/]"


def _modifier_markup(text: str) -> str:
    return f"[{MODIFIER_STYLE}]{text}[/]"


class EvalTree:
    """Base class of evaluated dice nodes."""

    op: ClassVar[Optional[BinaryOp]] = None

    def result(self) -> int:
        raise NotImplementedError

    def to_markup(self) -> str:
        """Renders the tree as rich markup, highlighting dice and modifiers."""
        raise NotImplementedError

    def _render(self, markup: bool) -> str:
        return self.to_markup() if markup else str(self)

    def _render_operand(self, parent: BinaryOp, right: bool, markup: bool) -> str:
        text = self._render(markup)
        if needs_brackets(self.op, parent, right):
            return f"({text})"
        return text


@dataclass(frozen=True)
class Modifier(EvalTree):
    """A flat number that took part in the roll."""

    value: int

    def result(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)

    def to_markup(self) -> str:
        return _modifier_markup(str(self.value))


@dataclass(frozen=True)
class Roll(EvalTree):
    """The faces of one or more dice, summed."""

    faces: tuple[int, ...]
    # Die size, None for faces that did not come from a rolled die.
    sides: Optional[int] = None

    def result(self) -> int:
        return sum(self.faces)

    def _join(self, fmt: Callable[[str], str]) -> str:
        if len(self.faces) == 1:
            return fmt(str(self.faces[0]))
        return "(" + " + ".join(fmt(str(face)) for face in self.faces) + ")"

    def __str__(self) -> str:
        return self._join(str)

    def to_markup(self) -> str:
        return self._join(_die_markup)


@dataclass(frozen=True)
class _PairRoll(EvalTree):
    first: int
    second: int
    sides: int = 20

    label: ClassVar[str] = ""

    def result(self) -> int:
        raise NotImplementedError

    def first_wins(self) -> bool:
        return self.result() == self.first

    def __str__(self) -> str:
        return f"{self.label}({self.first}, {self.second})"

    def to_markup(self) -> str:
        kept = f"[bold {DIE_STYLE}]{{}}[/]"
        dropped = f"[strike {DIE_STYLE}]{{}}[/]"
        if self.first_wins():
            first, second = kept.format(self.first), dropped.format(self.second)
        else:
            first, second = dropped.format(self.first), kept.format(self.second)
        return f"{self.label}({first}, {second})"


@dataclass(frozen=True)
class AdvantageRoll(_PairRoll):
    """Two d20-style rolls where the highest is kept."""

    label: ClassVar[str] = "Adv"

    def result(self) -> int:
        return max(self.first, self.second)


@dataclass(frozen=True)
class DisadvantageRoll(_PairRoll):
    """Two d20-style rolls where the lowest is kept."""

    label: ClassVar[str] = "Dis"

    def result(self) -> int:
        return min(self.first, self.second)


@dataclass(frozen=True)
class EvalBinary(EvalTree):
    lhs: EvalTree
    rhs: EvalTree

    def apply(self, lhs: int, rhs: int) -> int:
        raise NotImplementedError

    def result(self) -> int:
        return self.apply(self.lhs.result(), self.rhs.result())

    def _format(self, markup: bool) -> str:
        assert self.op is not None
        left = self.lhs._render_operand(self.op, False, markup)
        right = self.rhs._render_operand(self.op, True, markup)
        return f"{left} {self.op.symbol} {right}"

    def __str__(self) -> str:
        return self._format(markup=False)

    def to_markup(self) -> str:
        return self._format(markup=True)


@dataclass(frozen=True)
class EvalAdd(EvalBinary):
    op: ClassVar[Optional[BinaryOp]] = BinaryOp.ADD

    def apply(self, lhs: int, rhs: int) -> int:
        return lhs + rhs


@dataclass(frozen=True)
class EvalSub(EvalBinary):
    op: ClassVar[Optional[BinaryOp]] = BinaryOp.SUB

    def apply(self, lhs: int, rhs: int) -> int:
        return lhs - rhs


@dataclass(frozen=True)
class EvalMul(EvalBinary):
    op: ClassVar[Optional[BinaryOp]] = BinaryOp.MUL

    def apply(self, lhs: int, rhs: int) -> int:
        return lhs * rhs


@dataclass(frozen=True)
class EvalDiv(EvalBinary):
    op: ClassVar[Optional[BinaryOp]] = BinaryOp.DIV

    def apply(self, lhs: int, rhs: int) -> int:
        return trunc_div(lhs, rhs)


def describe(tree: EvalTree) -> str:
    """Formats a tree together with its total, e.g. ``d20 + 3 = 17``."""
    return f"{tree} = {tree.result()}"
