"""
Dice expression module for the engine.

A ``DExpr`` is a symbolic dice computation such as ``d20 + 5`` or
``2d6 * 2``. Nothing is rolled until ``evaluate()`` is called; the result is
an ``EvalTree`` of the same shape holding the faces that came up.

Advantage and disadvantage are applied to every single-die leaf, following
the rules for combining them: applying the same one twice changes nothing,
and once a die has received both it stays a plain die for good.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, ClassVar, Iterator, Optional, Union

from ..core.error_handling import require_positive_int
from . import rng
from .tree import (
    DIE_STYLE,
    MODIFIER_STYLE,
    AdvantageRoll,
    BinaryOp,
    DisadvantageRoll,
    EvalAdd,
    EvalDiv,
    EvalMul,
    EvalSub,
    EvalTree,
    Modifier,
    Roll,
    needs_brackets,
)

Operand = Union["DExpr", int]


def lift(value: Operand) -> "DExpr":
    """Turns an int into a ``Constant``; expressions pass through."""
    if isinstance(value, DExpr):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Constant(value)
    raise TypeError(f"Cannot use {type(value).__name__} in a dice expression")


class DExpr:
    """Base class of dice expression nodes."""

    op: ClassVar[Optional[BinaryOp]] = None

    # ---- Arithmetic ----

    def __add__(self, other: Any) -> "DExpr":
        if not isinstance(other, (DExpr, int)):
            return NotImplemented
        return Add(self, lift(other))

    def __radd__(self, other: Any) -> "DExpr":
        if not isinstance(other, int):
            return NotImplemented
        return Add(lift(other), self)

    def __sub__(self, other: Any) -> "DExpr":
        if not isinstance(other, (DExpr, int)):
            return NotImplemented
        return Sub(self, lift(other))

    def __rsub__(self, other: Any) -> "DExpr":
        if not isinstance(other, int):
            return NotImplemented
        return Sub(lift(other), self)

    def __mul__(self, other: Any) -> "DExpr":
        if not isinstance(other, (DExpr, int)):
            return NotImplemented
        return Mul(self, lift(other))

    def __rmul__(self, other: Any) -> "DExpr":
        if not isinstance(other, int):
            return NotImplemented
        return Mul(lift(other), self)

    def __truediv__(self, other: Any) -> "DExpr":
        if not isinstance(other, (DExpr, int)):
            return NotImplemented
        return Div(self, lift(other))

    def __rtruediv__(self, other: Any) -> "DExpr":
        if not isinstance(other, int):
            return NotImplemented
        return Div(lift(other), self)

    # ---- Transforms ----

    def advantage(self) -> "DExpr":
        """Applies advantage to every single-die roll in this expression."""
        return self

    def disadvantage(self) -> "DExpr":
        """Applies disadvantage to every single-die roll in this expression."""
        return self

    def map_dice(self, func: Callable[["Die"], "DExpr"]) -> "DExpr":
        """
        Rebuilds the expression with every plain die passed through ``func``.

        Advantage and disadvantage rolls are left untouched.

        Args:
            func (Callable[[Die], DExpr]):
                Maps a plain die to its replacement.

        Returns:
            DExpr:
                A new expression; this one is unchanged.

        """
        return self

    def double_dice(self) -> "DExpr":
        """Doubles the number of plain dice rolled, as on a critical hit."""
        return self.map_dice(lambda die: replace(die, count=die.count * 2))

    def dice(self) -> Iterator["DExpr"]:
        """Yields every die leaf, plain or not, from left to right."""
        return iter(())

    # ---- Evaluation ----

    def evaluate(self) -> EvalTree:
        """Rolls every die and returns the tree of results."""
        raise NotImplementedError

    def result(self) -> int:
        """Rolls the expression and reduces it to a number."""
        return self.evaluate().result()

    # ---- Formatting ----

    def to_markup(self) -> str:
        raise NotImplementedError

    def _render(self, markup: bool) -> str:
        return self.to_markup() if markup else str(self)

    def _render_operand(self, parent: BinaryOp, right: bool, markup: bool) -> str:
        text = self._render(markup)
        if needs_brackets(self.op, parent, right):
            return f"({text})"
        return text

    @staticmethod
    def parse(text: str) -> "DExpr":
        """Parses a dice string such as ``"2d6 + 3"``."""
        from .parser import parse_dice

        return parse_dice(text)


@dataclass(frozen=True)
class Constant(DExpr):
    """A flat number."""

    value: int

    def evaluate(self) -> EvalTree:
        return Modifier(self.value)

    def __str__(self) -> str:
        return str(self.value)

    def to_markup(self) -> str:
        return f"[{MODIFIER_STYLE}]{self.value}[/]"


def _die_name(count: int, sides: int) -> str:
    return f"d{sides}" if count == 1 else f"{count}d{sides}"


@dataclass(frozen=True)
class Die(DExpr):
    """
    One or more dice of the same size, summed.

    ``both_adv_dis`` marks a single die that has received both advantage and
    disadvantage: they cancel out, and neither can be applied to it again.
    """

    count: int
    sides: int
    both_adv_dis: bool = False

    def __post_init__(self) -> None:
        require_positive_int(self.count, "dice count", {"sides": self.sides})
        require_positive_int(self.sides, "die sides", {"count": self.count})

    def roll(self) -> tuple[int, ...]:
        return tuple(rng.roll_die(self.sides) for _ in range(self.count))

    def advantage(self) -> DExpr:
        if self.count == 1 and not self.both_adv_dis:
            return Advantage(self.sides)
        return self

    def disadvantage(self) -> DExpr:
        if self.count == 1 and not self.both_adv_dis:
            return Disadvantage(self.sides)
        return self

    def map_dice(self, func: Callable[["Die"], DExpr]) -> DExpr:
        return func(self)

    def dice(self) -> Iterator[DExpr]:
        yield self

    def evaluate(self) -> EvalTree:
        return Roll(self.roll(), self.sides)

    def __str__(self) -> str:
        return _die_name(self.count, self.sides)

    def to_markup(self) -> str:
        return f"[{DIE_STYLE}]{self}[/]"


@dataclass(frozen=True)
class Advantage(DExpr):
    """A single die rolled twice, keeping the highest."""

    sides: int

    def advantage(self) -> DExpr:
        return self

    def disadvantage(self) -> DExpr:
        return Die(1, self.sides, both_adv_dis=True)

    def dice(self) -> Iterator[DExpr]:
        yield self

    def evaluate(self) -> EvalTree:
        return AdvantageRoll(rng.roll_die(self.sides), rng.roll_die(self.sides), self.sides)

    def __str__(self) -> str:
        return f"Adv(d{self.sides})"

    def to_markup(self) -> str:
        return f"Adv([{DIE_STYLE}]d{self.sides}[/])"


@dataclass(frozen=True)
class Disadvantage(DExpr):
    """A single die rolled twice, keeping the lowest."""

    sides: int

    def advantage(self) -> DExpr:
        return Die(1, self.sides, both_adv_dis=True)

    def disadvantage(self) -> DExpr:
        return self

    def dice(self) -> Iterator[DExpr]:
        yield self

    def evaluate(self) -> EvalTree:
        return DisadvantageRoll(rng.roll_die(self.sides), rng.roll_die(self.sides), self.sides)

    def __str__(self) -> str:
        return f"Dis(d{self.sides})"

    def to_markup(self) -> str:
        return f"Dis([{DIE_STYLE}]d{self.sides}[/])"


@dataclass(frozen=True)
class Binary(DExpr):
    lhs: DExpr
    rhs: DExpr

    tree: ClassVar[type] = EvalTree

    def advantage(self) -> DExpr:
        return type(self)(self.lhs.advantage(), self.rhs.advantage())

    def disadvantage(self) -> DExpr:
        return type(self)(self.lhs.disadvantage(), self.rhs.disadvantage())

    def map_dice(self, func: Callable[[Die], DExpr]) -> DExpr:
        return type(self)(self.lhs.map_dice(func), self.rhs.map_dice(func))

    def dice(self) -> Iterator[DExpr]:
        yield from self.lhs.dice()
        yield from self.rhs.dice()

    def evaluate(self) -> EvalTree:
        return self.tree(self.lhs.evaluate(), self.rhs.evaluate())

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
class Add(Binary):
    op: ClassVar[Optional[BinaryOp]] = BinaryOp.ADD
    tree: ClassVar[type] = EvalAdd


@dataclass(frozen=True)
class Sub(Binary):
    op: ClassVar[Optional[BinaryOp]] = BinaryOp.SUB
    tree: ClassVar[type] = EvalSub


@dataclass(frozen=True)
class Mul(Binary):
    op: ClassVar[Optional[BinaryOp]] = BinaryOp.MUL
    tree: ClassVar[type] = EvalMul


@dataclass(frozen=True)
class Div(Binary):
    op: ClassVar[Optional[BinaryOp]] = BinaryOp.DIV
    tree: ClassVar[type] = EvalDiv


D4 = Die(1, 4)
D6 = Die(1, 6)
D8 = Die(1, 8)
D10 = Die(1, 10)
D12 = Die(1, 12)
D20 = Die(1, 20)
D100 = Die(1, 100)


def sum_exprs(exprs: list[DExpr]) -> Optional[DExpr]:
    """Folds expressions left to right with ``+``; None for an empty list."""
    total: Optional[DExpr] = None
    for expr in exprs:
        total = expr if total is None else total + expr
    return total
