"""
Dice parser module for the engine.

Turns dice strings such as ``"2d6 + 3"``, ``"d20 + 5"`` or ``"2d20kh1"``
into dice expressions, without rolling anything and without ``eval()``.

Grammar (whitespace is ignored)::

    expr   := term (('+' | '-') term)*
    term   := factor (('*' | '/') factor)*
    factor := '(' expr ')' | dice | ['-'] int
    dice   := [count] 'd' sides ['kh1' | 'kl1']
"""

from catchery import log_warning

from ..core.constants import MAX_DICE_PER_TERM, MAX_DIE_SIDES
from ..core.error_handling import DiceParseError
from .expr import Add, Advantage, Constant, DExpr, Die, Disadvantage, Div, Mul, Sub

_ADDITIVE = {"+": Add, "-": Sub}
_MULTIPLICATIVE = {"*": Mul, "/": Div}


class _DiceParser:
    """Single-use recursive descent parser over one dice string."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    # ---- Scanning ----

    def _skip_spaces(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _peek(self) -> str:
        self._skip_spaces()
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _peek_word(self, word: str) -> bool:
        self._skip_spaces()
        return self.text[self.pos : self.pos + len(word)].lower() == word

    def _error(self, message: str, position: int | None = None) -> DiceParseError:
        position = self.pos if position is None else position
        log_warning(
            f"Invalid dice expression: {message}",
            {"text": self.text, "position": position},
        )
        return DiceParseError(message, self.text, position)

    def _number(self) -> int | None:
        self._skip_spaces()
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos].isdigit():
            self.pos += 1
        if start == self.pos:
            return None
        return int(self.text[start : self.pos])

    # ---- Grammar ----

    def parse(self) -> DExpr:
        if not self.text.strip():
            raise self._error("empty expression", 0)
        expr = self._expr()
        if self._peek():
            raise self._error(f"unexpected '{self._peek()}'")
        return expr

    def _expr(self) -> DExpr:
        expr = self._term()
        while self._peek() in _ADDITIVE:
            node = _ADDITIVE[self._peek()]
            self.pos += 1
            expr = node(expr, self._term())
        return expr

    def _term(self) -> DExpr:
        expr = self._factor()
        while self._peek() in _MULTIPLICATIVE:
            node = _MULTIPLICATIVE[self._peek()]
            self.pos += 1
            expr = node(expr, self._factor())
        return expr

    def _factor(self) -> DExpr:
        char = self._peek()
        if char == "(":
            self.pos += 1
            expr = self._expr()
            if self._peek() != ")":
                raise self._error("missing ')'")
            self.pos += 1
            return expr
        if char == "-":
            self.pos += 1
            value = self._number()
            if value is None:
                raise self._error("expected a number after '-'")
            return Constant(-value)

        start = self.pos
        count = self._number()
        if self._peek().lower() == "d":
            return self._dice(count, start)
        if count is None:
            if not char:
                raise self._error("unexpected end of expression")
            raise self._error(f"unexpected '{char}'")
        return Constant(count)

    def _dice(self, count: int | None, start: int) -> DExpr:
        # Consume the 'd'; sides must follow immediately.
        self.pos += 1
        if self.pos < len(self.text) and self.text[self.pos].isspace():
            raise self._error("expected die sides right after 'd'")
        sides = self._number()
        if sides is None:
            raise self._error("expected die sides after 'd'")
        count = 1 if count is None else count
        if count <= 0:
            raise self._error("dice count must be positive", start)
        if count > MAX_DICE_PER_TERM:
            raise self._error(
                f"too many dice: {count} (limit: {MAX_DICE_PER_TERM})", start
            )
        if sides <= 0:
            raise self._error("die sides must be positive", start)
        if sides > MAX_DIE_SIDES:
            raise self._error(
                f"too many sides: {sides} (limit: {MAX_DIE_SIDES})", start
            )

        for suffix, node in (("kh1", Advantage), ("kl1", Disadvantage)):
            if self._peek_word(suffix):
                if count != 2:
                    raise self._error(f"'{suffix}' needs exactly two dice", start)
                self.pos += len(suffix)
                return node(sides)
        if self._peek_word("kh") or self._peek_word("kl"):
            raise self._error("only 'kh1' and 'kl1' are supported")
        return Die(count, sides)


def parse_dice(text: str) -> DExpr:
    """
    Parses a dice string into an unevaluated expression.

    Args:
        text (str):
            The dice string, e.g. ``"2d6 + 3"`` or ``"2d20kh1 + 4"``.

    Returns:
        DExpr:
            The parsed expression.

    Raises:
        DiceParseError:
            If the string is not a valid dice expression.

    """
    return _DiceParser(text).parse()
