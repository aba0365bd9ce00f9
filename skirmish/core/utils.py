"""
Console and formatting helpers shared by the dice, stats and combat modules.
"""

from typing import Any

from rich.console import Console
from rich.rule import Rule

# Shared console; markup strings built by the engine target it.
_console = Console(markup=True, width=120, force_terminal=True, force_jupyter=False)


def cprint(*args: Any, **kwargs: Any) -> None:
    """Prints rich markup through the shared console."""
    _console.print(*args, **kwargs)


def crule(title: str = "", **kwargs: Any) -> None:
    """
    Prints a horizontal rule, optionally titled.

    Args:
        title (str): Markup shown in the middle of the rule.
        **kwargs: Extra arguments for rich's Rule, e.g. style.

    """
    _console.print(Rule(title, **kwargs))


def ccapture(content: Any) -> str:
    """
    Renders content with the shared console and returns the text.

    Args:
        content (Any): Markup string or rich renderable.

    Returns:
        str: What would have been printed, without a trailing newline.

    """
    with _console.capture() as capture:
        _console.print(content, end="")
    return capture.get()


def get_stat_modifier(score: int) -> int:
    """Returns the modifier of an ability score, rounding down."""
    return (score - 10) // 2


def prettify_modifier(value: int) -> str:
    """Formats a modifier with an explicit sign: ``+2``, ``-1`` or ``±0``."""
    if value == 0:
        return "±0"
    return f"{value:+d}"
