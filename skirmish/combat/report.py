"""
Combat report module for the engine.

Renders the initiative order and attack results as rich markup, and prints
them to the console.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.constants import Condition
from ..core.utils import cprint, crule
from ..stats.health import DamageResult
from .attack import AttackResult, Hit

if TYPE_CHECKING:
    from .combat import Combat


def _hp_color(current: int, maximum: int) -> str:
    ratio = current / maximum if maximum else 0
    if ratio > 0.5:
        return "green"
    if ratio > 0.25:
        return "yellow"
    return "red"


def render_initiative(combat: "Combat") -> str:
    """
    Renders the initiative order, marking whose turn it is.

    Args:
        combat (Combat):
            The combat to render.

    Returns:
        str:
            Rich markup, one line per combatant.

    """
    lines = [f"[bold yellow]Round {combat.rounds + 1}[/]"]
    current = combat.initiative.current_index
    for index, combatant in enumerate(combat.combatants()):
        stats = combatant.stats
        marker = "▶" if index == current else " "
        color = _hp_color(stats.hp(), stats.max_hp())
        status = ""
        if stats.is_dead():
            status = " [bold red]💀 Dead[/]"
        elif stats.has_condition(Condition.UNCONSCIOUS):
            status = f" {Condition.UNCONSCIOUS.emoji} {Condition.UNCONSCIOUS.colored_name}"
        lines.append(
            f"  {marker} 🎲 {combatant.initiative.value:3}  [bold]{combatant.name}[/] "
            f"[{color}]{stats.hp()}/{stats.max_hp()}[/] HP, AC {stats.ac.value()}{status}"
        )
    return "\n".join(lines)


def render_attack(result: AttackResult) -> str:
    """
    Renders an attack result.

    Args:
        result (AttackResult):
            A hit or a miss.

    Returns:
        str:
            Rich markup describing the roll and the damage taken.

    """
    attacker = result.attacker().name
    target = result.target().name
    head = (
        f"[bold]{attacker}[/] attacks [bold]{target}[/] with "
        f"{result.attack.colored_name}: {result.to_hit.to_markup()}"
    )
    if not isinstance(result, Hit):
        return f"{head} [dim]miss[/]"
    parts = ", ".join(part.colored() for part in result.taken.taken)
    line = f"{head} [bold green]hit[/] → {parts} = [bold]{result.taken.total()}[/] damage"
    if result.taken.result is DamageResult.UNCONSCIOUS:
        line += f" ({Condition.UNCONSCIOUS.colored_name})"
    elif result.taken.result is DamageResult.DEATH:
        line += " ([bold red]dies[/])"
    return line


def print_initiative(combat: "Combat") -> None:
    crule("[bold]Initiative[/]")
    cprint(render_initiative(combat))


def print_attack(result: AttackResult) -> None:
    cprint(render_attack(result))
