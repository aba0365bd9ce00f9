"""
Attack module for the engine.

Resolves an attack: picking a target in the attacked square, rolling to hit
against its armor class, doubling damage dice on a critical hit and sending
the damage through the target's resistances.
"""

from __future__ import annotations

import weakref
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence, Union

from catchery import log_debug
from pydantic import BaseModel, ConfigDict, Field

from ..core.constants import DamageType, NiceEnum
from ..core.error_handling import resolve_ref
from ..core.legality import NO_ONE_TO_TARGET, Illegal, Legal, Legality
from ..dice.critical import Criticality, classify
from ..dice.expr import D20, Constant, DExpr
from ..dice.parser import parse_dice
from ..dice.tree import EvalTree
from ..stats.damage import Damage, DamageCause, DamagePart
from ..stats.health import DamageTaken
from .geometry import Point

if TYPE_CHECKING:
    from .combat import Combatant


class Range:
    """How far an attack reaches: melee reach, or a normal/long range in feet."""

    __slots__ = ("normal_ft", "long_ft")

    def __init__(self, normal_ft: Optional[float] = None, long_ft: Optional[float] = None) -> None:
        self.normal_ft = normal_ft
        self.long_ft = long_ft

    @classmethod
    def reach(cls) -> "Range":
        return cls()

    @classmethod
    def single(cls, feet: float) -> "Range":
        return cls(feet)

    @classmethod
    def long(cls, normal_ft: float, long_ft: float) -> "Range":
        return cls(normal_ft, long_ft)

    @classmethod
    def parse(cls, value: Any) -> "Range":
        """Reads ``"reach"``, a number of feet, or a ``[normal, long]`` pair."""
        if isinstance(value, Range):
            return value
        if isinstance(value, str) and value.strip().lower() == "reach":
            return cls.reach()
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return cls.single(value)
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return cls.long(float(value[0]), float(value[1]))
        raise ValueError(f"Invalid range: {value!r}")

    def is_reach(self) -> bool:
        return self.normal_ft is None

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Range):
            return (self.normal_ft, self.long_ft) == (other.normal_ft, other.long_ft)
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.normal_ft, self.long_ft))

    def __str__(self) -> str:
        # TODO: Read the reach from the creature's size instead of assuming 5ft.
        if self.normal_ft is None:
            return "Reach 5ft."
        if self.long_ft is None:
            return f"range {self.normal_ft:g} ft."
        return f"range {self.normal_ft:g}/{self.long_ft:g} ft."


class Targeting(NiceEnum):
    """Who an attack may target."""

    SINGLE = "SINGLE"

    @classmethod
    def parse(cls, value: Any) -> "Targeting":
        if isinstance(value, Targeting):
            return value
        if str(value).strip().lower() in ("single", "one"):
            return cls.SINGLE
        raise ValueError(f"Invalid targeting: {value!r}")

    def __str__(self) -> str:
        return "one target"


def _to_damage_type(value: Union[DamageType, str]) -> DamageType:
    if isinstance(value, DamageType):
        return value
    try:
        return DamageType[str(value).strip().upper()]
    except KeyError:
        raise ValueError(f"Unknown damage type: {value!r}") from None


def _to_expr(value: Union[DExpr, int, str]) -> DExpr:
    if isinstance(value, DExpr):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Constant(value)
    return parse_dice(str(value))


class MeleeAttackAction(BaseModel):
    """A melee attack, as listed in a stat block's actions."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(
        description="The name of the attack (e.g., 'Bite').",
    )
    description: str = Field(
        default="",
        description="A description of the attack.",
    )
    to_hit: Union[DExpr, int, str] = Field(
        default=0,
        description="Modifiers added to the d20 attack roll (e.g., 4 or '4 + d4').",
    )
    range: Union[Range, str, float, list, tuple] = Field(
        default_factory=Range.reach,
        description="The reach or range of the attack.",
    )
    targeting: Union[Targeting, str] = Field(
        default=Targeting.SINGLE,
        description="Who the attack may target.",
    )
    damage: list[tuple[Union[DExpr, int, str], Union[DamageType, str]]] = Field(
        description="Damage dealt on a hit, as (amount, damage type) pairs.",
    )

    def model_post_init(self, _: Any) -> None:
        """Validates fields and converts them after model initialization."""
        if not self.name:
            raise ValueError("name must be a non-empty string")
        if not self.damage:
            raise ValueError("damage must be a non-empty list of (amount, type) pairs")
        self.to_hit = _to_expr(self.to_hit)
        self.range = Range.parse(self.range)
        self.targeting = Targeting.parse(self.targeting)
        self.damage = [
            (_to_expr(amount), _to_damage_type(kind))
            for amount, kind in self.damage
        ]

    def to_hit_expr(self) -> DExpr:
        """The full attack roll, ``d20`` plus the attack's modifiers."""
        return D20 + self.to_hit  # type: ignore[operator]

    def damage_parts(self) -> list[tuple[DExpr, DamageType]]:
        return list(self.damage)  # type: ignore[arg-type]

    @property
    def colored_name(self) -> str:
        return f"[bold blue]{self.name}[/]"

    def __str__(self) -> str:
        damage = " + ".join(f"{amount} {kind.display_name}" for amount, kind in self.damage_parts())
        return (
            f"{self.name}. Melee Weapon Attack: {self.to_hit_expr()} to hit, "
            f"{self.range}, {self.targeting}. Hit: {damage} damage."
        )


class AttackRoll:
    """An evaluated attack roll."""

    __slots__ = ("tree",)

    def __init__(self, tree: EvalTree) -> None:
        self.tree = tree

    def criticality(self) -> Optional[Criticality]:
        return classify(self.tree)

    def total(self) -> int:
        return self.tree.result()

    def to_markup(self) -> str:
        crit = self.criticality()
        text = f"{self.tree.to_markup()} = {self.total()}"
        if crit is None:
            return text
        return crit.colorize(f"Critical({crit.display_name}, {text})")

    def __str__(self) -> str:
        crit = self.criticality()
        if crit is None:
            return str(self.tree)
        return f"Critical({crit.display_name}, {self.tree})"

    def __repr__(self) -> str:
        return f"AttackRoll({self}, total={self.total()})"


class AttackResult:
    """What came out of a legal attack."""

    def __init__(
        self,
        attacker: "Combatant",
        target: "Combatant",
        attack: MeleeAttackAction,
        to_hit: AttackRoll,
    ) -> None:
        self._attacker = weakref.ref(attacker)
        self._target = weakref.ref(target)
        self.attack = attack
        self.to_hit = to_hit

    def attacker(self) -> "Combatant":
        return resolve_ref(self._attacker, "attacker")

    def target(self) -> "Combatant":
        return resolve_ref(self._target, "attack target")

    def is_hit(self) -> bool:
        return False


class NoHit(AttackResult):
    """The attack missed."""

    def __repr__(self) -> str:
        return f"NoHit({self.attack.name}, {self.to_hit})"


class Hit(AttackResult):
    """The attack hit and dealt damage."""

    def __init__(
        self,
        attacker: "Combatant",
        target: "Combatant",
        attack: MeleeAttackAction,
        to_hit: AttackRoll,
        damage: Damage,
        taken: DamageTaken,
    ) -> None:
        super().__init__(attacker, target, attack, to_hit)
        self.damage = damage
        self.taken = taken

    def is_hit(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Hit({self.attack.name}, {self.to_hit}, {self.damage}, taken={self.taken.total()})"


TargetSelector = Callable[[Sequence["Combatant"], "Combatant"], Optional["Combatant"]]


def first_occupant(occupants: Sequence["Combatant"], attacker: "Combatant") -> Optional["Combatant"]:
    """Targets the first combatant found in the square."""
    return occupants[0] if occupants else None


def make_attack(
    action: MeleeAttackAction,
    me: "Combatant",
    delta: Point,
    select_target: TargetSelector = first_occupant,
) -> Legality[AttackResult]:
    """
    Makes an attack against the square at ``delta`` from the attacker.

    A natural 1 always misses. Otherwise the attack hits when the roll meets
    the target's armor class, and a natural 20 doubles the damage dice.

    Args:
        action (MeleeAttackAction):
            The attack made.
        me (Combatant):
            The attacker.
        delta (Point):
            Offset of the attacked square from the attacker.
        select_target (TargetSelector):
            Picks the target among the square's occupants.

    Returns:
        Legality[AttackResult]:
            ``Hit`` or ``NoHit``, or Illegal(NO_ONE_TO_TARGET) when no one
            can be targeted there.

    """
    combat = me.combat_ref()
    square = combat.arena.at(me.position() + delta)
    target = select_target(square.combatants, me)
    if target is None:
        return Illegal(NO_ONE_TO_TARGET)

    to_hit = AttackRoll(action.to_hit_expr().evaluate())
    criticality = to_hit.criticality()
    if criticality is Criticality.FAILURE or not target.stats.ac.does_hit(to_hit.total()):
        log_debug(
            f"{me.name} missed {target.name}",
            {"attack": action.name, "to_hit": str(to_hit), "total": to_hit.total()},
        )
        return Legal(NoHit(me, target, action, to_hit))

    parts = []
    for amount, damage_type in action.damage_parts():
        if criticality is Criticality.SUCCESS:
            amount = amount.double_dice()
        parts.append(
            DamagePart(
                damage_type=damage_type,
                amount=amount.evaluate(),
                cause=DamageCause.entity(me),
            )
        )
    damage = Damage(parts)
    taken = target.stats.damage(damage)
    log_debug(
        f"{me.name} hit {target.name}",
        {
            "attack": action.name,
            "to_hit": str(to_hit),
            "damage": str(damage),
            "taken": taken.total(),
            "result": str(taken.result),
        },
    )
    return Legal(Hit(me, target, action, to_hit, damage, taken))
