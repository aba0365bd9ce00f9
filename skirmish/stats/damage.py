"""
Damage module for the engine.

Handles damage parts, their provenance, and the resistance, vulnerability and
immunity rules a creature applies to incoming damage.
"""

import threading
import weakref
from typing import TYPE_CHECKING, Any, Callable, Iterable, Iterator, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..core.cell import CellPart, DerivedValueCell
from ..core.constants import DamageType
from ..core.error_handling import resolve_ref
from ..dice.tree import EvalDiv, EvalMul, EvalTree, Modifier

if TYPE_CHECKING:
    from .stat_block import StatBlock


class DamageHandling(BaseModel):
    """Records how a piece of damage is handled by its target."""

    model_config = ConfigDict(frozen=True)

    resistance: bool = Field(default=False, description="Damage is halved.")
    vulnerability: bool = Field(default=False, description="Damage is doubled.")
    immunity: bool = Field(default=False, description="Damage is negated.")

    def __or__(self, other: "DamageHandling") -> "DamageHandling":
        return DamageHandling(
            resistance=self.resistance or other.resistance,
            vulnerability=self.vulnerability or other.vulnerability,
            immunity=self.immunity or other.immunity,
        )

    def __str__(self) -> str:
        flags = [
            name
            for name, on in (
                ("immunity", self.immunity),
                ("resistance", self.resistance),
                ("vulnerability", self.vulnerability),
            )
            if on
        ]
        return ", ".join(flags) if flags else "normal"


def with_resistance(handling: DamageHandling) -> DamageHandling:
    return handling.model_copy(update={"resistance": True})


def with_vulnerability(handling: DamageHandling) -> DamageHandling:
    return handling.model_copy(update={"vulnerability": True})


def with_immunity(handling: DamageHandling) -> DamageHandling:
    return handling.model_copy(update={"immunity": True})


# ==============================================================================
# DAMAGE PROVENANCE
# ==============================================================================


class DamageActor:
    """
    Whoever dealt the damage: the environment (including the GM), or an
    entity referenced weakly.
    """

    __slots__ = ("_ref",)

    def __init__(self, ref: Optional[weakref.ReferenceType] = None) -> None:
        self._ref = ref

    @classmethod
    def environment(cls) -> "DamageActor":
        return cls(None)

    @classmethod
    def entity(cls, entity: Any) -> "DamageActor":
        return cls(weakref.ref(entity))

    def is_environment(self) -> bool:
        return self._ref is None

    def resolve(self) -> Any:
        """
        Returns the entity that dealt the damage.

        Returns:
            Any:
                The entity, or None for environmental damage.

        Raises:
            GoneError:
                If the entity no longer exists.

        """
        if self._ref is None:
            return None
        return resolve_ref(self._ref, "damage dealer")

    def __repr__(self) -> str:
        if self._ref is None:
            return "DamageActor(environment)"
        target = self._ref()
        name = getattr(target, "name", None) if target is not None else "<gone>"
        return f"DamageActor({name})"


class DamageSource(BaseModel):
    """What the damage came from."""

    model_config = ConfigDict(frozen=True)

    magical: bool = Field(
        default=False,
        description="Whether the damage comes from a magical source.",
    )

    def is_magical(self) -> bool:
        return self.magical


class DamageCause(BaseModel):
    """Who dealt a damage part, and through what."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    actor: DamageActor = Field(
        default_factory=DamageActor.environment,
        description="The entity (or environment) dealing the damage.",
    )
    source: DamageSource = Field(
        default_factory=DamageSource,
        description="The source of the damage.",
    )

    @classmethod
    def environment(cls, magical: bool = False) -> "DamageCause":
        return cls(source=DamageSource(magical=magical))

    @classmethod
    def entity(cls, entity: Any, magical: bool = False) -> "DamageCause":
        return cls(actor=DamageActor.entity(entity), source=DamageSource(magical=magical))

    def is_magical(self) -> bool:
        return self.source.is_magical()


# ==============================================================================
# DAMAGE
# ==============================================================================


class DamagePart(BaseModel):
    """An amount of damage of a single type, with its cause."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    damage_type: DamageType = Field(description="The type of the damage.")
    amount: EvalTree = Field(description="The rolled amount of damage.")
    cause: DamageCause = Field(
        default_factory=DamageCause,
        description="Who dealt the damage, and how.",
    )
    handling: DamageHandling = Field(
        default_factory=DamageHandling,
        description="How the target handled the damage so far.",
    )

    @classmethod
    def environmental(cls, damage_type: DamageType, amount: EvalTree) -> "DamagePart":
        return cls(damage_type=damage_type, amount=amount)

    def value(self) -> int:
        return self.amount.result()

    def colored(self) -> str:
        return (
            f"{self.damage_type.colorize(f'{self.amount} = {self.value()}')} "
            f"{self.damage_type.emoji} {self.damage_type.colored_name}"
        )

    def __add__(self, other: Union["DamagePart", "Damage"]) -> "Damage":
        return Damage([self]) + other

    def __str__(self) -> str:
        return f"{self.amount} {self.damage_type.name}"


class Damage:
    """All the damage dealt by one attack, spell or other cause."""

    def __init__(self, parts: Optional[Iterable[DamagePart]] = None) -> None:
        self.parts: list[DamagePart] = list(parts or [])

    def __add__(self, other: Union[DamagePart, "Damage"]) -> "Damage":
        if isinstance(other, DamagePart):
            return Damage(self.parts + [other])
        if isinstance(other, Damage):
            return Damage(self.parts + other.parts)
        return NotImplemented

    def __iter__(self) -> Iterator[DamagePart]:
        return iter(self.parts)

    def __len__(self) -> int:
        return len(self.parts)

    def total(self) -> int:
        """Sums every part, never going below zero."""
        return max(0, sum(part.value() for part in self.parts))

    def __str__(self) -> str:
        return " + ".join(str(part) for part in self.parts)

    def __repr__(self) -> str:
        return f"Damage({self})"


# ==============================================================================
# DAMAGE EFFECTORS
# ==============================================================================

DamagePredicate = Callable[[DamagePart], bool]
HandlingRule = Callable[[DamageHandling], DamageHandling]


def is_non_magical(part: DamagePart) -> bool:
    return not part.cause.is_magical()


class DamageEffectors:
    """
    A creature's resistances, vulnerabilities and immunities.

    Each damage type has its own cell of ``DamageHandling``. Rules in
    ``all_damage`` apply to every part whose predicate matches, whatever its
    type (e.g. resistance to non-magical damage).
    """

    def __init__(self, owner: "StatBlock") -> None:
        self.cells: dict[DamageType, DerivedValueCell["StatBlock", DamageHandling]] = {
            damage_type: DerivedValueCell(
                owner, DamageHandling(), name=f"damage:{damage_type.name}"
            )
            for damage_type in DamageType
        }
        self._lock = threading.RLock()
        self.all_damage: list[tuple[DamagePredicate, HandlingRule]] = []

    def add_effect(self, damage_type: DamageType, part: CellPart) -> CellPart:
        """Stacks a handling part onto one damage type."""
        return self.cells[damage_type].insert(part)

    def add_all_damage_rule(
        self, predicate: DamagePredicate, rule: HandlingRule
    ) -> None:
        """
        Adds a rule applied to any damage part matching the predicate.

        Args:
            predicate (Callable[[DamagePart], bool]):
                Selects the damage parts the rule applies to.
            rule (Callable[[DamageHandling], DamageHandling]):
                Updates the handling of matching parts.

        """
        with self._lock:
            self.all_damage.append((predicate, rule))

    def handling(self, damage_type: DamageType) -> DamageHandling:
        return self.cells[damage_type].get()

    def _handle_part(self, part: DamagePart) -> DamagePart:
        with self._lock:
            rules = list(self.all_damage)
        handling = DamageHandling()
        for predicate, rule in rules:
            if predicate(part):
                handling = rule(handling)
        handling = handling | self.handling(part.damage_type)

        amount = part.amount
        if handling.immunity:
            amount = EvalMul(amount, Modifier(0))
        # Resistance applies before vulnerability.
        if handling.resistance:
            amount = EvalDiv(amount, Modifier(2))
        if handling.vulnerability:
            amount = EvalMul(amount, Modifier(2))
        return part.model_copy(update={"amount": amount, "handling": handling})

    def calculate(self, damage: Damage) -> Damage:
        """
        Applies immunity, resistance and vulnerability to every part.

        Args:
            damage (Damage):
                The incoming damage.

        Returns:
            Damage:
                The damage as actually taken, with each part's amount
                wrapped by its handling.

        """
        return Damage(self._handle_part(part) for part in damage)
