"""
Legality module for the engine.

Every game action that the rules may forbid reports its outcome as either
``Legal(value)`` or ``Illegal(reason)``. Reason ids are stable strings that
bindings may branch on or translate.
"""

from typing import Any, Generic, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

from .error_handling import SkirmishError

T = TypeVar("T")


class Reason(BaseModel):
    """A stable identifier explaining why an action is illegal."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        description="Stable, upper snake case identifier (e.g. 'OUT_OF_BOUNDS').",
    )

    def model_post_init(self, _: Any) -> None:
        if not self.id:
            raise ValueError("Reason id must be a non-empty string.")

    def __str__(self) -> str:
        return self.id


OUT_OF_BOUNDS = Reason(id="OUT_OF_BOUNDS")
SPACE_OCCUPIED = Reason(id="SPACE_OCCUPIED")
NO_ONE_TO_TARGET = Reason(id="NO_ONE_TO_TARGET")
NOT_ENOUGH_MOVEMENT_LEFT = Reason(id="NOT_ENOUGH_MOVEMENT_LEFT")
CANNOT_USE_MODE = Reason(id="CANNOT_USE_MODE")
NO_ACTIONS_LEFT_IN_TURN = Reason(id="NO_ACTIONS_LEFT_IN_TURN")
CANNOT_MOVE_THERE = Reason(id="CANNOT_MOVE_THERE")
CANNOT_FIT = Reason(id="CANNOT_FIT")


class Legal(Generic[T]):
    """The action was allowed; carries its result."""

    __slots__ = ("value",)

    def __init__(self, value: T = None) -> None:  # type: ignore[assignment]
        self.value = value

    def is_legal(self) -> bool:
        return True

    def is_illegal(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Legal) and other.value == self.value

    def __hash__(self) -> int:
        return hash(("Legal", self.value))

    def __repr__(self) -> str:
        return f"Legal({self.value!r})"


class Illegal:
    """The action was refused by the rules."""

    __slots__ = ("reason",)

    def __init__(self, reason: Reason) -> None:
        self.reason = reason

    def is_legal(self) -> bool:
        return False

    def is_illegal(self) -> bool:
        return True

    def unwrap(self) -> Any:
        raise SkirmishError(f"Called unwrap() on an illegal outcome: {self.reason.id}")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Illegal) and other.reason == self.reason

    def __hash__(self) -> int:
        return hash(("Illegal", self.reason.id))

    def __repr__(self) -> str:
        return f"Illegal({self.reason.id})"


Legality = Union[Legal[T], Illegal]


def legal_if(condition: bool, reason: Reason) -> "Legality[None]":
    """Returns ``Legal(None)`` when the condition holds, ``Illegal(reason)`` otherwise."""
    return Legal(None) if condition else Illegal(reason)
