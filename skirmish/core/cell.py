"""
Derived value module for the engine.

A ``DerivedValueCell`` is a stat owned by an entity. Its value is recomputed
on every read: first from a base rule, then through an ordered stack of
effect parts. Parts may ask to be removed once the read completes.
"""

from __future__ import annotations

import threading
import weakref
from typing import Any, Callable, Generic, NamedTuple, Protocol, TypeVar, Union

from .error_handling import resolve_ref
from .logging import log_debug

Owner = TypeVar("Owner")
Value = TypeVar("Value")


class PartResult(NamedTuple):
    """The outcome of one part in the fold."""

    value: Any
    delete_self: bool = False


class CellPart(Protocol[Owner, Value]):
    """A single effect in a cell's stack."""

    def compute(self, owner: Owner, value: Value) -> PartResult: ...


class AnonymousPart(Generic[Owner, Value]):
    """
    A part defined by a plain callable.

    The callable receives the owner and the accumulated value, and returns
    either a ``PartResult`` or a bare value (meaning: keep this part).
    """

    def __init__(
        self,
        func: Callable[[Owner, Value], Union[PartResult, Value]],
        name: str = "anonymous",
    ) -> None:
        self.func = func
        self.name = name

    def compute(self, owner: Owner, value: Value) -> PartResult:
        result = self.func(owner, value)
        if isinstance(result, PartResult):
            return result
        return PartResult(result)

    def __repr__(self) -> str:
        return f"AnonymousPart({self.name})"


class DerivedValueCell(Generic[Owner, Value]):
    """
    A value computed from a base rule plus a stack of effect parts.

    Nothing is cached: every ``get()`` recomputes the base and folds all
    parts in insertion order. The base rule must not read this same cell.
    """

    def __init__(
        self,
        owner: Owner,
        base: Union[Value, Callable[[Owner], Value]],
        name: str = "",
    ) -> None:
        """
        Creates a cell.

        Args:
            owner (Owner):
                The entity owning this cell. Only a weak reference is kept.
            base (Value | Callable[[Owner], Value]):
                Either a constant, or a function of the owner's other stats.
            name (str):
                Label used in logs.

        """
        self._owner = weakref.ref(owner)
        self._base = base
        self._derived = callable(base)
        self._parts: list[CellPart[Owner, Value]] = []
        self._lock = threading.RLock()
        self.name = name

    def owner(self) -> Owner:
        return resolve_ref(self._owner, "owner of this stat")

    def base(self) -> Value:
        """Computes the base value, ignoring every part."""
        if self._derived:
            return self._base(self.owner())  # type: ignore[operator]
        return self._base  # type: ignore[return-value]

    def get(self) -> Value:
        """
        Computes the current value of the cell.

        Returns:
            Value:
                The base value after every part has been applied.

        """
        with self._lock:
            owner = self.owner()
            value = self.base()
            expired: list[int] = []
            for index, part in enumerate(self._parts):
                value, delete_self = part.compute(owner, value)
                if delete_self:
                    expired.append(index)
            for index in reversed(expired):
                removed = self._parts.pop(index)
                log_debug(
                    "Pruned expired effect part",
                    {"cell": self.name, "part": repr(removed)},
                )
            return value

    def insert(self, part: CellPart[Owner, Value]) -> CellPart[Owner, Value]:
        """Appends a part to the end of the stack and returns it."""
        with self._lock:
            self._parts.append(part)
        return part

    def remove(self, part: CellPart[Owner, Value]) -> bool:
        """Removes a specific part, returning whether it was present."""
        with self._lock:
            for index, existing in enumerate(self._parts):
                if existing is part:
                    del self._parts[index]
                    return True
        return False

    def parts(self) -> list[CellPart[Owner, Value]]:
        with self._lock:
            return list(self._parts)

    def clear(self) -> None:
        with self._lock:
            self._parts.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._parts)

    def __repr__(self) -> str:
        return f"DerivedValueCell({self.name or '?'}, parts={len(self)})"

