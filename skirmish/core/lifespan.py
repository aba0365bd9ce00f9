"""
Lifespan module for the engine.

Effects, conditions and temporary hit points live only as long as whatever
caused them. A ``Lifespan`` is a non-owning handle on that cause.
"""

import threading
import weakref
from typing import Any, Generic, Optional, Protocol, TypeVar


class Lifespan:
    """Tracks whether the cause of an effect still exists."""

    __slots__ = ("_ref", "_indefinite")

    def __init__(self, ref: Optional[weakref.ReferenceType] = None) -> None:
        self._ref = ref
        self._indefinite = ref is None

    @classmethod
    def of(cls, cause: Any) -> "Lifespan":
        """
        Ties a lifespan to a cause object.

        Args:
            cause (Any):
                Any weak-referenceable object. The lifespan ends when it is
                garbage collected.

        Returns:
            Lifespan:
                A lifespan bound to the cause.

        """
        return cls(weakref.ref(cause))

    @classmethod
    def indefinite(cls) -> "Lifespan":
        """Returns a lifespan that never ends."""
        return cls(None)

    @property
    def is_indefinite(self) -> bool:
        return self._indefinite

    def is_alive(self) -> bool:
        if self._indefinite:
            return True
        return self._ref() is not None  # type: ignore[misc]

    def cause(self) -> Optional[Any]:
        """Returns the cause, or None when indefinite or gone."""
        if self._ref is None:
            return None
        return self._ref()

    def __repr__(self) -> str:
        if self._indefinite:
            return "Lifespan(indefinite)"
        return f"Lifespan({'alive' if self.is_alive() else 'dead'})"


class Ephemeral(Protocol):
    """Anything whose existence is bounded by a lifespan."""

    def is_alive(self) -> bool: ...


E = TypeVar("E", bound=Ephemeral)


class RSlot(Generic[E]):
    """
    An optional, thread-safe slot holding an ephemeral value.

    Reads never return a value whose lifespan has ended; such values are
    dropped from the slot as they are found.
    """

    def __init__(self, value: Optional[E] = None) -> None:
        self._lock = threading.RLock()
        self._value = value

    def get(self) -> Optional[E]:
        with self._lock:
            if self._value is not None and not self._value.is_alive():
                self._value = None
            return self._value

    def replace(self, value: Optional[E]) -> Optional[E]:
        """Stores a new value and returns the previous live one, if any."""
        with self._lock:
            previous = self.get()
            self._value = value
            return previous

    def take(self) -> Optional[E]:
        return self.replace(None)

    def is_empty(self) -> bool:
        return self.get() is None

    def __repr__(self) -> str:
        return f"RSlot({self.get()!r})"
