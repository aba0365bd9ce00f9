"""
Geometry module for the engine.

All coordinates are measured in feet. Provides points, the grid distance
rule used for movement, rounding onto grid squares and areas of effect.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from ..core.constants import SQUARE_LENGTH
from ..core.error_handling import UnsupportedMovementError
from ..core.lifespan import Lifespan


@dataclass(frozen=True)
class Point:
    """A point (or displacement) in 3D space."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Any) -> "Point":
        if not isinstance(other, Point):
            return NotImplemented
        return Point(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Any) -> "Point":
        if not isinstance(other, Point):
            return NotImplemented
        return Point(self.x - other.x, self.y - other.y, self.z - other.z)

    def __str__(self) -> str:
        return f"({self.x:g}, {self.y:g}, {self.z:g})"


def resolve_distance(delta: Point) -> float:
    """
    Finds the minimal distance of a move across the grid.

    Diagonal steps cost the same as straight ones: the shorter axis is
    covered diagonally and the rest of the longer axis straight, so
    ``(3, -2)`` costs 3 rather than 5. This only holds on a flat plane.

    Args:
        delta (Point):
            The displacement, in feet.

    Returns:
        float:
            The distance covered, in feet.

    Raises:
        UnsupportedMovementError:
            If the displacement has a vertical component.

    """
    if delta.z != 0:
        raise UnsupportedMovementError(
            f"Vertical movement is not supported, got z = {delta.z:g}"
        )
    dx, dy = abs(delta.x), abs(delta.y)
    diagonal = min(dx, dy)
    return (dx - diagonal) + (dy - diagonal) + diagonal


def grid_round(value: float) -> float:
    """Rounds a coordinate to the nearest grid square."""
    return round(value / SQUARE_LENGTH) * SQUARE_LENGTH


def grid_round_point(point: Point) -> Point:
    """Rounds every coordinate of a point to the nearest grid square."""
    return Point(grid_round(point.x), grid_round(point.y), grid_round(point.z))


class Shape(Protocol):
    """A region of space."""

    def contains(self, point: Point) -> bool: ...


@dataclass(frozen=True)
class Cuboid:
    """An axis-aligned box from ``origin`` spanning ``extent`` on each axis."""

    origin: Point
    extent: Point

    def contains(self, point: Point) -> bool:
        corner = self.origin + self.extent
        return all(
            min(low, high) <= value <= max(low, high)
            for low, high, value in (
                (self.origin.x, corner.x, point.x),
                (self.origin.y, corner.y, point.y),
                (self.origin.z, corner.z, point.z),
            )
        )


class AreaOfEffect:
    """A shape on the battlefield that lasts as long as its cause."""

    def __init__(self, shape: Shape, cause: Lifespan | None = None) -> None:
        self.shape = shape
        self.cause = cause if cause is not None else Lifespan.indefinite()

    def is_alive(self) -> bool:
        return self.cause.is_alive()

    def contains(self, point: Point) -> bool:
        return self.shape.contains(point)

    def __repr__(self) -> str:
        return f"AreaOfEffect({self.shape!r})"
