"""Grid coordinate model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Vector2:
    """Immutable 2D integer coordinate."""

    x: int = 0
    y: int = 0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def manhattan(self, other: Vector2) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def neighbors(self) -> tuple[Vector2, ...]:
        """The four orthogonal neighbours (no diagonals)."""
        return tuple(self + d for d in CARDINAL_OFFSETS)

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})"


# East, west, south, north
CARDINAL_OFFSETS: tuple[Vector2, ...] = (
    Vector2(1, 0),
    Vector2(-1, 0),
    Vector2(0, 1),
    Vector2(0, -1),
)
