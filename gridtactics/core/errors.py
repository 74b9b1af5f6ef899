"""Exception types raised by the simulation core.

Expected gameplay failures (dead actor, out of range, already acted) are
*not* exceptions; they are reported through return values.  The types here
cover data errors that callers resolve with a fallback and programming
errors that must abort the operation.
"""

from __future__ import annotations


class GridTacticsError(Exception):
    """Base class for all engine errors."""


class UnknownTerrain(GridTacticsError, KeyError):
    """A terrain id has no entry in the catalogue."""

    def __init__(self, terrain_id: object) -> None:
        super().__init__(terrain_id)
        self.terrain_id = terrain_id

    def __str__(self) -> str:
        return f"unknown terrain id {self.terrain_id!r}"


class UnknownUnit(GridTacticsError, KeyError):
    """A unit id is not registered with the session."""

    def __init__(self, unit_id: object) -> None:
        super().__init__(unit_id)
        self.unit_id = unit_id

    def __str__(self) -> str:
        return f"unknown unit id {self.unit_id!r}"


class SessionNotReady(GridTacticsError, RuntimeError):
    """The session was driven before its required setup was complete."""
