"""Unit state, archetype presets, and per-unit transitions.

A unit is one concrete ``UnitState`` record.  Archetypes are data-only
stat templates applied at construction; archetype-specific death
behaviour is an optional ``on_death`` callback rather than a subclass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from pydantic import Field
from pydantic.dataclasses import dataclass as pydantic_dataclass

from gridtactics.core.enums import Team
from gridtactics.core.events import DamageTaken, HealthChanged, UnitDied, UnitMoved
from gridtactics.core.models import Vector2

if TYPE_CHECKING:
    from gridtactics.core.events import EventBus
    from gridtactics.systems.movement import MovementRangeSolver

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Archetype templates
# ---------------------------------------------------------------------------

@pydantic_dataclass(frozen=True)
class UnitArchetype:
    """Stat preset applied when a unit is created."""

    name: str
    max_health: int = Field(gt=0)
    attack_damage: int = Field(ge=0)
    base_defense: int = Field(0, ge=0)
    movement_range: int = Field(5, ge=0)
    attack_range: int = Field(1, ge=1)


ARCHETYPES: dict[str, UnitArchetype] = {}


def _reg(a: UnitArchetype) -> None:
    ARCHETYPES[a.name] = a


_reg(UnitArchetype("soldier", max_health=20, attack_damage=7,  base_defense=2, movement_range=5, attack_range=1))
_reg(UnitArchetype("knight",  max_health=26, attack_damage=9,  base_defense=6, movement_range=4, attack_range=1))
_reg(UnitArchetype("archer",  max_health=16, attack_damage=6,  base_defense=1, movement_range=5, attack_range=2))
_reg(UnitArchetype("scout",   max_health=15, attack_damage=5,  base_defense=1, movement_range=7, attack_range=1))
_reg(UnitArchetype("brute",   max_health=30, attack_damage=11, base_defense=0, movement_range=4, attack_range=1))


def get_archetype(name: str) -> UnitArchetype:
    """Look up an archetype by name; raises KeyError when absent."""
    return ARCHETYPES[name]


# ---------------------------------------------------------------------------
# Unit state
# ---------------------------------------------------------------------------

DeathHook = Callable[["UnitState"], None]


@dataclass(slots=True, eq=False)
class UnitState:
    """Mutable record for one combatant.

    ``alive`` always equals ``current_health > 0`` after any health change.
    Dead units keep their record (for reporting) but every action on them
    is rejected.
    """

    id: int
    team: Team
    position: Vector2
    max_health: int
    attack_damage: int
    base_defense: int = 0
    movement_range: int = 5
    attack_range: int = 1
    current_health: int | None = None
    archetype: str = "custom"
    terrain_defense_bonus: int = 0
    alive: bool = True
    moved_this_turn: bool = False
    attacked_this_turn: bool = False
    on_death: DeathHook | None = field(default=None, repr=False)
    bus: EventBus | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.max_health <= 0:
            raise ValueError(f"max_health must be positive, got {self.max_health}")
        if self.attack_damage < 0 or self.base_defense < 0 or self.movement_range < 0:
            raise ValueError("attack_damage, base_defense and movement_range must be >= 0")
        if self.attack_range < 1:
            raise ValueError(f"attack_range must be >= 1, got {self.attack_range}")
        if self.current_health is None:
            self.current_health = self.max_health
        self.current_health = max(0, min(self.current_health, self.max_health))
        self.alive = self.current_health > 0

    @classmethod
    def from_archetype(
        cls,
        unit_id: int,
        archetype: UnitArchetype | str,
        position: Vector2,
        team: Team,
        on_death: DeathHook | None = None,
    ) -> UnitState:
        if isinstance(archetype, str):
            archetype = get_archetype(archetype)
        return cls(
            id=unit_id,
            team=team,
            position=position,
            max_health=archetype.max_health,
            attack_damage=archetype.attack_damage,
            base_defense=archetype.base_defense,
            movement_range=archetype.movement_range,
            attack_range=archetype.attack_range,
            archetype=archetype.name,
            on_death=on_death,
        )

    # -- derived --

    @property
    def effective_defense(self) -> int:
        return self.base_defense + self.terrain_defense_bonus

    @property
    def health_ratio(self) -> float:
        return self.current_health / self.max_health

    @property
    def turn_done(self) -> bool:
        return self.moved_this_turn and self.attacked_this_turn

    # -- transitions --

    def move(
        self,
        target: Vector2,
        solver: MovementRangeSolver,
        blocked: set[Vector2] | frozenset[Vector2] | None = None,
    ) -> bool:
        """Move to *target* if it lies inside this turn's movement range."""
        if not self.alive:
            logger.debug("Unit %d move rejected — dead", self.id)
            return False
        if self.moved_this_turn:
            logger.debug("Unit %d move rejected — already moved", self.id)
            return False
        if target not in solver.reachable(self.position, self.movement_range, blocked):
            logger.debug("Unit %d move to %s rejected — not reachable", self.id, target)
            return False

        old = self.position
        self.position = target
        self.moved_this_turn = True
        logger.info("Unit %d (%s) moved %s -> %s", self.id, self.team.name, old, target)
        self._emit(UnitMoved(self.id, old, target))
        return True

    def take_damage(self, amount: int, source_id: int | None = None) -> int:
        """Subtract *amount* health; returns the amount requested.

        The single health-decrement path: emits damage/health events and, on
        reaching zero, marks the unit dead and fires the death notification.
        """
        if not self.alive:
            return 0
        self.current_health -= amount
        self._emit(DamageTaken(self.id, amount, source_id))
        if self.current_health <= 0:
            self.current_health = 0
            self.alive = False
        self._emit(HealthChanged(self.id, self.current_health, self.max_health))
        if not self.alive:
            self._die()
        return amount

    def heal(self, amount: int) -> int:
        """Restore up to *amount* health; returns the amount actually restored."""
        if amount < 0:
            raise ValueError(f"heal amount must be >= 0, got {amount}")
        if not self.alive:
            return 0
        before = self.current_health
        self.current_health = min(self.current_health + amount, self.max_health)
        restored = self.current_health - before
        if restored:
            self._emit(HealthChanged(self.id, self.current_health, self.max_health))
        return restored

    def reset_turn(self) -> None:
        self.moved_this_turn = False
        self.attacked_this_turn = False

    # -- internals --

    def _die(self) -> None:
        logger.info("Unit %d (%s %s) died", self.id, self.team.name, self.archetype)
        if self.on_death is not None:
            self.on_death(self)
        self._emit(UnitDied(self.id, self.team))

    def _emit(self, event) -> None:
        if self.bus is not None:
            self.bus.publish(event)
