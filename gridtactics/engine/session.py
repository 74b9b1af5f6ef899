"""BattleSession — owns every component of one battle and the unit table.

The session is the object a driver (UI, HTTP layer, test) talks to.  It
wires one TerrainQuery into the solver and the resolver, shares one
EventBus between units, resolver and turn cycle, and adds the table-level
rules the single-unit records cannot know about: occupancy, whose turn it
is, and whether the battle is already decided.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gridtactics.core.enums import Team
from gridtactics.core.errors import SessionNotReady, UnknownUnit
from gridtactics.core.events import EventBus
from gridtactics.core.terrain import TerrainCatalog
from gridtactics.engine.enemy import PassController
from gridtactics.systems.combat import AttackForecast, CombatResolver, sync_terrain_bonus
from gridtactics.systems.mapgen import generate_battlefield, spawn_armies
from gridtactics.systems.movement import MovementRangeSolver
from gridtactics.systems.rng import DeterministicRNG
from gridtactics.systems.terrain_query import TerrainQuery
from gridtactics.systems.turns import TurnCycle

if TYPE_CHECKING:
    from gridtactics.config import SessionConfig
    from gridtactics.core.enums import BattleOutcome, TurnPhase
    from gridtactics.core.grid import TileMap
    from gridtactics.core.models import Vector2
    from gridtactics.core.units import UnitState
    from gridtactics.engine.enemy import EnemyController

logger = logging.getLogger(__name__)


class BattleSession:
    """The single source of truth for one battle."""

    def __init__(
        self,
        tiles: TileMap | None,
        catalog: TerrainCatalog | None = None,
        bus: EventBus | None = None,
        enemy_controller: EnemyController | None = None,
    ) -> None:
        self.tiles = tiles
        self.catalog = catalog if catalog is not None else TerrainCatalog.default()
        self.bus = bus if bus is not None else EventBus()
        self.enemy_controller: EnemyController = (
            enemy_controller if enemy_controller is not None else PassController()
        )

        self.terrain = TerrainQuery(self.catalog, tiles)
        self.solver = MovementRangeSolver(self.terrain)
        self.resolver = CombatResolver(self.bus)
        self.cycle = TurnCycle(self.bus, on_enemy_turn=self._run_enemy_turn)

        self._units: dict[int, UnitState] = {}
        self._started = False

    @classmethod
    def from_config(
        cls,
        config: SessionConfig,
        enemy_controller: EnemyController | None = None,
    ) -> BattleSession:
        """Generate a battlefield and both armies from *config*."""
        rng = DeterministicRNG(config.seed)
        session = cls(generate_battlefield(config, rng), enemy_controller=enemy_controller)
        for unit in spawn_armies(config, rng):
            session.add_unit(unit)
        return session

    # -- unit table --

    def add_unit(self, unit: UnitState) -> None:
        if unit.id in self._units:
            raise ValueError(f"duplicate unit id {unit.id}")
        unit.bus = self.bus
        sync_terrain_bonus(unit, self.terrain)
        self._units[unit.id] = unit
        self.cycle.register(unit)
        logger.debug("Added unit %d (%s %s) at %s", unit.id, unit.team.name, unit.archetype, unit.position)

    def unit(self, unit_id: int) -> UnitState:
        try:
            return self._units[unit_id]
        except KeyError:
            raise UnknownUnit(unit_id) from None

    def units(self, team: Team | None = None, alive_only: bool = True) -> list[UnitState]:
        return [
            u for u in self._units.values()
            if (team is None or u.team == team) and (u.alive or not alive_only)
        ]

    def unit_at(self, pos: Vector2) -> UnitState | None:
        for u in self._units.values():
            if u.alive and u.position == pos:
                return u
        return None

    def occupied(self, exclude: UnitState | None = None) -> set[Vector2]:
        return {u.position for u in self._units.values() if u.alive and u is not exclude}

    # -- state --

    @property
    def started(self) -> bool:
        return self._started

    @property
    def active_team(self) -> Team:
        return self.cycle.active_team

    @property
    def turn_number(self) -> int:
        return self.cycle.turn_number

    @property
    def phase(self) -> TurnPhase:
        return self.cycle.phase

    @property
    def outcome(self) -> BattleOutcome | None:
        return self.cycle.outcome

    # -- lifecycle --

    def begin(self) -> None:
        """Start the first PLAYER turn.  Raises SessionNotReady if unset."""
        if self._started:
            raise SessionNotReady("battle already started")
        if self.tiles is None:
            raise SessionNotReady("no tile map loaded")
        for team in (Team.PLAYER, Team.ENEMY):
            if not self.cycle.living(team):
                raise SessionNotReady(f"no living {team.name} units registered")
        self._started = True
        logger.info(
            "Battle started: %d player vs %d enemy units",
            len(self.cycle.living(Team.PLAYER)), len(self.cycle.living(Team.ENEMY)),
        )
        self.cycle.start_turn()

    def end_turn(self) -> None:
        self._require_started()
        self.cycle.end_turn()

    # -- driver actions --

    def reachable(self, unit_id: int) -> set[Vector2]:
        """Destinations for *unit_id* this turn, ignoring whose turn it is.

        Enemy-held tiles cannot be crossed; ally-held tiles can be crossed
        but not ended on.
        """
        unit = self.unit(unit_id)
        if not unit.alive or unit.moved_this_turn:
            return set()
        tiles = self.solver.reachable(unit.position, unit.movement_range, self._blocked_for(unit))
        return tiles - self.occupied(exclude=unit)

    def path_to(self, unit_id: int, target: Vector2) -> list[Vector2] | None:
        unit = self.unit(unit_id)
        if target in self.occupied(exclude=unit):
            return None
        return self.solver.path_to(unit.position, unit.movement_range, target, self._blocked_for(unit))

    def move(self, unit_id: int, target: Vector2) -> bool:
        self._require_started()
        unit = self.unit(unit_id)
        if not self._may_act(unit):
            return False
        if target in self.occupied(exclude=unit):
            logger.debug("Unit %d move to %s rejected — occupied", unit.id, target)
            return False
        if not unit.move(target, self.solver, self._blocked_for(unit)):
            return False
        sync_terrain_bonus(unit, self.terrain)
        return True

    def attack(self, attacker_id: int, defender_id: int) -> int:
        self._require_started()
        attacker = self.unit(attacker_id)
        defender = self.unit(defender_id)
        if not self._may_act(attacker):
            return 0
        if defender.team == attacker.team:
            logger.debug("Unit %d attack on %d rejected — same team", attacker.id, defender.id)
            return 0
        return self.resolver.resolve_attack(attacker, defender, self.terrain)

    def forecast(self, attacker_id: int, defender_id: int) -> AttackForecast | None:
        attacker = self.unit(attacker_id)
        defender = self.unit(defender_id)
        if defender.team == attacker.team:
            return None
        return self.resolver.forecast(attacker, defender)

    def heal(self, unit_id: int, amount: int) -> int:
        return self.unit(unit_id).heal(amount)

    # -- internals --

    def _require_started(self) -> None:
        if not self._started:
            raise SessionNotReady("call begin() before driving the battle")

    def _may_act(self, unit: UnitState) -> bool:
        if self.outcome is not None:
            logger.debug("Unit %d action rejected — battle already decided", unit.id)
            return False
        if unit.team != self.active_team:
            logger.debug("Unit %d action rejected — not %s's turn", unit.id, unit.team.name)
            return False
        return True

    def _blocked_for(self, unit: UnitState) -> set[Vector2]:
        return {u.position for u in self._units.values() if u.alive and u.team != unit.team}

    def _run_enemy_turn(self) -> None:
        self.enemy_controller.take_turn(self)
