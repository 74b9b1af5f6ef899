"""TurnCycle — alternates control between PLAYER and ENEMY.

States: PLAYER_TURN -> ENEMY_TURN -> PLAYER_TURN ...  ``turn_number``
counts full rounds, so it only increments when control wraps back to the
player.  Victory and defeat are observations recorded after a unit death;
they do not block further transitions.

The enemy side is driven from outside.  When an ENEMY turn starts the
``on_enemy_turn`` hook (if any) is called; that collaborator decides what
to do and eventually calls ``end_turn()`` itself, either synchronously from
inside the hook or at any later time.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from gridtactics.core.enums import BattleOutcome, EventKind, Team, TurnPhase
from gridtactics.core.events import (
    BattleDecided,
    EnemyTurnStarted,
    PlayerTurnStarted,
    TurnEnded,
    TurnStarted,
)

if TYPE_CHECKING:
    from gridtactics.core.events import Event, EventBus
    from gridtactics.core.units import UnitState

logger = logging.getLogger(__name__)

_SIDES = (Team.PLAYER, Team.ENEMY)


class TurnCycle:
    """Whose turn it is, the per-team rosters, and the battle outcome."""

    def __init__(
        self,
        bus: EventBus | None = None,
        on_enemy_turn: Callable[[], None] | None = None,
    ) -> None:
        self.active_team: Team = Team.PLAYER
        self.turn_number: int = 1
        self.outcome: BattleOutcome | None = None
        self.on_enemy_turn = on_enemy_turn
        self._bus = bus
        self._roster: dict[Team, dict[int, UnitState]] = {team: {} for team in _SIDES}
        self._in_start = False
        self._end_requested = False
        if bus is not None:
            bus.subscribe(self._handle_death_event, EventKind.UNIT_DIED)

    # -- roster --

    def register(self, unit: UnitState) -> bool:
        """Add *unit* to its team's roster.  NEUTRAL units are ignored."""
        if unit.team not in self._roster:
            return False
        self._roster[unit.team][unit.id] = unit
        return True

    def unregister(self, unit: UnitState) -> None:
        roster = self._roster.get(unit.team)
        if roster is not None:
            roster.pop(unit.id, None)

    def roster(self, team: Team) -> list[UnitState]:
        return list(self._roster.get(team, {}).values())

    def living(self, team: Team) -> list[UnitState]:
        return [u for u in self._roster.get(team, {}).values() if u.alive]

    @property
    def phase(self) -> TurnPhase:
        return TurnPhase.PLAYER_TURN if self.active_team == Team.PLAYER else TurnPhase.ENEMY_TURN

    def is_actionable(self, unit: UnitState) -> bool:
        """Living, on the active side, and with an action left this turn."""
        return (
            unit.alive
            and unit.team == self.active_team
            and unit.id in self._roster[self.active_team]
            and not unit.turn_done
        )

    def all_actions_exhausted(self) -> bool:
        return not any(self.is_actionable(u) for u in self.living(self.active_team))

    # -- transitions --

    def start_turn(self) -> None:
        """Reset the active side's living units and announce the turn."""
        for unit in self.living(self.active_team):
            unit.reset_turn()

        logger.info("Turn %d: %s turn started", self.turn_number, self.active_team.name)
        self._emit(TurnStarted(self.active_team, self.turn_number))
        if self.active_team == Team.PLAYER:
            self._emit(PlayerTurnStarted(self.turn_number))
            return

        self._emit(EnemyTurnStarted(self.turn_number))
        if self.on_enemy_turn is None:
            return
        self._in_start = True
        try:
            self.on_enemy_turn()
            end_requested = self._end_requested
        finally:
            self._in_start = False
            self._end_requested = False
        if end_requested:
            self.end_turn()

    def end_turn(self) -> None:
        """Hand control to the other side and start its turn."""
        if self._in_start:
            # Called from inside the enemy hook; finish start_turn first.
            self._end_requested = True
            return

        logger.info("Turn %d: %s turn ended", self.turn_number, self.active_team.name)
        self._emit(TurnEnded(self.active_team, self.turn_number))
        if self.active_team == Team.PLAYER:
            self.active_team = Team.ENEMY
        else:
            self.active_team = Team.PLAYER
            self.turn_number += 1
        self.start_turn()

    # -- deaths & outcome --

    def on_unit_died(self, unit: UnitState) -> BattleOutcome | None:
        """Drop *unit* from play and re-evaluate the outcome.

        Defeat is checked before victory, so a mutual wipeout reads as
        DEFEAT.
        """
        self.unregister(unit)

        result: BattleOutcome | None = None
        if not self.living(Team.PLAYER):
            result = BattleOutcome.DEFEAT
        elif not self.living(Team.ENEMY):
            result = BattleOutcome.VICTORY

        if result is not None and self.outcome is None:
            self.outcome = result
            logger.info("Turn %d: battle decided — %s", self.turn_number, result.name)
            self._emit(BattleDecided(result, self.turn_number))
        return result

    def _handle_death_event(self, event: Event) -> None:
        for team in _SIDES:
            unit = self._roster[team].get(event.unit_id)
            if unit is not None and unit.team == event.team:
                self.on_unit_died(unit)
                return

    def _emit(self, event: Event) -> None:
        if self._bus is not None:
            self._bus.publish(event)
