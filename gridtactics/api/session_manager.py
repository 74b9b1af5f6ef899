"""SessionManager — lock-guarded wrapper around one BattleSession.

HTTP handlers run on worker threads and the enemy "thinking" timer runs on
its own thread, so every access to the session goes through one re-entrant
lock (single writer at a time).
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import TYPE_CHECKING

from gridtactics.core.enums import Team
from gridtactics.engine.session import BattleSession
from gridtactics.utils.event_log import EventLog

if TYPE_CHECKING:
    from gridtactics.config import SessionConfig
    from gridtactics.core.models import Vector2
    from gridtactics.core.units import UnitState
    from gridtactics.systems.combat import AttackForecast

logger = logging.getLogger(__name__)


class TimedEnemyController:
    """Ends the enemy turn after a fixed delay without taking actions.

    A zero delay ends the turn synchronously.
    """

    def __init__(self, manager: SessionManager, delay: float) -> None:
        self._manager = manager
        self._delay = delay
        self._timer: threading.Timer | None = None

    def take_turn(self, session: BattleSession) -> None:
        if self._delay <= 0:
            session.end_turn()
            return
        turn = session.turn_number
        self._timer = threading.Timer(self._delay, self._finish, args=(session, turn))
        self._timer.daemon = True
        self._timer.start()
        logger.debug("Enemy thinking for %.2fs on turn %d", self._delay, turn)

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _finish(self, session: BattleSession, turn: int) -> None:
        with self._manager.lock:
            # Ignore a timer that outlived a reset or a manual end_turn
            if session is not self._manager.session:
                return
            if session.active_team != Team.ENEMY or session.turn_number != turn:
                return
            self._timer = None
            session.end_turn()


class SessionManager:
    """Owns the current session, its event feed, and the enemy timer."""

    def __init__(self, config: SessionConfig) -> None:
        self.config = config
        self.lock = threading.RLock()
        self.event_log = EventLog(config.event_log_limit)
        self.session: BattleSession | None = None
        self._controller: TimedEnemyController | None = None
        self._unsubscribe = None
        self._build(config.seed)

    # -- lifecycle --

    def start(self) -> None:
        with self.lock:
            if self.session is not None and not self.session.started:
                self.session.begin()
                logger.info("SessionManager started (seed=%d)", self._seed)

    def stop(self) -> None:
        with self.lock:
            if self._controller is not None:
                self._controller.cancel()
        logger.info("SessionManager stopped.")

    def reset(self, seed: int | None = None) -> None:
        """Discard the current battle and start a fresh one."""
        with self.lock:
            self.stop()
            self.event_log.clear()
            self._build(self.config.seed if seed is None else seed)
            self.start()
        logger.info("SessionManager reset.")

    # -- driver operations (all under the lock) --

    def reachable(self, unit_id: int) -> list[Vector2]:
        with self.lock:
            return sorted(self._session().reachable(unit_id), key=lambda p: (p.y, p.x))

    def move(self, unit_id: int, target: Vector2) -> bool:
        with self.lock:
            return self._session().move(unit_id, target)

    def attack(self, attacker_id: int, defender_id: int) -> int:
        with self.lock:
            return self._session().attack(attacker_id, defender_id)

    def forecast(self, attacker_id: int, defender_id: int) -> AttackForecast | None:
        with self.lock:
            return self._session().forecast(attacker_id, defender_id)

    def end_turn(self) -> None:
        with self.lock:
            self._session().end_turn()

    def unit(self, unit_id: int) -> UnitState:
        with self.lock:
            return self._session().unit(unit_id)

    # -- internals --

    def _session(self) -> BattleSession:
        if self.session is None:
            raise RuntimeError("SessionManager has no session.")
        return self.session

    def _build(self, seed: int) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
        self._seed = seed
        cfg = self.config
        if seed != cfg.seed:
            cfg = replace(cfg, seed=seed)
        self._controller = TimedEnemyController(self, cfg.enemy_think_seconds)
        session = BattleSession.from_config(cfg, enemy_controller=self._controller)
        self._unsubscribe = self.event_log.attach(session.bus, lambda: session.turn_number)
        self.session = session
