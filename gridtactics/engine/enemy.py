"""Enemy decision-provider seam.

The core does not decide what enemy units do.  A controller is handed the
session when the ENEMY turn starts and must eventually call
``session.end_turn()``; it may do so synchronously or later.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from gridtactics.engine.session import BattleSession

logger = logging.getLogger(__name__)


class EnemyController(Protocol):
    def take_turn(self, session: BattleSession) -> None:
        """Act for the enemy side; responsible for ending the turn."""


class PassController:
    """Takes no actions and ends the enemy turn immediately."""

    def take_turn(self, session: BattleSession) -> None:
        logger.debug("Enemy passes on turn %d", session.turn_number)
        session.end_turn()


class ManualController:
    """Leaves the enemy turn open; the driver calls ``end_turn()`` later."""

    def take_turn(self, session: BattleSession) -> None:
        logger.debug("Enemy turn %d awaiting external end_turn()", session.turn_number)
