"""Battle session and the enemy decision-provider seam."""

from gridtactics.engine.enemy import EnemyController, ManualController, PassController
from gridtactics.engine.session import BattleSession

__all__ = ["BattleSession", "EnemyController", "ManualController", "PassController"]
