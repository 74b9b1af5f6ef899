"""CombatResolver — validates and resolves attacks between two units.

Damage model:
    effective_defense = base_defense + terrain_defense_bonus
    damage            = max(1, attack_damage - effective_defense)

An attack that fails a precondition is a *rejection*: it returns 0 and
leaves both units untouched.  Preconditions are checked in a fixed order
(dead attacker, missing or dead defender, already attacked, out of range).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

from gridtactics.core.events import AttackPerformed

if TYPE_CHECKING:
    from gridtactics.core.events import EventBus
    from gridtactics.core.units import UnitState
    from gridtactics.systems.terrain_query import TerrainQuery

logger = logging.getLogger(__name__)

MIN_DAMAGE = 1


@dataclass(frozen=True, slots=True)
class AttackForecast:
    """Side-effect-free preview of an attack."""

    damage: int
    effective_defense: int
    lethal: bool
    in_range: bool


def get_effective_defense(unit: UnitState) -> int:
    """Base defence plus the bonus of the tile the unit stands on."""
    return unit.base_defense + unit.terrain_defense_bonus


def sync_terrain_bonus(unit: UnitState, terrain: TerrainQuery) -> int:
    """Refresh ``unit.terrain_defense_bonus`` from its current tile."""
    unit.terrain_defense_bonus = terrain.defense_bonus(unit.position)
    return unit.terrain_defense_bonus


def compute_damage(attack_damage: int, effective_defense: int) -> int:
    return max(MIN_DAMAGE, attack_damage - effective_defense)


class CombatResolver:
    """Stateless handler for attacks; publishes to *bus* when given."""

    def __init__(self, bus: EventBus | None = None) -> None:
        self._bus = bus

    def rejection_reason(self, attacker: UnitState, defender: UnitState | None) -> str | None:
        """Why an attack would be rejected, or None when it is legal."""
        if not attacker.alive:
            return "attacker dead"
        if defender is None or not defender.alive:
            return "target dead or missing"
        if attacker.attacked_this_turn:
            return "already attacked"
        if attacker.position.manhattan(defender.position) > attacker.attack_range:
            return "out of range"
        return None

    def can_attack(self, attacker: UnitState, defender: UnitState | None) -> bool:
        return self.rejection_reason(attacker, defender) is None

    def resolve_attack(
        self,
        attacker: UnitState,
        defender: UnitState | None,
        terrain_query: TerrainQuery | None = None,
    ) -> int:
        """Resolve one attack and return the damage dealt (0 = rejected).

        When *terrain_query* is given the defender's terrain bonus is re-read
        from its tile first; otherwise the value already on the unit is used.
        """
        reason = self.rejection_reason(attacker, defender)
        if reason is not None:
            logger.debug(
                "Unit %d attack on %s rejected — %s",
                attacker.id, defender.id if defender is not None else None, reason,
            )
            return 0

        if terrain_query is not None:
            sync_terrain_bonus(defender, terrain_query)

        effective_defense = get_effective_defense(defender)
        damage = compute_damage(attacker.attack_damage, effective_defense)

        defender.take_damage(damage, source_id=attacker.id)
        attacker.attacked_this_turn = True

        logger.info(
            "Unit %d (%s) hits unit %d (%s) for %d damage [DEF %d, HP: %d/%d]%s",
            attacker.id, attacker.team.name,
            defender.id, defender.team.name,
            damage, effective_defense,
            defender.current_health, defender.max_health,
            " KILL" if not defender.alive else "",
        )
        if self._bus is not None:
            self._bus.publish(AttackPerformed(attacker.id, defender.id, damage))
        return damage

    def forecast(self, attacker: UnitState, defender: UnitState | None) -> AttackForecast | None:
        """Preview an attack; None when liveness or action flags forbid it.

        Range is reported rather than enforced so a driver can show the
        numbers before moving into range.
        """
        if not attacker.alive or defender is None or not defender.alive:
            return None
        if attacker.attacked_this_turn:
            return None
        effective_defense = get_effective_defense(defender)
        damage = compute_damage(attacker.attack_damage, effective_defense)
        return AttackForecast(
            damage=damage,
            effective_defense=effective_defense,
            lethal=damage >= defender.current_health,
            in_range=attacker.position.manhattan(defender.position) <= attacker.attack_range,
        )

    @staticmethod
    def targets_in_range(attacker: UnitState, candidates: Iterable[UnitState]) -> list[UnitState]:
        """Living units of another team within the attacker's range."""
        return [
            u for u in candidates
            if u.alive
            and u.team != attacker.team
            and u is not attacker
            and attacker.position.manhattan(u.position) <= attacker.attack_range
        ]
