"""Simulation systems: terrain queries, movement, combat, turns, map generation."""

from gridtactics.systems.combat import CombatResolver, get_effective_defense
from gridtactics.systems.movement import MovementRangeSolver
from gridtactics.systems.rng import DeterministicRNG
from gridtactics.systems.terrain_query import TerrainQuery
from gridtactics.systems.turns import TurnCycle

__all__ = [
    "CombatResolver",
    "DeterministicRNG",
    "MovementRangeSolver",
    "TerrainQuery",
    "TurnCycle",
    "get_effective_defense",
]
