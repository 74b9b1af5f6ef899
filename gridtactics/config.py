"""Session configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionConfig:
    """Immutable configuration for one battle session."""

    # Battlefield
    seed: int = 42
    grid_width: int = 16
    grid_height: int = 12
    tile_size: int = 16                    # world units per tile (coord_at)
    terrain_patch_count: int = 6
    patch_radius: int = 2
    river: bool = True

    # Armies (archetype names, one unit each)
    player_units: tuple[str, ...] = ("knight", "soldier", "archer", "scout")
    enemy_units: tuple[str, ...] = ("brute", "soldier", "soldier", "archer")

    # Enemy turn: driver-side "thinking" delay before the enemy ends its turn
    enemy_think_seconds: float = 1.0

    # API event feed
    event_log_limit: int = 500

    # Logging
    log_level: str = "INFO"
