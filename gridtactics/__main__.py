"""Entry point: ``python -m gridtactics``.

Supports two modes:
  - ``python -m gridtactics``              → Launch the FastAPI driver server
  - ``python -m gridtactics range --unit 1`` → Print a unit's movement range
"""

from __future__ import annotations

import argparse
import logging

from gridtactics.core.grid import ASCII_LEGEND

logger = logging.getLogger(__name__)

_GLYPHS = {int(v): k for k, v in ASCII_LEGEND.items()}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Turn-based tactical grid engine")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI driver server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--think", type=float, default=1.0, help="Enemy thinking delay in seconds")
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Range inspection ---
    rng = sub.add_parser("range", help="Print the battlefield with a unit's reachable tiles")
    rng.add_argument("--seed", type=int, default=42)
    rng.add_argument("--unit", type=int, default=1)
    rng.add_argument("--log-level", type=str, default="WARNING", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from gridtactics.api.app import create_app
    from gridtactics.config import SessionConfig

    config = SessionConfig(
        seed=args.seed,
        enemy_think_seconds=args.think,
        log_level=args.log_level,
    )
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def render_range(session, unit_id: int) -> str:
    """ASCII battlefield: units as P/E, reachable tiles as '*'."""
    from gridtactics.core.enums import Team
    from gridtactics.core.models import Vector2

    tiles = session.tiles
    reach = session.reachable(unit_id)
    lines: list[str] = []
    for y in range(tiles.height):
        row: list[str] = []
        for x in range(tiles.width):
            pos = Vector2(x, y)
            occupant = session.unit_at(pos)
            if occupant is not None:
                glyph = "P" if occupant.team == Team.PLAYER else "E"
                row.append(glyph.lower() if occupant.id == unit_id else glyph)
            elif pos in reach:
                row.append("*")
            else:
                tid = tiles.tile_at(pos)
                row.append(" " if tid is None else _GLYPHS.get(tid, "?"))
        lines.append("".join(row))
    return "\n".join(lines)


def _run_range(args: argparse.Namespace) -> None:
    from gridtactics.config import SessionConfig
    from gridtactics.engine.session import BattleSession
    from gridtactics.utils.logging import setup_logging

    config = SessionConfig(seed=args.seed, log_level=args.log_level)
    setup_logging(config.log_level)

    session = BattleSession.from_config(config)
    unit = session.unit(args.unit)
    print(
        f"Unit {unit.id} ({unit.team.name.lower()} {unit.archetype}) at {unit.position}, "
        f"move {unit.movement_range}, {len(session.reachable(unit.id))} tiles reachable"
    )
    print(render_range(session, unit.id))


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "range":
        _run_range(args)


if __name__ == "__main__":
    main()
