"""Thread-safe event feed exposed via the API.

Bridges the synchronous EventBus to HTTP polling: ``EventLog.attach`` turns
each core event into a flat ``BattleEvent`` record with a sequence number.
"""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from gridtactics.core.enums import EventKind

if TYPE_CHECKING:
    from gridtactics.core.events import Event, EventBus


@dataclass(frozen=True, slots=True)
class BattleEvent:
    """A single battle event for the API event feed."""

    seq: int
    turn: int
    category: str
    message: str
    unit_ids: tuple[int, ...] = ()


def describe(event: Event) -> tuple[str, tuple[int, ...]]:
    """Human-readable message and involved unit ids for a core event."""
    kind = event.kind
    if kind == EventKind.UNIT_MOVED:
        return f"Unit {event.unit_id} moved {event.old} -> {event.new}", (event.unit_id,)
    if kind == EventKind.HEALTH_CHANGED:
        return f"Unit {event.unit_id} health {event.current}/{event.maximum}", (event.unit_id,)
    if kind == EventKind.DAMAGE_TAKEN:
        ids = (event.unit_id,) if event.source_id is None else (event.unit_id, event.source_id)
        return f"Unit {event.unit_id} took {event.amount} damage", ids
    if kind == EventKind.UNIT_DIED:
        return f"Unit {event.unit_id} ({event.team.name}) died", (event.unit_id,)
    if kind == EventKind.ATTACK_PERFORMED:
        return (
            f"Unit {event.attacker_id} attacked unit {event.target_id} for {event.damage}",
            (event.attacker_id, event.target_id),
        )
    if kind in (EventKind.TURN_STARTED, EventKind.TURN_ENDED):
        verb = "started" if kind == EventKind.TURN_STARTED else "ended"
        return f"{event.team.name} turn {event.turn_number} {verb}", ()
    if kind in (EventKind.PLAYER_TURN_STARTED, EventKind.ENEMY_TURN_STARTED):
        return f"{kind.name.lower()} {event.turn_number}", ()
    if kind in (EventKind.VICTORY, EventKind.DEFEAT):
        return f"Battle decided: {kind.name}", ()
    return kind.name.lower(), ()


class EventLog:
    """Bounded event log. Writers append; readers snapshot a slice.

    Thread-safe via a simple lock — the HTTP layer reads from request
    threads while the session writes from whichever thread drives it.
    """

    __slots__ = ("_buffer", "_lock", "_next_seq")

    def __init__(self, limit: int | None = None) -> None:
        self._buffer: deque[BattleEvent] = deque(maxlen=limit)
        self._lock = threading.Lock()
        self._next_seq = 1

    def attach(self, bus: EventBus, turn_of: Callable[[], int]) -> Callable[[], None]:
        """Record every event published on *bus*; returns the unsubscriber."""

        def _record(event: Event) -> None:
            message, ids = describe(event)
            self.append(turn_of(), event.kind.name.lower(), message, ids)

        return bus.subscribe(_record)

    def append(self, turn: int, category: str, message: str, unit_ids: tuple[int, ...] = ()) -> BattleEvent:
        with self._lock:
            event = BattleEvent(self._next_seq, turn, category, message, unit_ids)
            self._next_seq += 1
            self._buffer.append(event)
            return event

    def since(self, seq: int) -> list[BattleEvent]:
        """Return all retained events with seq >= *seq*."""
        with self._lock:
            return [e for e in self._buffer if e.seq >= seq]

    def latest(self, count: int = 50) -> list[BattleEvent]:
        """Return the *count* most recent events."""
        with self._lock:
            items = list(self._buffer)
        return items[-count:]

    @property
    def next_seq(self) -> int:
        with self._lock:
            return self._next_seq

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)
