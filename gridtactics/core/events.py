"""Notification values and the in-process event bus.

Every mutating operation in the core publishes a small frozen event value.
Collaborators (UI, logger, enemy controller) either subscribe with a
callback or poll with ``drain()``; the core never depends on a consumer
being present.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Callable, ClassVar

from gridtactics.core.enums import BattleOutcome, EventKind, Team
from gridtactics.core.models import Vector2


class Event:
    """Base notification.  ``kind`` identifies the concrete type."""

    __slots__ = ()

    kind: ClassVar[EventKind]


@dataclass(frozen=True, slots=True)
class UnitMoved(Event):
    unit_id: int
    old: Vector2
    new: Vector2
    kind: ClassVar[EventKind] = EventKind.UNIT_MOVED


@dataclass(frozen=True, slots=True)
class HealthChanged(Event):
    unit_id: int
    current: int
    maximum: int
    kind: ClassVar[EventKind] = EventKind.HEALTH_CHANGED


@dataclass(frozen=True, slots=True)
class DamageTaken(Event):
    unit_id: int
    amount: int
    source_id: int | None = None
    kind: ClassVar[EventKind] = EventKind.DAMAGE_TAKEN


@dataclass(frozen=True, slots=True)
class UnitDied(Event):
    unit_id: int
    team: Team
    kind: ClassVar[EventKind] = EventKind.UNIT_DIED


@dataclass(frozen=True, slots=True)
class AttackPerformed(Event):
    attacker_id: int
    target_id: int
    damage: int
    kind: ClassVar[EventKind] = EventKind.ATTACK_PERFORMED


@dataclass(frozen=True, slots=True)
class TurnStarted(Event):
    team: Team
    turn_number: int
    kind: ClassVar[EventKind] = EventKind.TURN_STARTED


@dataclass(frozen=True, slots=True)
class TurnEnded(Event):
    team: Team
    turn_number: int
    kind: ClassVar[EventKind] = EventKind.TURN_ENDED


@dataclass(frozen=True, slots=True)
class PlayerTurnStarted(Event):
    turn_number: int
    kind: ClassVar[EventKind] = EventKind.PLAYER_TURN_STARTED


@dataclass(frozen=True, slots=True)
class EnemyTurnStarted(Event):
    turn_number: int
    kind: ClassVar[EventKind] = EventKind.ENEMY_TURN_STARTED


@dataclass(frozen=True, slots=True)
class BattleDecided(Event):
    outcome: BattleOutcome
    turn_number: int

    @property
    def kind(self) -> EventKind:  # type: ignore[override]
        return EventKind.VICTORY if self.outcome == BattleOutcome.VICTORY else EventKind.DEFEAT


Subscriber = Callable[[Event], None]


class EventBus:
    """Synchronous publish/subscribe hub with an optional polling queue.

    Subscribers run in registration order on the publishing call stack.
    An event published from inside a subscriber is delivered once the
    current event has reached every subscriber, so all subscribers see
    events in the same order.  With ``queue_events`` enabled every event
    is also kept until ``drain()`` is called.  Queueing is off by default.
    """

    __slots__ = ("_subscribers", "_pending", "_queue_events", "_outbox", "_dispatching")

    def __init__(self, queue_events: bool = False) -> None:
        self._subscribers: list[tuple[EventKind | None, Subscriber]] = []
        self._pending: deque[Event] = deque()
        self._queue_events = queue_events
        self._outbox: deque[Event] = deque()
        self._dispatching = False

    def subscribe(self, callback: Subscriber, kind: EventKind | None = None) -> Callable[[], None]:
        """Register *callback*; returns a function that removes it again."""
        entry = (kind, callback)
        self._subscribers.append(entry)

        def _unsubscribe() -> None:
            if entry in self._subscribers:
                self._subscribers.remove(entry)

        return _unsubscribe

    def publish(self, event: Event) -> None:
        self._outbox.append(event)
        if self._dispatching:
            return
        self._dispatching = True
        try:
            while self._outbox:
                self._deliver(self._outbox.popleft())
        finally:
            self._dispatching = False
            self._outbox.clear()

    def drain(self) -> list[Event]:
        """Return and forget every queued event, oldest first."""
        events = list(self._pending)
        self._pending.clear()
        return events

    def _deliver(self, event: Event) -> None:
        if self._queue_events:
            self._pending.append(event)
        for kind, callback in list(self._subscribers):
            if kind is None or kind == event.kind:
                callback(event)

    def __len__(self) -> int:
        return len(self._pending)
