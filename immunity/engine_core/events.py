"""
Event Bus - Synchronous observer notifications for state changes.

Every state transition in the engine publishes a GameEvent. Subscribers
(UI adapters, the session layer, tests, the engine's own death handler)
receive events in publish order, on the caller's stack.

A subscriber that raises is logged and skipped; the remaining subscribers
still run and the engine continues.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable
import logging

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of events published by the engine."""
    TURN_PHASE_CHANGED = "turn_phase_changed"
    TURN_NUMBER_CHANGED = "turn_number_changed"
    PLAYER_STATS_CHANGED = "player_stats_changed"
    CARD_PLAYED = "card_played"
    FIELD_CHANGED = "field_changed"
    COMBATANT_DIED = "combatant_died"
    PATHOGEN_SPAWNED = "pathogen_spawned"
    PATHOGEN_DEFEATED = "pathogen_defeated"
    PATHOGEN_ATTACKED = "pathogen_attacked"
    ABILITY_TRIGGERED = "ability_triggered"
    ALL_PATHOGENS_DEFEATED = "all_pathogens_defeated"
    SHOP_REFRESHED = "shop_refreshed"
    ITEM_PURCHASED = "item_purchased"
    GAME_OVER = "game_over"


@dataclass
class GameEvent:
    """A published event with its payload."""
    event_type: EventType
    payload: dict[str, Any] = field(default_factory=dict)
    sequence: int = 0

    def __getitem__(self, key: str) -> Any:
        return self.payload[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)


Listener = Callable[[GameEvent], None]


class EventBus:
    """
    Publish/subscribe hub.

    Usage:
        bus = EventBus()
        bus.subscribe(EventType.GAME_OVER, on_game_over)
        bus.publish(EventType.GAME_OVER, outcome="victory")
    """

    def __init__(self, history_size: int = 500):
        self._listeners: dict[EventType, list[Listener]] = {}
        self._global_listeners: list[Listener] = []
        self._sequence = 0
        self.history: deque[GameEvent] = deque(maxlen=history_size)

    def subscribe(self, event_type: EventType, listener: Listener) -> None:
        """Register a listener for one event type."""
        self._listeners.setdefault(event_type, []).append(listener)

    def subscribe_all(self, listener: Listener) -> None:
        """Register a listener for every event type."""
        self._global_listeners.append(listener)

    def unsubscribe(self, event_type: EventType, listener: Listener) -> bool:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)
            return True
        return False

    def publish(self, event_type: EventType, **payload: Any) -> GameEvent:
        """
        Deliver an event to every matching subscriber, in subscription order.

        Type-specific listeners run before global ones.
        """
        self._sequence += 1
        event = GameEvent(event_type=event_type, payload=payload, sequence=self._sequence)
        self.history.append(event)

        listeners = list(self._listeners.get(event_type, [])) + list(self._global_listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Subscriber %r failed handling %s", listener, event_type.value
                )
        return event

    def events_of(self, event_type: EventType) -> list[GameEvent]:
        """Recorded events of one type, oldest first."""
        return [e for e in self.history if e.event_type == event_type]
