"""
Tests for the event bus.

Tests:
- Delivery order
- A failing subscriber does not stop the others
- History
"""

from ..engine_core.events import EventBus, EventType


class TestEventBus:
    """Tests for publish/subscribe."""

    def test_typed_listeners_before_global(self, events: EventBus):
        received = []
        events.subscribe_all(lambda e: received.append("global"))
        events.subscribe(EventType.CARD_PLAYED, lambda e: received.append("typed"))

        events.publish(EventType.CARD_PLAYED, card=None)

        assert received == ["typed", "global"]

    def test_only_matching_type_delivered(self, events):
        received = []
        events.subscribe(EventType.GAME_OVER, received.append)

        events.publish(EventType.CARD_PLAYED)

        assert received == []

    def test_failing_subscriber_isolated(self, events):
        received = []

        def broken(event):
            raise RuntimeError("listener bug")

        events.subscribe(EventType.GAME_OVER, broken)
        events.subscribe(EventType.GAME_OVER, received.append)

        event = events.publish(EventType.GAME_OVER, outcome="victory")

        assert received == [event]

    def test_unsubscribe(self, events):
        received = []
        events.subscribe(EventType.GAME_OVER, received.append)

        assert events.unsubscribe(EventType.GAME_OVER, received.append)
        assert not events.unsubscribe(EventType.GAME_OVER, received.append)

        events.publish(EventType.GAME_OVER)
        assert received == []

    def test_payload_access(self, events):
        event = events.publish(EventType.TURN_NUMBER_CHANGED, turn_number=3)

        assert event["turn_number"] == 3
        assert event.get("missing", "default") == "default"

    def test_history_is_ordered(self, events):
        events.publish(EventType.CARD_PLAYED)
        events.publish(EventType.GAME_OVER)

        assert [e.event_type for e in events.history] == [EventType.CARD_PLAYED, EventType.GAME_OVER]
        assert [e.sequence for e in events.history] == [1, 2]
        assert len(events.events_of(EventType.GAME_OVER)) == 1

    def test_history_is_bounded(self):
        bus = EventBus(history_size=3)
        for turn in range(5):
            bus.publish(EventType.TURN_NUMBER_CHANGED, turn_number=turn)

        assert [e["turn_number"] for e in bus.history] == [2, 3, 4]
