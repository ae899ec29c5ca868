"""
Tests for the deck and drawing into hand.
"""

import random

from ..content.cards import ANTIBODY_STRIKE, BARRIER, FIRST_AID
from ..engine_core.deck import Deck
from ..engine_core.state import Card, PlayerState


class TestDeck:
    """Tests for the draw pile."""

    def test_draws_from_front(self):
        deck = Deck.from_definitions([ANTIBODY_STRIKE, FIRST_AID, BARRIER], shuffle=False)

        assert deck.draw_card().name == "Antibody Strike"
        assert deck.draw_card().name == "First Aid"
        assert deck.remaining == 1

    def test_empty_deck_returns_none(self):
        deck = Deck(shuffle=False)

        assert deck.is_empty
        assert deck.draw_card() is None

    def test_seeded_shuffle_is_reproducible(self):
        definitions = [ANTIBODY_STRIKE] * 5 + [FIRST_AID] * 5 + [BARRIER] * 5
        first = Deck.from_definitions(definitions, rng=random.Random(42))
        second = Deck.from_definitions(definitions, rng=random.Random(42))

        assert [c.name for c in first.peek(15)] == [c.name for c in second.peek(15)]

    def test_add_card_on_top(self):
        deck = Deck.from_definitions([ANTIBODY_STRIKE], shuffle=False)
        card = Card.create(FIRST_AID)

        deck.add_card(card, on_top=True)

        assert deck.draw_card() is card

    def test_copies_are_distinct_cards(self):
        first, second = Card.create(ANTIBODY_STRIKE), Card.create(ANTIBODY_STRIKE)

        assert first != second
        assert first.definition == second.definition


class TestDrawIntoHand:
    """Tests for PlayerState.draw_cards."""

    def test_clamped_by_hand_room(self):
        player = PlayerState.create(max_hp=100, hand_capacity=3)
        deck = Deck.from_definitions([ANTIBODY_STRIKE] * 10, shuffle=False)

        drawn = player.draw_cards(deck, 5)

        assert len(drawn) == 3
        assert len(player.hand) == 3
        assert deck.remaining == 7

    def test_clamped_by_deck(self):
        player = PlayerState.create(max_hp=100)
        deck = Deck.from_definitions([ANTIBODY_STRIKE] * 2, shuffle=False)

        drawn = player.draw_cards(deck, 5)

        assert len(drawn) == 2
        assert deck.is_empty

    def test_full_hand_rejects_cards(self):
        player = PlayerState.create(max_hp=100, hand_capacity=1)

        assert player.add_to_hand(Card.create(ANTIBODY_STRIKE))
        assert not player.add_to_hand(Card.create(ANTIBODY_STRIKE))
        assert player.hand_room == 0
