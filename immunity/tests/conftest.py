"""
Pytest fixtures for Immunity tests.
"""

import random

import pytest

from ..config import GameConfig
from ..content.cards import ANTIBODY_STRIKE
from ..content.setup import GameContext, create_game
from ..engine_core.combat import CombatResolver
from ..engine_core.combo_resolver import CardComboResolver
from ..engine_core.events import EventBus
from ..engine_core.pathogen import PathogenInstance, PathogenTemplate
from ..engine_core.state import Card, CardDefinition, CardField, PlayerState


GERM = PathogenTemplate(name="Germ", max_hp=100, attack_power=10, attack_interval=1)
WEAKLING = PathogenTemplate(name="Weakling", max_hp=10, attack_power=5, attack_interval=1)
PEBBLE = PathogenTemplate(name="Pebble", max_hp=100, attack_power=0, attack_interval=1)


@pytest.fixture
def config() -> GameConfig:
    """Default rules."""
    return GameConfig()


@pytest.fixture
def events() -> EventBus:
    return EventBus()


@pytest.fixture
def combat(events: EventBus) -> CombatResolver:
    return CombatResolver(events)


@pytest.fixture
def player() -> PlayerState:
    """A fresh 100 HP player."""
    return PlayerState.create(max_hp=100)


@pytest.fixture
def germ() -> PathogenInstance:
    return PathogenInstance(template=GERM)


@pytest.fixture
def card_field() -> CardField:
    return CardField(capacity=2)


@pytest.fixture
def resolver(combat: CombatResolver, card_field: CardField, events: EventBus) -> CardComboResolver:
    return CardComboResolver(combat, card_field, rng=random.Random(7), events=events)


@pytest.fixture
def make_game(config: GameConfig):
    """
    Factory for started, unshuffled games.

    Defaults: one Germ, a deck of ten Antibody Strikes, no shop.
    Keyword overrides are applied to the config.
    """
    def _make(
        templates: list[PathogenTemplate] | None = None,
        deck: list[CardDefinition] | None = None,
        items: list[CardDefinition] | None = None,
        **overrides,
    ) -> GameContext:
        game_config = GameConfig(**{**config.model_dump(), **overrides})
        return create_game(
            config=game_config,
            seed=1,
            templates=templates if templates is not None else [GERM],
            deck_cards=deck if deck is not None else [ANTIBODY_STRIKE] * 10,
            item_catalog=items if items is not None else [],
            shuffle=False,
            start=True,
        )

    return _make


@pytest.fixture
def game(make_game) -> GameContext:
    """A started game against a single Germ."""
    return make_game()


def play(resolver: CardComboResolver, player: PlayerState, definition: CardDefinition, target=None):
    """Put a new card into play and resolve it, the way the engine does."""
    card = Card.create(definition)
    player.played_cards.append(card)
    return resolver.resolve(card, player, target)
