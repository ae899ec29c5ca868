"""
Game Setup - The composition root for a single game.

This module wires the engine together without singletons:
- One seeded random generator per concern (deck, pathogens, shop, cards)
- Event bus, combat resolver, scheduler and combo resolver
- Player, deck, pathogen queue and shop built from config and catalog
- The TurnEngine that owns the turn state

The same seed and inputs always produce the same game.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable
import logging
import random

from ..config import GameConfig
from ..engine_core.abilities import AbilityScheduler
from ..engine_core.action import ActionResult
from ..engine_core.combat import CombatResolver
from ..engine_core.combo_resolver import CardComboResolver
from ..engine_core.deck import Deck
from ..engine_core.events import EventBus
from ..engine_core.pathogen import PathogenTemplate
from ..engine_core.pathogen_queue import PathogenQueue
from ..engine_core.shop import Shop
from ..engine_core.state import CardDefinition, CardField, PlayerState
from ..engine_core.turn_engine import TurnEngine
from .cards import ITEM_CATALOG, starter_deck_definitions
from .pathogens import BASE_PATHOGENS

logger = logging.getLogger(__name__)


@dataclass
class GameContext:
    """Every collaborator of one game, as wired by create_game."""
    config: GameConfig
    seed: int | None
    events: EventBus
    combat: CombatResolver
    player: PlayerState
    deck: Deck
    queue: PathogenQueue
    scheduler: AbilityScheduler
    combos: CardComboResolver
    field: CardField
    shop: Shop | None
    engine: TurnEngine

    def start(self) -> ActionResult:
        return self.engine.start_game()


def create_game(
    config: GameConfig | None = None,
    seed: int | None = None,
    templates: Iterable[PathogenTemplate] | None = None,
    deck_cards: Iterable[CardDefinition] | None = None,
    item_catalog: Iterable[CardDefinition] | None = None,
    shuffle: bool = True,
    start: bool = False,
) -> GameContext:
    """
    Build a ready-to-start game.

    Args:
        config: Rule configuration (defaults from the environment)
        seed: Seed for deterministic shuffles and rolls
        templates: Pathogen templates (defaults to the base catalog)
        deck_cards: Card definitions for the deck (defaults to the starter deck)
        item_catalog: Items the shop sells (defaults to every item; empty disables the shop)
        shuffle: Shuffle the deck and pathogen queue (tests pass False)
        start: Call start_game before returning

    Returns:
        GameContext with the engine and its collaborators
    """
    config = config or GameConfig.from_env()
    master = random.Random(seed)
    deck_rng = random.Random(master.getrandbits(32))
    queue_rng = random.Random(master.getrandbits(32))
    shop_rng = random.Random(master.getrandbits(32))
    card_rng = random.Random(master.getrandbits(32))

    events = EventBus()
    combat = CombatResolver(events)
    player = PlayerState.create(
        max_hp=config.starting_hp,
        hand_capacity=config.hand_capacity,
        tokens=config.starting_tokens,
    )

    definitions = list(deck_cards) if deck_cards is not None else starter_deck_definitions()
    deck = Deck.from_definitions(definitions, rng=deck_rng, shuffle=shuffle)

    queue = PathogenQueue(
        list(templates) if templates is not None else BASE_PATHOGENS,
        active_slots=config.active_pathogen_slots,
        rng=queue_rng,
        events=events,
        shuffle=shuffle,
    )

    scheduler = AbilityScheduler(combat, events)
    card_field = CardField(capacity=config.field_capacity)
    combos = CardComboResolver(
        combat,
        card_field,
        rng=card_rng,
        events=events,
        target_provider=lambda: queue.current_target,
    )

    items = list(item_catalog) if item_catalog is not None else ITEM_CATALOG
    shop = None
    if items and config.items_per_shop > 0:
        shop = Shop(items, items_per_shop=config.items_per_shop, rng=shop_rng, events=events)

    engine = TurnEngine(
        config=config,
        player=player,
        deck=deck,
        queue=queue,
        combat=combat,
        scheduler=scheduler,
        combos=combos,
        events=events,
        shop=shop,
    )

    context = GameContext(
        config=config,
        seed=seed,
        events=events,
        combat=combat,
        player=player,
        deck=deck,
        queue=queue,
        scheduler=scheduler,
        combos=combos,
        field=card_field,
        shop=shop,
        engine=engine,
    )
    logger.debug(
        "Created game: seed=%s deck=%d pathogens=%d", seed, len(deck), queue.total_count
    )
    if start:
        context.start()
    return context
