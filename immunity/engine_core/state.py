"""
Game State - Cards, player state, combo field and turn bookkeeping.

Design principles:
- Card definitions are immutable catalog entries; Card is a runtime instance
- PlayerState is mutated only through the CombatResolver and the TurnEngine
- TurnState is owned by the TurnEngine and never written elsewhere
- Snapshots (PlayerStats) are plain values safe to hand to observers
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import itertools


class CardKind(Enum):
    """What a card does when played."""
    ATTACK = "attack"
    HEAL = "heal"
    DEFENSE = "defense"
    IMMUNE_INSTANT = "immune_instant"
    IMMUNE_COMBO = "immune_combo"
    ITEM = "item"


class ItemKind(Enum):
    """Effect family of an item card."""
    HEAL = "heal"
    PERCENT_DEFENSE = "percent_defense"
    TARGETED_DEFENSE = "targeted_defense"
    TOKENS = "tokens"
    BOOST = "boost"
    SPAWN_PARTNER = "spawn_partner"


class CostType(Enum):
    """How an item may be paid for."""
    TOKENS = "tokens"
    HEALTH = "health"
    EITHER = "either"


@dataclass(frozen=True)
class CardEffect:
    """
    Numeric payload of an immune-cell card.

    Any combination of fields may be set; the resolver applies each
    non-zero one. ``damage_range`` rolls a random amount instead of
    ``damage``. ``grants`` is a card definition handed to the player
    (to hand for immune cells, onto the field for spawn items).
    """
    damage: int = 0
    damage_range: tuple[int, int] | None = None
    heal: int = 0
    flat_defense: int = 0
    percentage_defense: int = 0
    tokens: int = 0
    grants: CardDefinition | None = None


@dataclass(frozen=True)
class ItemCost:
    """Price of an item in tokens and/or health."""
    cost_type: CostType = CostType.TOKENS
    tokens: int = 0
    health: int = 0

    def can_pay_tokens(self) -> bool:
        return self.cost_type in (CostType.TOKENS, CostType.EITHER)

    def can_pay_health(self) -> bool:
        return self.cost_type in (CostType.HEALTH, CostType.EITHER)


@dataclass(frozen=True)
class CardDefinition:
    """
    A card as authored in the catalog.

    Note: This is the definition, not the runtime instance.
    Instances in decks and hands are Card objects created from it.
    """
    kind: CardKind
    name: str
    tag: str
    power: int = 0
    description: str = ""

    # Immune cells
    partner_tag: str | None = None
    effect: CardEffect | None = None

    # Items
    item_kind: ItemKind | None = None
    fallback_power: int = 0
    strong_against: tuple[str, ...] = ()
    cost: ItemCost | None = None

    @property
    def is_item(self) -> bool:
        return self.kind == CardKind.ITEM

    @property
    def is_combo(self) -> bool:
        return self.kind == CardKind.IMMUNE_COMBO

    @property
    def is_immune_cell(self) -> bool:
        return self.kind in (CardKind.IMMUNE_INSTANT, CardKind.IMMUNE_COMBO)

    @classmethod
    def attack(cls, name: str, power: int, tag: str = "attack", description: str = "") -> CardDefinition:
        """Factory for a basic attack card."""
        return cls(kind=CardKind.ATTACK, name=name, tag=tag, power=power, description=description)

    @classmethod
    def heal(cls, name: str, power: int, tag: str = "heal", description: str = "") -> CardDefinition:
        """Factory for a basic heal card."""
        return cls(kind=CardKind.HEAL, name=name, tag=tag, power=power, description=description)

    @classmethod
    def defense(cls, name: str, power: int, tag: str = "defense", description: str = "") -> CardDefinition:
        """Factory for a flat defense card."""
        return cls(kind=CardKind.DEFENSE, name=name, tag=tag, power=power, description=description)

    @classmethod
    def immune_instant(
        cls, name: str, tag: str, effect: CardEffect, description: str = ""
    ) -> CardDefinition:
        """Factory for an immune cell that acts as soon as it is played."""
        return cls(
            kind=CardKind.IMMUNE_INSTANT, name=name, tag=tag,
            effect=effect, description=description,
        )

    @classmethod
    def immune_combo(
        cls, name: str, tag: str, partner_tag: str, effect: CardEffect, description: str = ""
    ) -> CardDefinition:
        """Factory for an immune cell that waits for a partner."""
        return cls(
            kind=CardKind.IMMUNE_COMBO, name=name, tag=tag, partner_tag=partner_tag,
            effect=effect, description=description,
        )

    @classmethod
    def item(
        cls,
        name: str,
        tag: str,
        item_kind: ItemKind,
        cost: ItemCost,
        power: int = 0,
        effect: CardEffect | None = None,
        fallback_power: int = 0,
        strong_against: tuple[str, ...] = (),
        description: str = "",
    ) -> CardDefinition:
        """Factory for a shop item."""
        return cls(
            kind=CardKind.ITEM, name=name, tag=tag, power=power,
            item_kind=item_kind, cost=cost, effect=effect,
            fallback_power=fallback_power, strong_against=strong_against,
            description=description,
        )


_instance_counter = itertools.count(1)


@dataclass
class Card:
    """
    A card instance in the game.

    What a card is lives on the shared definition, and rules that ask about
    a card (combo partners, blocks, shop offers) compare its ``tag``.
    Equality and hashing go by instance_id instead, so two copies of one
    definition stay distinct cards. The hand, the field and API clients
    address one copy among duplicates by that id.
    """
    definition: CardDefinition
    instance_id: str

    @classmethod
    def create(cls, definition: CardDefinition) -> Card:
        return cls(definition=definition, instance_id=f"{definition.tag}_{next(_instance_counter)}")

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def tag(self) -> str:
        return self.definition.tag

    @property
    def kind(self) -> CardKind:
        return self.definition.kind

    @property
    def power(self) -> int:
        return self.definition.power

    @property
    def is_item(self) -> bool:
        return self.definition.is_item

    @property
    def is_combo(self) -> bool:
        return self.definition.is_combo

    def __hash__(self):
        return hash(self.instance_id)

    def __eq__(self, other):
        if not isinstance(other, Card):
            return False
        return self.instance_id == other.instance_id

    def __repr__(self) -> str:
        return f"Card({self.name!r}, {self.instance_id!r})"


@dataclass(frozen=True)
class PlayerStats:
    """Read-only snapshot of the player's numbers."""
    hp: int
    max_hp: int
    flat_defense: int
    percentage_defense: int
    tokens: int
    hand_size: int
    boost_active: bool


@dataclass
class PlayerState:
    """
    The player's health, defenses, tokens and card zones.

    HP and defenses are changed by the CombatResolver; the zones are
    changed by the TurnEngine and the card resolver.
    """
    max_hp: int
    hp: int
    hand_capacity: int = 7
    flat_defense: int = 0
    percentage_defense: int = 0
    tokens: int = 0
    boost_active: bool = False
    is_alive: bool = True
    name: str = "Player"

    hand: list[Card] = field(default_factory=list)
    played_cards: list[Card] = field(default_factory=list)

    @classmethod
    def create(cls, max_hp: int, hand_capacity: int = 7, tokens: int = 0) -> PlayerState:
        return cls(max_hp=max_hp, hp=max_hp, hand_capacity=hand_capacity, tokens=tokens)

    @property
    def hand_room(self) -> int:
        return max(0, self.hand_capacity - len(self.hand))

    @property
    def health_percentage(self) -> float:
        return self.hp / self.max_hp if self.max_hp else 0.0

    def mark_dead(self) -> None:
        self.is_alive = False

    def add_to_hand(self, card: Card) -> bool:
        """Add a card if the hand has room. Returns False when full."""
        if self.hand_room <= 0:
            return False
        self.hand.append(card)
        return True

    def remove_from_hand(self, card: Card) -> bool:
        if card in self.hand:
            self.hand.remove(card)
            return True
        return False

    def draw_cards(self, deck, count: int) -> list[Card]:
        """
        Draw up to ``count`` cards, stopping when the hand is full or the
        deck runs out.
        """
        drawn: list[Card] = []
        for _ in range(min(count, self.hand_room)):
            card = deck.draw_card()
            if card is None:
                break
            self.hand.append(card)
            drawn.append(card)
        return drawn

    def played_tags(self) -> set[str]:
        return {c.tag for c in self.played_cards}

    def stats(self) -> PlayerStats:
        return PlayerStats(
            hp=self.hp,
            max_hp=self.max_hp,
            flat_defense=self.flat_defense,
            percentage_defense=self.percentage_defense,
            tokens=self.tokens,
            hand_size=len(self.hand),
            boost_active=self.boost_active,
        )


@dataclass
class CardField:
    """
    Slots holding combo cards that wait for a partner, plus partner
    cards spawned directly onto the field. Cleared at end of turn.
    """
    capacity: int = 2
    cards: list[Card] = field(default_factory=list)

    @property
    def is_full(self) -> bool:
        return len(self.cards) >= self.capacity

    @property
    def available_slots(self) -> int:
        return max(0, self.capacity - len(self.cards))

    def place(self, card: Card) -> bool:
        if self.is_full:
            return False
        self.cards.append(card)
        return True

    def tags(self) -> set[str]:
        return {c.tag for c in self.cards}

    def clear(self) -> list[Card]:
        discarded = self.cards
        self.cards = []
        return discarded


class TurnPhase(Enum):
    """Phases of the turn state machine."""
    PLAYER_TURN = "player_turn"
    PATHOGEN_TURN = "pathogen_turn"
    GAME_OVER = "game_over"


class GameOutcome(Enum):
    VICTORY = "victory"
    DEFEAT = "defeat"


class GameOverReason(Enum):
    PLAYER_DEFEATED = "player_defeated"
    ALL_PATHOGENS_DEFEATED = "all_pathogens_defeated"
    TURN_LIMIT = "turn_limit"


@dataclass
class TurnState:
    """
    Turn bookkeeping owned by the TurnEngine.

    Note: Per-turn counters reset at the start of each player turn.
    """
    phase: TurnPhase = TurnPhase.PLAYER_TURN
    turn_number: int = 1
    started: bool = False
    cards_played_this_turn: int = 0
    cards_played_last_turn: int = 0
    turn_time_remaining: float | None = None
    turn_ended: bool = False
    is_locked: bool = False
    outcome: GameOutcome | None = None
    reason: GameOverReason | None = None

    @property
    def is_game_over(self) -> bool:
        return self.phase == TurnPhase.GAME_OVER

    @property
    def timer_expired(self) -> bool:
        return self.turn_time_remaining is not None and self.turn_time_remaining <= 0
