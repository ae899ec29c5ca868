"""
Card Combo Resolver - Two-pass resolution of played cards.

Pass 1 (immediate): when a card is played its own effect is applied at
once. Attack, heal and defense cards, instant immune cells and items all
resolve here.

Pass 2 (combos): a combo immune cell only acts when its partner tag is
present this turn, either among the cards played or on the field. If the
partner is already there the combo fires immediately; otherwise it waits
on the field and every later play re-checks the waiting combos. Each
combo entry activates at most once. Whatever is still waiting when the
turn ends is discarded with the field.

A Vaccine boost doubles the next non-item card's numeric effect. A
boosted combo keeps its boost until it activates or is discarded.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, TYPE_CHECKING
import logging
import random

from .combat import MAX_PERCENTAGE_DEFENSE, CombatResolver, DamageResult
from .events import EventBus, EventType
from .state import Card, CardEffect, CardField, CardKind, ItemKind, PlayerState

if TYPE_CHECKING:
    from .pathogen import PathogenInstance

logger = logging.getLogger(__name__)

BOOST_MULTIPLIER = 2


@dataclass
class ComboEntry:
    """A combo card played this turn and whether it has fired."""
    card: Card
    boosted: bool = False
    activated: bool = False


@dataclass
class PlayOutcome:
    """
    What resolving one card did.

    ``activated_combos`` lists combo cards that fired as a consequence of
    this play (including the card itself when its partner was present).
    """
    card: Card
    deferred: bool = False
    boosted: bool = False
    damage: list[DamageResult] = field(default_factory=list)
    healed: int = 0
    activated_combos: list[Card] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    @property
    def total_damage(self) -> int:
        return sum(r.actual for r in self.damage)


class CardComboResolver:
    """
    Applies card effects and tracks combo activation for the current turn.

    Usage:
        resolver = CardComboResolver(combat, field, rng)
        resolver.begin_turn()
        outcome = resolver.resolve(card, player, target)
        ...
        leftovers = resolver.finalize_turn(player, target)
    """

    def __init__(
        self,
        combat: CombatResolver,
        card_field: CardField,
        rng: random.Random | None = None,
        events: EventBus | None = None,
        target_provider: Callable[[], PathogenInstance | None] | None = None,
    ):
        self.combat = combat
        self.field = card_field
        self.rng = rng or random.Random()
        self.events = events
        self.target_provider = target_provider
        self._entries: list[ComboEntry] = []

    # -------------------------------------------------------------------------
    # Turn lifecycle
    # -------------------------------------------------------------------------

    def begin_turn(self) -> None:
        self._entries = []

    def pending_combos(self) -> list[ComboEntry]:
        return [e for e in self._entries if not e.activated]

    def finalize_turn(self, player: PlayerState, target: PathogenInstance | None) -> list[Card]:
        """
        Final combo pass before the field is cleared.

        Returns combo cards that never found their partner.
        """
        self.reevaluate(player, target)
        leftovers = [e.card for e in self.pending_combos()]
        for card in leftovers:
            logger.debug("%s found no partner this turn", card.name)
        return leftovers

    def clear_field(self) -> list[Card]:
        discarded = self.field.clear()
        if discarded and self.events is not None:
            self.events.publish(EventType.FIELD_CHANGED, cards=[])
        return discarded

    # -------------------------------------------------------------------------
    # Placement checks
    # -------------------------------------------------------------------------

    def partner_present(self, partner_tag: str | None, player: PlayerState) -> bool:
        if partner_tag is None:
            return False
        return partner_tag in player.played_tags() or partner_tag in self.field.tags()

    def can_place(self, card: Card, player: PlayerState) -> bool:
        """False when ``card`` would need a field slot and none is free."""
        definition = card.definition
        if definition.is_combo:
            return self.partner_present(definition.partner_tag, player) or not self.field.is_full
        return True

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def resolve(
        self,
        card: Card,
        player: PlayerState,
        target: PathogenInstance | None,
    ) -> PlayOutcome:
        """
        Resolve a card that has just been played.

        The caller has already moved the card into ``player.played_cards``
        and checked ``can_place``.
        """
        outcome = PlayOutcome(card=card)
        multiplier = 1
        if not card.is_item and player.boost_active:
            player.boost_active = False
            outcome.boosted = True
            multiplier = BOOST_MULTIPLIER

        definition = card.definition
        kind = definition.kind

        if kind == CardKind.ATTACK:
            self._damage(target, definition.power * multiplier, outcome)
        elif kind == CardKind.HEAL:
            outcome.healed += self.combat.apply_heal(player, definition.power * multiplier).healed
        elif kind == CardKind.DEFENSE:
            self.combat.grant_defense(player, definition.power * multiplier)
        elif kind == CardKind.IMMUNE_INSTANT:
            self._apply_effect(definition.effect, multiplier, player, target, outcome)
        elif kind == CardKind.IMMUNE_COMBO:
            entry = ComboEntry(card=card, boosted=outcome.boosted)
            self._entries.append(entry)
            if self.partner_present(definition.partner_tag, player):
                self._activate(entry, player, target, outcome)
            else:
                self.field.place(card)
                outcome.deferred = True
                outcome.notes.append(f"{card.name} waits for {definition.partner_tag}")
                if self.events is not None:
                    self.events.publish(EventType.FIELD_CHANGED, cards=list(self.field.cards))
        elif kind == CardKind.ITEM:
            self._apply_item(card, player, target, outcome)

        self.reevaluate(player, target, outcome)
        return outcome

    def reevaluate(
        self,
        player: PlayerState,
        target: PathogenInstance | None,
        outcome: PlayOutcome | None = None,
    ) -> list[Card]:
        """Fire every waiting combo whose partner is now present."""
        fired: list[Card] = []
        for entry in self.pending_combos():
            if self.partner_present(entry.card.definition.partner_tag, player):
                self._activate(entry, player, target, outcome)
                fired.append(entry.card)
        return fired

    def _activate(
        self,
        entry: ComboEntry,
        player: PlayerState,
        target: PathogenInstance | None,
        outcome: PlayOutcome | None,
    ) -> None:
        if entry.activated:
            return
        entry.activated = True
        multiplier = BOOST_MULTIPLIER if entry.boosted else 1
        sink = outcome if outcome is not None else PlayOutcome(card=entry.card)
        logger.info("Combo %s activated%s", entry.card.name, " (boosted)" if entry.boosted else "")
        self._apply_effect(entry.card.definition.effect, multiplier, player, target, sink)
        sink.activated_combos.append(entry.card)

    def _apply_effect(
        self,
        effect: CardEffect | None,
        multiplier: int,
        player: PlayerState,
        target: PathogenInstance | None,
        outcome: PlayOutcome,
    ) -> None:
        if effect is None:
            return

        damage = effect.damage
        if effect.damage_range is not None:
            low, high = effect.damage_range
            damage = self.rng.randint(low, high)
        if damage > 0:
            self._damage(target, damage * multiplier, outcome)

        if effect.heal > 0:
            outcome.healed += self.combat.apply_heal(player, effect.heal * multiplier).healed
        if effect.flat_defense > 0:
            self.combat.grant_defense(player, effect.flat_defense * multiplier)
        if effect.percentage_defense > 0:
            self.combat.grant_percentage_defense(
                player, min(MAX_PERCENTAGE_DEFENSE, effect.percentage_defense * multiplier)
            )
        if effect.tokens > 0:
            self.combat.grant_tokens(player, effect.tokens * multiplier)
        if effect.grants is not None:
            granted = Card.create(effect.grants)
            if player.add_to_hand(granted):
                outcome.notes.append(f"{granted.name} added to hand")
            else:
                outcome.notes.append(f"Hand full, {granted.name} lost")

    def _apply_item(
        self,
        card: Card,
        player: PlayerState,
        target: PathogenInstance | None,
        outcome: PlayOutcome,
    ) -> None:
        definition = card.definition
        item_kind = definition.item_kind

        if item_kind == ItemKind.HEAL:
            outcome.healed += self.combat.apply_heal(player, definition.power).healed
        elif item_kind == ItemKind.PERCENT_DEFENSE:
            self.combat.grant_percentage_defense(player, definition.power)
        elif item_kind == ItemKind.TARGETED_DEFENSE:
            name = target.name.lower() if target is not None else ""
            strong = any(keyword in name for keyword in definition.strong_against)
            self.combat.grant_percentage_defense(
                player, definition.power if strong else definition.fallback_power
            )
        elif item_kind == ItemKind.TOKENS:
            self.combat.grant_tokens(player, definition.power)
        elif item_kind == ItemKind.BOOST:
            player.boost_active = True
            outcome.notes.append("Next card effect doubled")
        elif item_kind == ItemKind.SPAWN_PARTNER:
            grants = definition.effect.grants if definition.effect else None
            if grants is None:
                return
            spawned = Card.create(grants)
            if self.field.place(spawned):
                outcome.notes.append(f"{spawned.name} spawned on the field")
                if self.events is not None:
                    self.events.publish(EventType.FIELD_CHANGED, cards=list(self.field.cards))
            else:
                outcome.notes.append(f"No room on the field for {spawned.name}")
                logger.debug("Field full, %s not spawned", spawned.name)

    def _damage(self, target: PathogenInstance | None, amount: int, outcome: PlayOutcome) -> None:
        if (target is None or not target.is_alive) and self.target_provider is not None:
            target = self.target_provider()
        if target is None or not target.is_alive:
            outcome.notes.append("No live target")
            return
        outcome.damage.append(self.combat.apply_damage(target, amount))
