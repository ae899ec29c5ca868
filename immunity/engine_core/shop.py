"""
Shop - Items offered to the player each turn.

The shop restocks whenever a player turn starts: ``items_per_shop``
item definitions are picked from the catalog. Purchases are paid in
tokens or health depending on the item's cost type; paying with health
requires strictly more HP than the price so a purchase can never kill.
"""

from __future__ import annotations
from typing import Iterable
import logging
import random

from .action import ActionResult, RejectionCode
from .combat import CombatResolver
from .events import EventBus, EventType
from .state import Card, CardDefinition, PlayerState

logger = logging.getLogger(__name__)


class Shop:
    """Rotating item offers and purchase handling."""

    def __init__(
        self,
        catalog: Iterable[CardDefinition],
        items_per_shop: int = 2,
        rng: random.Random | None = None,
        events: EventBus | None = None,
    ):
        self.catalog = [d for d in catalog if d.is_item]
        self.items_per_shop = items_per_shop
        self.rng = rng or random.Random()
        self.events = events
        self.offers: list[CardDefinition] = []

    def refresh(self) -> list[CardDefinition]:
        """Restock with a fresh random selection of distinct items."""
        count = min(self.items_per_shop, len(self.catalog))
        self.offers = self.rng.sample(self.catalog, count) if count else []
        if self.events is not None:
            self.events.publish(EventType.SHOP_REFRESHED, offers=[d.tag for d in self.offers])
        return list(self.offers)

    def find_offer(self, item_tag: str) -> CardDefinition | None:
        for offer in self.offers:
            if offer.tag == item_tag:
                return offer
        return None

    def can_afford(self, item: CardDefinition, player: PlayerState, use_health: bool = False) -> bool:
        cost = item.cost
        if cost is None:
            return True
        if use_health:
            return cost.can_pay_health() and player.hp > cost.health
        return cost.can_pay_tokens() and player.tokens >= cost.tokens

    def purchase(
        self,
        item_tag: str,
        player: PlayerState,
        combat: CombatResolver,
        use_health: bool = False,
    ) -> ActionResult:
        """
        Buy an offered item into the player's hand.

        Validation happens before any payment, so a rejected purchase
        changes nothing.
        """
        item = self.find_offer(item_tag)
        if item is None:
            return ActionResult.failure(f"{item_tag} is not in the shop", RejectionCode.NOT_IN_SHOP)
        if player.hand_room <= 0:
            return ActionResult.failure("Hand is full", RejectionCode.HAND_FULL)
        if not self.can_afford(item, player, use_health):
            return ActionResult.failure(
                f"Cannot afford {item.name} with {'health' if use_health else 'tokens'}",
                RejectionCode.CANNOT_AFFORD,
            )

        cost = item.cost
        if cost is not None:
            if use_health:
                combat.pay_health(player, cost.health)
                paid = f"{cost.health} HP"
            else:
                combat.spend_tokens(player, cost.tokens)
                paid = f"{cost.tokens} tokens"
        else:
            paid = "nothing"

        card = Card.create(item)
        player.add_to_hand(card)
        self.offers.remove(item)
        logger.info("Bought %s for %s", item.name, paid)
        if self.events is not None:
            self.events.publish(EventType.ITEM_PURCHASED, card=card, paid=paid)
        return ActionResult.ok([f"Bought {item.name} for {paid}"], card=card)
