"""
Deck - The player's draw pile.

Cards are drawn from the front. Shuffling uses an injected random
generator so seeded games are reproducible.
"""

from __future__ import annotations
from collections import deque
from typing import Iterable
import random

from .state import Card, CardDefinition


class Deck:
    """An ordered draw pile of card instances."""

    def __init__(
        self,
        cards: Iterable[Card] | None = None,
        rng: random.Random | None = None,
        shuffle: bool = True,
    ):
        self.rng = rng or random.Random()
        self._cards: deque[Card] = deque(cards or [])
        if shuffle:
            self.shuffle_remaining()

    @classmethod
    def from_definitions(
        cls,
        definitions: Iterable[CardDefinition],
        rng: random.Random | None = None,
        shuffle: bool = True,
    ) -> Deck:
        return cls((Card.create(d) for d in definitions), rng=rng, shuffle=shuffle)

    def draw_card(self) -> Card | None:
        """Take the top card, or None when the deck is empty."""
        if not self._cards:
            return None
        return self._cards.popleft()

    def add_card(self, card: Card, on_top: bool = False) -> None:
        if on_top:
            self._cards.appendleft(card)
        else:
            self._cards.append(card)

    def shuffle_remaining(self) -> None:
        cards = list(self._cards)
        self.rng.shuffle(cards)
        self._cards = deque(cards)

    def peek(self, count: int = 1) -> list[Card]:
        return list(self._cards)[:count]

    @property
    def remaining(self) -> int:
        return len(self._cards)

    @property
    def is_empty(self) -> bool:
        return not self._cards

    def __len__(self) -> int:
        return len(self._cards)
