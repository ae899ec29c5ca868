"""
Content - The base game's cards, items and pathogens, and game setup.
"""

from .cards import (
    ALL_CARDS,
    ITEM_CATALOG,
    IMMUNE_CELLS,
    STARTER_DECK,
    get_card,
    starter_deck_definitions,
)
from .pathogens import BASE_PATHOGENS, get_pathogen
from .setup import GameContext, create_game

__all__ = [
    "ALL_CARDS",
    "ITEM_CATALOG",
    "IMMUNE_CELLS",
    "STARTER_DECK",
    "get_card",
    "starter_deck_definitions",
    "BASE_PATHOGENS",
    "get_pathogen",
    "GameContext",
    "create_game",
]
