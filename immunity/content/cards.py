"""
Card Catalog - Every card and item definition in the base game.

Immune cells:
- Macrophage: partial shield, a small hit, and a Helper T-Cell for the hand
- Natural Killer: a random hit
- Helper T-Cell: no effect of its own; wakes up combo cells
- B-Cell / Cytotoxic T-Cell: combo cells that need a Helper T-Cell

Items are sold in the shop and played from hand like any other card.
"""

from __future__ import annotations

from ..engine_core.state import CardDefinition, CardEffect, CostType, ItemCost, ItemKind


# =============================================================================
# Basic cards
# =============================================================================

ANTIBODY_STRIKE = CardDefinition.attack(
    "Antibody Strike", power=10, description="Deal 10 damage to the target."
)
FIRST_AID = CardDefinition.heal("First Aid", power=15, description="Restore 15 HP.")
BARRIER = CardDefinition.defense(
    "Barrier", power=5, description="Reduce each hit by 5 until your next turn."
)


# =============================================================================
# Immune cells
# =============================================================================

HELPER_T_CELL = CardDefinition.immune_instant(
    "Helper T-Cell",
    tag="helper_t",
    effect=CardEffect(),
    description="Activates B-Cells and Cytotoxic T-Cells played this turn.",
)

MACROPHAGE = CardDefinition.immune_instant(
    "Macrophage",
    tag="macrophage",
    effect=CardEffect(damage=5, percentage_defense=25, grants=HELPER_T_CELL),
    description="25% defense, 5 damage, and a Helper T-Cell joins your hand.",
)

NATURAL_KILLER = CardDefinition.immune_instant(
    "Natural Killer",
    tag="natural_killer",
    effect=CardEffect(damage_range=(5, 20)),
    description="Deal 5 to 20 damage.",
)

B_CELL = CardDefinition.immune_combo(
    "B-Cell",
    tag="b_cell",
    partner_tag="helper_t",
    effect=CardEffect(percentage_defense=50),
    description="With a Helper T-Cell: 50% defense.",
)

CYTOTOXIC_T_CELL = CardDefinition.immune_combo(
    "Cytotoxic T-Cell",
    tag="cytotoxic_t",
    partner_tag="helper_t",
    effect=CardEffect(damage=25),
    description="With a Helper T-Cell: deal 25 damage.",
)


# =============================================================================
# Items
# =============================================================================

VITAMIN = CardDefinition.item(
    "Vitamin", "vitamin", ItemKind.HEAL,
    cost=ItemCost(CostType.TOKENS, tokens=3),
    power=20,
    description="Restore 20 HP.",
)

WEAR_MASK = CardDefinition.item(
    "Wear Mask", "wear_mask", ItemKind.PERCENT_DEFENSE,
    cost=ItemCost(CostType.EITHER, tokens=2, health=5),
    power=50,
    description="50% defense until your next turn.",
)

WASH_HANDS = CardDefinition.item(
    "Wash Hands", "wash_hands", ItemKind.TARGETED_DEFENSE,
    cost=ItemCost(CostType.EITHER, tokens=2, health=5),
    power=80,
    fallback_power=20,
    strong_against=("covid", "influenza", "flu"),
    description="80% defense against respiratory viruses, 20% otherwise.",
)

IMMUNOSTIMULANT = CardDefinition.item(
    "Immunostimulant", "immunostimulant", ItemKind.PERCENT_DEFENSE,
    cost=ItemCost(CostType.HEALTH, health=5),
    power=100,
    description="Block all damage until your next turn.",
)

ADRENALINE = CardDefinition.item(
    "Adrenaline", "adrenaline", ItemKind.TOKENS,
    cost=ItemCost(CostType.HEALTH, health=10),
    power=5,
    description="Gain 5 tokens.",
)

VACCINE = CardDefinition.item(
    "Vaccine", "vaccine", ItemKind.BOOST,
    cost=ItemCost(CostType.TOKENS, tokens=4),
    description="Double the effect of the next card you play.",
)

CYTOKINE = CardDefinition.item(
    "Cytokine", "cytokine", ItemKind.SPAWN_PARTNER,
    cost=ItemCost(CostType.EITHER, tokens=5, health=10),
    effect=CardEffect(grants=HELPER_T_CELL),
    description="Put a Helper T-Cell onto the field.",
)


IMMUNE_CELLS: list[CardDefinition] = [
    HELPER_T_CELL, MACROPHAGE, NATURAL_KILLER, B_CELL, CYTOTOXIC_T_CELL,
]

ITEM_CATALOG: list[CardDefinition] = [
    VITAMIN, WEAR_MASK, WASH_HANDS, IMMUNOSTIMULANT, ADRENALINE, VACCINE, CYTOKINE,
]

ALL_CARDS: list[CardDefinition] = [ANTIBODY_STRIKE, FIRST_AID, BARRIER] + IMMUNE_CELLS + ITEM_CATALOG

# (definition, copies) making up a fresh deck
STARTER_DECK: list[tuple[CardDefinition, int]] = [
    (ANTIBODY_STRIKE, 6),
    (FIRST_AID, 3),
    (BARRIER, 3),
    (MACROPHAGE, 3),
    (NATURAL_KILLER, 3),
    (HELPER_T_CELL, 4),
    (B_CELL, 3),
    (CYTOTOXIC_T_CELL, 3),
]


def get_card(tag: str) -> CardDefinition | None:
    """Look up a definition by tag."""
    for definition in ALL_CARDS:
        if definition.tag == tag:
            return definition
    return None


def starter_deck_definitions() -> list[CardDefinition]:
    """Expand STARTER_DECK into one definition per physical card."""
    cards: list[CardDefinition] = []
    for definition, copies in STARTER_DECK:
        cards.extend([definition] * copies)
    return cards
