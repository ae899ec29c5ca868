"""
Pathogen Catalog - The enemies of the base game.

Attack intervals use the pathogen's own turn counter: interval 1 attacks
every turn, interval 2 attacks on turns 1, 3, 5...
"""

from __future__ import annotations

from ..engine_core.pathogen import AbilityKind, AbilitySpec, PathogenTemplate


COVID_19 = PathogenTemplate(
    name="Covid-19",
    max_hp=50,
    attack_power=8,
    attack_interval=1,
    description="Steady respiratory attacker.",
)

INFLUENZA = PathogenTemplate(
    name="Influenza",
    max_hp=50,
    attack_power=4,
    attack_interval=1,
    abilities=[AbilitySpec(AbilityKind.MUTATION, trigger_interval=1, value=4)],
    description="Weak hits, but mutates back 4 HP every turn.",
)

DENGUE = PathogenTemplate(
    name="Dengue",
    max_hp=50,
    attack_power=10,
    attack_interval=2,
    abilities=[
        AbilitySpec(AbilityKind.BLOCK_CARDS, trigger_interval=1, blocked_tags=frozenset({"macrophage"})),
        AbilitySpec(AbilityKind.REGENERATION, trigger_interval=2, value=10),
    ],
    description="Blocks Macrophages and regenerates every other turn.",
)

HIV = PathogenTemplate(
    name="HIV",
    max_hp=70,
    attack_power=2,
    attack_interval=1,
    abilities=[
        AbilitySpec(AbilityKind.BLOCK_CARDS, trigger_interval=2, blocked_tags=frozenset({"helper_t"})),
        AbilitySpec(AbilityKind.EXTRA_DAMAGE, trigger_interval=2, value=2),
    ],
    description="Shuts down Helper T-Cells every other turn.",
)

SUPERBUGS = PathogenTemplate(
    name="Superbugs",
    max_hp=70,
    attack_power=11,
    attack_interval=1,
    abilities=[
        AbilitySpec(AbilityKind.EXTRA_DAMAGE, trigger_interval=2, value=9),
        AbilitySpec(AbilityKind.MUTATION, trigger_interval=2, value=5),
    ],
    description="Resistant bacteria with heavy, irregular hits.",
)


BASE_PATHOGENS: list[PathogenTemplate] = [COVID_19, INFLUENZA, DENGUE, HIV, SUPERBUGS]


def get_pathogen(name: str) -> PathogenTemplate | None:
    """Look up a template by name (case-insensitive)."""
    for template in BASE_PATHOGENS:
        if template.name.lower() == name.lower():
            return template
    return None
