"""
Pathogens - Authored templates and runtime instances.

A PathogenTemplate is immutable content: health, attack power, attack
interval and a map of scheduled abilities. A PathogenInstance is one live
enemy created from a template; it tracks current health, its own turn
counter and the per-turn effects its abilities produced.

Template data is validated on construction. Bad content raises
TemplateError immediately instead of surfacing mid-game.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping


class TemplateError(ValueError):
    """Raised for malformed pathogen or card content."""


class AbilityKind(Enum):
    """Scheduled pathogen abilities."""
    BLOCK_CARDS = "block_cards"
    EXTRA_DAMAGE = "extra_damage"
    REGENERATION = "regeneration"
    MUTATION = "mutation"


@dataclass(frozen=True)
class AbilitySpec:
    """
    One scheduled ability.

    ``trigger_interval`` of 0 disables the ability. ``value`` is the heal
    or extra damage amount; ``blocked_tags`` lists card tags disabled by
    BLOCK_CARDS.
    """
    kind: AbilityKind
    trigger_interval: int = 1
    value: int = 0
    blocked_tags: frozenset[str] = frozenset()

    def __post_init__(self):
        if self.trigger_interval < 0:
            raise TemplateError(
                f"{self.kind.value}: trigger_interval must be >= 0, got {self.trigger_interval}"
            )
        if self.value < 0:
            raise TemplateError(f"{self.kind.value}: value must be >= 0, got {self.value}")
        if not isinstance(self.blocked_tags, frozenset):
            object.__setattr__(self, "blocked_tags", frozenset(self.blocked_tags))
        if self.kind == AbilityKind.BLOCK_CARDS and not self.blocked_tags:
            raise TemplateError("block_cards ability needs at least one blocked tag")

    @property
    def enabled(self) -> bool:
        return self.trigger_interval > 0

    def triggers_on(self, turn: int) -> bool:
        """Whether the ability fires on the given pathogen turn."""
        return self.trigger_interval > 0 and turn % self.trigger_interval == 0


@dataclass(frozen=True, eq=False)
class PathogenTemplate:
    """
    Immutable description of a pathogen.

    ``abilities`` may be given as a sequence of AbilitySpec; it is stored
    as a read-only mapping keyed by AbilityKind, in the given order.
    """
    name: str
    max_hp: int
    attack_power: int
    attack_interval: int = 1
    abilities: Mapping[AbilityKind, AbilitySpec] = field(default_factory=dict)
    description: str = ""

    def __post_init__(self):
        if not self.name:
            raise TemplateError("Pathogen template needs a name")
        if self.max_hp <= 0:
            raise TemplateError(f"{self.name}: max_hp must be > 0, got {self.max_hp}")
        if self.attack_power < 0:
            raise TemplateError(f"{self.name}: attack_power must be >= 0, got {self.attack_power}")
        if self.attack_interval < 1:
            raise TemplateError(
                f"{self.name}: attack_interval must be >= 1, got {self.attack_interval}"
            )
        object.__setattr__(self, "abilities", MappingProxyType(_ability_map(self.name, self.abilities)))

    def ability(self, kind: AbilityKind) -> AbilitySpec | None:
        return self.abilities.get(kind)

    def __repr__(self) -> str:
        return f"PathogenTemplate({self.name!r}, hp={self.max_hp}, atk={self.attack_power})"


def _ability_map(
    name: str, abilities: Mapping[AbilityKind, AbilitySpec] | Iterable[AbilitySpec]
) -> dict[AbilityKind, AbilitySpec]:
    if isinstance(abilities, Mapping):
        specs = list(abilities.values())
    else:
        specs = list(abilities)

    result: dict[AbilityKind, AbilitySpec] = {}
    for spec in specs:
        if not isinstance(spec, AbilitySpec):
            raise TemplateError(f"{name}: expected AbilitySpec, got {type(spec).__name__}")
        if spec.kind in result:
            raise TemplateError(f"{name}: duplicate ability {spec.kind.value}")
        result[spec.kind] = spec
    return result


@dataclass(eq=False)
class PathogenInstance:
    """
    A live pathogen.

    The turn counter is incremented once per pathogen turn by the
    AbilityScheduler. ``blocked_tags`` and ``extra_damage`` hold the
    effects of abilities that fired on the current pathogen turn and stay
    in force until the next one.
    """
    template: PathogenTemplate
    instance_id: str = ""
    current_hp: int = 0
    turn_counter: int = 0
    is_alive: bool = True
    can_attack_this_turn: bool = False
    blocked_tags: set[str] = field(default_factory=set)
    extra_damage: int = 0

    def __post_init__(self):
        if not isinstance(self.template, PathogenTemplate):
            raise TemplateError("PathogenInstance requires a PathogenTemplate")
        if not self.instance_id:
            self.instance_id = self.template.name.lower().replace(" ", "_")
        if self.current_hp <= 0:
            self.current_hp = self.template.max_hp

    @property
    def name(self) -> str:
        return self.template.name

    @property
    def max_hp(self) -> int:
        return self.template.max_hp

    # Combatant protocol; pathogens carry no mitigation
    @property
    def hp(self) -> int:
        return self.current_hp

    @hp.setter
    def hp(self, value: int) -> None:
        self.current_hp = value

    @property
    def flat_defense(self) -> int:
        return 0

    @property
    def percentage_defense(self) -> int:
        return 0

    def mark_dead(self) -> None:
        self.is_alive = False
        self.can_attack_this_turn = False

    @property
    def attack_damage(self) -> int:
        """Damage of an attack this turn, including extra damage."""
        return self.template.attack_power + self.extra_damage

    @property
    def health_percentage(self) -> float:
        return self.current_hp / self.max_hp

    def is_card_blocked(self, tag: str) -> bool:
        return self.is_alive and tag in self.blocked_tags

    def __repr__(self) -> str:
        return f"PathogenInstance({self.instance_id!r}, hp={self.current_hp}/{self.max_hp})"
