"""
Authored Data Models - Pydantic schemas for pathogen and card content.

Content can be written as JSON and loaded through these models. Pydantic
checks field types and ranges; conversion produces the engine's frozen
dataclasses, whose own checks raise TemplateError.

Example JSON:
    {
      "pathogens": [
        {"name": "Dengue", "max_hp": 50, "attack_power": 10, "attack_interval": 2,
         "abilities": [{"kind": "block_cards", "trigger_interval": 1,
                        "blocked_tags": ["macrophage"]}]}
      ],
      "cards": [
        {"kind": "attack", "name": "Antibody Strike", "tag": "attack", "power": 10}
      ]
    }
"""

from pathlib import Path
from typing import Optional, Union
import json

from pydantic import BaseModel, Field, model_validator

from ..engine_core.pathogen import AbilityKind, AbilitySpec, PathogenTemplate, TemplateError
from ..engine_core.state import (
    CardDefinition,
    CardEffect,
    CardKind,
    CostType,
    ItemCost,
    ItemKind,
)


# =============================================================================
# Pathogens
# =============================================================================

class AbilitySpecModel(BaseModel):
    """A scheduled pathogen ability."""
    kind: AbilityKind
    trigger_interval: int = Field(1, ge=0, description="Pathogen turns between triggers (0 = never)")
    value: int = Field(0, ge=0, description="Heal or extra damage amount")
    blocked_tags: list[str] = Field(default_factory=list, description="Card tags blocked by block_cards")

    def to_spec(self) -> AbilitySpec:
        return AbilitySpec(
            kind=self.kind,
            trigger_interval=self.trigger_interval,
            value=self.value,
            blocked_tags=frozenset(self.blocked_tags),
        )


class PathogenTemplateModel(BaseModel):
    """A pathogen template."""
    name: str = Field(..., min_length=1)
    max_hp: int = Field(..., gt=0)
    attack_power: int = Field(..., ge=0)
    attack_interval: int = Field(1, ge=1, description="Pathogen turns between attacks")
    abilities: list[AbilitySpecModel] = Field(default_factory=list)
    description: str = ""

    def to_template(self) -> PathogenTemplate:
        return PathogenTemplate(
            name=self.name,
            max_hp=self.max_hp,
            attack_power=self.attack_power,
            attack_interval=self.attack_interval,
            abilities=[a.to_spec() for a in self.abilities],
            description=self.description,
        )


# =============================================================================
# Cards
# =============================================================================

class CardEffectModel(BaseModel):
    """Numeric payload of an immune cell or spawn item."""
    damage: int = Field(0, ge=0)
    damage_range: Optional[tuple[int, int]] = None
    heal: int = Field(0, ge=0)
    flat_defense: int = Field(0, ge=0)
    percentage_defense: int = Field(0, ge=0, le=100)
    tokens: int = Field(0, ge=0)
    grants: Optional[str] = Field(None, description="Tag of a card granted to the player")

    @model_validator(mode="after")
    def check_range(self):
        if self.damage_range is not None:
            low, high = self.damage_range
            if low < 0 or high < low:
                raise ValueError(f"damage_range must satisfy 0 <= low <= high, got {self.damage_range}")
        return self


class ItemCostModel(BaseModel):
    cost_type: CostType = CostType.TOKENS
    tokens: int = Field(0, ge=0)
    health: int = Field(0, ge=0)


class CardModel(BaseModel):
    """A card or item definition."""
    kind: CardKind
    name: str = Field(..., min_length=1)
    tag: str = Field(..., min_length=1)
    power: int = Field(0, ge=0)
    description: str = ""

    partner_tag: Optional[str] = None
    effect: Optional[CardEffectModel] = None

    item_kind: Optional[ItemKind] = None
    fallback_power: int = Field(0, ge=0)
    strong_against: list[str] = Field(default_factory=list)
    cost: Optional[ItemCostModel] = None

    @model_validator(mode="after")
    def check_kind_fields(self):
        if self.kind == CardKind.IMMUNE_COMBO and not self.partner_tag:
            raise ValueError(f"{self.name}: combo cards need a partner_tag")
        if self.kind == CardKind.ITEM and (self.item_kind is None or self.cost is None):
            raise ValueError(f"{self.name}: items need item_kind and cost")
        if self.kind != CardKind.ITEM and self.item_kind is not None:
            raise ValueError(f"{self.name}: item_kind is only valid on items")
        return self

    def to_definition(self, granted: Optional[CardDefinition] = None) -> CardDefinition:
        effect = None
        if self.effect is not None:
            effect = CardEffect(
                damage=self.effect.damage,
                damage_range=self.effect.damage_range,
                heal=self.effect.heal,
                flat_defense=self.effect.flat_defense,
                percentage_defense=self.effect.percentage_defense,
                tokens=self.effect.tokens,
                grants=granted,
            )
        cost = None
        if self.cost is not None:
            cost = ItemCost(
                cost_type=self.cost.cost_type, tokens=self.cost.tokens, health=self.cost.health
            )
        return CardDefinition(
            kind=self.kind,
            name=self.name,
            tag=self.tag,
            power=self.power,
            description=self.description,
            partner_tag=self.partner_tag,
            effect=effect,
            item_kind=self.item_kind,
            fallback_power=self.fallback_power,
            strong_against=tuple(s.lower() for s in self.strong_against),
            cost=cost,
        )


class ContentBundle(BaseModel):
    """A file of authored content."""
    pathogens: list[PathogenTemplateModel] = Field(default_factory=list)
    cards: list[CardModel] = Field(default_factory=list)

    def to_templates(self) -> list[PathogenTemplate]:
        return [p.to_template() for p in self.pathogens]

    def to_definitions(self) -> list[CardDefinition]:
        """
        Convert cards, resolving ``grants`` references by tag.

        Granted cards are built first; a reference to an unknown tag or a
        cycle raises TemplateError.
        """
        by_tag = {c.tag: c for c in self.cards}
        built: dict[str, CardDefinition] = {}

        def build(model: CardModel, visiting: tuple[str, ...]) -> CardDefinition:
            if model.tag in built:
                return built[model.tag]
            if model.tag in visiting:
                raise TemplateError(f"Cycle in granted cards: {' -> '.join(visiting + (model.tag,))}")
            granted = None
            grant_tag = model.effect.grants if model.effect else None
            if grant_tag is not None:
                if grant_tag not in by_tag:
                    raise TemplateError(f"{model.name}: grants unknown card '{grant_tag}'")
                granted = build(by_tag[grant_tag], visiting + (model.tag,))
            definition = model.to_definition(granted)
            built[model.tag] = definition
            return definition

        return [build(model, ()) for model in self.cards]


def parse_content(data: dict) -> ContentBundle:
    """Validate a content dict. Raises pydantic.ValidationError."""
    return ContentBundle.model_validate(data)


def load_content(path: Union[str, Path]) -> ContentBundle:
    """Load and validate a JSON content file."""
    with open(path, encoding="utf-8") as f:
        return parse_content(json.load(f))
