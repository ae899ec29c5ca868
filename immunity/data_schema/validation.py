"""
Content Validation - Whole-catalog checks for pathogens and cards.

Single templates validate themselves on construction. This module checks
what only makes sense across a catalog:
1. Names and tags are unique
2. Block abilities reference card tags that exist
3. Combo partners exist in the card set
4. Abilities that can never fire are reported as warnings
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable

from ..engine_core.pathogen import AbilityKind, PathogenTemplate
from ..engine_core.state import CardDefinition, CardKind, ItemKind


class ContentValidationError(Exception):
    """Raised when content validation fails."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Content validation failed with {len(errors)} error(s)")


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def raise_if_invalid(self) -> None:
        if not self.valid:
            raise ContentValidationError(self.errors)


def validate_templates(
    templates: Iterable[PathogenTemplate],
    known_tags: Iterable[str] | None = None,
) -> ValidationResult:
    """
    Validate a pathogen catalog.

    ``known_tags`` enables checking block targets against the card set.
    """
    templates = list(templates)
    tags = set(known_tags) if known_tags is not None else None
    errors: list[str] = []
    warnings: list[str] = []

    if not templates:
        warnings.append("No pathogens defined - the game is won immediately")

    seen: set[str] = set()
    for template in templates:
        key = template.name.lower()
        if key in seen:
            errors.append(f"Duplicate pathogen name '{template.name}'")
        seen.add(key)

        for kind, ability in template.abilities.items():
            if not ability.enabled:
                warnings.append(f"{template.name}: {kind.value} has interval 0 and never fires")
            if kind == AbilityKind.BLOCK_CARDS and tags is not None:
                for tag in sorted(ability.blocked_tags - tags):
                    errors.append(f"{template.name}: blocks unknown card tag '{tag}'")
            if kind in (AbilityKind.REGENERATION, AbilityKind.MUTATION, AbilityKind.EXTRA_DAMAGE):
                if ability.value == 0:
                    warnings.append(f"{template.name}: {kind.value} has value 0")

        if template.attack_power == 0:
            warnings.append(f"{template.name}: attack_power is 0")

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def validate_cards(definitions: Iterable[CardDefinition]) -> ValidationResult:
    """Validate a card catalog (deck cards plus items)."""
    definitions = list(definitions)
    errors: list[str] = []
    warnings: list[str] = []

    by_tag: dict[str, CardDefinition] = {}
    for definition in definitions:
        existing = by_tag.get(definition.tag)
        if existing is not None and existing != definition:
            errors.append(f"Tag '{definition.tag}' used by both {existing.name} and {definition.name}")
        by_tag[definition.tag] = definition

    for definition in definitions:
        if definition.kind == CardKind.IMMUNE_COMBO:
            if definition.partner_tag not in by_tag:
                errors.append(f"{definition.name}: partner '{definition.partner_tag}' is not a known card")
            elif definition.partner_tag == definition.tag:
                errors.append(f"{definition.name}: a combo cannot be its own partner")
        if definition.is_immune_cell and definition.effect is None:
            errors.append(f"{definition.name}: immune cells need an effect")
        if definition.item_kind == ItemKind.SPAWN_PARTNER:
            if definition.effect is None or definition.effect.grants is None:
                errors.append(f"{definition.name}: spawn items need a granted card")
        if definition.item_kind == ItemKind.TARGETED_DEFENSE and not definition.strong_against:
            warnings.append(f"{definition.name}: targeted defense without strong_against")

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)
