"""Authored content schema - pydantic models and catalog validation."""

from .models import (
    AbilitySpecModel,
    PathogenTemplateModel,
    CardEffectModel,
    ItemCostModel,
    CardModel,
    ContentBundle,
    parse_content,
    load_content,
)
from .validation import (
    ValidationResult,
    ContentValidationError,
    validate_templates,
    validate_cards,
)

__all__ = [
    "AbilitySpecModel",
    "PathogenTemplateModel",
    "CardEffectModel",
    "ItemCostModel",
    "CardModel",
    "ContentBundle",
    "parse_content",
    "load_content",
    "ValidationResult",
    "ContentValidationError",
    "validate_templates",
    "validate_cards",
]
