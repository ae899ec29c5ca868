"""
Tests for pathogen templates and instances.

Tests:
- Malformed templates raise TemplateError at construction
- Instances start at full health
- Base catalog content
"""

import pytest

from ..content.pathogens import BASE_PATHOGENS, DENGUE, SUPERBUGS, get_pathogen
from ..engine_core.pathogen import (
    AbilityKind,
    AbilitySpec,
    PathogenInstance,
    PathogenTemplate,
    TemplateError,
)


class TestTemplateValidation:
    """Tests for template construction checks."""

    @pytest.mark.parametrize("kwargs", [
        {"name": "", "max_hp": 10, "attack_power": 1},
        {"name": "Bad", "max_hp": 0, "attack_power": 1},
        {"name": "Bad", "max_hp": 10, "attack_power": -1},
        {"name": "Bad", "max_hp": 10, "attack_power": 1, "attack_interval": 0},
    ])
    def test_invalid_numbers_rejected(self, kwargs):
        with pytest.raises(TemplateError):
            PathogenTemplate(**kwargs)

    def test_template_error_is_value_error(self):
        assert issubclass(TemplateError, ValueError)

    def test_negative_trigger_interval_rejected(self):
        with pytest.raises(TemplateError):
            AbilitySpec(AbilityKind.REGENERATION, trigger_interval=-1, value=5)

    def test_negative_value_rejected(self):
        with pytest.raises(TemplateError):
            AbilitySpec(AbilityKind.EXTRA_DAMAGE, trigger_interval=1, value=-3)

    def test_block_needs_tags(self):
        with pytest.raises(TemplateError):
            AbilitySpec(AbilityKind.BLOCK_CARDS, trigger_interval=1)

    def test_duplicate_ability_rejected(self):
        with pytest.raises(TemplateError):
            PathogenTemplate(
                name="Twice",
                max_hp=10,
                attack_power=1,
                abilities=[
                    AbilitySpec(AbilityKind.REGENERATION, value=1),
                    AbilitySpec(AbilityKind.REGENERATION, value=2),
                ],
            )

    def test_abilities_are_read_only(self):
        with pytest.raises(TypeError):
            DENGUE.abilities[AbilityKind.MUTATION] = AbilitySpec(AbilityKind.MUTATION, value=1)

    def test_instance_requires_template(self):
        with pytest.raises(TemplateError):
            PathogenInstance(template=None)


class TestInstance:
    """Tests for runtime pathogen instances."""

    def test_starts_at_full_health(self):
        instance = PathogenInstance(template=SUPERBUGS)

        assert instance.hp == 70
        assert instance.turn_counter == 0
        assert instance.is_alive
        assert instance.attack_damage == 11

    def test_instances_are_independent(self):
        first = PathogenInstance(template=DENGUE)
        second = PathogenInstance(template=DENGUE)
        first.hp = 10

        assert second.hp == 50
        assert DENGUE.max_hp == 50


class TestCatalog:
    """Tests for the base pathogen catalog."""

    def test_five_pathogens(self):
        assert [t.name for t in BASE_PATHOGENS] == [
            "Covid-19", "Influenza", "Dengue", "HIV", "Superbugs",
        ]

    def test_lookup_is_case_insensitive(self):
        assert get_pathogen("dengue") is DENGUE
        assert get_pathogen("unknown") is None

    def test_dengue_blocks_macrophage(self):
        block = DENGUE.ability(AbilityKind.BLOCK_CARDS)
        assert block is not None
        assert "macrophage" in block.blocked_tags
