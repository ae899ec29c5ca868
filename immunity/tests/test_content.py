"""
Tests for the base catalog, authored content loading and validation.

Tests:
- The shipped catalog validates cleanly
- JSON content converts into engine templates and cards
- Schema and cross-catalog errors are reported
- create_game is deterministic for a seed
"""

import json

import pytest
from pydantic import ValidationError

from ..config import GameConfig
from ..content.cards import ALL_CARDS, B_CELL, HELPER_T_CELL, STARTER_DECK, get_card, starter_deck_definitions
from ..content.pathogens import BASE_PATHOGENS
from ..content.setup import create_game
from ..data_schema.models import load_content, parse_content
from ..data_schema.validation import (
    ContentValidationError,
    validate_cards,
    validate_templates,
)
from ..engine_core.pathogen import AbilityKind, AbilitySpec, PathogenTemplate, TemplateError
from ..engine_core.state import CardDefinition, CardEffect, CardKind, ItemKind


@pytest.fixture
def content_dict():
    return {
        "pathogens": [
            {
                "name": "Measles",
                "max_hp": 40,
                "attack_power": 6,
                "attack_interval": 2,
                "abilities": [
                    {"kind": "block_cards", "trigger_interval": 2, "blocked_tags": ["attack"]},
                    {"kind": "regeneration", "trigger_interval": 3, "value": 4},
                ],
            }
        ],
        "cards": [
            {"kind": "attack", "name": "Jab", "tag": "attack", "power": 7},
            {
                "kind": "immune_instant",
                "name": "Helper",
                "tag": "helper_t",
                "effect": {},
            },
            {
                "kind": "item",
                "name": "Signal",
                "tag": "signal",
                "item_kind": "spawn_partner",
                "cost": {"cost_type": "either", "tokens": 3, "health": 6},
                "effect": {"grants": "helper_t"},
            },
        ],
    }


class TestBaseCatalog:
    """Tests for the shipped content."""

    def test_pathogens_validate(self):
        result = validate_templates(BASE_PATHOGENS, known_tags=[c.tag for c in ALL_CARDS])

        assert result.valid, result.errors

    def test_cards_validate(self):
        result = validate_cards(ALL_CARDS)

        assert result.valid, result.errors
        assert result.warnings == []

    def test_starter_deck(self):
        deck = starter_deck_definitions()

        assert len(deck) == sum(copies for _, copies in STARTER_DECK) == 28
        assert not any(d.is_item for d in deck)

    def test_get_card(self):
        assert get_card("b_cell") is B_CELL
        assert get_card("missing") is None


class TestContentLoading:
    """Tests for pydantic content models."""

    def test_templates_from_dict(self, content_dict):
        templates = parse_content(content_dict).to_templates()

        measles = templates[0]
        assert measles.name == "Measles"
        assert measles.attack_interval == 2
        assert measles.ability(AbilityKind.BLOCK_CARDS).blocked_tags == frozenset({"attack"})
        assert measles.ability(AbilityKind.REGENERATION).value == 4

    def test_grants_resolved(self, content_dict):
        definitions = parse_content(content_dict).to_definitions()

        signal = next(d for d in definitions if d.tag == "signal")
        assert signal.item_kind == ItemKind.SPAWN_PARTNER
        assert signal.effect.grants.tag == "helper_t"

    def test_load_from_file(self, content_dict, tmp_path):
        path = tmp_path / "content.json"
        path.write_text(json.dumps(content_dict), encoding="utf-8")

        bundle = load_content(path)

        assert [p.name for p in bundle.pathogens] == ["Measles"]
        assert len(bundle.cards) == 3

    def test_loaded_content_plays(self, content_dict):
        bundle = parse_content(content_dict)
        definitions = bundle.to_definitions()
        deck = [d for d in definitions if not d.is_item] * 3

        game = create_game(
            config=GameConfig(),
            seed=4,
            templates=bundle.to_templates(),
            deck_cards=deck,
            item_catalog=[d for d in definitions if d.is_item],
            start=True,
        )

        assert game.engine.get_active_pathogens()[0].name == "Measles"
        assert [o.tag for o in game.engine.get_shop_offers()] == ["signal"]

    def test_schema_rejects_bad_numbers(self, content_dict):
        content_dict["pathogens"][0]["max_hp"] = 0

        with pytest.raises(ValidationError):
            parse_content(content_dict)

    def test_combo_needs_partner(self):
        with pytest.raises(ValidationError):
            parse_content({"cards": [{"kind": "immune_combo", "name": "Lonely", "tag": "lonely"}]})

    def test_item_needs_cost(self):
        with pytest.raises(ValidationError):
            parse_content({"cards": [{"kind": "item", "name": "Free", "tag": "free", "item_kind": "heal"}]})

    def test_bad_damage_range(self):
        card = {
            "kind": "immune_instant", "name": "Odd", "tag": "odd",
            "effect": {"damage_range": [9, 3]},
        }
        with pytest.raises(ValidationError):
            parse_content({"cards": [card]})

    def test_unknown_grant(self, content_dict):
        content_dict["cards"][2]["effect"]["grants"] = "nobody"

        with pytest.raises(TemplateError):
            parse_content(content_dict).to_definitions()

    def test_grant_cycle(self):
        bundle = parse_content({"cards": [
            {"kind": "immune_instant", "name": "A", "tag": "a", "effect": {"grants": "b"}},
            {"kind": "immune_instant", "name": "B", "tag": "b", "effect": {"grants": "a"}},
        ]})

        with pytest.raises(TemplateError):
            bundle.to_definitions()

    def test_block_without_tags(self, content_dict):
        content_dict["pathogens"][0]["abilities"][0]["blocked_tags"] = []

        with pytest.raises(TemplateError):
            parse_content(content_dict).to_templates()


class TestCatalogValidation:
    """Tests for cross-catalog checks."""

    def test_duplicate_names(self):
        template = PathogenTemplate(name="Twin", max_hp=10, attack_power=1)
        result = validate_templates([template, template])

        assert not result.valid
        with pytest.raises(ContentValidationError):
            result.raise_if_invalid()

    def test_unknown_block_tag(self):
        template = PathogenTemplate(
            name="Blocker", max_hp=10, attack_power=1,
            abilities=[AbilitySpec(AbilityKind.BLOCK_CARDS, blocked_tags={"ghost"})],
        )

        result = validate_templates([template], known_tags=["attack"])

        assert result.errors == ["Blocker: blocks unknown card tag 'ghost'"]

    def test_warnings(self):
        template = PathogenTemplate(
            name="Idle", max_hp=10, attack_power=0,
            abilities=[AbilitySpec(AbilityKind.REGENERATION, trigger_interval=0, value=0)],
        )

        result = validate_templates([template])

        assert result.valid
        assert len(result.warnings) == 3

    def test_empty_catalog_warns(self):
        result = validate_templates([])

        assert result.valid
        assert result.warnings

    def test_combo_partner_missing(self):
        result = validate_cards([B_CELL])

        assert not result.valid
        assert "partner 'helper_t'" in result.errors[0]

    def test_tag_conflict(self):
        impostor = CardDefinition.immune_instant("Impostor", tag="helper_t", effect=CardEffect(damage=1))

        result = validate_cards([HELPER_T_CELL, impostor])

        assert not result.valid

    def test_immune_cell_needs_effect(self):
        bare = CardDefinition(kind=CardKind.IMMUNE_INSTANT, name="Bare", tag="bare")

        assert not validate_cards([bare]).valid


class TestDeterminism:
    """Tests for seeded game creation."""

    def test_same_seed_same_game(self):
        first = create_game(config=GameConfig(), seed=11, start=True)
        second = create_game(config=GameConfig(), seed=11, start=True)

        assert [c.name for c in first.engine.get_player_hand()] == [
            c.name for c in second.engine.get_player_hand()
        ]
        assert first.queue.current_target.name == second.queue.current_target.name
        assert [o.tag for o in first.engine.get_shop_offers()] == [
            o.tag for o in second.engine.get_shop_offers()
        ]
