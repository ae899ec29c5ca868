"""
Heuristic Evaluator - Scores candidate actions for the greedy policy.

The evaluator assigns a numeric value to each legal action based on:
- Damage features (damage dealt, finishing the target)
- Survival features (healing when low, defense against incoming attacks)
- Combo features (enabling waiting combos, not stranding combo cards)
- Economy features (items worth their price)

Weights can be adjusted to create different play styles.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..engine_core.action import Action, ActionType
from ..engine_core.state import CardDefinition, CardEffect, CardKind, ItemKind

if TYPE_CHECKING:
    from ..engine_core.turn_engine import TurnEngine


@dataclass
class EvaluationWeights:
    """
    Weights for the heuristic evaluator.

    Higher values = more importance.
    """
    # Damage
    damage: float = 1.0
    kill_bonus: float = 15.0

    # Survival
    heal: float = 0.6
    low_health_threshold: float = 0.4
    low_health_multiplier: float = 2.5
    defense: float = 1.0

    # Combos
    combo_enable: float = 12.0
    stranded_combo: float = -5.0

    # Economy
    tokens: float = 0.5
    purchase_discount: float = 0.7
    health_purchase_min_ratio: float = 0.6


@dataclass
class ActionEvaluation:
    """Value of one action, with a per-feature breakdown."""
    action: Action
    score: float
    feature_breakdown: dict[str, float] = field(default_factory=dict)


class HeuristicEvaluator:
    """
    Evaluates actions using weighted heuristics.

    Usage:
        evaluator = HeuristicEvaluator()
        best = max(evaluator.evaluate_all(engine, legal), key=lambda e: e.score)
    """

    def __init__(self, weights: EvaluationWeights | None = None):
        self.weights = weights or EvaluationWeights()

    def evaluate_all(self, engine: TurnEngine, actions: list[Action]) -> list[ActionEvaluation]:
        return [self.evaluate(engine, action) for action in actions]

    def evaluate(self, engine: TurnEngine, action: Action) -> ActionEvaluation:
        features: dict[str, float] = {}

        if action.action_type == ActionType.PLAY_CARD:
            card = engine.find_card(action.card_id or "")
            if card is not None:
                features = self._card_features(engine, card.definition, action.target_id)
                if engine.player.boost_active and not card.is_item:
                    features = {k: v * 2 if v > 0 else v for k, v in features.items()}
        elif action.action_type == ActionType.PURCHASE_ITEM:
            features = self._purchase_features(engine, action)

        return ActionEvaluation(action=action, score=sum(features.values()), feature_breakdown=features)

    # -------------------------------------------------------------------------
    # Features
    # -------------------------------------------------------------------------

    def _card_features(
        self, engine: TurnEngine, definition: CardDefinition, target_id: str | None
    ) -> dict[str, float]:
        w = self.weights
        kind = definition.kind

        if kind == CardKind.ATTACK:
            return self._damage_features(engine, definition.power, target_id)
        if kind == CardKind.HEAL:
            return {"heal": self._heal_value(engine, definition.power)}
        if kind == CardKind.DEFENSE:
            return {"defense": min(definition.power, self._incoming_damage(engine)) * w.defense}
        if kind == CardKind.IMMUNE_INSTANT:
            features = self._effect_features(engine, definition.effect, target_id)
            enabled = self._combos_enabled_by(engine, definition.tag)
            if enabled:
                features["combo_enable"] = enabled * w.combo_enable
            return features
        if kind == CardKind.IMMUNE_COMBO:
            if self._partner_available(engine, definition):
                return self._effect_features(engine, definition.effect, target_id)
            return {"stranded_combo": w.stranded_combo}
        if kind == CardKind.ITEM:
            return self._item_features(engine, definition)
        return {}

    def _damage_features(self, engine: TurnEngine, amount: float, target_id: str | None) -> dict[str, float]:
        w = self.weights
        features = {"damage": amount * w.damage}
        target = engine.queue.find(target_id) if target_id else engine.queue.current_target
        if target is not None and amount >= target.current_hp:
            features["kill_bonus"] = w.kill_bonus
        return features

    def _effect_features(
        self, engine: TurnEngine, effect: CardEffect | None, target_id: str | None
    ) -> dict[str, float]:
        if effect is None:
            return {}
        w = self.weights
        features: dict[str, float] = {}
        damage = effect.damage
        if effect.damage_range is not None:
            damage = sum(effect.damage_range) / 2
        if damage:
            features.update(self._damage_features(engine, damage, target_id))
        if effect.heal:
            features["heal"] = self._heal_value(engine, effect.heal)
        if effect.flat_defense:
            features["defense"] = min(effect.flat_defense, self._incoming_damage(engine)) * w.defense
        if effect.percentage_defense:
            features["pct_defense"] = self._pct_defense_value(engine, effect.percentage_defense)
        if effect.grants is not None and engine.player.hand_room > 0:
            features["grants"] = 2.0
        return features

    def _item_features(self, engine: TurnEngine, definition: CardDefinition) -> dict[str, float]:
        w = self.weights
        item_kind = definition.item_kind
        if item_kind == ItemKind.HEAL:
            return {"heal": self._heal_value(engine, definition.power)}
        if item_kind == ItemKind.PERCENT_DEFENSE:
            return {"pct_defense": self._pct_defense_value(engine, definition.power)}
        if item_kind == ItemKind.TARGETED_DEFENSE:
            target = engine.queue.current_target
            name = target.name.lower() if target else ""
            strong = any(k in name for k in definition.strong_against)
            pct = definition.power if strong else definition.fallback_power
            return {"pct_defense": self._pct_defense_value(engine, pct)}
        if item_kind == ItemKind.TOKENS:
            return {"tokens": definition.power * w.tokens}
        if item_kind == ItemKind.BOOST:
            best = 0.0
            for card in engine.player.hand:
                if not card.is_item:
                    best = max(best, sum(self._card_features(engine, card.definition, None).values()))
            return {"boost": best * 0.5}
        if item_kind == ItemKind.SPAWN_PARTNER:
            grants = definition.effect.grants if definition.effect else None
            if engine.combos.field.is_full:
                return {}
            enabled = self._combos_enabled_by(engine, grants.tag) if grants else 0
            return {"combo_enable": enabled * w.combo_enable}
        return {}

    def _purchase_features(self, engine: TurnEngine, action: Action) -> dict[str, float]:
        w = self.weights
        if engine.shop is None:
            return {}
        item = engine.shop.find_offer(action.item_tag or "")
        if item is None:
            return {}
        if action.use_health and engine.player.health_percentage < w.health_purchase_min_ratio:
            return {"too_risky": -100.0}
        value = sum(self._item_features(engine, item).values()) * w.purchase_discount
        price = 0.0
        if item.cost is not None:
            price = item.cost.health * w.heal if action.use_health else item.cost.tokens * w.tokens
        return {"item_value": value, "price": -price}

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _heal_value(self, engine: TurnEngine, amount: int) -> float:
        w = self.weights
        player = engine.player
        useful = min(amount, player.max_hp - player.hp)
        multiplier = w.low_health_multiplier if player.health_percentage <= w.low_health_threshold else 1.0
        return useful * w.heal * multiplier

    def _incoming_damage(self, engine: TurnEngine) -> int:
        """Rough size of the next pathogen turn's attacks."""
        return sum(p.template.attack_power for p in engine.get_active_pathogens())

    def _pct_defense_value(self, engine: TurnEngine, pct: int) -> float:
        current = engine.player.percentage_defense
        gained = max(0, min(100, pct) - current)
        return self._incoming_damage(engine) * gained / 100 * self.weights.defense

    def _partner_available(self, engine: TurnEngine, definition: CardDefinition) -> bool:
        partner = definition.partner_tag
        if engine.combos.partner_present(partner, engine.player):
            return True
        return any(c.tag == partner for c in engine.player.hand)

    def _combos_enabled_by(self, engine: TurnEngine, tag: str) -> int:
        """Waiting combos, plus combo cards in hand, that ``tag`` would activate."""
        if engine.combos.partner_present(tag, engine.player):
            return 0
        waiting = sum(
            1 for entry in engine.combos.pending_combos()
            if entry.card.definition.partner_tag == tag
        )
        in_hand = sum(
            1 for card in engine.player.hand
            if card.is_combo and card.definition.partner_tag == tag
        )
        return waiting + in_hand
