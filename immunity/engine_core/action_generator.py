"""
Action Generator - Enumerates the legal actions for the current turn.

The action generator is used by:
1. Player policies to enumerate possible moves
2. The API to show available actions
3. Validation (is this action in legal_actions?)

Design: Generates Action objects, not just action types.
Every generated action is accepted by TurnEngine.apply.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .action import Action, ActionType
from .state import TurnPhase

if TYPE_CHECKING:
    from .turn_engine import TurnEngine


@dataclass
class ActionGenerator:
    """Generates legal actions from a TurnEngine's current state."""
    engine: TurnEngine

    def generate(self) -> list[Action]:
        engine = self.engine
        state = engine.state
        if state.is_game_over or state.is_locked or not state.started:
            return []
        if state.phase != TurnPhase.PLAYER_TURN:
            return []

        actions: list[Action] = []
        actions.extend(self._generate_play_actions())
        actions.extend(self._generate_purchase_actions())
        actions.append(Action.end_turn())
        return actions

    def _generate_play_actions(self) -> list[Action]:
        engine = self.engine
        pathogens = engine.get_active_pathogens()
        current = engine.queue.current_target

        actions = []
        for card in engine.playable_cards():
            if len(pathogens) > 1:
                # Each live pathogen is a distinct target choice
                for pathogen in pathogens:
                    actions.append(Action.play_card(card.instance_id, pathogen.instance_id))
            else:
                target_id = current.instance_id if current else None
                actions.append(Action.play_card(card.instance_id, target_id))
        return actions

    def _generate_purchase_actions(self) -> list[Action]:
        engine = self.engine
        if engine.shop is None or engine.player.hand_room <= 0:
            return []

        actions = []
        for item in engine.shop.offers:
            if engine.shop.can_afford(item, engine.player, use_health=False):
                actions.append(Action.purchase(item.tag))
            if engine.shop.can_afford(item, engine.player, use_health=True):
                actions.append(Action.purchase(item.tag, use_health=True))
        return actions


def legal_actions(engine: TurnEngine) -> list[Action]:
    """
    Convenience function to get legal actions.

    Creates an ActionGenerator and generates actions.
    """
    return ActionGenerator(engine=engine).generate()


def is_legal(engine: TurnEngine, action: Action) -> bool:
    """Check if a specific action is legal."""
    for legal in legal_actions(engine):
        if legal.action_type != action.action_type:
            continue
        if action.action_type == ActionType.END_TURN:
            return True
        if action.action_type == ActionType.PLAY_CARD and legal.card_id == action.card_id:
            if action.target_id is None or legal.target_id == action.target_id:
                return True
        if (
            action.action_type == ActionType.PURCHASE_ITEM
            and legal.item_tag == action.item_tag
            and legal.use_health == action.use_health
        ):
            return True
    return False
