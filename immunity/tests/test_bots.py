"""
Tests for player policies and the heuristic evaluator.

Tests:
- Baseline policies
- Greedy choices in simple positions
- Policy lookup
"""

import pytest

from ..bots.evaluator import HeuristicEvaluator
from ..bots.policy import FirstPlayablePolicy, GreedyPolicy, RandomPolicy, get_policy
from ..content.cards import (
    ANTIBODY_STRIKE,
    CYTOKINE,
    CYTOTOXIC_T_CELL,
    FIRST_AID,
    HELPER_T_CELL,
)
from ..engine_core.action import Action, ActionType
from ..engine_core.action_generator import legal_actions
from .conftest import WEAKLING


def chosen_card(game, decision):
    return game.engine.find_card(decision.action.card_id).tag


class TestBaselinePolicies:
    """Tests for random and first-playable policies."""

    def test_first_playable(self, game):
        legal = legal_actions(game.engine)

        decision = FirstPlayablePolicy().select_action(game.engine, legal)

        assert decision.action is legal[0]

    def test_first_playable_ends_turn_when_stuck(self, game):
        decision = FirstPlayablePolicy().select_action(game.engine, [Action.end_turn()])

        assert decision.action.action_type == ActionType.END_TURN

    def test_random_is_seeded(self, game):
        legal = legal_actions(game.engine)

        first = RandomPolicy(seed=5).select_action(game.engine, legal)
        second = RandomPolicy(seed=5).select_action(game.engine, legal)

        assert first.action is second.action

    def test_no_legal_actions(self, game):
        with pytest.raises(ValueError):
            RandomPolicy().select_action(game.engine, [])


class TestGreedyPolicy:
    """Tests for the greedy policy."""

    def test_heals_when_low(self, make_game):
        game = make_game(deck=[ANTIBODY_STRIKE, FIRST_AID] * 5)
        game.player.hp = 30

        decision = GreedyPolicy().select_action(game.engine, legal_actions(game.engine))

        assert chosen_card(game, decision) == "heal"

    def test_attacks_at_full_health(self, make_game):
        game = make_game(deck=[FIRST_AID, ANTIBODY_STRIKE] * 5)

        decision = GreedyPolicy().select_action(game.engine, legal_actions(game.engine))

        assert chosen_card(game, decision) == "attack"
        assert decision.best_score == 10

    def test_ends_turn_when_nothing_helps(self, make_game):
        game = make_game(deck=[FIRST_AID] * 10)

        decision = GreedyPolicy().select_action(game.engine, legal_actions(game.engine))

        assert decision.action.action_type == ActionType.END_TURN

    def test_kill_bonus(self, make_game):
        game = make_game(templates=[WEAKLING])
        evaluator = HeuristicEvaluator()
        action = legal_actions(game.engine)[0]

        evaluation = evaluator.evaluate(game.engine, action)

        assert evaluation.feature_breakdown == {"damage": 10.0, "kill_bonus": 15.0}

    def test_stranded_combo_penalised(self, make_game):
        game = make_game(deck=[CYTOTOXIC_T_CELL] + [ANTIBODY_STRIKE] * 9)
        card = game.engine.get_player_hand()[0]

        evaluation = HeuristicEvaluator().evaluate(game.engine, Action.play_card(card.instance_id))

        assert evaluation.score < 0

    def test_partner_enables_combo(self, make_game):
        game = make_game(deck=[CYTOTOXIC_T_CELL, HELPER_T_CELL] + [ANTIBODY_STRIKE] * 8)
        engine = game.engine
        engine.play_card(engine.get_player_hand()[0])
        helper = next(c for c in engine.get_player_hand() if c.tag == "helper_t")

        evaluation = HeuristicEvaluator().evaluate(engine, Action.play_card(helper.instance_id))

        assert evaluation.feature_breakdown["combo_enable"] == 12.0

    def test_cytokine_on_full_field_enables_nothing(self, make_game):
        game = make_game(
            deck=[CYTOTOXIC_T_CELL, CYTOKINE] + [ANTIBODY_STRIKE] * 8,
            field_capacity=1,
            cards_per_turn=3,
        )
        engine = game.engine
        engine.play_card(engine.get_player_hand()[0])
        cytokine = next(c for c in engine.get_player_hand() if c.tag == "cytokine")

        evaluation = HeuristicEvaluator().evaluate(engine, Action.play_card(cytokine.instance_id))

        assert evaluation.feature_breakdown.get("combo_enable", 0) == 0


class TestPolicyLookup:
    """Tests for get_policy."""

    @pytest.mark.parametrize("name,cls", [
        ("greedy", GreedyPolicy),
        ("RANDOM", RandomPolicy),
        ("first", FirstPlayablePolicy),
    ])
    def test_known(self, name, cls):
        assert isinstance(get_policy(name, seed=1), cls)

    def test_unknown(self):
        with pytest.raises(ValueError):
            get_policy("telepathic")
