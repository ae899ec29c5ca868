"""
Tests for legal action generation.
"""

from ..content.cards import ANTIBODY_STRIKE, VITAMIN, WEAR_MASK
from ..engine_core.action import Action, ActionType
from ..engine_core.action_generator import is_legal, legal_actions
from .conftest import WEAKLING


class TestLegalActions:
    """Tests for ActionGenerator."""

    def test_plays_and_end_turn(self, game):
        actions = legal_actions(game.engine)

        plays = [a for a in actions if a.action_type == ActionType.PLAY_CARD]
        assert len(plays) == 5
        assert all(a.target_id == game.queue.current_target.instance_id for a in plays)
        assert actions[-1].action_type == ActionType.END_TURN

    def test_every_action_is_accepted(self, make_game):
        game = make_game(items=[VITAMIN, WEAR_MASK], starting_tokens=10)

        for action in legal_actions(game.engine):
            assert is_legal(game.engine, action)

        buy = next(a for a in legal_actions(game.engine) if a.action_type == ActionType.PURCHASE_ITEM)
        assert game.engine.apply(buy).success

    def test_purchase_payment_options(self, make_game):
        game = make_game(items=[WEAR_MASK], starting_tokens=2)

        buys = [a for a in legal_actions(game.engine) if a.action_type == ActionType.PURCHASE_ITEM]

        assert {a.use_health for a in buys} == {False, True}

    def test_targets_each_pathogen(self, make_game):
        game = make_game(
            templates=[WEAKLING, WEAKLING], active_pathogen_slots=2, deck=[ANTIBODY_STRIKE] * 2
        )

        plays = [a for a in legal_actions(game.engine) if a.action_type == ActionType.PLAY_CARD]

        assert len(plays) == 4
        assert len({a.target_id for a in plays}) == 2

    def test_nothing_after_game_over(self, make_game):
        game = make_game(templates=[])

        assert legal_actions(game.engine) == []

    def test_illegal_card(self, game):
        assert not is_legal(game.engine, Action.play_card("missing_1"))
        assert is_legal(game.engine, Action.end_turn())
