"""
Game Loop - Drives a game with a player policy.

The loop:
1. Enumerate legal actions
2. Ask the policy for a decision
3. Apply it through the TurnEngine
4. Repeat until the player turn ends (the engine runs the pathogen turn)
5. For whole games, repeat turns until GAME_OVER

A rejected action should not happen with legal actions; if it does, the
error is recorded and the turn is ended so the loop always progresses.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING
import logging

from ..engine_core.action_generator import legal_actions

if TYPE_CHECKING:
    from ..bots.policy import PlayerPolicy
    from ..engine_core.turn_engine import TurnEngine
    from .manager import Session

logger = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the game loop."""
    WAITING_PLAYER = "waiting_player"
    RUNNING_POLICY = "running_policy"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of playing one player turn.

    Contains the actions taken and what they changed.
    """
    success: bool
    loop_state: LoopState
    turn_number: int = 0

    # Actions the policy took, as short descriptions
    actions: list[str] = field(default_factory=list)

    # Changes reported by the engine
    state_changes: list[str] = field(default_factory=list)

    # Errors/warnings
    errors: list[str] = field(default_factory=list)

    # Game over info
    outcome: str | None = None
    reason: str | None = None


@dataclass
class GameSummary:
    """Result of playing a game to the end."""
    outcome: str | None
    reason: str | None
    turns_played: int
    final_hp: int
    tokens: int
    pathogens_defeated: list[str] = field(default_factory=list)
    actions_taken: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def won(self) -> bool:
        return self.outcome == "victory"


class GameLoop:
    """
    The policy-driven game loop.

    Usage:
        loop = GameLoop(engine)
        result = loop.run_player_turn(GreedyPolicy())
        summary = loop.run_to_completion(GreedyPolicy())
    """

    def __init__(self, engine: TurnEngine, session: Session | None = None, max_actions_per_turn: int = 25):
        self.engine = engine
        self.session = session
        self.max_actions_per_turn = max_actions_per_turn
        self.state = LoopState.GAME_OVER if engine.is_game_over else LoopState.WAITING_PLAYER

    def run_player_turn(self, policy: PlayerPolicy) -> TurnResult:
        """Let the policy play until the current player turn ends."""
        engine = self.engine
        if engine.is_game_over:
            self.state = LoopState.GAME_OVER
            return self._result(False, errors=["Game is over"])

        self.state = LoopState.RUNNING_POLICY
        turn_number = engine.turn_number
        actions: list[str] = []
        changes: list[str] = []
        errors: list[str] = []

        for _ in range(self.max_actions_per_turn):
            legal = legal_actions(engine)
            if not legal:
                break

            decision = policy.select_action(engine, legal)
            result = engine.apply(decision.action)
            description = decision.action.describe()

            if not result.success:
                # Shouldn't happen with legal actions
                logger.warning("%s rejected %s: %s", policy.get_name(), description, result.error)
                errors.append(f"{description}: {result.error}")
                result = engine.end_player_turn()
                description = "end_turn (forced)"
                if not result.success:
                    break

            actions.append(description)
            changes.extend(result.state_changes)
            if result.turn_ended or engine.is_game_over:
                break
        else:
            errors.append("Action limit reached, ending turn")
            result = engine.end_player_turn()
            if result.success:
                actions.append("end_turn (forced)")
                changes.extend(result.state_changes)

        if self.session is not None:
            self.session.record(actions)

        self.state = LoopState.GAME_OVER if engine.is_game_over else LoopState.WAITING_PLAYER
        logger.debug("Turn %d by %s: %s", turn_number, policy.get_name(), actions)
        return self._result(
            True, turn_number=turn_number, actions=actions, changes=changes, errors=errors
        )

    def run_to_completion(self, policy: PlayerPolicy, max_turns: int | None = None) -> GameSummary:
        """Play turns until the game ends or ``max_turns`` turns have been played."""
        limit = max_turns if max_turns is not None else self.engine.config.max_turns + 1
        actions_taken = 0
        errors: list[str] = []
        turns = 0

        while not self.engine.is_game_over and turns < limit:
            result = self.run_player_turn(policy)
            if not result.success:
                break
            turns += 1
            actions_taken += len(result.actions)
            errors.extend(result.errors)

        return self.summary(actions_taken=actions_taken, errors=errors)

    def summary(self, actions_taken: int = 0, errors: list[str] | None = None) -> GameSummary:
        engine = self.engine
        state = engine.state
        return GameSummary(
            outcome=state.outcome.value if state.outcome else None,
            reason=state.reason.value if state.reason else None,
            turns_played=(
                min(state.turn_number, engine.config.max_turns)
                if engine.is_game_over else state.turn_number - 1
            ),
            final_hp=engine.player.hp,
            tokens=engine.player.tokens,
            pathogens_defeated=list(engine.queue.defeated),
            actions_taken=actions_taken,
            errors=errors or [],
        )

    def _result(
        self,
        success: bool,
        turn_number: int | None = None,
        actions: list[str] | None = None,
        changes: list[str] | None = None,
        errors: list[str] | None = None,
    ) -> TurnResult:
        state = self.engine.state
        return TurnResult(
            success=success,
            loop_state=self.state,
            turn_number=turn_number if turn_number is not None else state.turn_number,
            actions=actions or [],
            state_changes=changes or [],
            errors=errors or [],
            outcome=state.outcome.value if state.outcome else None,
            reason=state.reason.value if state.reason else None,
        )
