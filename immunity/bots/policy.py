"""
Player Policy - Interface for automated play decisions.

A PlayerPolicy looks at the TurnEngine and the legal actions and returns
a decision: play a card, buy an item, or end the turn.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
import random

from ..engine_core.action import Action, ActionType
from .evaluator import EvaluationWeights, HeuristicEvaluator

if TYPE_CHECKING:
    from ..engine_core.turn_engine import TurnEngine


@dataclass
class PolicyDecision:
    """
    A decision made by a policy.

    Contains:
    - The action to take
    - Explanation (for UI/debugging)
    - Evaluation details (for debugging)
    """
    action: Action
    explanation: str = ""
    evaluated_actions: int = 0
    best_score: float = 0.0
    evaluation_details: dict[str, Any] = field(default_factory=dict)


class PlayerPolicy(ABC):
    """
    Abstract base class for player policies.

    Implementations range from trivial baselines to heuristic search.
    """

    @abstractmethod
    def select_action(self, engine: TurnEngine, legal_actions: list[Action]) -> PolicyDecision:
        """
        Select an action from the legal actions.

        Args:
            engine: The game's TurnEngine (read-only use)
            legal_actions: List of legal actions to choose from

        Returns:
            PolicyDecision with the selected action
        """
        pass

    def get_name(self) -> str:
        """Get the policy's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(PlayerPolicy):
    """
    Random policy - selects actions uniformly at random.

    Used for:
    - Testing
    - Baseline comparison
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_action(self, engine: TurnEngine, legal_actions: list[Action]) -> PolicyDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        action = self.rng.choice(legal_actions)
        return PolicyDecision(
            action=action,
            explanation="Selected randomly",
            evaluated_actions=len(legal_actions),
        )


class FirstPlayablePolicy(PlayerPolicy):
    """
    First-playable policy - plays the first playable card, never shops.

    Used for:
    - Deterministic testing
    - Baseline comparison
    """

    def select_action(self, engine: TurnEngine, legal_actions: list[Action]) -> PolicyDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        for action in legal_actions:
            if action.action_type == ActionType.PLAY_CARD:
                return PolicyDecision(
                    action=action, explanation="Played first playable card", evaluated_actions=1
                )
        return PolicyDecision(action=Action.end_turn(), explanation="Nothing playable")


class GreedyPolicy(PlayerPolicy):
    """
    Greedy policy - takes the single best-scoring action.

    Heals when low, plays combo partners, buys items worth their price,
    and ends the turn when nothing scores above zero.
    """

    def __init__(self, weights: EvaluationWeights | None = None):
        self.evaluator = HeuristicEvaluator(weights)

    def select_action(self, engine: TurnEngine, legal_actions: list[Action]) -> PolicyDecision:
        if not legal_actions:
            raise ValueError("No legal actions available")

        evaluations = self.evaluator.evaluate_all(engine, legal_actions)
        candidates = [e for e in evaluations if e.action.action_type != ActionType.END_TURN]
        best = max(candidates, key=lambda e: e.score, default=None)

        if best is None or best.score <= 0:
            return PolicyDecision(
                action=Action.end_turn(),
                explanation="No action worth taking",
                evaluated_actions=len(evaluations),
            )
        return PolicyDecision(
            action=best.action,
            explanation=f"Best score {best.score:.1f}: {best.action.describe()}",
            evaluated_actions=len(evaluations),
            best_score=best.score,
            evaluation_details=best.feature_breakdown,
        )


POLICIES: dict[str, type[PlayerPolicy]] = {
    "first": FirstPlayablePolicy,
    "random": RandomPolicy,
    "greedy": GreedyPolicy,
}


def get_policy(name: str, seed: int | None = None) -> PlayerPolicy:
    """Build a policy by name. Raises ValueError for unknown names."""
    key = name.lower()
    if key not in POLICIES:
        raise ValueError(f"Unknown policy '{name}'. Choose from: {', '.join(POLICIES)}")
    if key == "random":
        return RandomPolicy(seed)
    return POLICIES[key]()
