"""
Bots module - Automated players.

Provides:
- PlayerPolicy: Interface for decision-making
- FirstPlayablePolicy / RandomPolicy / GreedyPolicy
- HeuristicEvaluator: Scores candidate actions
"""

from .policy import (
    PlayerPolicy,
    PolicyDecision,
    RandomPolicy,
    FirstPlayablePolicy,
    GreedyPolicy,
    POLICIES,
    get_policy,
)
from .evaluator import HeuristicEvaluator, EvaluationWeights, ActionEvaluation

__all__ = [
    "PlayerPolicy",
    "PolicyDecision",
    "RandomPolicy",
    "FirstPlayablePolicy",
    "GreedyPolicy",
    "POLICIES",
    "get_policy",
    "HeuristicEvaluator",
    "EvaluationWeights",
    "ActionEvaluation",
]
