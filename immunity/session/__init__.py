"""
Session Module - Manages ephemeral game sessions.

A session represents one play-through of a game:
- Created when a client starts a game
- Holds the composed engine and its collaborators
- Runs policy-driven turns on request
- Removed when the client ends it or it goes stale

Sessions are EPHEMERAL:
- No persistence to database
- A game is reproducible from its seed and action history
"""

from .manager import SessionManager, Session, SessionState
from .game_loop import GameLoop, LoopState, TurnResult, GameSummary

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "GameLoop",
    "LoopState",
    "TurnResult",
    "GameSummary",
]
