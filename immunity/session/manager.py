"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Client starts a session -> a fresh game is composed and started
2. During the game:
   - Client plays cards, buys items, ends turns (or asks a policy to)
   - Engine resolves pathogen turns synchronously
3. Game ends -> session is marked GAME_OVER and kept until ended or cleaned
4. Client can start a new session with the same seed to replay

PERSISTENCE RULES:
- NO database for gameplay
- Sessions live in memory only
- The seed plus the action history is enough to reproduce a game
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable
import logging
import time
import uuid

from ..config import GameConfig
from ..content.setup import GameContext, create_game
from ..engine_core.events import EventType, GameEvent
from ..engine_core.pathogen import PathogenTemplate
from ..engine_core.turn_engine import TurnEngine

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Game completed
    ABANDONED = "abandoned"  # Client quit


@dataclass
class Session:
    """
    An ephemeral game session.

    Contains:
    - The composed game (engine and collaborators)
    - Session state and metadata
    - The history of applied actions
    """
    session_id: str
    context: GameContext
    created_at: float
    seed: int | None = None
    state: SessionState = SessionState.ACTIVE
    last_activity: float = 0.0
    history: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def engine(self) -> TurnEngine:
        return self.context.engine

    def is_active(self) -> bool:
        """Check if session is still active."""
        return self.state == SessionState.ACTIVE

    def record(self, entries: Iterable[str]) -> None:
        self.history.extend(entries)
        self.last_activity = time.time()


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions with a composed, started game
    - Track active sessions
    - Clean up completed sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, config: GameConfig | None = None):
        self.config = config
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        config: GameConfig | None = None,
        seed: int | None = None,
        templates: list[PathogenTemplate] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Session:
        """
        Create a new game session and start the game.

        Args:
            config: Rule configuration (falls back to the manager's, then env)
            seed: Seed for a reproducible game
            templates: Pathogen templates (defaults to the base catalog)
            metadata: Free-form client data

        Returns:
            New active Session
        """
        session_id = str(uuid.uuid4())
        context = create_game(
            config=config or self.config,
            seed=seed,
            templates=templates,
        )
        now = time.time()
        session = Session(
            session_id=session_id,
            context=context,
            created_at=now,
            last_activity=now,
            seed=seed,
            metadata=metadata or {},
        )
        context.events.subscribe(
            EventType.GAME_OVER, lambda event: self._on_game_over(session, event)
        )
        session.record(context.start().state_changes)

        self._sessions[session_id] = session
        logger.info("Created session %s (seed=%s)", session_id, seed)
        return session

    def _on_game_over(self, session: Session, event: GameEvent) -> None:
        session.state = SessionState.GAME_OVER
        logger.info(
            "Session %s finished: %s (%s)",
            session.session_id, event["outcome"].value, event["reason"].value,
        )

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> Session | None:
        """
        End a session and remove it from memory.

        Returns the removed session, or None if it did not exist.
        """
        session = self._sessions.pop(session_id, None)
        if session:
            if session.state == SessionState.ACTIVE and reason != "completed":
                session.state = SessionState.ABANDONED
            logger.info("Ended session %s (%s)", session_id, reason)
        return session

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def list_sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Remove sessions idle for longer than ``max_age_seconds``.

        Returns the number of sessions removed.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.last_activity > max_age_seconds
        ]
        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)
