"""
Action System - Player actions, rejection codes and results.

Actions represent:
1. Card plays (with an optional pathogen target)
2. Ending the player turn early
3. Shop purchases

Every engine operation answers with an ActionResult. A rejected action
carries an error code and leaves all state untouched.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .state import Card


class ActionType(Enum):
    """Types of actions a player or policy can submit."""
    PLAY_CARD = "play_card"
    END_TURN = "end_turn"
    PURCHASE_ITEM = "purchase_item"


class RejectionCode(str, Enum):
    """Why an engine operation was rejected."""
    WRONG_PHASE = "WRONG_PHASE"
    ENGINE_LOCKED = "ENGINE_LOCKED"
    GAME_OVER = "GAME_OVER"
    ALREADY_STARTED = "ALREADY_STARTED"
    CARD_NOT_IN_HAND = "CARD_NOT_IN_HAND"
    CARD_BLOCKED = "CARD_BLOCKED"
    CARD_LIMIT_REACHED = "CARD_LIMIT_REACHED"
    INVALID_TARGET = "INVALID_TARGET"
    FIELD_FULL = "FIELD_FULL"
    NOT_IN_SHOP = "NOT_IN_SHOP"
    CANNOT_AFFORD = "CANNOT_AFFORD"
    HAND_FULL = "HAND_FULL"


@dataclass
class Action:
    """
    An action to be applied through the TurnEngine.

    Card and target are referenced by id so actions can be built from
    API requests as easily as from policies.
    """
    action_type: ActionType
    card_id: str | None = None
    target_id: str | None = None
    item_tag: str | None = None
    use_health: bool = False

    @classmethod
    def play_card(cls, card_id: str, target_id: str | None = None) -> Action:
        """Factory for a card play."""
        return cls(action_type=ActionType.PLAY_CARD, card_id=card_id, target_id=target_id)

    @classmethod
    def end_turn(cls) -> Action:
        """Factory for ending the player turn."""
        return cls(action_type=ActionType.END_TURN)

    @classmethod
    def purchase(cls, item_tag: str, use_health: bool = False) -> Action:
        """Factory for a shop purchase."""
        return cls(action_type=ActionType.PURCHASE_ITEM, item_tag=item_tag, use_health=use_health)

    def describe(self) -> str:
        if self.action_type == ActionType.PLAY_CARD:
            return f"play {self.card_id}" + (f" -> {self.target_id}" if self.target_id else "")
        if self.action_type == ActionType.PURCHASE_ITEM:
            return f"buy {self.item_tag}" + (" (health)" if self.use_health else "")
        return self.action_type.value


@dataclass
class ActionResult:
    """
    Result of an engine operation.

    Contains:
    - Whether the operation succeeded
    - Error and error code (if rejected)
    - Human-readable changes (for UI/logging)
    - Whether the player turn ended as a consequence
    """
    success: bool
    error: str | None = None
    error_code: RejectionCode | None = None

    state_changes: list[str] = field(default_factory=list)
    card: Card | None = None
    turn_ended: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def failure(cls, error: str, error_code: RejectionCode | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def ok(
        cls,
        changes: list[str] | None = None,
        card: Card | None = None,
        turn_ended: bool = False,
        **details: Any,
    ) -> ActionResult:
        """Create a success result."""
        return cls(
            success=True,
            state_changes=changes or [],
            card=card,
            turn_ended=turn_ended,
            details=details,
        )
