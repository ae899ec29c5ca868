"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between clients and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has been ended
- ACTION_REJECTED: The engine refused the action (see details.reason)
- VALIDATION_ERROR: Request parameters are invalid
- INVALID_POLICY: Unknown autoplay policy name
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class PhaseName(str, Enum):
    """Turn phases."""
    PLAYER_TURN = "player_turn"
    PATHOGEN_TURN = "pathogen_turn"
    GAME_OVER = "game_over"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    ACTION_REJECTED = "ACTION_REJECTED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_POLICY = "INVALID_POLICY"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """Card information for display."""
    card_id: str
    name: str
    tag: str
    kind: str = Field(description="attack, heal, defense, immune_instant, immune_combo, item")
    power: int = 0
    partner_tag: Optional[str] = None
    description: str = ""
    is_blocked: bool = False


class ItemOfferInfo(BaseModel):
    """An item on sale in the shop."""
    tag: str
    name: str
    description: str = ""
    cost_type: str = Field(description="tokens, health or either")
    token_cost: int = 0
    health_cost: int = 0
    affordable_with_tokens: bool = False
    affordable_with_health: bool = False


class PlayerInfo(BaseModel):
    """The player's numbers and hand."""
    hp: int
    max_hp: int
    flat_defense: int = 0
    percentage_defense: int = 0
    tokens: int = 0
    boost_active: bool = False
    hand: list[CardInfo] = Field(default_factory=list)


class PathogenInfo(BaseModel):
    """An active pathogen."""
    pathogen_id: str
    name: str
    hp: int
    max_hp: int
    attack_power: int
    attack_interval: int
    turn_counter: int = 0
    is_target: bool = False
    blocked_tags: list[str] = Field(default_factory=list)
    abilities: list[str] = Field(default_factory=list)


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""
    random_seed: Optional[int] = Field(None, description="Seed for reproducible games")
    starting_hp: Optional[int] = Field(None, ge=1, description="Override player HP")
    max_turns: Optional[int] = Field(None, ge=1, description="Override the turn limit")
    turn_time_seconds: Optional[float] = Field(
        None, ge=0, description="Override the turn timer (0 disables it)"
    )


class PlayCardRequest(BaseModel):
    """Request to play a card from hand."""
    card_id: str = Field(..., description="Instance ID of a card in hand")
    target_id: Optional[str] = Field(None, description="Pathogen to target (defaults to current)")


class TickRequest(BaseModel):
    """Advance the turn timer."""
    elapsed_seconds: float = Field(..., ge=0, description="Seconds since the last tick")


class PurchaseRequest(BaseModel):
    """Buy an item from the shop."""
    item_tag: str = Field(..., description="Tag of an offered item")
    use_health: bool = Field(False, description="Pay with HP instead of tokens")


class AutoplayRequest(BaseModel):
    """Let a policy play for the player."""
    policy: str = Field("greedy", description="first, random or greedy")
    full_game: bool = Field(False, description="Play until the game ends instead of one turn")
    seed: Optional[int] = Field(None, description="Seed for the random policy")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    status: SessionStatus
    phase: PhaseName
    turn_number: int = 1
    random_seed: Optional[int] = None
    created_at: float = 0.0
    api_version: str = "v1"


class GameStateResponse(BaseModel):
    """Complete game state for display."""
    session_id: str
    status: SessionStatus
    phase: PhaseName
    turn_number: int
    max_turns: int
    cards_played_this_turn: int = 0
    cards_per_turn: int = 2
    turn_time_remaining: Optional[float] = None
    player: PlayerInfo
    pathogens: list[PathogenInfo] = Field(default_factory=list)
    field_cards: list[CardInfo] = Field(default_factory=list)
    shop: list[ItemOfferInfo] = Field(default_factory=list)
    pathogens_remaining: int = 0
    pathogens_defeated: list[str] = Field(default_factory=list)
    deck_size: int = 0
    outcome: Optional[str] = Field(None, description="victory or defeat once the game is over")
    game_over_reason: Optional[str] = None
    api_version: str = "v1"


class ActionResponse(BaseModel):
    """Response after a player action."""
    session_id: str
    success: bool
    action: str
    error: Optional[str] = None
    error_code: Optional[str] = Field(None, description="Engine rejection code")
    state_changes: list[str] = Field(default_factory=list)
    turn_ended: bool = False
    game_state: Optional[GameStateResponse] = None
    api_version: str = "v1"


class AutoplayResponse(BaseModel):
    """Response after policy-driven play."""
    session_id: str
    policy: str
    turns_played: int = 0
    actions: list[str] = Field(default_factory=list)
    state_changes: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    game_state: Optional[GameStateResponse] = None
    api_version: str = "v1"


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
