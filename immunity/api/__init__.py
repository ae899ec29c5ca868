"""
API Module - HTTP interface for game clients.

Exposes the engine via REST API. A client:
1. Creates a game session
2. Reads the game state
3. Plays cards, buys items and ends turns
4. Optionally hands control to a policy

All state is session-scoped. No persistent user accounts required.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    PlayCardRequest,
    TickRequest,
    PurchaseRequest,
    AutoplayRequest,
    # Responses
    SessionResponse,
    GameStateResponse,
    ActionResponse,
    AutoplayResponse,
    ErrorResponse,
    # Shared
    CardInfo,
    PlayerInfo,
    PathogenInfo,
    ItemOfferInfo,
    # Enums
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "PlayCardRequest",
    "TickRequest",
    "PurchaseRequest",
    "AutoplayRequest",
    # Responses
    "SessionResponse",
    "GameStateResponse",
    "ActionResponse",
    "AutoplayResponse",
    "ErrorResponse",
    # Shared
    "CardInfo",
    "PlayerInfo",
    "PathogenInfo",
    "ItemOfferInfo",
    # Enums
    "ErrorCode",
    "APIService",
    "create_app",
]
