"""
FastAPI Application - REST API for game clients.

Endpoints:
    POST   /api/v1/sessions                     Create game session
    GET    /api/v1/sessions                     List active sessions
    GET    /api/v1/sessions/{id}                Get session status
    DELETE /api/v1/sessions/{id}                End session
    GET    /api/v1/sessions/{id}/state          Get game state
    POST   /api/v1/sessions/{id}/play           Play a card
    POST   /api/v1/sessions/{id}/end-turn       End the player turn
    POST   /api/v1/sessions/{id}/tick           Advance the turn timer
    POST   /api/v1/sessions/{id}/purchase       Buy a shop item
    POST   /api/v1/sessions/{id}/autoplay       Let a policy play

Pathogen turns run synchronously inside the request that ends the player
turn, so every action response already shows the next player turn.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Union
import os

# Environment configuration
IMMUNITY_ENV = os.getenv("IMMUNITY_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .. import __version__
    from .service import APIService
    from .schemas import (
        # Request models
        CreateSessionRequest,
        PlayCardRequest,
        TickRequest,
        PurchaseRequest,
        AutoplayRequest,
        # Response models
        SessionResponse,
        GameStateResponse,
        ActionResponse,
        AutoplayResponse,
        ErrorResponse,
        SessionListResponse,
        EndSessionResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )

    app = FastAPI(
        title="Immunity Engine API",
        description="""
Turn-based immune system card battle.

## Turn Flow

1. `POST /sessions` starts a game on player turn 1 with a drawn hand
2. `POST /play` plays cards (2 per turn by default); the last allowed card ends the turn
3. `POST /end-turn` ends the turn early; pathogens act and the next turn opens
4. `POST /tick` advances the turn timer; expiry ends the turn

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `ACTION_REJECTED` | Engine refused the action; `details.reason` holds the engine code |
| `VALIDATION_ERROR` | Invalid request parameters |
| `INVALID_POLICY` | Unknown autoplay policy |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Union[dict, None] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def error_or_result(response):
        if isinstance(response, ErrorResponse):
            status = 404 if response.error_code == ErrorCode.SESSION_NOT_FOUND else 400
            return make_error_response(
                response.error_code, response.error, status_code=status, details=response.details
            )
        if isinstance(response, ActionResponse) and not response.success:
            return make_error_response(
                ErrorCode.ACTION_REJECTED,
                response.error or "Action rejected",
                status_code=409,
                details={"reason": response.error_code, "action": response.action},
            )
        return response

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={400: {"model": ErrorResponse, "description": "Invalid parameters"}},
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(request: CreateSessionRequest) -> Union[SessionResponse, JSONResponse]:
        """Create a session; the game starts immediately on player turn 1."""
        try:
            return api_service.create_session(request)
        except ValueError as e:
            return make_error_response(ErrorCode.VALIDATION_ERROR, str(e))

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        """Get the current status of a game session."""
        return error_or_result(api_service.get_session(session_id))

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        """End a game session and release resources."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get the full game state",
    )
    async def get_game_state(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        """Player, hand, pathogens, field and shop."""
        return error_or_result(api_service.get_game_state(session_id))

    # =========================================================================
    # Action Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_id}/play",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Play a card from hand",
    )
    async def play_card(session_id: str, request: PlayCardRequest) -> Union[ActionResponse, JSONResponse]:
        """Play a card at the current target or `target_id`."""
        return error_or_result(api_service.play_card(session_id, request))

    @app.post(
        "/api/v1/sessions/{session_id}/end-turn",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Game"],
        summary="End the player turn",
    )
    async def end_turn(session_id: str) -> Union[ActionResponse, JSONResponse]:
        """End the turn; the pathogen turn runs before the response returns."""
        return error_or_result(api_service.end_turn(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/tick",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Advance the turn timer",
    )
    async def tick(session_id: str, request: TickRequest) -> Union[ActionResponse, JSONResponse]:
        """Advance the timer; `turn_ended` is true when it ran out."""
        return error_or_result(api_service.tick(session_id, request))

    @app.post(
        "/api/v1/sessions/{session_id}/purchase",
        response_model=ActionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Buy a shop item",
    )
    async def purchase(session_id: str, request: PurchaseRequest) -> Union[ActionResponse, JSONResponse]:
        """Buy an offered item with tokens or health."""
        return error_or_result(api_service.purchase(session_id, request))

    @app.post(
        "/api/v1/sessions/{session_id}/autoplay",
        response_model=AutoplayResponse,
        responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Let a policy play",
    )
    async def autoplay(session_id: str, request: AutoplayRequest) -> Union[AutoplayResponse, JSONResponse]:
        """Play one turn (or the whole game) with the chosen policy."""
        return error_or_result(api_service.autoplay(session_id, request))

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(
            status="healthy",
            service="immunity-engine",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Immunity Engine API",
            "version": __version__,
            "environment": IMMUNITY_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn immunity.api.app:app
app = None
try:
    app = create_app()
except ImportError:
    # FastAPI not installed
    pass
