"""
Tests for API Pydantic schemas.

Validates that:
- Request models apply defaults and reject bad values
- Error responses serialize with string codes
"""

import pytest
from pydantic import ValidationError

from ..api.schemas import (
    AutoplayRequest,
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    PurchaseRequest,
    SessionResponse,
    SessionStatus,
    PhaseName,
    TickRequest,
)


class TestRequestSchemas:
    """Tests for request validation."""

    def test_create_session_defaults(self):
        request = CreateSessionRequest()

        assert request.random_seed is None
        assert request.starting_hp is None

    def test_create_session_rejects_zero_hp(self):
        with pytest.raises(ValidationError):
            CreateSessionRequest(starting_hp=0)

    def test_tick_rejects_negative(self):
        with pytest.raises(ValidationError):
            TickRequest(elapsed_seconds=-1)

    def test_purchase_defaults_to_tokens(self):
        assert not PurchaseRequest(item_tag="vitamin").use_health

    def test_autoplay_defaults(self):
        request = AutoplayRequest()

        assert request.policy == "greedy"
        assert not request.full_game


class TestResponseSchemas:
    """Tests for response serialization."""

    def test_error_response(self):
        data = ErrorResponse(
            error="Session abc not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        ).model_dump(mode="json")

        assert data["error_code"] == "SESSION_NOT_FOUND"
        assert data["details"] is None
        assert data["api_version"] == "v1"

    def test_session_response(self):
        data = SessionResponse(
            session_id="abc",
            status=SessionStatus.ACTIVE,
            phase=PhaseName.PLAYER_TURN,
        ).model_dump()

        assert data["status"] == "active"
        assert data["phase"] == "player_turn"
        assert data["turn_number"] == 1
