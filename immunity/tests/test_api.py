"""
Tests for the API service and FastAPI app.

Tests:
- Session lifecycle through the service
- Actions and rejections
- Autoplay
- HTTP status codes and error envelopes
"""

import pytest
from fastapi.testclient import TestClient

from ..api.app import create_app
from ..api.schemas import (
    ActionResponse,
    AutoplayRequest,
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    GameStateResponse,
    PhaseName,
    PlayCardRequest,
    PurchaseRequest,
    SessionStatus,
    TickRequest,
)
from ..api.service import APIService
from ..config import GameConfig
from ..session import SessionManager


@pytest.fixture
def service() -> APIService:
    return APIService(session_manager=SessionManager(), default_config=GameConfig())


@pytest.fixture
def session_id(service) -> str:
    return service.create_session(CreateSessionRequest(random_seed=7)).session_id


class TestSessions:
    """Tests for session endpoints in the service."""

    def test_create_session(self, service):
        response = service.create_session(CreateSessionRequest(random_seed=7))

        assert response.status == SessionStatus.ACTIVE
        assert response.phase == PhaseName.PLAYER_TURN
        assert response.turn_number == 1
        assert response.random_seed == 7
        assert service.list_sessions() == [response.session_id]

    def test_overrides(self, service):
        response = service.create_session(
            CreateSessionRequest(random_seed=1, starting_hp=80, max_turns=5)
        )

        state = service.get_game_state(response.session_id)

        assert state.player.hp == 80
        assert state.player.max_hp == 80
        assert state.max_turns == 5

    def test_game_state(self, service, session_id):
        state = service.get_game_state(session_id)

        assert isinstance(state, GameStateResponse)
        assert len(state.player.hand) == 5
        assert len(state.pathogens) == 1
        assert state.pathogens[0].is_target
        assert state.pathogens_remaining == 5
        assert len(state.shop) == 2
        assert state.deck_size == 23
        assert state.turn_time_remaining == 60

    def test_unknown_session(self, service):
        response = service.get_game_state("missing")

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.SESSION_NOT_FOUND

    def test_end_session(self, service, session_id):
        assert service.end_session(session_id)
        assert not service.end_session(session_id)
        assert service.list_sessions() == []


class TestActions:
    """Tests for player actions through the service."""

    def test_play_card(self, service, session_id):
        card_id = service.get_game_state(session_id).player.hand[0].card_id

        response = service.play_card(session_id, PlayCardRequest(card_id=card_id))

        assert isinstance(response, ActionResponse)
        assert response.success
        assert response.game_state.cards_played_this_turn == 1
        assert card_id not in [c.card_id for c in response.game_state.player.hand]

    def test_rejected_play(self, service, session_id):
        response = service.play_card(session_id, PlayCardRequest(card_id="bogus_1"))

        assert not response.success
        assert response.error_code == "CARD_NOT_IN_HAND"

    def test_end_turn(self, service, session_id):
        response = service.end_turn(session_id)

        assert response.success
        assert response.turn_ended
        assert response.game_state.turn_number == 2 or response.game_state.outcome is not None

    def test_tick_expires_turn(self, service, session_id):
        assert not service.tick(session_id, TickRequest(elapsed_seconds=10)).turn_ended

        response = service.tick(session_id, TickRequest(elapsed_seconds=50))

        assert response.turn_ended

    def test_purchase_not_offered(self, service, session_id):
        response = service.purchase(session_id, PurchaseRequest(item_tag="nothing"))

        assert response.error_code == "NOT_IN_SHOP"

    def test_purchase_with_health(self, service, session_id):
        state = service.get_game_state(session_id)
        offer = next((o for o in state.shop if o.affordable_with_health), None)
        if offer is None:
            pytest.skip("no health-priced offer for this seed")

        response = service.purchase(session_id, PurchaseRequest(item_tag=offer.tag, use_health=True))

        assert response.success
        assert response.game_state.player.hp == 100 - offer.health_cost

    def test_action_on_unknown_session(self, service):
        response = service.end_turn("missing")

        assert isinstance(response, ErrorResponse)


class TestAutoplay:
    """Tests for policy-driven play through the service."""

    def test_one_turn(self, service, session_id):
        response = service.autoplay(session_id, AutoplayRequest(policy="greedy"))

        assert response.turns_played == 1
        assert response.actions
        assert response.game_state.turn_number == 2 or response.game_state.outcome is not None

    def test_full_game(self, service, session_id):
        response = service.autoplay(session_id, AutoplayRequest(policy="first", full_game=True))

        assert response.game_state.outcome in ("victory", "defeat")
        assert response.game_state.status == SessionStatus.GAME_OVER

    def test_invalid_policy(self, service, session_id):
        response = service.autoplay(session_id, AutoplayRequest(policy="psychic"))

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.INVALID_POLICY


class TestHTTP:
    """Tests for the FastAPI routes."""

    @pytest.fixture
    def client(self, service) -> TestClient:
        return TestClient(create_app(service))

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_session_flow(self, client):
        created = client.post("/api/v1/sessions", json={"random_seed": 3})
        assert created.status_code == 200
        session_id = created.json()["session_id"]

        state = client.get(f"/api/v1/sessions/{session_id}/state")
        assert state.status_code == 200
        card_id = state.json()["player"]["hand"][0]["card_id"]

        played = client.post(f"/api/v1/sessions/{session_id}/play", json={"card_id": card_id})
        assert played.status_code == 200
        assert played.json()["success"] is True

        ended = client.post(f"/api/v1/sessions/{session_id}/end-turn")
        assert ended.status_code == 200

        listed = client.get("/api/v1/sessions")
        assert listed.json()["count"] in (0, 1)

        deleted = client.delete(f"/api/v1/sessions/{session_id}")
        assert deleted.json()["success"] is True

    def test_rejection_is_conflict(self, client):
        session_id = client.post("/api/v1/sessions", json={"random_seed": 3}).json()["session_id"]

        response = client.post(f"/api/v1/sessions/{session_id}/play", json={"card_id": "bogus_1"})

        assert response.status_code == 409
        body = response.json()
        assert body["error_code"] == "ACTION_REJECTED"
        assert body["details"]["reason"] == "CARD_NOT_IN_HAND"

    def test_unknown_session_is_404(self, client):
        response = client.get("/api/v1/sessions/missing/state")

        assert response.status_code == 404
        assert response.json()["error_code"] == "SESSION_NOT_FOUND"

    def test_invalid_policy_is_400(self, client):
        session_id = client.post("/api/v1/sessions", json={}).json()["session_id"]

        response = client.post(f"/api/v1/sessions/{session_id}/autoplay", json={"policy": "psychic"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_POLICY"

    def test_request_validation(self, client):
        response = client.post("/api/v1/sessions", json={"starting_hp": 0})

        assert response.status_code == 422
