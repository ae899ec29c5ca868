"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions
3. Runs policies on request
4. Formats responses for clients

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable
import logging

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
    ItemOfferInfo,
    PlayerInfo,
    PathogenInfo,
    # Enums
    ErrorCode,
    PhaseName,
    SessionStatus,
)
from ..bots.policy import get_policy
from ..config import GameConfig
from ..engine_core.action import Action, ActionResult
from ..engine_core.state import Card, CardDefinition
from ..engine_core.turn_engine import TurnEngine
from ..session import GameLoop, Session, SessionManager

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        # Create session
        session_response = service.create_session(CreateSessionRequest(random_seed=7))

        # Play
        state = service.get_game_state(session_response.session_id)
        service.play_card(session_id, PlayCardRequest(card_id=state.player.hand[0].card_id))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    default_config: GameConfig | None = None

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """
        Create a session and start its game.

        Raises ValueError (pydantic ValidationError) for invalid overrides.
        """
        base = self.default_config or GameConfig.from_env()
        overrides = {
            name: value
            for name, value in (
                ("starting_hp", request.starting_hp),
                ("max_turns", request.max_turns),
                ("turn_time_seconds", request.turn_time_seconds),
            )
            if value is not None
        }
        config = GameConfig(**{**base.model_dump(), **overrides})
        session = self.session_manager.create_session(config=config, seed=request.random_seed)
        return self._session_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._session_response(session)

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._game_state(session)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(session_id, reason) is not None

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    # =========================================================================
    # Player actions
    # =========================================================================

    def play_card(self, session_id: str, request: PlayCardRequest) -> ActionResponse | ErrorResponse:
        action = Action.play_card(request.card_id, request.target_id)
        return self._run_action(session_id, action.describe(), lambda engine: engine.apply(action))

    def end_turn(self, session_id: str) -> ActionResponse | ErrorResponse:
        return self._run_action(session_id, "end_turn", lambda engine: engine.end_player_turn())

    def tick(self, session_id: str, request: TickRequest) -> ActionResponse | ErrorResponse:
        return self._run_action(
            session_id,
            f"tick {request.elapsed_seconds:g}s",
            lambda engine: engine.tick(request.elapsed_seconds),
        )

    def purchase(self, session_id: str, request: PurchaseRequest) -> ActionResponse | ErrorResponse:
        return self._run_action(
            session_id,
            f"buy {request.item_tag}",
            lambda engine: engine.purchase_item(request.item_tag, request.use_health),
        )

    def autoplay(self, session_id: str, request: AutoplayRequest) -> AutoplayResponse | ErrorResponse:
        """Let a policy play one turn, or the rest of the game."""
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        try:
            policy = get_policy(request.policy, seed=request.seed)
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.INVALID_POLICY)

        loop = GameLoop(session.engine, session=session)
        if request.full_game:
            summary = loop.run_to_completion(policy)
            return AutoplayResponse(
                session_id=session_id,
                policy=policy.get_name(),
                turns_played=summary.turns_played,
                actions=session.history[-summary.actions_taken:] if summary.actions_taken else [],
                errors=summary.errors,
                game_state=self._game_state(session),
            )

        result = loop.run_player_turn(policy)
        return AutoplayResponse(
            session_id=session_id,
            policy=policy.get_name(),
            turns_played=1 if result.success else 0,
            actions=result.actions,
            state_changes=result.state_changes,
            errors=result.errors,
            game_state=self._game_state(session),
        )

    def _run_action(
        self,
        session_id: str,
        description: str,
        operation: Callable[[TurnEngine], ActionResult],
    ) -> ActionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)

        result = operation(session.engine)
        if result.success:
            session.record([description])
        else:
            logger.debug("Session %s rejected %s: %s", session_id, description, result.error)
        return ActionResponse(
            session_id=session_id,
            success=result.success,
            action=description,
            error=result.error,
            error_code=result.error_code.value if result.error_code else None,
            state_changes=result.state_changes,
            turn_ended=result.turn_ended,
            game_state=self._game_state(session),
        )

    # =========================================================================
    # Conversion helpers
    # =========================================================================

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _session_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            status=SessionStatus(session.state.value),
            phase=PhaseName(session.engine.phase.value),
            turn_number=session.engine.turn_number,
            random_seed=session.seed,
            created_at=session.created_at,
        )

    def _game_state(self, session: Session) -> GameStateResponse:
        engine = session.engine
        state = engine.state
        player = engine.player
        target = engine.queue.current_target

        return GameStateResponse(
            session_id=session.session_id,
            status=SessionStatus(session.state.value),
            phase=PhaseName(state.phase.value),
            turn_number=state.turn_number,
            max_turns=engine.config.max_turns,
            cards_played_this_turn=state.cards_played_this_turn,
            cards_per_turn=engine.config.cards_per_turn,
            turn_time_remaining=state.turn_time_remaining,
            player=PlayerInfo(
                hp=player.hp,
                max_hp=player.max_hp,
                flat_defense=player.flat_defense,
                percentage_defense=player.percentage_defense,
                tokens=player.tokens,
                boost_active=player.boost_active,
                hand=[self._card_info(engine, c) for c in player.hand],
            ),
            pathogens=[
                PathogenInfo(
                    pathogen_id=p.instance_id,
                    name=p.name,
                    hp=p.current_hp,
                    max_hp=p.max_hp,
                    attack_power=p.template.attack_power,
                    attack_interval=p.template.attack_interval,
                    turn_counter=p.turn_counter,
                    is_target=p is target,
                    blocked_tags=sorted(p.blocked_tags),
                    abilities=[kind.value for kind in p.template.abilities],
                )
                for p in engine.get_active_pathogens()
            ],
            field_cards=[self._card_info(engine, c) for c in engine.get_field_cards()],
            shop=[self._offer_info(engine, d) for d in engine.get_shop_offers()],
            pathogens_remaining=engine.queue.remaining_count,
            pathogens_defeated=list(engine.queue.defeated),
            deck_size=engine.deck.remaining,
            outcome=state.outcome.value if state.outcome else None,
            game_over_reason=state.reason.value if state.reason else None,
        )

    def _card_info(self, engine: TurnEngine, card: Card) -> CardInfo:
        definition = card.definition
        return CardInfo(
            card_id=card.instance_id,
            name=definition.name,
            tag=definition.tag,
            kind=definition.kind.value,
            power=definition.power,
            partner_tag=definition.partner_tag,
            description=definition.description,
            is_blocked=engine.is_card_blocked(card),
        )

    def _offer_info(self, engine: TurnEngine, definition: CardDefinition) -> ItemOfferInfo:
        cost = definition.cost
        shop = engine.shop
        return ItemOfferInfo(
            tag=definition.tag,
            name=definition.name,
            description=definition.description,
            cost_type=cost.cost_type.value if cost else "tokens",
            token_cost=cost.tokens if cost else 0,
            health_cost=cost.health if cost else 0,
            affordable_with_tokens=bool(shop and shop.can_afford(definition, engine.player)),
            affordable_with_health=bool(shop and shop.can_afford(definition, engine.player, use_health=True)),
        )
