"""
Turn Engine - The turn phase state machine.

Phases:
    PLAYER_TURN --end/limit/timer--> PATHOGEN_TURN --> PLAYER_TURN
    any phase --win/lose--> GAME_OVER (terminal)

A player turn:
1. Counters reset, played cards cleared, shop restocked
2. Cards drawn: ``first_turn_draw`` on turn 1, otherwise one per card
   played last turn, capped by hand room and the deck
3. Up to ``cards_per_turn`` cards are played; reaching the limit or the
   timer running out ends the turn automatically, exactly once

A pathogen turn:
1. Waiting combos get a final check, then the field is cleared
2. Every live pathogen starts its turn (abilities) and attacks if due
3. The turn number advances; player defenses expire when the next
   player turn opens

Win conditions are checked after every card play and during the pathogen
turn, in order: player dead, all pathogens defeated, turn limit passed.

Public operations are rejected while a transition is running
(``is_locked``); the lock is released only after the transition's
notifications have gone out. A rejected operation changes nothing.
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import Callable, Iterator, TYPE_CHECKING
import logging

from .action import Action, ActionResult, ActionType, RejectionCode
from .events import EventBus, EventType, GameEvent
from .pathogen import PathogenInstance
from .state import (
    Card,
    GameOutcome,
    GameOverReason,
    PlayerState,
    PlayerStats,
    TurnPhase,
    TurnState,
)

if TYPE_CHECKING:
    from ..config import GameConfig
    from .abilities import AbilityScheduler
    from .combat import CombatResolver
    from .combo_resolver import CardComboResolver
    from .deck import Deck
    from .pathogen_queue import PathogenQueue
    from .shop import Shop
    from .state import CardDefinition

logger = logging.getLogger(__name__)


class TurnEngine:
    """
    Drives turns for one game.

    Usage:
        engine = TurnEngine(config, player, deck, queue, combat, scheduler, combos, events)
        engine.start_game()
        engine.play_card(engine.get_player_hand()[0])
        engine.end_player_turn()
    """

    def __init__(
        self,
        config: GameConfig,
        player: PlayerState,
        deck: Deck,
        queue: PathogenQueue,
        combat: CombatResolver,
        scheduler: AbilityScheduler,
        combos: CardComboResolver,
        events: EventBus,
        shop: Shop | None = None,
    ):
        self.config = config
        self.player = player
        self.deck = deck
        self.queue = queue
        self.combat = combat
        self.scheduler = scheduler
        self.combos = combos
        self.events = events
        self.shop = shop

        self.state = TurnState()
        self._changes: list[str] = []

        events.subscribe(EventType.COMBATANT_DIED, self._on_combatant_died)

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def phase(self) -> TurnPhase:
        return self.state.phase

    @property
    def turn_number(self) -> int:
        return self.state.turn_number

    @property
    def is_game_over(self) -> bool:
        return self.state.is_game_over

    @property
    def outcome(self) -> GameOutcome | None:
        return self.state.outcome

    @property
    def cards_remaining_this_turn(self) -> int:
        return max(0, self.config.cards_per_turn - self.state.cards_played_this_turn)

    def get_player_stats(self) -> PlayerStats:
        return self.player.stats()

    def get_phase(self) -> TurnPhase:
        return self.state.phase

    def get_turn_number(self) -> int:
        return self.state.turn_number

    def get_player_hand(self) -> list[Card]:
        return list(self.player.hand)

    def get_field_cards(self) -> list[Card]:
        return list(self.combos.field.cards)

    def get_active_pathogens(self) -> list[PathogenInstance]:
        return self.queue.get_active_pathogens()

    def get_shop_offers(self) -> list[CardDefinition]:
        return list(self.shop.offers) if self.shop else []

    def find_card(self, card_id: str) -> Card | None:
        for card in self.player.hand:
            if card.instance_id == card_id:
                return card
        return None

    def is_card_blocked(self, card: Card) -> bool:
        return self.queue.is_card_blocked(card.tag)

    def validate_play(self, card: Card, target: PathogenInstance | None = None) -> ActionResult | None:
        """Return a failure result if ``card`` cannot be played now, else None."""
        rejected = self._guard()
        if rejected:
            return rejected
        if card not in self.player.hand:
            return ActionResult.failure(f"{card.name} is not in hand", RejectionCode.CARD_NOT_IN_HAND)
        if self.state.cards_played_this_turn >= self.config.cards_per_turn:
            return ActionResult.failure(
                f"Already played {self.config.cards_per_turn} cards this turn",
                RejectionCode.CARD_LIMIT_REACHED,
            )
        if self.is_card_blocked(card):
            return ActionResult.failure(f"{card.name} is blocked", RejectionCode.CARD_BLOCKED)
        if target is not None and (target not in self.queue.active or not target.is_alive):
            return ActionResult.failure("Target is not a live pathogen", RejectionCode.INVALID_TARGET)
        if not self.combos.can_place(card, self.player):
            return ActionResult.failure("Field is full", RejectionCode.FIELD_FULL)
        return None

    def playable_cards(self) -> list[Card]:
        return [c for c in self.player.hand if self.validate_play(c) is None]

    # =========================================================================
    # Operations
    # =========================================================================

    def start_game(self) -> ActionResult:
        """Spawn the first pathogens and open turn 1."""
        if self.state.is_locked:
            return ActionResult.failure("Engine is busy", RejectionCode.ENGINE_LOCKED)
        if self.state.started:
            return ActionResult.failure("Game already started", RejectionCode.ALREADY_STARTED)

        with self._transition():
            self.state.started = True
            self.queue.start()
            self.events.publish(EventType.TURN_NUMBER_CHANGED, turn_number=self.state.turn_number)
            if not self._check_win_conditions():
                self._begin_player_turn()
            return ActionResult.ok(self._take_changes())

    def start_player_turn(self) -> ActionResult:
        """Open the next player turn. Valid only between turns."""
        rejected = self._guard(require_player_turn=False)
        if rejected:
            return rejected
        if self.state.phase != TurnPhase.PATHOGEN_TURN:
            return ActionResult.failure("A player turn is already open", RejectionCode.WRONG_PHASE)
        with self._transition():
            self._begin_player_turn()
            return ActionResult.ok(self._take_changes())

    def play_card(self, card: Card, target: PathogenInstance | None = None) -> ActionResult:
        """
        Play a card from hand at the current (or given) target.

        Validation order: lock, phase, hand, limit, block, target, field.
        """
        rejected = self.validate_play(card, target)
        if rejected:
            logger.debug("Rejected %s: %s", card.name, rejected.error)
            return rejected

        with self._transition():
            if target is not None:
                self.queue.set_target(target)
            target = self.queue.current_target

            self.player.remove_from_hand(card)
            self.player.played_cards.append(card)
            self.state.cards_played_this_turn += 1
            self._note(f"Played {card.name}" + (f" at {target.name}" if target else ""))
            self.events.publish(EventType.CARD_PLAYED, card=card, target=target)

            outcome = self.combos.resolve(card, self.player, target)
            for result in outcome.damage:
                self._note(f"Dealt {result.actual} damage")
            for combo in outcome.activated_combos:
                self._note(f"Combo {combo.name} activated")
            for note in outcome.notes:
                self._note(note)
            self.events.publish(EventType.PLAYER_STATS_CHANGED, stats=self.player.stats())

            turn_ended = False
            if self._check_win_conditions():
                turn_ended = True
            elif self.state.cards_played_this_turn >= self.config.cards_per_turn:
                self._note("Card limit reached")
                self._finish_player_turn()
                turn_ended = True

            return ActionResult.ok(
                self._take_changes(), card=card, turn_ended=turn_ended, outcome=outcome
            )

    def end_player_turn(self) -> ActionResult:
        """End the player turn and run the pathogen turn."""
        rejected = self._guard()
        if rejected:
            logger.debug("Rejected end turn: %s", rejected.error)
            return rejected
        with self._transition():
            self._finish_player_turn()
            return ActionResult.ok(self._take_changes(), turn_ended=True)

    def tick(self, elapsed: float) -> ActionResult:
        """Advance the turn timer. Ends the turn once when it runs out."""
        rejected = self._guard()
        if rejected:
            return rejected
        remaining = self.state.turn_time_remaining
        if remaining is None or elapsed <= 0:
            return ActionResult.ok()

        self.state.turn_time_remaining = max(0.0, remaining - elapsed)
        if not self.state.timer_expired or self.state.turn_ended:
            return ActionResult.ok()

        with self._transition():
            self._note("Turn timer expired")
            self._finish_player_turn()
            return ActionResult.ok(self._take_changes(), turn_ended=True)

    def purchase_item(self, item_tag: str, use_health: bool = False) -> ActionResult:
        """Buy a shop item into hand. Does not count as a card play."""
        rejected = self._guard()
        if rejected:
            return rejected
        if self.shop is None:
            return ActionResult.failure("No shop in this game", RejectionCode.NOT_IN_SHOP)

        with self._transition():
            result = self.shop.purchase(item_tag, self.player, self.combat, use_health)
            if result.success:
                self.events.publish(EventType.PLAYER_STATS_CHANGED, stats=self.player.stats())
                self._check_win_conditions()
            else:
                logger.debug("Rejected purchase of %s: %s", item_tag, result.error)
            return result

    def apply(self, action: Action) -> ActionResult:
        """Apply an Action built by a policy or an API request."""
        handler = self._get_handler(action.action_type)
        if handler is None:
            return ActionResult.failure(f"Unknown action type: {action.action_type}")
        return handler(action)

    def _get_handler(self, action_type: ActionType) -> Callable[[Action], ActionResult] | None:
        handlers = {
            ActionType.PLAY_CARD: self._handle_play_card,
            ActionType.END_TURN: lambda action: self.end_player_turn(),
            ActionType.PURCHASE_ITEM: lambda action: self.purchase_item(
                action.item_tag or "", action.use_health
            ),
        }
        return handlers.get(action_type)

    def _handle_play_card(self, action: Action) -> ActionResult:
        card = self.find_card(action.card_id or "")
        if card is None:
            return ActionResult.failure(
                f"Card {action.card_id} is not in hand", RejectionCode.CARD_NOT_IN_HAND
            )
        target = None
        if action.target_id:
            target = self.queue.find(action.target_id)
            if target is None:
                return ActionResult.failure(
                    f"Unknown target {action.target_id}", RejectionCode.INVALID_TARGET
                )
        return self.play_card(card, target)

    # =========================================================================
    # Transitions (run under the lock)
    # =========================================================================

    @contextmanager
    def _transition(self) -> Iterator[None]:
        self.state.is_locked = True
        try:
            yield
        finally:
            self.state.is_locked = False

    def _guard(self, require_player_turn: bool = True) -> ActionResult | None:
        if self.state.is_locked:
            return ActionResult.failure("Engine is busy", RejectionCode.ENGINE_LOCKED)
        if self.state.is_game_over:
            return ActionResult.failure("Game is over", RejectionCode.GAME_OVER)
        if not self.state.started:
            return ActionResult.failure("Game has not started", RejectionCode.WRONG_PHASE)
        if require_player_turn and self.state.phase != TurnPhase.PLAYER_TURN:
            return ActionResult.failure("Not the player's turn", RejectionCode.WRONG_PHASE)
        return None

    def _begin_player_turn(self) -> None:
        state = self.state
        self._set_phase(TurnPhase.PLAYER_TURN)
        state.turn_ended = False
        state.cards_played_this_turn = 0
        state.turn_time_remaining = (
            self.config.turn_time_seconds if self.config.turn_time_seconds > 0 else None
        )
        self.combat.reset_defense(self.player)
        self.player.played_cards.clear()
        self.combos.begin_turn()

        if state.turn_number == 1:
            to_draw = self.config.first_turn_draw
        else:
            to_draw = state.cards_played_last_turn
        drawn = self.player.draw_cards(self.deck, to_draw)
        if drawn:
            self._note(f"Drew {len(drawn)} card(s)")

        if self.shop is not None:
            self.shop.refresh()
        self.events.publish(EventType.PLAYER_STATS_CHANGED, stats=self.player.stats())

    def _finish_player_turn(self) -> None:
        state = self.state
        if state.turn_ended:
            return
        state.turn_ended = True
        state.cards_played_last_turn = state.cards_played_this_turn

        self.combos.finalize_turn(self.player, self.queue.current_target)
        discarded = self.combos.clear_field()
        if discarded:
            self._note(f"Discarded {len(discarded)} card(s) from the field")

        if self._check_win_conditions():
            return
        self._run_pathogen_turn()

    def _run_pathogen_turn(self) -> None:
        self._set_phase(TurnPhase.PATHOGEN_TURN)

        for pathogen in list(self.queue.active):
            if not pathogen.is_alive:
                continue
            started = self.scheduler.process_turn_start(pathogen)
            for ability in started.triggered:
                self._note(f"{pathogen.name} used {ability.value}")
            result = self.scheduler.resolve_attack(pathogen, self.player)
            if result is not None:
                self._note(f"{pathogen.name} attacked for {result.actual}")
            if not self.player.is_alive:
                break

        self.events.publish(EventType.PLAYER_STATS_CHANGED, stats=self.player.stats())
        if self._check_win_conditions():
            return

        self.state.turn_number += 1
        self.events.publish(EventType.TURN_NUMBER_CHANGED, turn_number=self.state.turn_number)
        if self._check_win_conditions():
            return
        self._begin_player_turn()

    def _check_win_conditions(self) -> bool:
        """Enter GAME_OVER if the game is decided. Returns True when over."""
        if self.state.is_game_over:
            return True
        if not self.player.is_alive:
            self._enter_game_over(GameOutcome.DEFEAT, GameOverReason.PLAYER_DEFEATED)
        elif self.queue.victory:
            self._enter_game_over(GameOutcome.VICTORY, GameOverReason.ALL_PATHOGENS_DEFEATED)
        elif self.state.turn_number > self.config.max_turns:
            self._enter_game_over(GameOutcome.DEFEAT, GameOverReason.TURN_LIMIT)
        return self.state.is_game_over

    def _enter_game_over(self, outcome: GameOutcome, reason: GameOverReason) -> None:
        self.state.outcome = outcome
        self.state.reason = reason
        self.state.turn_time_remaining = None
        self._set_phase(TurnPhase.GAME_OVER)
        self._note(f"Game over: {outcome.value} ({reason.value})")
        self.events.publish(EventType.GAME_OVER, outcome=outcome, reason=reason)

    def _set_phase(self, phase: TurnPhase) -> None:
        self.state.phase = phase
        logger.debug("Phase -> %s (turn %d)", phase.value, self.state.turn_number)
        self.events.publish(
            EventType.TURN_PHASE_CHANGED, phase=phase, turn_number=self.state.turn_number
        )

    def _on_combatant_died(self, event: GameEvent) -> None:
        combatant = event["combatant"]
        if isinstance(combatant, PathogenInstance):
            self.combat.grant_tokens(self.player, self.config.tokens_per_defeat)
            self._note(f"{combatant.name} defeated (+{self.config.tokens_per_defeat} tokens)")
            self.queue.handle_death(combatant)

    def _note(self, change: str) -> None:
        logger.info("%s", change)
        self._changes.append(change)

    def _take_changes(self) -> list[str]:
        changes, self._changes = self._changes, []
        return changes
