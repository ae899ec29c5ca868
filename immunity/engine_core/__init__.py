"""
Engine Core - Deterministic turn, combat and card resolution.

The engine is the runtime that:
1. Runs the player / pathogen turn state machine
2. Applies defended damage and clamped healing
3. Schedules pathogen attacks and abilities
4. Resolves cards in two passes (immediate effects, then combos)
5. Publishes every state change on an event bus
"""

from .state import (
    Card,
    CardDefinition,
    CardEffect,
    CardField,
    CardKind,
    CostType,
    GameOutcome,
    GameOverReason,
    ItemCost,
    ItemKind,
    PlayerState,
    PlayerStats,
    TurnPhase,
    TurnState,
)
from .action import Action, ActionType, ActionResult, RejectionCode
from .events import EventBus, EventType, GameEvent
from .combat import CombatResolver, DamageResult, HealResult, compute_actual_damage
from .pathogen import (
    AbilityKind,
    AbilitySpec,
    PathogenInstance,
    PathogenTemplate,
    TemplateError,
)
from .abilities import AbilityScheduler, should_attack, should_trigger, attack_pattern
from .combo_resolver import CardComboResolver, ComboEntry, PlayOutcome
from .deck import Deck
from .pathogen_queue import PathogenQueue
from .shop import Shop
from .turn_engine import TurnEngine
from .action_generator import ActionGenerator, legal_actions, is_legal

__all__ = [
    "Card",
    "CardDefinition",
    "CardEffect",
    "CardField",
    "CardKind",
    "CostType",
    "GameOutcome",
    "GameOverReason",
    "ItemCost",
    "ItemKind",
    "PlayerState",
    "PlayerStats",
    "TurnPhase",
    "TurnState",
    "Action",
    "ActionType",
    "ActionResult",
    "RejectionCode",
    "EventBus",
    "EventType",
    "GameEvent",
    "CombatResolver",
    "DamageResult",
    "HealResult",
    "compute_actual_damage",
    "AbilityKind",
    "AbilitySpec",
    "PathogenInstance",
    "PathogenTemplate",
    "TemplateError",
    "AbilityScheduler",
    "should_attack",
    "should_trigger",
    "attack_pattern",
    "CardComboResolver",
    "ComboEntry",
    "PlayOutcome",
    "Deck",
    "PathogenQueue",
    "Shop",
    "TurnEngine",
    "ActionGenerator",
    "legal_actions",
    "is_legal",
]
