"""
Game Configuration - Tunable rule knobs for a play-through.

Every number that shapes a game lives here instead of being scattered across
the engine:
- Player starting health, hand and field capacity
- Card play limit per turn and opening hand size
- Active pathogen slots and the turn limit
- Turn timer length (0 disables the timer)
- Shop size and token economy

Values are read from ``IMMUNITY_<FIELD>`` environment variables, e.g.
``IMMUNITY_STARTING_HP=80``. Keyword arguments win over the environment.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


ENV_PREFIX = "IMMUNITY_"


class GameConfig(BaseSettings):
    """Rule configuration for a single game."""

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, frozen=True)

    starting_hp: int = Field(100, ge=1, description="Player max and starting HP")
    cards_per_turn: int = Field(2, ge=1, description="Cards the player may play per turn")
    first_turn_draw: int = Field(5, ge=0, description="Cards drawn on turn 1")
    hand_capacity: int = Field(7, ge=1, description="Maximum cards held in hand")
    field_capacity: int = Field(2, ge=0, description="Slots for waiting combo cards")
    active_pathogen_slots: int = Field(1, ge=1, description="Pathogens active at once")
    max_turns: int = Field(30, ge=1, description="Turn limit before attrition defeat")
    turn_time_seconds: float = Field(
        60.0, ge=0, description="Player turn timer in seconds (0 disables)"
    )
    items_per_shop: int = Field(2, ge=0, description="Items offered each player turn")
    tokens_per_defeat: int = Field(5, ge=0, description="Tokens awarded per defeated pathogen")
    starting_tokens: int = Field(0, ge=0, description="Tokens at game start")

    @property
    def timer_enabled(self) -> bool:
        return self.turn_time_seconds > 0

    @classmethod
    def from_env(cls, **overrides) -> GameConfig:
        """Build a config from the environment, with keyword overrides on top."""
        return cls(**overrides)
