"""
Combat Resolver - The single authority for health and defense changes.

Damage flow (player or pathogen target):
1. Percentage defense scales the nominal damage (round half to even)
2. Flat defense is subtracted, floored at zero
3. HP is lowered, floored at zero
4. On the alive -> dead transition COMBATANT_DIED is published once

Healing is clamped to max HP and does nothing for dead combatants.
Health spent as a price bypasses defenses.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Protocol, TYPE_CHECKING
import logging

from .events import EventBus, EventType

if TYPE_CHECKING:
    from .state import PlayerState

logger = logging.getLogger(__name__)

MAX_PERCENTAGE_DEFENSE = 100


class Combatant(Protocol):
    """Anything that can take damage: the player or a pathogen."""
    hp: int
    max_hp: int
    is_alive: bool

    @property
    def flat_defense(self) -> int: ...

    @property
    def percentage_defense(self) -> int: ...

    def mark_dead(self) -> None: ...


@dataclass(frozen=True)
class DamageResult:
    """Outcome of one damage application."""
    nominal: int
    actual: int
    hp_before: int
    hp_after: int
    died: bool = False


@dataclass(frozen=True)
class HealResult:
    requested: int
    healed: int
    hp_after: int


def compute_actual_damage(nominal: int, flat_defense: int = 0, percentage_defense: int = 0) -> int:
    """
    Apply percentage then flat defense to a nominal damage amount.

    >>> compute_actual_damage(20, flat_defense=5, percentage_defense=50)
    5
    """
    nominal = max(0, nominal)
    pct = min(MAX_PERCENTAGE_DEFENSE, max(0, percentage_defense))
    after_pct = round(nominal * (100 - pct) / 100)
    return max(0, after_pct - max(0, flat_defense))


class CombatResolver:
    """
    Applies damage, healing, defense and token changes.

    Usage:
        combat = CombatResolver(events)
        result = combat.apply_damage(player, 20)
        if result.died:
            ...
    """

    def __init__(self, events: EventBus | None = None):
        self.events = events

    def apply_damage(self, target: Combatant, nominal: int) -> DamageResult:
        """Apply defended damage to a combatant."""
        hp_before = target.hp
        if not target.is_alive:
            return DamageResult(nominal=nominal, actual=0, hp_before=hp_before, hp_after=hp_before)

        actual = compute_actual_damage(nominal, target.flat_defense, target.percentage_defense)
        return self._lower_hp(target, nominal, actual)

    def pay_health(self, target: Combatant, amount: int) -> DamageResult:
        """Spend health as a price. Defenses do not apply."""
        hp_before = target.hp
        if not target.is_alive or amount <= 0:
            return DamageResult(nominal=amount, actual=0, hp_before=hp_before, hp_after=hp_before)
        return self._lower_hp(target, amount, amount)

    def _lower_hp(self, target: Combatant, nominal: int, actual: int) -> DamageResult:
        hp_before = target.hp
        target.hp = max(0, hp_before - actual)
        died = target.hp == 0 and target.is_alive
        logger.debug(
            "%s takes %d (nominal %d): %d -> %d",
            getattr(target, "name", target), actual, nominal, hp_before, target.hp,
        )
        if died:
            target.mark_dead()
            logger.info("%s died", getattr(target, "name", target))
            if self.events is not None:
                self.events.publish(EventType.COMBATANT_DIED, combatant=target)
        return DamageResult(
            nominal=nominal, actual=actual, hp_before=hp_before, hp_after=target.hp, died=died
        )

    def apply_heal(self, target: Combatant, amount: int) -> HealResult:
        """Restore health, clamped to max. No effect on the dead or for amount <= 0."""
        if not target.is_alive or amount <= 0:
            return HealResult(requested=amount, healed=0, hp_after=target.hp)
        before = target.hp
        target.hp = min(target.max_hp, before + amount)
        healed = target.hp - before
        logger.debug("%s heals %d: %d -> %d", getattr(target, "name", target), healed, before, target.hp)
        return HealResult(requested=amount, healed=healed, hp_after=target.hp)

    # -------------------------------------------------------------------------
    # Player-only resources
    # -------------------------------------------------------------------------

    def grant_defense(self, player: PlayerState, amount: int) -> int:
        """Add flat defense; reset when the next player turn starts."""
        if amount > 0:
            player.flat_defense += amount
        return player.flat_defense

    def grant_percentage_defense(self, player: PlayerState, percent: int) -> int:
        """Raise percentage defense. Sources do not stack; the highest wins."""
        percent = min(MAX_PERCENTAGE_DEFENSE, max(0, percent))
        player.percentage_defense = max(player.percentage_defense, percent)
        return player.percentage_defense

    def reset_defense(self, player: PlayerState) -> None:
        player.flat_defense = 0
        player.percentage_defense = 0

    def grant_tokens(self, player: PlayerState, amount: int) -> int:
        if amount > 0:
            player.tokens += amount
        return player.tokens

    def spend_tokens(self, player: PlayerState, amount: int) -> bool:
        """Spend tokens if the player has enough."""
        if amount < 0 or player.tokens < amount:
            return False
        player.tokens -= amount
        return True
