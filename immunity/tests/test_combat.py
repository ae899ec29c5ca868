"""
Tests for the combat resolver.

Tests:
- Percentage then flat defense, with round-half-to-even
- HP floors at zero and death is published once
- Healing clamps to max HP
- Health payments bypass defenses
"""

import pytest

from ..engine_core.combat import CombatResolver, compute_actual_damage
from ..engine_core.events import EventType
from ..engine_core.state import PlayerState


class TestComputeActualDamage:
    """Tests for the damage formula."""

    def test_percentage_then_flat(self):
        """20 damage through 50% and 5 flat leaves 5."""
        assert compute_actual_damage(20, flat_defense=5, percentage_defense=50) == 5

    def test_no_defense(self):
        assert compute_actual_damage(12) == 12

    @pytest.mark.parametrize("nominal,pct,expected", [
        (5, 50, 2),   # 2.5 rounds to even
        (7, 50, 4),   # 3.5 rounds to even
        (10, 25, 8),  # 7.5 rounds to even
    ])
    def test_rounds_half_to_even(self, nominal, pct, expected):
        assert compute_actual_damage(nominal, percentage_defense=pct) == expected

    def test_flat_defense_floors_at_zero(self):
        assert compute_actual_damage(4, flat_defense=10) == 0

    def test_full_percentage_blocks_everything(self):
        assert compute_actual_damage(50, percentage_defense=100) == 0

    def test_percentage_above_cap_is_clamped(self):
        assert compute_actual_damage(50, percentage_defense=150) == 0


class TestApplyDamage:
    """Tests for damage application."""

    def test_defended_hit_on_player(self, combat: CombatResolver, player: PlayerState):
        """A 20 damage hit against 50% and 5 flat takes 5 HP."""
        player.percentage_defense = 50
        player.flat_defense = 5

        result = combat.apply_damage(player, 20)

        assert result.actual == 5
        assert player.hp == 95
        assert not result.died

    def test_hp_floors_at_zero(self, combat, player):
        result = combat.apply_damage(player, 250)

        assert player.hp == 0
        assert result.hp_after == 0
        assert result.died
        assert not player.is_alive

    def test_death_published_once(self, combat, events, player):
        """Damage to an already dead combatant publishes nothing new."""
        combat.apply_damage(player, 100)
        combat.apply_damage(player, 100)

        deaths = events.events_of(EventType.COMBATANT_DIED)
        assert len(deaths) == 1
        assert deaths[0]["combatant"] is player

    def test_dead_target_takes_no_damage(self, combat, germ):
        combat.apply_damage(germ, 100)
        result = combat.apply_damage(germ, 10)

        assert result.actual == 0
        assert germ.hp == 0

    def test_zero_damage_does_not_kill(self, combat, player):
        player.flat_defense = 50
        result = combat.apply_damage(player, 30)

        assert result.actual == 0
        assert player.hp == 100
        assert player.is_alive


class TestHealing:
    """Tests for healing."""

    def test_heal_clamped_to_max(self, combat, player):
        player.hp = 90

        result = combat.apply_heal(player, 20)

        assert result.healed == 10
        assert player.hp == 100

    def test_heal_does_nothing_for_dead(self, combat, player):
        combat.apply_damage(player, 100)

        result = combat.apply_heal(player, 50)

        assert result.healed == 0
        assert player.hp == 0

    def test_non_positive_heal_ignored(self, combat, player):
        player.hp = 50
        assert combat.apply_heal(player, 0).healed == 0
        assert combat.apply_heal(player, -5).healed == 0
        assert player.hp == 50


class TestPlayerResources:
    """Tests for defense and token bookkeeping."""

    def test_pay_health_ignores_defense(self, combat, player):
        player.percentage_defense = 100
        player.flat_defense = 20

        result = combat.pay_health(player, 10)

        assert result.actual == 10
        assert player.hp == 90

    def test_percentage_defense_takes_highest(self, combat, player):
        combat.grant_percentage_defense(player, 50)
        combat.grant_percentage_defense(player, 25)

        assert player.percentage_defense == 50

    def test_percentage_defense_clamped(self, combat, player):
        assert combat.grant_percentage_defense(player, 180) == 100

    def test_flat_defense_stacks(self, combat, player):
        combat.grant_defense(player, 5)
        combat.grant_defense(player, 5)

        assert player.flat_defense == 10

    def test_reset_defense(self, combat, player):
        combat.grant_defense(player, 5)
        combat.grant_percentage_defense(player, 50)

        combat.reset_defense(player)

        assert player.flat_defense == 0
        assert player.percentage_defense == 0

    def test_spend_tokens(self, combat, player):
        player.tokens = 5

        assert combat.spend_tokens(player, 3)
        assert player.tokens == 2
        assert not combat.spend_tokens(player, 3)
        assert player.tokens == 2
