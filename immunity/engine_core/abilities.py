"""
Ability Scheduler - Decides when pathogens attack and which abilities fire.

Each pathogen keeps its own turn counter T, incremented once at the start
of every pathogen turn:
- It attacks when (T - 1) % attack_interval == 0, so turns 1, 1+k, 1+2k...
- An ability fires when its trigger interval is > 0 and T % interval == 0

Effects of fired abilities (blocked card tags, extra attack damage) are
reset at the start of the pathogen's next turn, so a block placed on
pathogen turn T covers the player turn that follows it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .combat import CombatResolver, DamageResult
from .events import EventBus, EventType
from .pathogen import AbilityKind, AbilitySpec, PathogenInstance, PathogenTemplate
from .state import PlayerState

logger = logging.getLogger(__name__)


def should_attack(turn: int, attack_interval: int) -> bool:
    """Attack cadence: first pathogen turn, then every ``attack_interval`` turns."""
    if turn < 1 or attack_interval < 1:
        return False
    return (turn - 1) % attack_interval == 0


def should_trigger(ability: AbilitySpec, turn: int) -> bool:
    return ability.triggers_on(turn)


@dataclass
class TurnStartOutcome:
    """What happened when a pathogen's turn started."""
    pathogen: PathogenInstance
    turn: int
    will_attack: bool
    triggered: list[AbilityKind] = field(default_factory=list)
    healed: int = 0


class AbilityScheduler:
    """
    Runs pathogen turn starts and attacks.

    Healing from Regeneration and Mutation goes through the CombatResolver,
    so it is clamped to max HP and ignored for dead pathogens.
    """

    def __init__(self, combat: CombatResolver, events: EventBus | None = None):
        self.combat = combat
        self.events = events

    def process_turn_start(self, pathogen: PathogenInstance) -> TurnStartOutcome:
        """Advance the pathogen's turn counter and apply due abilities."""
        pathogen.turn_counter += 1
        turn = pathogen.turn_counter
        pathogen.blocked_tags = set()
        pathogen.extra_damage = 0

        outcome = TurnStartOutcome(pathogen=pathogen, turn=turn, will_attack=False)
        if not pathogen.is_alive:
            pathogen.can_attack_this_turn = False
            return outcome

        for ability in pathogen.template.abilities.values():
            if should_trigger(ability, turn):
                self._apply_ability(pathogen, ability, outcome)

        pathogen.can_attack_this_turn = should_attack(turn, pathogen.template.attack_interval)
        outcome.will_attack = pathogen.can_attack_this_turn
        logger.debug(
            "%s turn %d: attack=%s abilities=%s",
            pathogen.name, turn, outcome.will_attack, [k.value for k in outcome.triggered],
        )
        return outcome

    def _apply_ability(
        self, pathogen: PathogenInstance, ability: AbilitySpec, outcome: TurnStartOutcome
    ) -> None:
        amount = 0
        if ability.kind == AbilityKind.BLOCK_CARDS:
            pathogen.blocked_tags |= set(ability.blocked_tags)
        elif ability.kind == AbilityKind.EXTRA_DAMAGE:
            pathogen.extra_damage += ability.value
            amount = ability.value
        elif ability.kind in (AbilityKind.REGENERATION, AbilityKind.MUTATION):
            amount = self.combat.apply_heal(pathogen, ability.value).healed
            outcome.healed += amount

        outcome.triggered.append(ability.kind)
        if self.events is not None:
            self.events.publish(
                EventType.ABILITY_TRIGGERED,
                pathogen=pathogen,
                ability=ability.kind,
                amount=amount,
                blocked_tags=sorted(ability.blocked_tags),
            )

    def resolve_attack(self, pathogen: PathogenInstance, player: PlayerState) -> DamageResult | None:
        """Attack the player if the pathogen may attack this turn."""
        if not pathogen.is_alive or not pathogen.can_attack_this_turn:
            return None
        result = self.combat.apply_damage(player, pathogen.attack_damage)
        logger.info("%s attacks for %d (%d after defense)", pathogen.name, result.nominal, result.actual)
        if self.events is not None:
            self.events.publish(EventType.PATHOGEN_ATTACKED, pathogen=pathogen, result=result)
        return result

    def is_card_blocked(self, pathogens: list[PathogenInstance], tag: str) -> bool:
        """A card is blocked if any live pathogen blocks its tag."""
        return any(p.is_card_blocked(tag) for p in pathogens)


def attack_pattern(template: PathogenTemplate, turns: int) -> list[int]:
    """Pathogen turns (1-based) on which a template attacks, for previews and debugging."""
    return [t for t in range(1, turns + 1) if should_attack(t, template.attack_interval)]
