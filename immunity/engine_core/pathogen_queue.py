"""
Pathogen Queue - Spawning, targeting and the victory condition.

Lifecycle:
1. Templates are shuffled once when the queue is built
2. start() fills the active slots, targeting the first spawn
3. When a pathogen dies it leaves the active set and the target moves
   to another live pathogen
4. When the active set empties the next template spawns and becomes
   the target; when nothing is left the victory flag is raised
"""

from __future__ import annotations
from collections import deque
from typing import Iterable
import logging
import random

from .events import EventBus, EventType
from .pathogen import PathogenInstance, PathogenTemplate

logger = logging.getLogger(__name__)


class PathogenQueue:
    """The waiting templates plus the currently active pathogens."""

    def __init__(
        self,
        templates: Iterable[PathogenTemplate],
        active_slots: int = 1,
        rng: random.Random | None = None,
        events: EventBus | None = None,
        shuffle: bool = True,
    ):
        self.rng = rng or random.Random()
        self.events = events
        self.active_slots = max(1, active_slots)

        pending = list(templates)
        if shuffle:
            self.rng.shuffle(pending)
        self._queue: deque[PathogenTemplate] = deque(pending)
        self.total_count = len(pending)

        self.active: list[PathogenInstance] = []
        self.current_target: PathogenInstance | None = None
        self.defeated: list[str] = []
        self.victory = False
        self._spawn_count = 0

    # -------------------------------------------------------------------------
    # Spawning
    # -------------------------------------------------------------------------

    def start(self) -> list[PathogenInstance]:
        """Fill every free active slot. Victory if there was nothing to spawn."""
        spawned: list[PathogenInstance] = []
        while len(self.active) < self.active_slots:
            instance = self.spawn_next()
            if instance is None:
                break
            spawned.append(instance)
        if not self.active:
            self._declare_victory()
        return spawned

    def spawn_next(self) -> PathogenInstance | None:
        """Spawn the next queued template into the active set and target it."""
        if not self._queue:
            return None
        template = self._queue.popleft()
        self._spawn_count += 1
        slug = template.name.lower().replace(" ", "_")
        instance = PathogenInstance(template=template, instance_id=f"{slug}_{self._spawn_count}")
        self.active.append(instance)
        self.current_target = instance
        logger.info("Spawned %s (%d HP)", instance.name, instance.current_hp)
        if self.events is not None:
            self.events.publish(EventType.PATHOGEN_SPAWNED, pathogen=instance)
        return instance

    # -------------------------------------------------------------------------
    # Death
    # -------------------------------------------------------------------------

    def handle_death(self, pathogen: PathogenInstance) -> PathogenInstance | None:
        """
        Remove a dead pathogen and advance the queue.

        Returns the newly spawned pathogen, if any.
        """
        if pathogen not in self.active:
            return None
        self.active.remove(pathogen)
        self.defeated.append(pathogen.name)
        logger.info("%s defeated (%d remaining)", pathogen.name, self.remaining_count)
        if self.events is not None:
            self.events.publish(EventType.PATHOGEN_DEFEATED, pathogen=pathogen)

        if self.current_target is pathogen:
            self.current_target = self._first_alive()

        if self.active:
            return None
        if not self._queue:
            self._declare_victory()
            return None
        return self.spawn_next()

    def _declare_victory(self) -> None:
        if self.victory:
            return
        self.victory = True
        self.current_target = None
        logger.info("All pathogens defeated")
        if self.events is not None:
            self.events.publish(EventType.ALL_PATHOGENS_DEFEATED, defeated=list(self.defeated))

    # -------------------------------------------------------------------------
    # Targeting and queries
    # -------------------------------------------------------------------------

    def set_target(self, pathogen: PathogenInstance) -> bool:
        """Target a live active pathogen."""
        if pathogen not in self.active or not pathogen.is_alive:
            return False
        self.current_target = pathogen
        return True

    def find(self, instance_id: str) -> PathogenInstance | None:
        for pathogen in self.active:
            if pathogen.instance_id == instance_id:
                return pathogen
        return None

    def _first_alive(self) -> PathogenInstance | None:
        for pathogen in self.active:
            if pathogen.is_alive:
                return pathogen
        return None

    def get_active_pathogens(self) -> list[PathogenInstance]:
        return [p for p in self.active if p.is_alive]

    def is_card_blocked(self, tag: str) -> bool:
        return any(p.is_card_blocked(tag) for p in self.active)

    @property
    def queued_count(self) -> int:
        return len(self._queue)

    @property
    def remaining_count(self) -> int:
        return len(self._queue) + len(self.get_active_pathogens())

    def upcoming(self) -> list[PathogenTemplate]:
        return list(self._queue)
