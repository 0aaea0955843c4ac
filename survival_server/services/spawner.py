# survival_server/services/spawner.py
"""Enemy spawning with an accelerating spawn rate."""

import logging
import random
from typing import Optional

from survival_server.config.settings import (
    ENEMY_TYPES,
    MIN_SPAWN_INTERVAL_MS,
    SPAWN_INTERVAL_DECAY,
    SPAWN_MARGIN,
    WORLD_HEIGHT,
    WORLD_WIDTH,
)
from survival_server.models.entities import Enemy
from survival_server.models.world import World

logger = logging.getLogger(__name__)

SIDE_TOP, SIDE_RIGHT, SIDE_BOTTOM, SIDE_LEFT = range(4)


class Spawner:
    """Decides when and where new enemies enter the arena."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def update(self, world: World, now: float) -> Optional[Enemy]:
        """Spawn at most one enemy if the current spawn interval has elapsed."""
        if now - world.last_enemy_spawn <= world.enemy_spawn_rate:
            return None

        x, y = self._spawn_point(self.rng.randrange(4))
        type_name = self.rng.choice(list(ENEMY_TYPES))
        enemy = world.add_enemy(x, y, type_name, now)

        world.last_enemy_spawn = now
        world.enemy_spawn_rate = max(
            MIN_SPAWN_INTERVAL_MS, world.enemy_spawn_rate * SPAWN_INTERVAL_DECAY
        )
        logger.debug(
            f"Spawned {type_name} {enemy.id} at ({x:.0f}, {y:.0f}), "
            f"next interval {world.enemy_spawn_rate:.0f}ms"
        )
        return enemy

    def _spawn_point(self, side: int) -> tuple:
        """A point just outside the given edge of the arena."""
        if side == SIDE_TOP:
            return self.rng.uniform(0, WORLD_WIDTH), -SPAWN_MARGIN
        if side == SIDE_RIGHT:
            return WORLD_WIDTH + SPAWN_MARGIN, self.rng.uniform(0, WORLD_HEIGHT)
        if side == SIDE_BOTTOM:
            return self.rng.uniform(0, WORLD_WIDTH), WORLD_HEIGHT + SPAWN_MARGIN
        return -SPAWN_MARGIN, self.rng.uniform(0, WORLD_HEIGHT)
