"""Tests for enemy spawn pacing and placement."""
from __future__ import annotations

import random

from survival_server.config import settings
from survival_server.models.world import World
from survival_server.services.spawner import Spawner


def test_spawns_only_after_interval_elapses(world: World) -> None:
    spawner = Spawner(random.Random(1))
    assert spawner.update(world, now=2000) is None
    enemy = spawner.update(world, now=2001)
    assert enemy is not None
    assert world.enemies == {enemy.id: enemy}
    assert world.last_enemy_spawn == 2001
    assert world.enemy_spawn_rate == 2000 * 0.99


def test_new_enemy_has_full_health_for_its_type(world: World) -> None:
    spawner = Spawner(random.Random(3))
    enemy = spawner.update(world, now=5000)
    stats = settings.ENEMY_TYPES[enemy.type]
    assert enemy.health == enemy.maxHealth == stats["health"]
    assert enemy.lastShot == 5000


def test_spawn_interval_decreases_to_floor() -> None:
    world = World(now=0)
    spawner = Spawner(random.Random(5))
    now = 0.0
    intervals = [world.enemy_spawn_rate]
    for _ in range(300):
        now += world.enemy_spawn_rate + 1
        assert spawner.update(world, now) is not None
        intervals.append(world.enemy_spawn_rate)

    assert all(later <= earlier for earlier, later in zip(intervals, intervals[1:]))
    assert min(intervals) == settings.MIN_SPAWN_INTERVAL_MS
    assert intervals[-1] == settings.MIN_SPAWN_INTERVAL_MS


def test_enemies_appear_outside_the_arena() -> None:
    world = World(now=0)
    spawner = Spawner(random.Random(11))
    seen_types = set()
    for step in range(1, 200):
        enemy = spawner.update(world, now=step * 10_000)
        seen_types.add(enemy.type)
        outside_x = enemy.x in (-settings.SPAWN_MARGIN, settings.WORLD_WIDTH + settings.SPAWN_MARGIN)
        outside_y = enemy.y in (-settings.SPAWN_MARGIN, settings.WORLD_HEIGHT + settings.SPAWN_MARGIN)
        assert outside_x or outside_y
    assert seen_types == set(settings.ENEMY_TYPES)


def test_at_most_one_enemy_per_update(world: World) -> None:
    spawner = Spawner(random.Random(2))
    spawner.update(world, now=100_000)
    spawner.update(world, now=100_000)
    assert len(world.enemies) == 1
