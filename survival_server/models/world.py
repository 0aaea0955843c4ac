# survival_server/models/world.py
"""Authoritative world state shared by every pipeline stage."""

import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from survival_server.config.settings import ENEMY_TYPES, INITIAL_SPAWN_INTERVAL_MS
from survival_server.models.entities import (
    Bullet,
    Enemy,
    EnemyBullet,
    Player,
    Projectile,
    RailgunBeam,
)

logger = logging.getLogger(__name__)


def enemy_type(type_name: str) -> Dict[str, float]:
    """Fixed parameters (health, speed, size, points, damage) for an enemy type."""
    return ENEMY_TYPES[type_name]


class World:
    """Owns every entity collection plus spawn pacing and round state.

    Collections are dicts keyed by id. Stages that remove entities while
    walking a collection iterate over ``list(...)`` of it and re-check
    membership before touching an entity.
    """

    def __init__(self, now: float = 0.0):
        self.players: Dict[str, Player] = {}
        self.enemies: Dict[str, Enemy] = {}
        self.bullets: Dict[str, Projectile] = {}
        self.enemy_bullets: Dict[str, EnemyBullet] = {}

        # ID generators
        self.next_enemy_id = 0
        self.next_bullet_id = 0
        self.next_enemy_bullet_id = 0

        self.last_enemy_spawn = now
        self.enemy_spawn_rate = float(INITIAL_SPAWN_INTERVAL_MS)
        self.enemies_killed = 0
        self.game_over = False

    def reset(self, now: float) -> None:
        """Clear every collection and restart spawn pacing and kill counters."""
        self.players.clear()
        self.enemies.clear()
        self.bullets.clear()
        self.enemy_bullets.clear()
        self.last_enemy_spawn = now
        self.enemy_spawn_rate = float(INITIAL_SPAWN_INTERVAL_MS)
        self.enemies_killed = 0
        self.game_over = False
        logger.info("World reset")

    # Players
    def add_player(self, player_id: str) -> Player:
        player = Player(id=player_id)
        self.players[player_id] = player
        return player

    def remove_player(self, player_id: str) -> Optional[Player]:
        return self.players.pop(player_id, None)

    def living_players(self) -> List[Player]:
        return [p for p in self.players.values() if p.is_alive]

    # Enemies
    def add_enemy(self, x: float, y: float, type_name: str, now: float) -> Enemy:
        enemy_id = f"enemy-{self.next_enemy_id}"
        self.next_enemy_id += 1

        health = enemy_type(type_name)["health"]
        enemy = Enemy(
            id=enemy_id,
            x=x,
            y=y,
            type=type_name,
            health=health,
            maxHealth=health,
            lastShot=now,
        )
        self.enemies[enemy_id] = enemy
        return enemy

    def remove_enemy(self, enemy_id: str) -> Optional[Enemy]:
        return self.enemies.pop(enemy_id, None)

    # Player projectiles
    def add_bullet(
        self, owner_id: str, x: float, y: float, dx: float, dy: float, life: int
    ) -> Bullet:
        bullet = Bullet(
            id=self._next_bullet_id(),
            x=x,
            y=y,
            dx=dx,
            dy=dy,
            life=life,
            ownerId=owner_id,
        )
        self.bullets[bullet.id] = bullet
        return bullet

    def add_beam(
        self,
        owner_id: str,
        x: float,
        y: float,
        end_x: float,
        end_y: float,
        damage: float,
        life: int,
    ) -> RailgunBeam:
        beam = RailgunBeam(
            id=self._next_bullet_id(),
            x=x,
            y=y,
            endX=end_x,
            endY=end_y,
            damage=damage,
            life=life,
            ownerId=owner_id,
        )
        self.bullets[beam.id] = beam
        return beam

    def remove_bullet(self, bullet_id: str) -> Optional[Projectile]:
        return self.bullets.pop(bullet_id, None)

    def _next_bullet_id(self) -> str:
        bullet_id = f"bullet-{self.next_bullet_id}"
        self.next_bullet_id += 1
        return bullet_id

    # Enemy projectiles
    def add_enemy_bullet(
        self, x: float, y: float, dx: float, dy: float, life: int
    ) -> EnemyBullet:
        bullet_id = f"ebullet-{self.next_enemy_bullet_id}"
        self.next_enemy_bullet_id += 1

        bullet = EnemyBullet(id=bullet_id, x=x, y=y, dx=dx, dy=dy, life=life)
        self.enemy_bullets[bullet_id] = bullet
        return bullet

    def remove_enemy_bullet(self, bullet_id: str) -> Optional[EnemyBullet]:
        return self.enemy_bullets.pop(bullet_id, None)

    # Snapshot
    def snapshot(self) -> Dict[str, Any]:
        """Deep, JSON-ready copy of the world for publication."""
        bullets = []
        for bullet in self.bullets.values():
            data = asdict(bullet)
            if isinstance(bullet, RailgunBeam):
                data["hitEnemies"] = sorted(bullet.hitEnemies)
            bullets.append(data)

        return {
            "players": {pid: asdict(p) for pid, p in self.players.items()},
            "enemies": [asdict(e) for e in self.enemies.values()],
            "bullets": bullets,
            "enemyBullets": [asdict(b) for b in self.enemy_bullets.values()],
            "lastEnemySpawn": self.last_enemy_spawn,
            "enemySpawnRate": self.enemy_spawn_rate,
            "enemiesKilled": self.enemies_killed,
            "gameOver": self.game_over,
        }
