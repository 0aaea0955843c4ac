# survival_server/services/combat_service.py
"""Advances enemies and projectiles by one tick and resolves every collision."""

import logging
import math
from typing import List, Optional

from survival_server.config.settings import (
    BULLET_DAMAGE,
    BULLET_RADIUS,
    ENEMY_BULLET_DAMAGE,
    ENEMY_BULLET_LIFE,
    ENEMY_BULLET_RADIUS,
    ENEMY_BULLET_SPEED,
    ENEMY_FIRE_INTERVAL_MS,
    ENEMY_PURSUIT_POLICY,
    PLAYER_RADIUS,
    SHOOTING_ENEMY_TYPE,
)
from survival_server.models.entities import Enemy, Player, RailgunBeam
from survival_server.models.world import World, enemy_type
from survival_server.utils.helpers import (
    calculate_distance,
    in_world,
    is_collision,
    point_segment_distance,
    unit_vector,
)

logger = logging.getLogger(__name__)


def apply_player_damage(player: Player, damage: int) -> None:
    """Damage a player, never below zero."""
    player.health = max(0, player.health - damage)


class CombatResolver:
    """Runs the per-tick enemy, projectile and collision passes in fixed order."""

    def __init__(self, pursuit_policy: str = ENEMY_PURSUIT_POLICY):
        if pursuit_policy not in ("sequential", "nearest"):
            raise ValueError(f"Unknown pursuit policy: {pursuit_policy}")
        self.pursuit_policy = pursuit_policy

    def resolve(self, world: World, now: float) -> None:
        self.update_enemies(world, now)
        self.update_bullets(world)
        self.update_enemy_bullets(world)
        self.resolve_hits(world)
        self.check_game_over(world)

    # ------------------------------------------------------------------
    # Enemies
    # ------------------------------------------------------------------
    def update_enemies(self, world: World, now: float) -> None:
        for enemy_id in list(world.enemies):
            enemy = world.enemies.get(enemy_id)
            if enemy is None:
                continue

            living = world.living_players()
            min_dist = min(
                (calculate_distance(p.x, p.y, enemy.x, enemy.y) for p in living),
                default=math.inf,
            )

            self._pursue(enemy, living)

            if enemy.type == SHOOTING_ENEMY_TYPE:
                self._enemy_fire(world, enemy, living, now)

            if self._contact(enemy, living):
                world.remove_enemy(enemy_id)
                continue

            if enemy.health <= 0 or min_dist <= 0:
                world.remove_enemy(enemy_id)

    def _pursue(self, enemy: Enemy, living: List[Player]) -> None:
        speed = enemy_type(enemy.type)["speed"]
        if self.pursuit_policy == "nearest":
            targets = [
                min(living, key=lambda p: calculate_distance(p.x, p.y, enemy.x, enemy.y))
            ] if living else []
        else:
            targets = living

        for player in targets:
            direction = unit_vector(player.x - enemy.x, player.y - enemy.y)
            if direction is None:
                continue
            enemy.x += direction[0] * speed
            enemy.y += direction[1] * speed

    def _enemy_fire(
        self, world: World, enemy: Enemy, living: List[Player], now: float
    ) -> None:
        if now - enemy.lastShot < ENEMY_FIRE_INTERVAL_MS or not living:
            return
        target = living[0]
        direction = unit_vector(target.x - enemy.x, target.y - enemy.y)
        if direction is None:
            return
        world.add_enemy_bullet(
            enemy.x,
            enemy.y,
            direction[0] * ENEMY_BULLET_SPEED,
            direction[1] * ENEMY_BULLET_SPEED,
            ENEMY_BULLET_LIFE,
        )
        enemy.lastShot = now

    def _contact(self, enemy: Enemy, living: List[Player]) -> Optional[Player]:
        """Damage the first living player touching the enemy. Contact always kills the enemy."""
        stats = enemy_type(enemy.type)
        for player in living:
            if is_collision(player.x, player.y, PLAYER_RADIUS, enemy.x, enemy.y, stats["size"]):
                apply_player_damage(player, stats["damage"])
                logger.debug(
                    f"{enemy.type} {enemy.id} hit player {player.id}, health {player.health}"
                )
                return player
        return None

    # ------------------------------------------------------------------
    # Projectiles
    # ------------------------------------------------------------------
    def update_bullets(self, world: World) -> None:
        for bullet_id in list(world.bullets):
            bullet = world.bullets.get(bullet_id)
            if bullet is None:
                continue
            # Beams stay where they were fired and only count down
            if not isinstance(bullet, RailgunBeam):
                bullet.x += bullet.dx
                bullet.y += bullet.dy
            bullet.life -= 1
            if not in_world(bullet.x, bullet.y) or bullet.life <= 0:
                world.remove_bullet(bullet_id)

    def update_enemy_bullets(self, world: World) -> None:
        for bullet_id in list(world.enemy_bullets):
            bullet = world.enemy_bullets.get(bullet_id)
            if bullet is None:
                continue
            bullet.x += bullet.dx
            bullet.y += bullet.dy
            bullet.life -= 1

            hit = False
            for player in world.living_players():
                if is_collision(bullet.x, bullet.y, ENEMY_BULLET_RADIUS, player.x, player.y, PLAYER_RADIUS):
                    apply_player_damage(player, ENEMY_BULLET_DAMAGE)
                    hit = True
                    break

            if hit or not in_world(bullet.x, bullet.y) or bullet.life <= 0:
                world.remove_enemy_bullet(bullet_id)

    # ------------------------------------------------------------------
    # Hits
    # ------------------------------------------------------------------
    def resolve_hits(self, world: World) -> None:
        for enemy_id in list(world.enemies):
            enemy = world.enemies.get(enemy_id)
            if enemy is None:
                continue
            size = enemy_type(enemy.type)["size"]

            for bullet_id in list(world.bullets):
                bullet = world.bullets.get(bullet_id)
                if bullet is None:
                    continue

                if isinstance(bullet, RailgunBeam):
                    if enemy.id in bullet.hitEnemies:
                        continue
                    distance, t = point_segment_distance(
                        enemy.x, enemy.y, bullet.x, bullet.y, bullet.endX, bullet.endY
                    )
                    if distance > size or not 0 <= t <= 1:
                        continue
                    enemy.health -= bullet.damage
                    bullet.hitEnemies.add(enemy.id)
                else:
                    if not is_collision(bullet.x, bullet.y, BULLET_RADIUS, enemy.x, enemy.y, size):
                        continue
                    enemy.health -= BULLET_DAMAGE
                    world.remove_bullet(bullet_id)

                if enemy.health <= 0:
                    self._kill_enemy(world, enemy)
                    break

    def _kill_enemy(self, world: World, enemy: Enemy) -> None:
        """Remove a destroyed enemy and share its points with every connected player."""
        world.remove_enemy(enemy.id)
        world.enemies_killed += 1
        points = enemy_type(enemy.type)["points"]
        for player in world.players.values():
            player.score += points
        logger.debug(f"{enemy.type} {enemy.id} destroyed, +{points} to all players")

    def check_game_over(self, world: World) -> None:
        if world.game_over or not world.players:
            return
        if all(not p.is_alive for p in world.players.values()):
            world.game_over = True
            logger.info(
                f"Game over: all {len(world.players)} player(s) down, "
                f"{world.enemies_killed} enemies killed"
            )
