# survival_server/services/intent_service.py
"""Applies buffered player intents: movement, primary fire and the railgun."""

import logging
from typing import Optional

from survival_server.config.settings import (
    BULLET_LIFE,
    BULLET_SPEED,
    FIRE_COOLDOWN_MS,
    FIRE_COOLDOWN_POLICY,
    PLAYER_SPEED,
    RAILGUN_CHARGE_PER_TICK,
    RAILGUN_LIFE,
    RAILGUN_MAX_DAMAGE,
    RAILGUN_MIN_CHARGE,
    RAILGUN_MIN_DAMAGE,
    RAILGUN_RANGE,
    WORLD_MARGIN,
)
from survival_server.models.entities import Bullet, Player, RailgunBeam
from survival_server.models.intent import Intent
from survival_server.models.world import World
from survival_server.utils.helpers import clamp_to_world, lerp, unit_vector

logger = logging.getLogger(__name__)


def railgun_damage(charge: float) -> float:
    """Damage of a beam released at ``charge``.

    Flat minimum up to the threshold, then linear up to the maximum at full charge.
    """
    if charge <= RAILGUN_MIN_CHARGE:
        return RAILGUN_MIN_DAMAGE
    t = (charge - RAILGUN_MIN_CHARGE) / (1 - RAILGUN_MIN_CHARGE)
    return lerp(RAILGUN_MIN_DAMAGE, RAILGUN_MAX_DAMAGE, t)


class IntentProcessor:
    """Mutates one player's position, charge and fire state from an intent."""

    def __init__(self, cooldown_policy: str = FIRE_COOLDOWN_POLICY):
        if cooldown_policy not in ("server", "client"):
            raise ValueError(f"Unknown fire cooldown policy: {cooldown_policy}")
        self.cooldown_policy = cooldown_policy

    def apply(self, world: World, player_id: str, intent: Intent, now: float) -> None:
        # Stale or dead players are a no-op
        player = world.players.get(player_id)
        if player is None or not player.is_alive:
            return

        self._move(player, intent)
        self._primary_fire(world, player, intent, now)
        self._railgun(world, player, intent)

    def _move(self, player: Player, intent: Intent) -> None:
        new_x, new_y = player.x, player.y
        keys = intent.keys
        if keys.w:
            new_y -= PLAYER_SPEED
        if keys.s:
            new_y += PLAYER_SPEED
        if keys.a:
            new_x -= PLAYER_SPEED
        if keys.d:
            new_x += PLAYER_SPEED

        joystick = intent.joystick
        if joystick.x or joystick.y:
            new_x += joystick.x * PLAYER_SPEED
            new_y += joystick.y * PLAYER_SPEED

        player.x, player.y = clamp_to_world(new_x, new_y, WORLD_MARGIN)

    def _primary_fire(
        self, world: World, player: Player, intent: Intent, now: float
    ) -> Optional[Bullet]:
        mouse = intent.mouse
        if not mouse.down or not mouse.has_aim:
            return None

        last_shot = player.lastShot if self.cooldown_policy == "server" else intent.lastShot
        if last_shot + FIRE_COOLDOWN_MS > now:
            return None

        direction = unit_vector(mouse.x - player.x, mouse.y - player.y)
        if direction is None:
            return None

        bullet = world.add_bullet(
            player.id,
            player.x,
            player.y,
            direction[0] * BULLET_SPEED,
            direction[1] * BULLET_SPEED,
            BULLET_LIFE,
        )
        player.lastShot = now
        return bullet

    def _railgun(self, world: World, player: Player, intent: Intent) -> Optional[RailgunBeam]:
        mouse = intent.mouse
        if mouse.rightDown:
            player.railgunCharge = min(1.0, player.railgunCharge + RAILGUN_CHARGE_PER_TICK)
            return None

        if player.railgunCharge <= 0 or not mouse.has_aim:
            return None

        direction = unit_vector(mouse.x - player.x, mouse.y - player.y)
        if direction is None:
            # Keep the charge until the player aims somewhere
            return None

        damage = railgun_damage(player.railgunCharge)
        beam = world.add_beam(
            player.id,
            player.x,
            player.y,
            player.x + direction[0] * RAILGUN_RANGE,
            player.y + direction[1] * RAILGUN_RANGE,
            damage,
            RAILGUN_LIFE,
        )
        logger.debug(
            f"Player {player.id} fired railgun at charge {player.railgunCharge:.2f} "
            f"for {damage:.0f} damage"
        )
        player.railgunCharge = 0.0
        return beam
