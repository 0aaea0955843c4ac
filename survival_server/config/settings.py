# survival_server/config/settings.py
"""Game configuration constants and settings."""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# World settings
WORLD_WIDTH = 800
WORLD_HEIGHT = 600
WORLD_MARGIN = 20  # players are clamped this far inside the edges
SPAWN_MARGIN = 30  # enemies appear this far outside the edges

# Tick settings
TICK_RATE = 30  # ticks per second
TICK_INTERVAL_MS = 1000 / TICK_RATE

# Player settings
PLAYER_START_X = 400
PLAYER_START_Y = 300
PLAYER_MAX_HEALTH = 100
PLAYER_SPEED = 5
PLAYER_RADIUS = 20

# Bullet settings
BULLET_SPEED = 8
BULLET_RADIUS = 4
BULLET_LIFE = 100  # ticks
BULLET_DAMAGE = 50
FIRE_COOLDOWN_MS = 250

# Railgun settings
RAILGUN_FULL_CHARGE_MS = 5000
RAILGUN_CHARGE_PER_TICK = TICK_INTERVAL_MS / RAILGUN_FULL_CHARGE_MS
RAILGUN_RANGE = 1000  # roughly the arena diagonal
RAILGUN_LIFE = 60  # ticks
RAILGUN_MIN_CHARGE = 0.05
RAILGUN_MIN_DAMAGE = 5
RAILGUN_MAX_DAMAGE = 300

# Enemy settings
ENEMY_TYPES = {
    "square": {"health": 200, "speed": 4, "size": 30, "points": 5, "damage": 15},
    "triangle": {"health": 50, "speed": 6.5, "size": 15, "points": 10, "damage": 25},
    "octagon": {"health": 800, "speed": 1, "size": 50, "points": 50, "damage": 50},
}
SHOOTING_ENEMY_TYPE = "octagon"
ENEMY_FIRE_INTERVAL_MS = 4000
ENEMY_BULLET_SPEED = 8
ENEMY_BULLET_RADIUS = 6
ENEMY_BULLET_LIFE = 100  # ticks
ENEMY_BULLET_DAMAGE = 15

# Spawn pacing
INITIAL_SPAWN_INTERVAL_MS = 2000
MIN_SPAWN_INTERVAL_MS = 500
SPAWN_INTERVAL_DECAY = 0.99

# Policies
# "sequential": enemies step toward every living player in turn (observed behaviour)
# "nearest": enemies step toward the closest living player only
ENEMY_PURSUIT_POLICY = "sequential"
# "server": fire cooldown tracked per player on the server
# "client": trust the lastShot timestamp echoed in each intent
FIRE_COOLDOWN_POLICY = "server"


class ServerSettings(BaseSettings):
    """Process settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SURVIVAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    log_level: str = Field(
        default="INFO",
        description="Root logging level",
    )
    cors_origins: List[str] = Field(
        default=["*"],
        description="Origins allowed to call the HTTP API",
    )


@lru_cache()
def get_settings() -> ServerSettings:
    """Get cached settings instance."""
    return ServerSettings()


def get_game_config():
    """Get the complete game configuration as a dictionary."""
    return {
        "worldWidth": WORLD_WIDTH,
        "worldHeight": WORLD_HEIGHT,
        "worldMargin": WORLD_MARGIN,
        "tickRate": TICK_RATE,
        "playerRadius": PLAYER_RADIUS,
        "playerSpeed": PLAYER_SPEED,
        "playerMaxHealth": PLAYER_MAX_HEALTH,
        "bulletSpeed": BULLET_SPEED,
        "bulletRadius": BULLET_RADIUS,
        "fireCooldown": FIRE_COOLDOWN_MS,
        "railgunRange": RAILGUN_RANGE,
        "railgunFullCharge": RAILGUN_FULL_CHARGE_MS,
        "railgunMinDamage": RAILGUN_MIN_DAMAGE,
        "railgunMaxDamage": RAILGUN_MAX_DAMAGE,
        "enemyBulletRadius": ENEMY_BULLET_RADIUS,
        "enemyTypes": {name: dict(stats) for name, stats in ENEMY_TYPES.items()},
    }
