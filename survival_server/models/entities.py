# survival_server/models/entities.py
"""Game entity models and data classes."""

from dataclasses import dataclass, field
from typing import Set, Union

from survival_server.config.settings import (
    PLAYER_MAX_HEALTH,
    PLAYER_START_X,
    PLAYER_START_Y,
)


@dataclass
class Player:
    """Represents a connected player."""

    id: str
    x: float = PLAYER_START_X
    y: float = PLAYER_START_Y
    health: int = PLAYER_MAX_HEALTH
    score: int = 0
    railgunCharge: float = 0.0
    lastShot: float = 0.0  # ms, server side fire cooldown marker

    @property
    def is_alive(self) -> bool:
        return self.health > 0


@dataclass
class Enemy:
    """Represents an enemy chasing the players."""

    id: str
    x: float
    y: float
    type: str
    health: float
    maxHealth: float
    lastShot: float


@dataclass
class Bullet:
    """Represents a regular bullet fired by a player."""

    id: str
    x: float
    y: float
    dx: float
    dy: float
    life: int
    ownerId: str
    type: str = "bullet"


@dataclass
class RailgunBeam:
    """Represents a railgun shot, a line segment that lingers for a few ticks."""

    id: str
    x: float
    y: float
    endX: float
    endY: float
    damage: float
    life: int
    ownerId: str
    hitEnemies: Set[str] = field(default_factory=set)
    type: str = "railgun"


@dataclass
class EnemyBullet:
    """Represents a projectile fired by an enemy."""

    id: str
    x: float
    y: float
    dx: float
    dy: float
    life: int


Projectile = Union[Bullet, RailgunBeam]
