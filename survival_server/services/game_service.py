# survival_server/services/game_service.py
"""Core game logic and state management."""

import logging
import time
import uuid
from typing import Any, Callable, Dict, Optional

from survival_server.models.entities import Player
from survival_server.models.intent import Intent, parse_intent
from survival_server.models.world import World
from survival_server.services.combat_service import CombatResolver
from survival_server.services.intent_service import IntentProcessor
from survival_server.services.spawner import Spawner

logger = logging.getLogger(__name__)


class GameError(Exception):
    """Base class for game service failures."""


class PlayerNotFound(GameError):
    """Raised when an operation names a player that is not connected."""


def wall_clock_ms() -> float:
    return time.time() * 1000


class GameService:
    """Main game service that owns the world and runs one simulation tick at a time."""

    def __init__(
        self,
        spawner: Optional[Spawner] = None,
        intent_processor: Optional[IntentProcessor] = None,
        combat_resolver: Optional[CombatResolver] = None,
        clock: Callable[[], float] = wall_clock_ms,
    ):
        self.clock = clock
        self.world = World(now=clock())
        self.spawner = spawner or Spawner()
        self.intent_processor = intent_processor or IntentProcessor()
        self.combat_resolver = combat_resolver or CombatResolver()

        # Latest intent per player, replaced on every message and drained each tick
        self.pending_intents: Dict[str, Intent] = {}
        self.tick_number = 0

    def create_player(self) -> Player:
        """Create a new player at the arena centre."""
        player_id = str(uuid.uuid4())
        player = self.world.add_player(player_id)
        logger.info(f"Player {player_id} joined ({len(self.world.players)} connected)")
        return player

    def remove_player(self, player_id: str) -> None:
        """Remove a player. The world resets once nobody is left."""
        self.pending_intents.pop(player_id, None)
        if self.world.remove_player(player_id) is None:
            return
        logger.info(f"Player {player_id} left ({len(self.world.players)} connected)")

        if not self.world.players:
            self.pending_intents.clear()
            self.world.reset(self.clock())

    def submit_intent(self, player_id: str, data: Any) -> Intent:
        """Buffer a player's intent for the next tick. Last received wins."""
        if player_id not in self.world.players:
            raise PlayerNotFound(player_id)
        intent = data if isinstance(data, Intent) else parse_intent(data)
        self.pending_intents[player_id] = intent
        return intent

    @property
    def is_frozen(self) -> bool:
        return self.world.game_over or not self.world.players

    def tick(self, now: Optional[float] = None) -> bool:
        """Run one simulation step. Returns False when the world is frozen."""
        self.tick_number += 1
        now = self.clock() if now is None else now

        intents = self.pending_intents
        self.pending_intents = {}

        if self.is_frozen:
            return False

        self.spawner.update(self.world, now)
        for player_id, intent in intents.items():
            self.intent_processor.apply(self.world, player_id, intent, now)
        self.combat_resolver.resolve(self.world, now)
        return True

    # Getter methods for game state
    def get_player(self, player_id: str) -> Player:
        player = self.world.players.get(player_id)
        if player is None:
            raise PlayerNotFound(player_id)
        return player

    def get_snapshot(self) -> Dict[str, Any]:
        return self.world.snapshot()

    def get_stats(self) -> Dict[str, Any]:
        world = self.world
        return {
            "tickNumber": self.tick_number,
            "totalPlayers": len(world.players),
            "livingPlayers": len(world.living_players()),
            "totalEnemies": len(world.enemies),
            "totalBullets": len(world.bullets),
            "totalEnemyBullets": len(world.enemy_bullets),
            "enemiesKilled": world.enemies_killed,
            "gameOver": world.game_over,
        }
