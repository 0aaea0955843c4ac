# survival_server/api/routes.py
"""API routes for the game server."""

from fastapi import APIRouter

from survival_server.config.settings import get_game_config
from survival_server.services.game_service import GameService
from survival_server.services.tick_service import TickScheduler


class GameAPI:
    """API routes for game-related endpoints."""

    def __init__(self, game_service: GameService, scheduler: TickScheduler):
        self.game_service = game_service
        self.scheduler = scheduler
        self.router = APIRouter()
        self._setup_routes()

    def _setup_routes(self):
        """Set up all API routes."""

        @self.router.get("/")
        async def root():
            """Root endpoint."""
            return {"message": "Survival Arena Server Running"}

        @self.router.get("/health")
        async def health_check():
            """Health check endpoint."""
            return {
                "status": "healthy",
                "tick_engine_running": self.scheduler.is_running,
                "tick_number": self.scheduler.tick_number,
            }

        @self.router.get("/api/game/config")
        async def get_game_config_endpoint():
            """Get world size, tick rate, enemy table and weapon constants."""
            return get_game_config()

        @self.router.get("/api/game/state")
        async def get_state():
            """Get the current world snapshot."""
            async with self.scheduler.lock:
                return self.game_service.get_snapshot()

        @self.router.get("/api/game/stats")
        async def get_game_stats():
            """Get game statistics."""
            async with self.scheduler.lock:
                return self.game_service.get_stats()
