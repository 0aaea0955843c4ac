"""
Main FastAPI application for the Survival Arena server.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from survival_server.api.routes import GameAPI
from survival_server.config.settings import get_settings
from survival_server.services.game_service import GameService
from survival_server.services.tick_service import TickScheduler
from survival_server.services.websocket_service import WebSocketService

logger = logging.getLogger(__name__)


def create_app(
    game_service: Optional[GameService] = None,
    start_ticking: bool = True,
) -> FastAPI:
    """Create the application with its game service, tick loop and transport."""
    settings = get_settings()
    game_service = game_service or GameService()
    lock = asyncio.Lock()
    websocket_service = WebSocketService(game_service, lock)
    scheduler = TickScheduler(game_service, websocket_service.publish, lock=lock)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if start_ticking:
            await scheduler.start()
        logger.info("Survival Arena server started")

        yield

        logger.info("Shutting down...")
        await scheduler.stop()

    app = FastAPI(
        title="Survival Arena",
        description="Authoritative server for a multiplayer survival shooter",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.game_service = game_service
    app.state.websocket_service = websocket_service
    app.state.scheduler = scheduler

    app.include_router(GameAPI(game_service, scheduler).router)

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """Main WebSocket endpoint: one connection is one player."""
        await websocket_service.handle_connection(websocket)

    return app


def main():
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run(create_app(), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
