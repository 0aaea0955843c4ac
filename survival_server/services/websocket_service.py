# survival_server/services/websocket_service.py
"""WebSocket connection management and message handling."""

import asyncio
import contextlib
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from fastapi import WebSocket, WebSocketDisconnect

from .game_service import GameService

logger = logging.getLogger(__name__)


@dataclass
class ClientConnection:
    """A connected client and its outbound snapshot queue."""

    player_id: str
    websocket: WebSocket
    # Holds only the newest snapshot; a slow client skips stale ones
    queue: "asyncio.Queue[Dict[str, Any]]" = field(
        default_factory=lambda: asyncio.Queue(maxsize=1)
    )
    sender: Optional[asyncio.Task] = None


class WebSocketService:
    """Manages WebSocket connections and message routing."""

    def __init__(self, game_service: GameService, lock: asyncio.Lock):
        self.game_service = game_service
        self.lock = lock
        self.connections: Dict[str, ClientConnection] = {}

    async def handle_connection(self, websocket: WebSocket):
        """Handle a new WebSocket connection for its whole lifetime."""
        await websocket.accept()
        logger.info(f"WebSocket connection accepted for {websocket.client}")

        async with self.lock:
            player = self.game_service.create_player()
            snapshot = self.game_service.get_snapshot()

        connection = ClientConnection(player_id=player.id, websocket=websocket)
        try:
            await websocket.send_json(
                {"type": "init", "playerId": player.id, "gameState": snapshot}
            )
            self.connections[player.id] = connection
            connection.sender = asyncio.create_task(self._send_loop(connection))

            await self._handle_client_messages(websocket, player.id)

        except WebSocketDisconnect:
            pass
        except Exception:
            logger.exception(f"WebSocket error for player {player.id}")
        finally:
            await self._handle_disconnect(connection)

    async def _handle_client_messages(self, websocket: WebSocket, player_id: str):
        """Handle incoming messages from a client."""
        while True:
            try:
                data = await websocket.receive_json()
            except (json.JSONDecodeError, KeyError):
                # Undecodable text or a binary frame
                logger.warning(f"Ignoring non-JSON frame from player {player_id}")
                continue
            await self._process_message(websocket, player_id, data)

    async def _process_message(self, websocket: WebSocket, player_id: str, data: Any):
        """Process a single message from a client."""
        message_type = data.get("type", "input") if isinstance(data, dict) else "input"

        if message_type == "input":
            async with self.lock:
                if player_id in self.game_service.world.players:
                    self.game_service.submit_intent(player_id, data)
        elif message_type == "ping":
            await websocket.send_json({"type": "pong"})
        else:
            logger.debug(f"Ignoring message type {message_type!r} from {player_id}")

    async def _handle_disconnect(self, connection: ClientConnection):
        """Handle client disconnection."""
        logger.info(f"Player {connection.player_id} disconnected")

        self.connections.pop(connection.player_id, None)
        async with self.lock:
            self.game_service.remove_player(connection.player_id)

        if connection.sender is not None:
            connection.sender.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await connection.sender

    def publish(self, snapshot: Dict[str, Any]) -> None:
        """Queue a snapshot for every connection without waiting on any of them."""
        message = {"type": "update", "gameState": snapshot}
        for connection in list(self.connections.values()):
            if connection.queue.full():
                with contextlib.suppress(asyncio.QueueEmpty):
                    connection.queue.get_nowait()
            connection.queue.put_nowait(message)

    async def _send_loop(self, connection: ClientConnection):
        """Deliver queued snapshots to one client until it goes away."""
        while True:
            message = await connection.queue.get()
            try:
                await connection.websocket.send_json(message)
            except Exception as e:
                # The receive loop notices the dead socket and cleans up
                logger.warning(f"Dropping sends to player {connection.player_id}: {e}")
                with contextlib.suppress(Exception):
                    await connection.websocket.close()
                return
