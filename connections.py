import asyncio
import json
from typing import Any, Dict, Optional

from fastapi import WebSocket

from events import DATA_KEY, EVENT_KEY
from logging_config import get_logger

logger = get_logger(__name__)


class ConnectionManager:
    """Tracks which live WebSockets belong to which room and fans events out.

    Format: {room_id: {connection_id: websocket}}
    """

    def __init__(self):
        self.room_connections: Dict[str, Dict[str, WebSocket]] = {}

    def add(self, room_id: str, connection_id: str, websocket: WebSocket):
        self.room_connections.setdefault(room_id, {})[connection_id] = websocket
        logger.debug(f"Added connection {connection_id} to room {room_id} (local connections: {len(self.room_connections[room_id])})")

    def remove(self, room_id: str, connection_id: str):
        connections = self.room_connections.get(room_id)
        if not connections or connection_id not in connections:
            return
        del connections[connection_id]
        logger.debug(f"Removed connection {connection_id} from room {room_id}")
        if not connections:
            del self.room_connections[room_id]
            logger.debug(f"No more local connections in room {room_id}")

    def count(self, room_id: str) -> int:
        return len(self.room_connections.get(room_id, {}))

    async def send(self, websocket: WebSocket, event: str, data: Any = None):
        await websocket.send_text(json.dumps({EVENT_KEY: event, DATA_KEY: data}))

    async def broadcast(self, room_id: str, event: str, data: Any = None, exclude: Optional[str] = None):
        """Send one event to every connection in the room, except ``exclude``."""
        targets = [
            (conn_id, ws)
            for conn_id, ws in self.room_connections.get(room_id, {}).items()
            if conn_id != exclude
        ]
        if not targets:
            return

        message = json.dumps({EVENT_KEY: event, DATA_KEY: data})
        results = await asyncio.gather(
            *(ws.send_text(message) for _, ws in targets),
            return_exceptions=True,
        )

        for (conn_id, _), result in zip(targets, results):
            if isinstance(result, Exception):
                logger.warning(f"Error sending {event} to connection {conn_id} in room {room_id}: {result}")
                self.remove(room_id, conn_id)
        logger.debug(f"Broadcasted {event} to {len(targets)} connections in room {room_id}")
