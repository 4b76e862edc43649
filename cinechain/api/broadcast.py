"""
Room Broadcaster - Realtime fan-out of room events over WebSockets.

Messages from server:
- update: full game state after a join or an accepted answer
- end-game: {reason, player} when a player leaves or times out
"""

from __future__ import annotations
from typing import Any
import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class RoomBroadcaster:
    """Tracks WebSocket connections per room and publishes to them."""

    def __init__(self):
        self._connections: dict[str, list[WebSocket]] = {}

    def connect(self, room_code: str, websocket: WebSocket):
        self._connections.setdefault(room_code, []).append(websocket)

    def disconnect(self, room_code: str, websocket: WebSocket):
        connections = self._connections.get(room_code)
        if connections and websocket in connections:
            connections.remove(websocket)
        if connections == []:
            del self._connections[room_code]

    def connection_count(self, room_code: str) -> int:
        return len(self._connections.get(room_code, []))

    async def publish(self, room_code: str, event: str, payload: dict[str, Any]):
        """Send an event to every connection in a room, dropping dead ones."""
        dead_connections = []
        for ws in list(self._connections.get(room_code, [])):
            try:
                await ws.send_json({"event": event, "payload": payload})
            except Exception:
                logger.debug("Dropping dead connection in room %s", room_code)
                dead_connections.append(ws)
        for ws in dead_connections:
            self.disconnect(room_code, ws)
