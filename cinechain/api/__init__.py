"""
API Module - Web client interface.

Exposes the engine via REST and WebSocket for the browser client.
The client:
1. Searches titles and opens a room from a seed
2. Shares the room code; the second player joins
3. Players alternate submitting answers
4. Receives "update" and "end-game" events over the room WebSocket

All state is room-scoped. No persistent user accounts required.
"""

from .schemas import (
    # Requests
    CreateRoomRequest,
    SubmitAnswerRequest,
    # Responses
    GameStateResponse,
    SearchResponse,
    SubmitAnswerResponse,
    EndGameResponse,
    ErrorResponse,
    # Shared
    MediaOptionInfo,
    PlayedMediaInfo,
    LinkInfo,
    ErrorCode,
)
from .service import GameService, GameServiceError
from .broadcast import RoomBroadcaster
from .app import create_app

__all__ = [
    # Requests
    "CreateRoomRequest",
    "SubmitAnswerRequest",
    # Responses
    "GameStateResponse",
    "SearchResponse",
    "SubmitAnswerResponse",
    "EndGameResponse",
    "ErrorResponse",
    # Shared
    "MediaOptionInfo",
    "PlayedMediaInfo",
    "LinkInfo",
    "ErrorCode",
    # Service
    "GameService",
    "GameServiceError",
    "RoomBroadcaster",
    "create_app",
]
