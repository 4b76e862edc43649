"""
FastAPI Application - REST + WebSocket API for the web client.

Endpoints:
    GET    /api/v1/search?query=        Search titles (max 5)
    POST   /api/v1/rooms                Open a room from a seed title
    POST   /api/v1/rooms/{code}/join    Join a room as second player
    GET    /api/v1/game                 Get the caller's game state
    POST   /api/v1/game/answer          Submit the next title
    POST   /api/v1/game/leave           Leave the game (ends it)
    POST   /api/v1/game/timeout         Report the turn timer ran out
    WS     /api/v1/rooms/{code}/ws      Realtime room events

The caller is identified by the X-Player-Id header. Authentication happens
upstream of this service.

Service calls block on store locks and TMDB requests; endpoints always run
them in the threadpool.

Answer Flow:
    1. Turn and duplicate checks run against the stored snapshot
    2. Credits for the answer are fetched from TMDB
    3. Accepted answers are saved and published as an "update" event
    4. Rejections return success=false with a message, nothing is saved

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional
import json
import logging
import os

from fastapi import FastAPI, Header, Query, Request, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..engine_core import Accepted, RejectionReason
from ..metadata import MetadataProviderError, TMDBClient
from ..metadata.client import DEFAULT_BASE_URL
from ..session import ConcurrentUpdateError
from .broadcast import RoomBroadcaster
from .service import (
    GameService,
    GameServiceError,
    GameNotReadyError,
    InvalidRoomStateError,
    MissingPlayerError,
    PlayerAlreadySeatedError,
    RoomFullError,
    RoomNotFoundError,
)
from .schemas import (
    CreateRoomRequest,
    EndGameResponse,
    ErrorCode,
    ErrorResponse,
    GameStateResponse,
    HealthResponse,
    MediaOptionInfo,
    SearchResponse,
    SubmitAnswerRequest,
    SubmitAnswerResponse,
)

logger = logging.getLogger(__name__)

# Environment configuration
CINECHAIN_ENV = os.getenv("CINECHAIN_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
TMDB_ACCESS_TOKEN = os.getenv("TMDB_ACCESS_TOKEN", "")
TMDB_BASE_URL = os.getenv("TMDB_BASE_URL", DEFAULT_BASE_URL)
ROOM_TTL_SECONDS = int(os.getenv("ROOM_TTL_SECONDS", "3600"))

UPDATE_EVENT = "update"
END_GAME_EVENT = "end-game"

# service error -> HTTP status
ERROR_STATUS = {
    MissingPlayerError: 401,
    RoomNotFoundError: 404,
    RoomFullError: 409,
    PlayerAlreadySeatedError: 409,
    GameNotReadyError: 409,
    InvalidRoomStateError: 500,
}

PlayerHeader = Annotated[Optional[str], Header(alias="X-Player-Id")]


def create_app(service=None, broadcaster=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional GameService (creates one backed by TMDB if not provided)
        broadcaster: Optional RoomBroadcaster

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Cinechain API",
        description="""
Two-player trivia: name a movie or TV show that shares a cast or crew
member with the previous title.

## Error Codes

| Code | Description |
|------|-------------|
| `MISSING_PLAYER` | No `X-Player-Id` header |
| `ROOM_NOT_FOUND` | Player not seated or room gone |
| `ROOM_FULL` | Room already has two players |
| `NOT_YOUR_TURN` | Answer submitted out of turn |
| `CONCURRENT_UPDATE` | Another move landed first |
| `METADATA_UNAVAILABLE` | TMDB request failed |
        """,
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if service is None:
        if not TMDB_ACCESS_TOKEN:
            logger.warning("TMDB_ACCESS_TOKEN is not set; metadata requests will fail")
        service = GameService(
            metadata=TMDBClient(TMDB_ACCESS_TOKEN, base_url=TMDB_BASE_URL),
            room_ttl_seconds=ROOM_TTL_SECONDS,
        )
    game_service = service
    room_broadcaster = broadcaster or RoomBroadcaster()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(GameServiceError)
    async def game_service_error_handler(request: Request, exc: GameServiceError):
        return make_error_response(
            ErrorCode(exc.error_code),
            str(exc),
            status_code=ERROR_STATUS.get(type(exc), 400),
        )

    @app.exception_handler(MetadataProviderError)
    async def metadata_error_handler(request: Request, exc: MetadataProviderError):
        return make_error_response(ErrorCode.METADATA_UNAVAILABLE, str(exc), status_code=502)

    @app.exception_handler(ConcurrentUpdateError)
    async def concurrent_update_handler(request: Request, exc: ConcurrentUpdateError):
        return make_error_response(ErrorCode.CONCURRENT_UPDATE, str(exc), status_code=409)

    def state_response(view) -> GameStateResponse:
        return GameStateResponse.from_state(view.room_code, view.state, view.version)

    # =========================================================================
    # Search Endpoint
    # =========================================================================

    @app.get(
        "/api/v1/search",
        response_model=SearchResponse,
        responses={502: {"model": ErrorResponse}},
        tags=["Media"],
        summary="Search movies and TV shows",
    )
    async def search(
        query: Annotated[str, Query(min_length=1, description="Free-text title query")],
    ) -> SearchResponse:
        """Return at most five titles labelled with their release year."""
        options = await run_in_threadpool(game_service.search, query)
        return SearchResponse(results=[
            MediaOptionInfo(**option.to_dict()) for option in options
        ])

    # =========================================================================
    # Room Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/rooms",
        response_model=GameStateResponse,
        responses={401: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Rooms"],
        summary="Open a room from a seed title",
    )
    async def create_room(body: CreateRoomRequest, player_id: PlayerHeader = None) -> GameStateResponse:
        """The seed's cast and crew become the first credit pool."""
        view = await run_in_threadpool(
            game_service.create_room, player_id, body.seed.to_candidate()
        )
        return state_response(view)

    @app.post(
        "/api/v1/rooms/{room_code}/join",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Rooms"],
        summary="Join a room as the second player",
    )
    async def join_room(room_code: str, player_id: PlayerHeader = None) -> GameStateResponse:
        view = await run_in_threadpool(game_service.join_room, player_id, room_code)
        await room_broadcaster.publish(view.room_code, UPDATE_EVENT, view.state.to_dict())
        return state_response(view)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/game",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get the caller's game state",
    )
    async def get_game(player_id: PlayerHeader = None) -> GameStateResponse:
        view = await run_in_threadpool(game_service.get_room, player_id)
        return state_response(view)

    @app.post(
        "/api/v1/game/answer",
        response_model=Optional[SubmitAnswerResponse],
        responses={
            400: {"model": ErrorResponse, "description": "Not your turn"},
            404: {"model": ErrorResponse},
            409: {"model": ErrorResponse},
            502: {"model": ErrorResponse},
        },
        tags=["Game"],
        summary="Submit the next title in the chain",
    )
    async def submit_answer(body: SubmitAnswerRequest, player_id: PlayerHeader = None):
        """
        Submit a title sharing a cast/crew member with the previous one.

        **Request Body:**
        ```json
        {"answer": {"key": "movie-999", "id": 999, "label": "Other Movie (2015)", "media_type": "movie"}}
        ```
        """
        answer = body.answer.to_candidate() if body.answer else None
        outcome = await run_in_threadpool(game_service.submit_answer, player_id, answer)
        if outcome is None:
            return None

        result = outcome.result
        if isinstance(result, Accepted):
            await room_broadcaster.publish(outcome.room_code, UPDATE_EVENT, result.state.to_dict())
            return SubmitAnswerResponse(success=True)

        if result.reason == RejectionReason.NOT_YOUR_TURN:
            return make_error_response(ErrorCode.NOT_YOUR_TURN, result.message)

        return SubmitAnswerResponse(
            success=False,
            message=result.message,
            reason=result.reason.value,
        )

    @app.post(
        "/api/v1/game/leave",
        response_model=EndGameResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Leave the game",
    )
    async def leave_game(player_id: PlayerHeader = None) -> EndGameResponse:
        over = await run_in_threadpool(game_service.leave_game, player_id)
        return await _publish_end(over)

    @app.post(
        "/api/v1/game/timeout",
        response_model=EndGameResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Report that the turn timer ran out",
    )
    async def report_timeout(player_id: PlayerHeader = None) -> EndGameResponse:
        over = await run_in_threadpool(game_service.report_timeout, player_id)
        return await _publish_end(over)

    async def _publish_end(over) -> EndGameResponse:
        await room_broadcaster.publish(over.room_code, END_GAME_EVENT, over.signal.to_dict())
        return EndGameResponse(
            room_code=over.room_code,
            reason=over.signal.reason.value,
            player=over.signal.player,
        )

    # =========================================================================
    # WebSocket Endpoint
    # =========================================================================

    @app.websocket("/api/v1/rooms/{room_code}/ws")
    async def websocket_endpoint(websocket: WebSocket, room_code: str):
        """
        WebSocket for realtime room events.

        Messages from server:
        - update: Game state changed (payload is the full state)
        - end-game: Game ended (payload is {reason, player})
        - error: Bad client message

        Messages from client:
        - ping: Keep-alive
        """
        await websocket.accept()
        room_code = room_code.strip().upper()
        room_broadcaster.connect(room_code, websocket)

        try:
            record = game_service.store.get(room_code)
            if record is not None:
                await websocket.send_json({
                    "event": UPDATE_EVENT,
                    "payload": json.loads(record.payload),
                })

            while True:
                data = await websocket.receive_text()
                try:
                    message = json.loads(data)
                except json.JSONDecodeError:
                    await websocket.send_json({
                        "event": "error",
                        "payload": {"message": "Invalid JSON"},
                    })
                    continue
                if isinstance(message, dict) and message.get("event") == "ping":
                    await websocket.send_json({"event": "pong"})

        except WebSocketDisconnect:
            logger.debug("WebSocket closed for room %s", room_code)
        finally:
            room_broadcaster.disconnect(room_code, websocket)
            logger.debug(
                "Room %s has %d listener(s)",
                room_code, room_broadcaster.connection_count(room_code),
            )

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(status="healthy", service="cinechain", version="1.0.0")

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Cinechain API",
            "version": "1.0.0",
            "env": CINECHAIN_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn cinechain.api.app:app
app = create_app()
