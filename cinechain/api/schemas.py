"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between the web client and the
engine. Broadcast payloads reuse GameState.to_dict() instead, so the
realtime wire format matches what clients already parse.

Error Codes:
- MISSING_PLAYER: No X-Player-Id header on the request
- ROOM_NOT_FOUND: Player is not seated anywhere, or the room is gone
- ROOM_FULL: Room already has two players
- ALREADY_SEATED: Player is already in a room
- GAME_NOT_READY: Room is still waiting for its second player
- NOT_YOUR_TURN: Answer submitted out of turn
- CONCURRENT_UPDATE: Another move landed first; reload and retry
- METADATA_UNAVAILABLE: The metadata provider failed
- INVALID_STATE: Stored game state is corrupt
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from ..engine_core import GameState, MediaCandidate, current_player


# =============================================================================
# Enums
# =============================================================================

class ErrorCode(str, Enum):
    """Structured error codes."""
    MISSING_PLAYER = "MISSING_PLAYER"
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    ROOM_FULL = "ROOM_FULL"
    ALREADY_SEATED = "ALREADY_SEATED"
    GAME_NOT_READY = "GAME_NOT_READY"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    CONCURRENT_UPDATE = "CONCURRENT_UPDATE"
    METADATA_UNAVAILABLE = "METADATA_UNAVAILABLE"
    INVALID_STATE = "INVALID_STATE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    GAME_ERROR = "GAME_ERROR"


class MediaType(str, Enum):
    MOVIE = "movie"
    TV = "tv"


# =============================================================================
# Shared Models
# =============================================================================

class MediaOptionInfo(BaseModel):
    """A pickable title."""
    key: str = Field(description="<media_type>-<id>, e.g. movie-27205")
    id: int
    label: str = Field(description="Title and release year, e.g. Inception (2010)")
    media_type: MediaType

    model_config = {"from_attributes": True}

    def to_candidate(self) -> MediaCandidate:
        """Build the candidate; the key is always derived from type and id."""
        return MediaCandidate.from_option(self.media_type.value, self.id, self.label)


class LinkInfo(BaseModel):
    """A person shared between two consecutive titles."""
    id: int
    name: str

    model_config = {"from_attributes": True}


class PlayedMediaInfo(BaseModel):
    """A title in the chain."""
    key: str
    label: str
    links: list[LinkInfo] = Field(default_factory=list)

    model_config = {"from_attributes": True}


# =============================================================================
# Request Models
# =============================================================================

class CreateRoomRequest(BaseModel):
    """Open a room from a seed title."""
    seed: MediaOptionInfo


class SubmitAnswerRequest(BaseModel):
    """Propose the next title. A missing answer is a no-op."""
    answer: Optional[MediaOptionInfo] = None


# =============================================================================
# Response Models
# =============================================================================

class GameStateResponse(BaseModel):
    """Complete game state for display."""
    room_code: str
    version: int
    players: list[str]
    initial_label: str
    initial_key: Optional[str] = None
    media: list[PlayedMediaInfo] = Field(default_factory=list)
    current_credits: list[int] = Field(default_factory=list)
    current_player: Optional[str] = None

    @classmethod
    def from_state(cls, room_code: str, state: GameState, version: int) -> "GameStateResponse":
        return cls(
            room_code=room_code,
            version=version,
            players=list(state.players),
            initial_label=state.initial_label,
            initial_key=state.initial_key,
            media=[
                PlayedMediaInfo(
                    key=item.key,
                    label=item.label,
                    links=[LinkInfo(id=link.id, name=link.name) for link in item.links],
                )
                for item in state.media
            ],
            current_credits=list(state.current_credits),
            current_player=current_player(state) if state.is_full else None,
        )


class SearchResponse(BaseModel):
    results: list[MediaOptionInfo] = Field(default_factory=list, max_length=5)


class SubmitAnswerResponse(BaseModel):
    """Outcome of an answer. Rejections are not errors."""
    success: bool
    message: Optional[str] = None
    reason: Optional[str] = Field(None, description="ALREADY_PLAYED or NO_LINKS_FOUND")


class EndGameResponse(BaseModel):
    room_code: str
    reason: str = Field(description="PLAYER_LEFT or TIMEOUT")
    player: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict] = None


class HealthResponse(BaseModel):
    status: str = "healthy"
    service: str = "cinechain"
    version: str = "1.0.0"
