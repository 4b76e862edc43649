"""
Game Service - Business logic layer between API and engine.

The service:
1. Loads the caller's room snapshot from the store
2. Authorizes the caller with the turn resolver
3. Fetches credits from the metadata provider
4. Runs the engine and persists accepted moves

Broadcasting is left to the transport; every mutating call returns the
room code so the caller knows where to publish.

This layer is framework-agnostic (can be used with FastAPI, a CLI, tests).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Protocol
import logging

from ..engine_core import (
    Accepted,
    AnswerResult,
    EndGame,
    EndGameReason,
    GameState,
    MediaCandidate,
    Rejected,
    RejectionReason,
    apply_answer,
    check_already_played,
    contributing_people,
    create_new_game_state,
    current_player,
    is_player_turn,
)
from ..metadata import MediaOption, format_search_results
from ..session import RoomStore, RoomRecord

logger = logging.getLogger(__name__)


class MetadataProvider(Protocol):
    """What the service needs from a metadata client."""

    def search_multi(self, query: str) -> list[dict[str, Any]]: ...

    def credits(self, media_type: str, media_id: int) -> dict[str, list[dict[str, Any]]]: ...


# =============================================================================
# Errors
# =============================================================================

class GameServiceError(Exception):
    """Base error for service failures. error_code is stable for clients."""
    error_code = "GAME_ERROR"


class MissingPlayerError(GameServiceError):
    error_code = "MISSING_PLAYER"


class RoomNotFoundError(GameServiceError):
    error_code = "ROOM_NOT_FOUND"


class RoomFullError(GameServiceError):
    error_code = "ROOM_FULL"


class PlayerAlreadySeatedError(GameServiceError):
    error_code = "ALREADY_SEATED"


class GameNotReadyError(GameServiceError):
    error_code = "GAME_NOT_READY"


class InvalidRoomStateError(GameServiceError):
    error_code = "INVALID_STATE"


# =============================================================================
# Outcomes
# =============================================================================

@dataclass
class RoomView:
    """A room snapshot as seen by a player."""
    room_code: str
    state: GameState
    version: int


@dataclass
class MoveOutcome:
    """Outcome of a submitted answer, with the room it applies to."""
    room_code: str
    result: AnswerResult

    @property
    def success(self) -> bool:
        return self.result.success

    @property
    def message(self) -> str | None:
        return self.result.message


@dataclass
class GameOver:
    """An ended game and the signal to publish to its room."""
    room_code: str
    signal: EndGame


@dataclass
class GameService:
    """
    Main service driving games.

    Usage:
        service = GameService(metadata=TMDBClient(token))

        room = service.create_room("alice", seed)
        service.join_room("bob", room.room_code)
        outcome = service.submit_answer("alice", candidate)
    """
    metadata: MetadataProvider
    store: RoomStore = field(default_factory=RoomStore)
    room_ttl_seconds: int = 3600

    def search(self, query: str) -> list[MediaOption]:
        """Search titles a player can pick."""
        return format_search_results(self.metadata.search_multi(query))

    def create_room(self, player_id: str, seed: MediaCandidate) -> RoomView:
        """
        Start a game from a seed title, seated with the host only.

        The seed's contributors become the first credit pool.
        """
        self._require_player(player_id)
        self.store.cleanup_stale_rooms(self.room_ttl_seconds)
        if self.store.room_for_player(player_id):
            raise PlayerAlreadySeatedError(f"Player {player_id} is already in a room")

        contributors = self._fetch_contributors(seed)
        credit_ids = list(dict.fromkeys(person.id for person in contributors))
        state = create_new_game_state(
            player_id,
            seed.label,
            credit_ids,
            initial_key=seed.key,
        )
        room_code = self.store.create(state)
        logger.info("Player %s opened room %s with %s", player_id, room_code, seed.key)
        return RoomView(room_code=room_code, state=state, version=1)

    def join_room(self, player_id: str, room_code: str) -> RoomView:
        """Seat the second player in a room."""
        self._require_player(player_id)
        self.store.cleanup_stale_rooms(self.room_ttl_seconds)
        room_code = room_code.strip().upper()
        seated_in = self.store.room_for_player(player_id)
        if seated_in:
            raise PlayerAlreadySeatedError(f"Player {player_id} is already in room {seated_in}")

        with self.store.lock(room_code):
            record = self._get_record(room_code)
            state = self._load(record)
            if state.is_full:
                raise RoomFullError(f"Room {room_code} is full")
            new_state = state.with_player(player_id)
            new_record = self.store.save(room_code, new_state, expected_version=record.version)

        logger.info("Player %s joined room %s", player_id, room_code)
        return RoomView(room_code=room_code, state=new_state, version=new_record.version)

    def get_room(self, player_id: str) -> RoomView:
        """Get the room the player is seated in."""
        room_code = self._room_code_for(player_id)
        record = self._get_record(room_code)
        return RoomView(room_code=room_code, state=self._load(record), version=record.version)

    def submit_answer(
        self,
        player_id: str,
        answer: MediaCandidate | None,
    ) -> MoveOutcome | None:
        """
        Submit a title as the next link in the chain.

        Returns None when there is no answer. Credits are only fetched once
        the turn and duplicate checks pass. Accepted moves are saved.
        """
        if answer is None:
            return None

        room_code = self._room_code_for(player_id)
        with self.store.lock(room_code):
            record = self._get_record(room_code)
            state = self._load(record)

            if not state.is_full:
                raise GameNotReadyError(f"Room {room_code} is waiting for a second player")

            if not is_player_turn(state, player_id):
                logger.warning("Player %s answered out of turn in room %s", player_id, room_code)
                return MoveOutcome(room_code, Rejected(RejectionReason.NOT_YOUR_TURN))

            if check_already_played(state, answer):
                return MoveOutcome(room_code, Rejected(RejectionReason.ALREADY_PLAYED))

            contributors = self._fetch_contributors(answer)
            result = apply_answer(state, answer, contributors)

            if isinstance(result, Accepted):
                self.store.save(room_code, result.state, expected_version=record.version)
                logger.info(
                    "Room %s: %s played %s (%d links)",
                    room_code, player_id, answer.key, len(result.state.media[0].links),
                )
            else:
                logger.info("Room %s: %s rejected (%s)", room_code, answer.key, result.reason.value)

        return MoveOutcome(room_code, result)

    def leave_game(self, player_id: str) -> GameOver:
        """End the caller's game because they left."""
        room_code = self._room_code_for(player_id)
        return self._end(room_code, EndGame(reason=EndGameReason.PLAYER_LEFT, player=player_id))

    def report_timeout(self, player_id: str) -> GameOver:
        """End the caller's game because the turn owner ran out of time."""
        room_code = self._room_code_for(player_id)
        record = self._get_record(room_code)
        timed_out = current_player(self._load(record)) or player_id
        return self._end(room_code, EndGame(reason=EndGameReason.TIMEOUT, player=timed_out))

    def list_rooms(self) -> list[str]:
        return self.store.list_rooms()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _end(self, room_code: str, signal: EndGame) -> GameOver:
        with self.store.lock(room_code):
            self.store.delete(room_code)
        logger.info("Room %s ended: %s by %s", room_code, signal.reason.value, signal.player)
        return GameOver(room_code=room_code, signal=signal)

    def _fetch_contributors(self, candidate: MediaCandidate):
        raw = self.metadata.credits(candidate.media_type, candidate.id)
        return contributing_people(raw.get("cast", []), raw.get("crew", []))

    def _require_player(self, player_id: str | None) -> str:
        if not player_id:
            raise MissingPlayerError("Player id is required")
        return player_id

    def _room_code_for(self, player_id: str | None) -> str:
        self._require_player(player_id)
        room_code = self.store.room_for_player(player_id)
        if not room_code:
            raise RoomNotFoundError("Room code not found")
        return room_code

    def _get_record(self, room_code: str) -> RoomRecord:
        record = self.store.get(room_code)
        if record is None:
            raise RoomNotFoundError(f"Room {room_code} not found")
        return record

    def _load(self, record: RoomRecord) -> GameState:
        try:
            return record.load_state()
        except ValueError as e:
            logger.error("Room %s holds an invalid game state: %s", record.room_code, e)
            raise InvalidRoomStateError("Game state not found") from e
