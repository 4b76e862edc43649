"""
Room Store - Holds the serialized game state of every room.

LIFECYCLE:
1. Host creates a room -> record created with version 1
2. Guest joins -> state saved, version bumped
3. Each accepted answer -> state saved, version bumped
4. Game ends (player left, timeout) -> room removed, players unmapped

PERSISTENCE RULES:
- In-memory only; rooms vanish with the process
- State is stored serialized (GameState.to_dict as JSON) and handed back
  as a fresh snapshot on every load
- Saves are compare-and-swap on the record version, so two accepted
  answers computed from the same snapshot cannot both land
"""

from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator
import json
import logging
import secrets
import string
import threading
import time

from ..engine_core.state import GameState

logger = logging.getLogger(__name__)

ROOM_CODE_CHARS = string.ascii_uppercase + string.digits
ROOM_CODE_LENGTH = 4


class ConcurrentUpdateError(RuntimeError):
    """A save was attempted against a stale room version."""


@dataclass
class RoomRecord:
    """A stored room: serialized state plus bookkeeping."""
    room_code: str
    payload: str
    version: int = 1
    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)

    def load_state(self) -> GameState:
        """Deserialize a fresh snapshot. Raises ValueError if corrupt."""
        return GameState.from_dict(json.loads(self.payload))


class RoomStore:
    """
    In-memory room store.

    Usage:
        store = RoomStore()
        code = store.create(state)
        record = store.get(code)
        store.save(code, new_state, expected_version=record.version)
    """

    def __init__(self):
        self._rooms: dict[str, RoomRecord] = {}
        self._player_rooms: dict[str, str] = {}
        self._room_locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def create(self, state: GameState) -> str:
        """Store a new game under a fresh room code and seat its players."""
        with self._guard:
            room_code = self._generate_room_code()
            self._rooms[room_code] = RoomRecord(
                room_code=room_code,
                payload=json.dumps(state.to_dict()),
            )
            self._room_locks[room_code] = threading.Lock()
            for player_id in state.players:
                self._player_rooms[player_id] = room_code
        logger.info("Room %s created", room_code)
        return room_code

    def get(self, room_code: str) -> RoomRecord | None:
        """Get a room record by code."""
        return self._rooms.get(room_code)

    def save(self, room_code: str, state: GameState, expected_version: int) -> RoomRecord:
        """
        Replace a room's state if nobody saved since expected_version.

        Raises KeyError for an unknown room and ConcurrentUpdateError for a
        stale version.
        """
        with self._guard:
            record = self._rooms.get(room_code)
            if record is None:
                raise KeyError(room_code)
            if record.version != expected_version:
                raise ConcurrentUpdateError(
                    f"Room {room_code} is at version {record.version}, "
                    f"expected {expected_version}"
                )
            new_record = RoomRecord(
                room_code=room_code,
                payload=json.dumps(state.to_dict()),
                version=record.version + 1,
                created_at=record.created_at,
            )
            self._rooms[room_code] = new_record
            for player_id in state.players:
                self._player_rooms[player_id] = room_code
        return new_record

    def delete(self, room_code: str) -> bool:
        """Remove a room and unmap its players."""
        with self._guard:
            record = self._rooms.pop(room_code, None)
            self._room_locks.pop(room_code, None)
            for player_id in [p for p, code in self._player_rooms.items() if code == room_code]:
                del self._player_rooms[player_id]
        if record:
            logger.info("Room %s removed", room_code)
        return record is not None

    def room_for_player(self, player_id: str) -> str | None:
        """Get the room code a player is seated in."""
        return self._player_rooms.get(player_id)

    @contextmanager
    def lock(self, room_code: str) -> Iterator[None]:
        """Serialize work on one room. Unknown rooms get a throwaway lock."""
        room_lock = self._room_locks.get(room_code) or threading.Lock()
        with room_lock:
            yield

    def list_rooms(self) -> list[str]:
        """List codes of stored rooms."""
        with self._guard:
            return list(self._rooms)

    def cleanup_stale_rooms(self, max_age_seconds: int = 3600) -> list[str]:
        """
        Remove rooms not updated for max_age_seconds.

        Runs before rooms are opened or joined so abandoned seats free up.
        """
        current_time = time.time()
        with self._guard:
            stale = [
                code for code, record in self._rooms.items()
                if current_time - record.updated_at > max_age_seconds
            ]
        removed = []
        for room_code in stale:
            with self.lock(room_code):
                record = self._rooms.get(room_code)
                # A move may have landed since the scan
                if record and current_time - record.updated_at > max_age_seconds:
                    self.delete(room_code)
                    removed.append(room_code)
        if removed:
            logger.info("Cleaned up %d stale room(s)", len(removed))
        return removed

    def _generate_room_code(self) -> str:
        while True:
            code = "".join(secrets.choice(ROOM_CODE_CHARS) for _ in range(ROOM_CODE_LENGTH))
            if code not in self._rooms:
                return code
