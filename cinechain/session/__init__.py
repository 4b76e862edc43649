"""
Session Module - Stores rooms between requests.

A room represents one match:
- Created when a host picks a seed title
- Joined by exactly one guest
- Updated on every accepted answer
- Removed when the game ends

Rooms are EPHEMERAL:
- No persistence to database
- Ends cleanly when a player leaves or times out
"""

from .store import RoomStore, RoomRecord, ConcurrentUpdateError

__all__ = [
    "RoomStore",
    "RoomRecord",
    "ConcurrentUpdateError",
]
