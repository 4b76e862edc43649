"""
Game State - The canonical record of one match.

Design principles:
- Immutable-friendly: accepted moves return a new state
- Serializable: round-trips through the room store as plain JSON
- Turn-free: whose turn it is is derived from the chain, never stored
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EndGameReason(Enum):
    """Why a game ended. Raised by the caller, never by the engine."""
    PLAYER_LEFT = "PLAYER_LEFT"
    TIMEOUT = "TIMEOUT"


@dataclass(frozen=True)
class Link:
    """A person shared between a played title and the one before it."""
    id: int
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class PlayedMedia:
    """
    A title accepted into the chain.

    key is "<media_type>-<external id>", e.g. "movie-27205".
    """
    key: str
    label: str
    links: tuple[Link, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "links": [link.to_dict() for link in self.links],
        }


@dataclass
class GameState:
    """
    State of a single match.

    players: seating order, fixes turn parity. Two players once joined.
    initial_label: label of the seed title the game started from.
    initial_key: stable key of the seed title, when known.
    media: accepted titles, newest first.
    current_credits: person ids of the most recently accepted title
        (the seed's contributors before the first move).
    """
    players: list[str]
    initial_label: str
    media: list[PlayedMedia] = field(default_factory=list)
    current_credits: list[int] = field(default_factory=list)
    initial_key: str | None = None

    @property
    def is_full(self) -> bool:
        return len(self.players) >= 2

    def has_played(self, key: str) -> bool:
        """Check whether a title key is already in the chain."""
        return any(item.key == key for item in self.media)

    def with_player(self, player_id: str) -> GameState:
        """Return new state with a player seated after the existing ones."""
        return self._copy_with(players=[*self.players, player_id])

    def with_move(self, played: PlayedMedia, credits: list[int]) -> GameState:
        """Return new state with a title prepended and the credit pool replaced."""
        return self._copy_with(
            media=[played, *self.media],
            current_credits=list(credits),
        )

    def _copy_with(self, **changes: Any) -> GameState:
        values = {
            "players": list(self.players),
            "initial_label": self.initial_label,
            "media": list(self.media),
            "current_credits": list(self.current_credits),
            "initial_key": self.initial_key,
        }
        values.update(changes)
        return GameState(**values)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the wire names clients already consume."""
        data = {
            "players": list(self.players),
            "initialLabel": self.initial_label,
            "media": [item.to_dict() for item in self.media],
            "currentCredits": list(self.current_credits),
        }
        if self.initial_key is not None:
            data["initialKey"] = self.initial_key
        return data

    @classmethod
    def from_dict(cls, data: Any) -> GameState:
        """
        Build a state from its serialized form.

        Raises ValueError when the payload does not have the expected shape.
        """
        if not isinstance(data, dict):
            raise ValueError("Game state must be an object")

        players = data.get("players")
        if not isinstance(players, list) or not all(isinstance(p, str) for p in players):
            raise ValueError("players must be a list of strings")

        initial_label = data.get("initialLabel")
        if not isinstance(initial_label, str):
            raise ValueError("initialLabel must be a string")

        initial_key = data.get("initialKey")
        if initial_key is not None and not isinstance(initial_key, str):
            raise ValueError("initialKey must be a string")

        credits = data.get("currentCredits")
        if not isinstance(credits, list) or not all(_is_int(c) for c in credits):
            raise ValueError("currentCredits must be a list of numbers")

        raw_media = data.get("media")
        if not isinstance(raw_media, list):
            raise ValueError("media must be a list")

        media = []
        for item in raw_media:
            if not isinstance(item, dict):
                raise ValueError("media entries must be objects")
            key, label = item.get("key"), item.get("label")
            if not isinstance(key, str) or not isinstance(label, str):
                raise ValueError("media entries need string key and label")
            raw_links = item.get("links")
            if not isinstance(raw_links, list):
                raise ValueError("media links must be a list")
            links = []
            for link in raw_links:
                if (
                    not isinstance(link, dict)
                    or not _is_int(link.get("id"))
                    or not isinstance(link.get("name"), str)
                ):
                    raise ValueError("links need a numeric id and a string name")
                links.append(Link(id=link["id"], name=link["name"]))
            media.append(PlayedMedia(key=key, label=label, links=tuple(links)))

        return cls(
            players=list(players),
            initial_label=initial_label,
            media=media,
            current_credits=list(credits),
            initial_key=initial_key,
        )


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class EndGame:
    """End-of-game signal published to the room."""
    reason: EndGameReason
    player: str

    def to_dict(self) -> dict[str, Any]:
        return {"reason": self.reason.value, "player": self.player}


def create_new_game_state(
    player: str,
    initial_label: str,
    current_credits: list[int],
    initial_key: str | None = None,
) -> GameState:
    """Create the state for a fresh game seated with its host only."""
    return GameState(
        players=[player],
        initial_label=initial_label,
        media=[],
        current_credits=list(current_credits),
        initial_key=initial_key,
    )
