"""
Answer System - Candidates, contributors, and outcomes.

A player's answer is a MediaCandidate. The engine judges it against the
people who worked on it (Contributor) and returns one of two outcomes:
- Accepted: carries the next GameState
- Rejected: carries a RejectionReason, state untouched

Outcomes are plain values, not exceptions, so callers can match on them.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Union

from .state import GameState


class RejectionReason(Enum):
    """Closed set of reasons an answer can be turned down."""
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    ALREADY_PLAYED = "ALREADY_PLAYED"
    NO_LINKS_FOUND = "NO_LINKS_FOUND"

    @property
    def message(self) -> str:
        return _REJECTION_MESSAGES[self]


_REJECTION_MESSAGES = {
    RejectionReason.NOT_YOUR_TURN: "Not your turn",
    RejectionReason.ALREADY_PLAYED: "This media has already been played",
    RejectionReason.NO_LINKS_FOUND: "No links found",
}


@dataclass(frozen=True)
class MediaCandidate:
    """A title a player proposes as the next link in the chain."""
    key: str
    label: str
    id: int
    media_type: str  # "movie" or "tv"

    @classmethod
    def from_option(cls, media_type: str, media_id: int, label: str) -> MediaCandidate:
        """Factory that derives the key from type and id."""
        return cls(
            key=f"{media_type}-{media_id}",
            label=label,
            id=media_id,
            media_type=media_type,
        )


@dataclass(frozen=True)
class Contributor:
    """A person credited on a title (cast member or allow-listed crew)."""
    id: int
    name: str
    role: str | None = None


@dataclass(frozen=True)
class Accepted:
    """The answer links to the previous title; state is the next state."""
    state: GameState

    @property
    def success(self) -> bool:
        return True

    @property
    def message(self) -> str | None:
        return None


@dataclass(frozen=True)
class Rejected:
    """The answer was turned down; the game state is unchanged."""
    reason: RejectionReason

    @property
    def success(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return self.reason.message


AnswerResult = Union[Accepted, Rejected]
