"""
Engine Core - Deterministic game state and answer validation.

The engine is the pure core that:
1. Holds the GameState (players, chain, credit pool)
2. Resolves whose turn it is from the chain length
3. Filters raw credits down to contributors
4. Judges answers and returns Accepted or Rejected

It does no I/O. Fetching credits, storing state and broadcasting updates
belong to the caller.
"""

from .state import EndGame, EndGameReason, GameState, Link, PlayedMedia, create_new_game_state
from .action import (
    Accepted,
    AnswerResult,
    Contributor,
    MediaCandidate,
    Rejected,
    RejectionReason,
)
from .turns import current_player, is_player_turn
from .credits import CREW_JOBS, contributing_people, is_contributing_job
from .reducer import apply_answer, check_already_played, compute_links

__all__ = [
    "EndGame",
    "EndGameReason",
    "GameState",
    "Link",
    "PlayedMedia",
    "create_new_game_state",
    "Accepted",
    "AnswerResult",
    "Contributor",
    "MediaCandidate",
    "Rejected",
    "RejectionReason",
    "current_player",
    "is_player_turn",
    "CREW_JOBS",
    "contributing_people",
    "is_contributing_job",
    "apply_answer",
    "check_already_played",
    "compute_links",
]
