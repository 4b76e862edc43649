"""
Reducer - Judges an answer and produces the next game state.

The reducer is the single point of state change.
All accepted moves go through apply_answer().

Design principles:
- Pure function: (state, candidate, contributors) -> outcome
- Checks run in a fixed order; the first failing check wins
- Never mutates the input state
- No I/O: credits are fetched by the caller and passed in
"""

from __future__ import annotations
from typing import Iterable

from .state import GameState, Link, PlayedMedia
from .action import (
    Accepted,
    AnswerResult,
    Contributor,
    MediaCandidate,
    Rejected,
    RejectionReason,
)
from .turns import is_player_turn


def check_already_played(state: GameState, candidate: MediaCandidate) -> bool:
    """
    Check whether the candidate is the seed or already in the chain.

    The seed is matched by label, and also by key when the seed key is known.
    """
    if candidate.label == state.initial_label:
        return True
    if state.initial_key is not None and candidate.key == state.initial_key:
        return True
    return state.has_played(candidate.key)


def compute_links(
    current_credits: Iterable[int],
    contributors: Iterable[Contributor],
) -> tuple[list[Link], list[int]]:
    """
    Intersect the candidate's contributors with the credit pool.

    Returns (links, contributor_ids). links holds each shared person once,
    keeping the first name seen. contributor_ids holds every contributor id
    once, in encounter order, and becomes the next credit pool.
    """
    pool = set(current_credits)
    links: list[Link] = []
    linked: set[int] = set()
    contributor_ids: list[int] = []
    seen: set[int] = set()

    for person in contributors:
        if person.id not in seen:
            seen.add(person.id)
            contributor_ids.append(person.id)
        if person.id in pool and person.id not in linked:
            linked.add(person.id)
            links.append(Link(id=person.id, name=person.name))

    return links, contributor_ids


def apply_answer(
    state: GameState,
    candidate: MediaCandidate,
    contributors: Iterable[Contributor],
    player_id: str | None = None,
) -> AnswerResult:
    """
    Apply a player's answer to the game state.

    When player_id is given the turn is checked first; otherwise the caller
    is expected to have authorized the move already.
    """
    if player_id is not None and not is_player_turn(state, player_id):
        return Rejected(RejectionReason.NOT_YOUR_TURN)

    if check_already_played(state, candidate):
        return Rejected(RejectionReason.ALREADY_PLAYED)

    links, contributor_ids = compute_links(state.current_credits, contributors)
    if not links:
        return Rejected(RejectionReason.NO_LINKS_FOUND)

    played = PlayedMedia(key=candidate.key, label=candidate.label, links=tuple(links))
    return Accepted(state.with_move(played, contributor_ids))
