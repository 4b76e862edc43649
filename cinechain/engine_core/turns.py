"""
Turn Resolver - Whose turn it is, derived from the chain length.

Turn index is len(media) % 2, so alternation can never drift from the chain.
"""

from __future__ import annotations

from .state import GameState


def current_player(state: GameState | None) -> str | None:
    """Return the player who owns the turn, or None if the seat is empty."""
    if state is None:
        return None
    index = len(state.media) % 2
    if index >= len(state.players):
        return None
    return state.players[index]


def is_player_turn(state: GameState | None, player_id: str | None) -> bool:
    """Check whether player_id owns the turn. False without full context."""
    if not state or not player_id:
        return False
    return current_player(state) == player_id
