"""
Tests for game state, serialization and turn resolution.
"""

import pytest

from ..engine_core.state import (
    EndGame,
    EndGameReason,
    GameState,
    Link,
    PlayedMedia,
    create_new_game_state,
)
from ..engine_core.turns import current_player, is_player_turn


class TestGameState:
    """Tests for GameState construction and copies."""

    def test_create_new_game_state(self):
        state = create_new_game_state("A", "Inception (2010)", [5, 9, 12], initial_key="movie-27205")

        assert state.players == ["A"]
        assert state.initial_label == "Inception (2010)"
        assert state.initial_key == "movie-27205"
        assert state.media == []
        assert state.current_credits == [5, 9, 12]
        assert not state.is_full

    def test_with_player_returns_new_state(self, host_only_state):
        joined = host_only_state.with_player("B")

        assert joined.players == ["A", "B"]
        assert joined.is_full
        assert host_only_state.players == ["A"]

    def test_to_dict_uses_wire_names(self, fresh_state):
        assert fresh_state.to_dict() == {
            "players": ["A", "B"],
            "initialLabel": "Inception (2010)",
            "media": [],
            "currentCredits": [5, 9, 12],
        }

    def test_from_dict_restores_state(self):
        state = GameState(
            players=["A", "B"],
            initial_label="Inception (2010)",
            media=[PlayedMedia("movie-999", "Other Movie (2015)", (Link(5, "X"),))],
            current_credits=[5, 40],
            initial_key="movie-27205",
        )
        assert GameState.from_dict(state.to_dict()) == state

    @pytest.mark.parametrize("payload", [
        None,
        [],
        {"players": "A", "initialLabel": "x", "media": [], "currentCredits": []},
        {"players": ["A"], "initialLabel": 3, "media": [], "currentCredits": []},
        {"players": ["A"], "initialLabel": "x", "media": [], "currentCredits": ["5"]},
        {"players": ["A"], "initialLabel": "x", "media": [{"key": "k", "label": "l"}], "currentCredits": []},
        {"players": ["A"], "initialLabel": "x", "media": [
            {"key": "k", "label": "l", "links": [{"id": "5", "name": "X"}]}
        ], "currentCredits": []},
    ])
    def test_from_dict_rejects_malformed(self, payload):
        with pytest.raises(ValueError):
            GameState.from_dict(payload)

    def test_end_game_to_dict(self):
        signal = EndGame(reason=EndGameReason.TIMEOUT, player="B")
        assert signal.to_dict() == {"reason": "TIMEOUT", "player": "B"}


class TestTurnResolver:
    """Tests for turn parity."""

    def test_first_player_starts(self, fresh_state):
        assert is_player_turn(fresh_state, "A")
        assert not is_player_turn(fresh_state, "B")

    @pytest.mark.parametrize("n", range(6))
    def test_parity_follows_chain_length(self, fresh_state, n):
        state = fresh_state
        for i in range(n):
            state = state.with_move(PlayedMedia(f"movie-{i}", f"M{i}", (Link(1, "P"),)), [1])

        players = state.players
        assert is_player_turn(state, players[n % 2])
        assert not is_player_turn(state, players[(n + 1) % 2])

    @pytest.mark.parametrize("player_id", [None, ""])
    def test_missing_player_is_never_turn(self, fresh_state, player_id):
        assert not is_player_turn(fresh_state, player_id)

    def test_missing_state_is_never_turn(self):
        assert not is_player_turn(None, "A")
        assert current_player(None) is None

    def test_empty_seat_owns_no_turn(self, host_only_state):
        """With one player the odd turns belong to nobody."""
        state = host_only_state.with_move(PlayedMedia("movie-1", "M", (Link(5, "X"),)), [5])
        assert current_player(state) is None
        assert not is_player_turn(state, "A")
