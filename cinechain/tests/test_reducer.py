"""
Tests for the reducer (answer validation and state transitions).

Tests:
- Check ordering and rejection reasons
- State is never mutated on rejection
- Accepted moves prepend one entry and replace the credit pool
- Link computation dedup rules
"""

import copy

from ..engine_core.action import Accepted, Contributor, MediaCandidate, Rejected, RejectionReason
from ..engine_core.reducer import apply_answer, check_already_played, compute_links
from ..engine_core.state import GameState, Link, PlayedMedia
from ..engine_core.turns import is_player_turn


class TestAlreadyPlayed:
    """Tests for duplicate detection."""

    def test_seed_label_rejected(self, fresh_state, inception):
        """Answering with the seed's label is already played."""
        before = copy.deepcopy(fresh_state)
        result = apply_answer(fresh_state, inception, [Contributor(id=5, name="X")])

        assert isinstance(result, Rejected)
        assert result.reason == RejectionReason.ALREADY_PLAYED
        assert not result.success
        assert result.message == "This media has already been played"
        assert fresh_state == before

    def test_seed_key_rejected_when_label_differs(self, fresh_state):
        """A known seed key matches even under another label."""
        state = GameState(
            players=["A", "B"],
            initial_label="Inception (2010)",
            current_credits=[5],
            initial_key="movie-27205",
        )
        candidate = MediaCandidate(key="movie-27205", label="Inception", id=27205, media_type="movie")

        assert check_already_played(state, candidate)
        # Without the key only the label can match
        assert not check_already_played(fresh_state, candidate)

    def test_history_key_rejected(self, fresh_state, other_movie):
        """A title already in the chain cannot be played twice."""
        state = fresh_state.with_move(
            PlayedMedia(key="movie-999", label="Other Movie (2015)", links=(Link(5, "X"),)),
            [5, 40],
        )
        contributors = [Contributor(id=5, name="X")]

        for _ in range(2):
            before = copy.deepcopy(state)
            result = apply_answer(state, other_movie, contributors)
            assert result.reason == RejectionReason.ALREADY_PLAYED
            assert state == before

    def test_duplicate_checked_before_links(self, fresh_state, inception):
        """Already played wins over no links."""
        result = apply_answer(fresh_state, inception, [])
        assert result.reason == RejectionReason.ALREADY_PLAYED


class TestNoLinks:
    """Tests for the link gate."""

    def test_no_overlap_rejected(self, fresh_state, other_movie):
        """Contributors outside the pool are rejected, state unchanged."""
        before = copy.deepcopy(fresh_state)
        result = apply_answer(
            fresh_state,
            other_movie,
            [Contributor(id=100, name="P"), Contributor(id=101, name="Q")],
        )

        assert result == Rejected(RejectionReason.NO_LINKS_FOUND)
        assert result.message == "No links found"
        assert fresh_state == before

    def test_empty_contributors_rejected(self, fresh_state, other_movie):
        result = apply_answer(fresh_state, other_movie, [])
        assert result.reason == RejectionReason.NO_LINKS_FOUND


class TestAccepted:
    """Tests for accepted moves."""

    def test_accepted_scenario(self, fresh_state, other_movie):
        """One shared person links the titles; pool becomes the new cast."""
        result = apply_answer(
            fresh_state,
            other_movie,
            [Contributor(id=5, name="X"), Contributor(id=40, name="Y")],
        )

        assert isinstance(result, Accepted)
        assert result.success
        new_state = result.state
        assert new_state.media == [
            PlayedMedia(key="movie-999", label="Other Movie (2015)", links=(Link(id=5, name="X"),))
        ]
        assert new_state.current_credits == [5, 40]
        assert new_state.to_dict()["media"] == [
            {"key": "movie-999", "label": "Other Movie (2015)", "links": [{"id": 5, "name": "X"}]}
        ]

    def test_input_state_not_mutated(self, fresh_state, other_movie):
        before = copy.deepcopy(fresh_state)
        apply_answer(fresh_state, other_movie, [Contributor(id=5, name="X")])
        assert fresh_state == before

    def test_prepends_newest_first(self, fresh_state, other_movie):
        """Each accepted move lands at the front of the chain."""
        first = apply_answer(fresh_state, other_movie, [Contributor(id=9, name="Z"), Contributor(id=40, name="Y")])
        second_candidate = MediaCandidate(key="tv-1399", label="Show (2011)", id=1399, media_type="tv")
        second = apply_answer(first.state, second_candidate, [Contributor(id=40, name="Y")])

        assert isinstance(second, Accepted)
        assert [item.key for item in second.state.media] == ["tv-1399", "movie-999"]
        assert second.state.current_credits == [40]

    def test_pool_replaced_not_merged(self, fresh_state, other_movie):
        """Credits of older titles no longer link."""
        first = apply_answer(fresh_state, other_movie, [Contributor(id=5, name="X"), Contributor(id=40, name="Y")])
        candidate = MediaCandidate(key="movie-1", label="Third (2001)", id=1, media_type="movie")

        result = apply_answer(first.state, candidate, [Contributor(id=12, name="W")])
        assert result.reason == RejectionReason.NO_LINKS_FOUND

    def test_turn_flips_after_accepted_move(self, fresh_state, other_movie):
        assert is_player_turn(fresh_state, "A")
        result = apply_answer(fresh_state, other_movie, [Contributor(id=5, name="X")])

        assert not is_player_turn(result.state, "A")
        assert is_player_turn(result.state, "B")

    def test_is_deterministic(self, fresh_state, other_movie):
        contributors = [Contributor(id=5, name="X"), Contributor(id=40, name="Y")]
        assert apply_answer(fresh_state, other_movie, contributors) == apply_answer(
            fresh_state, other_movie, contributors
        )


class TestTurnCheck:
    """Tests for the optional in-engine turn check."""

    def test_wrong_player_rejected_first(self, fresh_state, inception):
        """Not your turn wins over every other check."""
        result = apply_answer(fresh_state, inception, [], player_id="B")
        assert result.reason == RejectionReason.NOT_YOUR_TURN
        assert result.message == "Not your turn"

    def test_right_player_proceeds(self, fresh_state, other_movie):
        result = apply_answer(fresh_state, other_movie, [Contributor(id=5, name="X")], player_id="A")
        assert result.success


class TestComputeLinks:
    """Tests for link computation."""

    def test_links_dedup_first_name_wins(self):
        links, ids = compute_links(
            [5, 9],
            [
                Contributor(id=5, name="Cast Credit"),
                Contributor(id=40, name="Y"),
                Contributor(id=5, name="Crew Credit"),
                Contributor(id=9, name="Z"),
            ],
        )
        assert links == [Link(5, "Cast Credit"), Link(9, "Z")]
        assert ids == [5, 40, 9]

    def test_links_are_intersection(self):
        links, ids = compute_links([1, 2, 3], [Contributor(id=3, name="C"), Contributor(id=4, name="D")])
        assert {link.id for link in links} == {1, 2, 3} & set(ids)
