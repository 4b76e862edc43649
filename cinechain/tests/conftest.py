"""
Pytest fixtures for Cinechain tests.
"""

import pytest

from ..engine_core import GameState, MediaCandidate, create_new_game_state
from ..api.service import GameService
from ..session import RoomStore


class FakeMetadata:
    """In-memory stand-in for TMDBClient."""

    def __init__(self, credits=None, search_results=None):
        self._credits = credits or {}
        self.search_results = search_results or []
        self.credit_calls = []

    def add_credits(self, media_type, media_id, cast=(), crew=()):
        self._credits[(media_type, media_id)] = {"cast": list(cast), "crew": list(crew)}

    def search_multi(self, query):
        return list(self.search_results)

    def credits(self, media_type, media_id):
        self.credit_calls.append((media_type, media_id))
        return self._credits.get((media_type, media_id), {"cast": [], "crew": []})


@pytest.fixture
def inception() -> MediaCandidate:
    return MediaCandidate(key="movie-27205", label="Inception (2010)", id=27205, media_type="movie")


@pytest.fixture
def other_movie() -> MediaCandidate:
    return MediaCandidate(key="movie-999", label="Other Movie (2015)", id=999, media_type="movie")


@pytest.fixture
def fresh_state() -> GameState:
    """Two-player game seeded from Inception, no moves yet."""
    return GameState(
        players=["A", "B"],
        initial_label="Inception (2010)",
        media=[],
        current_credits=[5, 9, 12],
    )


@pytest.fixture
def host_only_state() -> GameState:
    return create_new_game_state("A", "Inception (2010)", [5, 9, 12])


@pytest.fixture
def metadata() -> FakeMetadata:
    """Credits for Inception, Other Movie and an unrelated show."""
    fake = FakeMetadata()
    fake.add_credits(
        "movie", 27205,
        cast=[{"id": 5, "name": "X", "character": "Cobb"}, {"id": 9, "name": "Z"}],
        crew=[
            {"id": 12, "name": "W", "job": "Director"},
            {"id": 77, "name": "Grip", "job": "Key Grip"},
        ],
    )
    fake.add_credits(
        "movie", 999,
        cast=[{"id": 5, "name": "X"}, {"id": 40, "name": "Y"}],
    )
    fake.add_credits(
        "tv", 1399,
        cast=[{"id": 300, "name": "Nobody"}],
    )
    return fake


@pytest.fixture
def service(metadata) -> GameService:
    return GameService(metadata=metadata, store=RoomStore())
