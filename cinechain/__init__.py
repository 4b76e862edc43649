"""
Cinechain - Six degrees of separation, played on film and TV credits.

Two players alternately name a movie or TV show that shares a cast or crew
member with the previous title, building a chain. The package provides:
- A pure game engine (turns, link validation, state transitions)
- A TMDB client for search and credits
- An in-memory room store
- A FastAPI service with realtime room updates
"""

__version__ = "0.1.0"
