"""
Metadata Module - The Movie Database (TMDB) collaborator.

Provides:
- TMDBClient: HTTP client for search and credits lookups
- format_search_results: turns raw search hits into pickable options

The engine never calls this module; the game service does.
"""

from .client import TMDBClient, MetadataProviderError, MEDIA_TYPES
from .search import MediaOption, format_search_results, format_label

__all__ = [
    "TMDBClient",
    "MetadataProviderError",
    "MEDIA_TYPES",
    "MediaOption",
    "format_search_results",
    "format_label",
]
