"""
TMDB Client - Search and credits lookups against The Movie Database.

The client:
- Authenticates with a v4 read access token (Bearer)
- Retries transient failures with exponential backoff
- Raises MetadataProviderError for any transport or payload failure

Endpoints used:
    GET /search/multi?query=...
    GET /movie/{id}/credits
    GET /tv/{id}/credits
"""

from __future__ import annotations
import logging
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.themoviedb.org/3"
DEFAULT_TIMEOUT: tuple[float, float] = (5.0, 15.0)  # connect, read

# media_type -> path segment
MEDIA_TYPES = {
    "movie": "movie",
    "tv": "tv",
}


class MetadataProviderError(RuntimeError):
    """Failure talking to the metadata provider."""


class TMDBClient:
    """
    HTTP client for TMDB.

    Usage:
        client = TMDBClient(access_token="...")
        hits = client.search_multi("inception")
        credits = client.credits("movie", 27205)
    """

    def __init__(
        self,
        access_token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        session: requests.Session | None = None,
        timeout: tuple[float, float] = DEFAULT_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or self._build_session()
        self.session.headers.update({
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        })
        self.timeout = timeout

    @staticmethod
    def _build_session() -> requests.Session:
        session = requests.Session()
        retry = Retry(
            total=3,
            backoff_factor=0.5,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=frozenset({"GET"}),
            respect_retry_after_header=True,
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            logger.debug("TMDB request %s", path)
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.Timeout as exc:
            logger.warning("TMDB request timed out: %s", path)
            raise MetadataProviderError("Metadata request timed out") from exc
        except requests.RequestException as exc:
            logger.error("TMDB request failed: %s", path, exc_info=True)
            raise MetadataProviderError("Metadata request failed") from exc

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("Invalid JSON payload from TMDB: %s", path)
            raise MetadataProviderError("Invalid metadata payload") from exc

        if not isinstance(data, dict):
            raise MetadataProviderError("Invalid metadata payload")
        return data

    def search_multi(self, query: str) -> list[dict[str, Any]]:
        """Search movies, TV shows and people in one call."""
        data = self._get("/search/multi", params={"query": query})
        results = data.get("results", [])
        if not isinstance(results, list):
            raise MetadataProviderError("Invalid search payload")
        return results

    def credits(self, media_type: str, media_id: int) -> dict[str, list[dict[str, Any]]]:
        """
        Get cast and crew for a title.

        Returns {"cast": [...], "crew": [...]} with provider person dicts.
        Every person is guaranteed a numeric id and a string name.
        """
        segment = MEDIA_TYPES.get(media_type)
        if segment is None:
            raise MetadataProviderError(f"Unknown media type: {media_type}")

        path = f"/{segment}/{media_id}/credits"
        data = self._get(path)
        return {
            "cast": _people(data, "cast", path),
            "crew": _people(data, "crew", path),
        }


def _people(data: dict[str, Any], section: str, path: str) -> list[dict[str, Any]]:
    people = data.get(section) or []
    if not isinstance(people, list):
        raise MetadataProviderError(f"Invalid {section} list in credits payload")
    for person in people:
        if (
            not isinstance(person, dict)
            or not isinstance(person.get("id"), int)
            or isinstance(person.get("id"), bool)
            or not isinstance(person.get("name"), str)
        ):
            logger.error("Malformed %s entry from TMDB: %s", section, path)
            raise MetadataProviderError(f"Malformed {section} entry in credits payload")
    return list(people)
