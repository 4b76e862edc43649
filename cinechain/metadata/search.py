"""
Search Formatting - Raw TMDB multi-search hits to pickable options.

Each option is labelled "<title> (<year>)", with "N/A" when the release
year is unknown. People are skipped; at most five options are returned.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable

from .client import MetadataProviderError

MAX_RESULTS = 5


@dataclass(frozen=True)
class MediaOption:
    """A title a player can pick as an answer or as the seed."""
    key: str
    id: int
    label: str
    media_type: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "id": self.id,
            "label": self.label,
            "media_type": self.media_type,
        }


def format_label(title: str, date: str | None) -> str:
    """Format "<title> (<year>)" from an ISO date string."""
    year = (date or "")[:4]
    return f"{title} ({year or 'N/A'})"


def format_search_results(
    results: Iterable[dict[str, Any]],
    limit: int = MAX_RESULTS,
) -> list[MediaOption]:
    """
    Convert multi-search hits to options.

    Raises MetadataProviderError on a media type that is not movie, tv
    or person.
    """
    options: list[MediaOption] = []
    for result in results:
        if len(options) >= limit:
            break

        media_type = result.get("media_type")
        if media_type == "person":
            continue

        if media_type == "movie":
            label = format_label(result.get("title", ""), result.get("release_date"))
        elif media_type == "tv":
            label = format_label(result.get("name", ""), result.get("first_air_date"))
        else:
            raise MetadataProviderError("Unknown media type")

        options.append(MediaOption(
            key=f"{media_type}-{result['id']}",
            id=result["id"],
            label=label,
            media_type=media_type,
        ))

    return options
