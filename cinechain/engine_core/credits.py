"""
Credit Filter - Which credited people count as contributors.

Everyone in the cast counts. From the crew only a fixed allow-list of jobs
counts: Director, Writer, Director of Photography, and any Composer job
("Original Music Composer", "Music Composer", ...).
"""

from __future__ import annotations
from typing import Any, Iterable

from .action import Contributor

CREW_JOBS = frozenset({"Director", "Writer", "Director of Photography"})


def is_contributing_job(job: str | None) -> bool:
    """Check whether a crew job is on the allow-list."""
    if not job:
        return False
    return job in CREW_JOBS or "Composer" in job


def contributing_people(
    cast: Iterable[dict[str, Any]],
    crew: Iterable[dict[str, Any]],
) -> list[Contributor]:
    """
    Build the contributor list for a title from raw credits.

    Cast comes first, then allow-listed crew, each in provider order.
    Duplicates are kept; the validator dedups by id.
    """
    people = [
        Contributor(id=person["id"], name=person["name"], role=person.get("character"))
        for person in cast
    ]
    people.extend(
        Contributor(id=person["id"], name=person["name"], role=person.get("job"))
        for person in crew
        if is_contributing_job(person.get("job"))
    )
    return people
