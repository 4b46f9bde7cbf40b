"""Anecdote normalization — the scoring-ready view of each record."""

import math
from collections.abc import Iterable
from datetime import datetime, timezone

from storylines.models import Anecdote, NormalizedItem


_REDUCED_FORMATS = ("%Y-%m", "%Y")


def _parse_reduced(value: str) -> datetime | None:
    for fmt in _REDUCED_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def parse_timestamp(date: str) -> float:
    """Parse an ISO date or datetime into epoch seconds.

    Naive values are read as UTC; "YYYY-MM" and "YYYY" mean the first day
    of that period. Anything unparsable becomes nan, which compares false
    against every other timestamp.
    """
    try:
        value = date.strip()
    except AttributeError:
        return math.nan
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        parsed = _parse_reduced(value)
        if parsed is None:
            return math.nan
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def build_search_text(anecdote: Anecdote) -> str:
    parts = [
        anecdote.title,
        anecdote.story,
        anecdote.notes,
        anecdote.location,
        anecdote.storyteller,
        " ".join(anecdote.tags),
    ]
    return " ".join(parts).lower()


def normalize_anecdote(anecdote: Anecdote) -> NormalizedItem:
    return NormalizedItem(
        anecdote=anecdote,
        timestamp=parse_timestamp(anecdote.date),
        text=build_search_text(anecdote),
        tags=tuple(tag.lower() for tag in anecdote.tags),
    )


def normalize_anecdotes(anecdotes: Iterable[Anecdote]) -> list[NormalizedItem]:
    """Normalize every anecdote, preserving order."""
    return [normalize_anecdote(a) for a in anecdotes]


def chronological_order(items: list[NormalizedItem]) -> list[NormalizedItem]:
    """Stable ascending timestamp order; unparsable dates sort last."""
    return sorted(
        items,
        key=lambda item: (math.isnan(item.timestamp), 0.0 if math.isnan(item.timestamp) else item.timestamp),
    )
