"""Builders shared by the storyline tests."""

from storylines.engine.normalize import normalize_anecdote
from storylines.models import Anecdote, NormalizedItem


def make_anecdote(anecdote_id: str, date: str, **fields) -> Anecdote:
    """Anecdote with bland defaults so only the given fields affect scoring."""
    defaults = {
        "title": f"Story {anecdote_id}",
        "story": "",
        "notes": "",
        "storyteller": f"teller-{anecdote_id}",
        "location": "",
        "tags": [],
    }
    defaults.update(fields)
    return Anecdote(id=anecdote_id, date=date, **defaults)


def make_item(anecdote_id: str, date: str, **fields) -> NormalizedItem:
    return normalize_anecdote(make_anecdote(anecdote_id, date, **fields))
