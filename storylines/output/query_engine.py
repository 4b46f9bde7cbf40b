"""Query layer — storyline generation, cache fallback, and beat diagnostics."""

import logging
from pathlib import Path

from storylines.config import Config
from storylines.db import StorylineDB
from storylines.engine import generate_storylines
from storylines.ingest import ingest_file
from storylines.models import Storyline

logger = logging.getLogger(__name__)


def refresh_storylines(db: StorylineDB, config: Config, save: bool = True) -> list[Storyline]:
    """Generate storylines from every stored anecdote, caching the result."""
    anecdotes = db.get_all_anecdotes()
    storylines = generate_storylines(anecdotes, config.engine)
    if save and storylines:
        db.save_storylines(storylines)
    return storylines


def get_storylines(db: StorylineDB, config: Config) -> list[Storyline]:
    """Fresh storylines when anecdotes exist, else whatever the cache holds.

    The cache is only a display fallback; it is never merged with fresh output.
    """
    if db.count_anecdotes():
        return refresh_storylines(db, config)
    cached = db.load_storylines()
    logger.info("No anecdotes stored, serving %d cached storylines", len(cached))
    return cached


def get_storyline(storyline_id: str, db: StorylineDB, config: Config) -> Storyline:
    for line in get_storylines(db, config):
        if line.id == storyline_id:
            return line
    raise ValueError(f"Storyline not found: {storyline_id}")


def explain_beat(storyline_id: str, beat_id: str, db: StorylineDB, config: Config) -> dict[str, object]:
    """Why a beat sits where it does: its connection and score breakdown."""
    line = get_storyline(storyline_id, db, config)
    for position, beat in enumerate(line.beats):
        if beat.id != beat_id:
            continue
        previous = line.beats[position - 1].anecdote if position > 0 else None
        return {
            "storyline": line.id,
            "beat": beat.id,
            "position": position + 1,
            "anecdote": {"id": beat.anecdote.id, "title": beat.anecdote.title, "date": beat.anecdote.date},
            "previous": {"id": previous.id, "title": previous.title, "date": previous.date} if previous else None,
            "connection": beat.connection.model_dump(mode="json") if beat.connection else None,
            "intensity": beat.intensity,
            "score": beat.debug.model_dump(mode="json") if beat.debug else None,
        }
    raise ValueError(f"Beat not found in {storyline_id}: {beat_id}")


def list_anecdotes(db: StorylineDB, year: int | None = None) -> list[dict[str, object]]:
    anecdotes = db.get_anecdotes_by_year(year) if year is not None else db.get_all_anecdotes()
    return [
        {
            "id": a.id,
            "date": a.date,
            "year": a.year,
            "title": a.title,
            "storyteller": a.storyteller,
            "location": a.location,
            "tags": a.tags,
        }
        for a in anecdotes
    ]


def ingest_anecdotes_from_path(path: str, db: StorylineDB) -> dict[str, object]:
    """Ingest an anecdote file. Raises FileNotFoundError / ValueError on bad input."""
    result = ingest_file(Path(path).expanduser().resolve(), db)
    return {
        "source": result.source,
        "loaded": result.loaded,
        "new": result.new,
        "updated": result.updated,
        "rejected": result.rejected,
    }
