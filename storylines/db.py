"""SQLite database setup and operations for anecdotes and the storyline cache."""

import json
import logging
import sqlite3
import time

from pydantic import TypeAdapter, ValidationError

from storylines.config import Config
from storylines.engine.assembler import storylines_signature
from storylines.models import Anecdote, Media, Storyline

logger = logging.getLogger(__name__)

_STORYLINE_LIST = TypeAdapter(list[Storyline])

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS anecdotes (
    id TEXT PRIMARY KEY,
    date TEXT NOT NULL,
    year INTEGER NOT NULL DEFAULT 0,
    title TEXT NOT NULL DEFAULT '',
    story TEXT NOT NULL DEFAULT '',
    storyteller TEXT NOT NULL DEFAULT '',
    location TEXT NOT NULL DEFAULT '',
    notes TEXT NOT NULL DEFAULT '',
    tags TEXT NOT NULL DEFAULT '[]',
    created_at INTEGER NOT NULL,
    updated_at INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS media (
    id TEXT PRIMARY KEY,
    anecdote_id TEXT NOT NULL REFERENCES anecdotes(id) ON DELETE CASCADE,
    type TEXT NOT NULL,
    url TEXT NOT NULL,
    caption TEXT,
    created_at INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS storylines_cache (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    payload TEXT NOT NULL,
    signature TEXT NOT NULL,
    updated_at INTEGER NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_anecdotes_year ON anecdotes(year);
CREATE INDEX IF NOT EXISTS idx_media_anecdote ON media(anecdote_id);
"""


def _now_ms() -> int:
    return int(time.time() * 1000)


class StorylineDB:
    """SQLite database wrapper for anecdotes and cached storylines."""

    def __init__(self, config: Config) -> None:
        self.db_path = config.resolved_db_path
        self._conn: sqlite3.Connection | None = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Database not initialized. Call init_db() first.")
        return self._conn

    def init_db(self) -> None:
        """Create database and tables."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self.db_path))
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA foreign_keys=ON")
        self._conn.executescript(SCHEMA_SQL)
        logger.info("Database initialized at %s", self.db_path)

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None

    # --- Anecdote operations ---

    def _row_to_anecdote(self, row: sqlite3.Row) -> Anecdote:
        media_rows = self.conn.execute(
            "SELECT id, type, url, caption FROM media WHERE anecdote_id = ? ORDER BY created_at, id",
            (row["id"],),
        ).fetchall()
        return Anecdote(
            id=row["id"],
            date=row["date"],
            year=row["year"],
            title=row["title"],
            story=row["story"],
            storyteller=row["storyteller"],
            location=row["location"],
            notes=row["notes"],
            tags=json.loads(row["tags"] or "[]"),
            media=[Media(**dict(m)) for m in media_rows],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def upsert_anecdote(self, anecdote: Anecdote) -> bool:
        """Insert or replace an anecdote and its media. Returns True if it was new."""
        now = _now_ms()
        existing = self.conn.execute(
            "SELECT created_at FROM anecdotes WHERE id = ?", (anecdote.id,)
        ).fetchone()
        created_at = existing["created_at"] if existing else (anecdote.created_at or now)

        self.conn.execute(
            """INSERT INTO anecdotes
               (id, date, year, title, story, storyteller, location, notes, tags, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
               ON CONFLICT(id) DO UPDATE SET
                 date = excluded.date, year = excluded.year, title = excluded.title,
                 story = excluded.story, storyteller = excluded.storyteller,
                 location = excluded.location, notes = excluded.notes,
                 tags = excluded.tags, updated_at = excluded.updated_at""",
            (
                anecdote.id,
                anecdote.date,
                anecdote.year,
                anecdote.title,
                anecdote.story,
                anecdote.storyteller,
                anecdote.location,
                anecdote.notes,
                json.dumps(anecdote.tags),
                created_at,
                now,
            ),
        )
        self.conn.execute("DELETE FROM media WHERE anecdote_id = ?", (anecdote.id,))
        for m in anecdote.media:
            self.conn.execute(
                "INSERT INTO media (id, anecdote_id, type, url, caption, created_at) VALUES (?, ?, ?, ?, ?, ?)",
                (m.id, anecdote.id, m.type.value, m.url, m.caption, now),
            )
        self.conn.commit()
        return existing is None

    def get_anecdote(self, anecdote_id: str) -> Anecdote | None:
        row = self.conn.execute(
            "SELECT * FROM anecdotes WHERE id = ?", (anecdote_id,)
        ).fetchone()
        if row:
            return self._row_to_anecdote(row)
        return None

    def get_all_anecdotes(self) -> list[Anecdote]:
        """All anecdotes in a stable order (date, then id) so generation is reproducible."""
        rows = self.conn.execute("SELECT * FROM anecdotes ORDER BY date, id").fetchall()
        return [self._row_to_anecdote(r) for r in rows]

    def get_anecdotes_by_year(self, year: int) -> list[Anecdote]:
        rows = self.conn.execute(
            "SELECT * FROM anecdotes WHERE year = ? ORDER BY date, id", (year,)
        ).fetchall()
        return [self._row_to_anecdote(r) for r in rows]

    def delete_anecdote(self, anecdote_id: str) -> bool:
        cursor = self.conn.execute("DELETE FROM anecdotes WHERE id = ?", (anecdote_id,))
        self.conn.commit()
        return cursor.rowcount > 0

    def count_anecdotes(self) -> int:
        row = self.conn.execute("SELECT COUNT(*) as cnt FROM anecdotes").fetchone()
        return row["cnt"] if row else 0

    # --- Storyline cache ---

    def save_storylines(self, storylines: list[Storyline]) -> bool:
        """Store the storyline list. Returns False when the cache already holds it."""
        signature = storylines_signature(storylines)
        row = self.conn.execute(
            "SELECT signature FROM storylines_cache WHERE id = 1"
        ).fetchone()
        if row and row["signature"] == signature:
            logger.debug("Storyline cache unchanged, skipping save")
            return False

        payload = _STORYLINE_LIST.dump_json(storylines).decode()
        self.conn.execute(
            """INSERT INTO storylines_cache (id, payload, signature, updated_at)
               VALUES (1, ?, ?, ?)
               ON CONFLICT(id) DO UPDATE SET
                 payload = excluded.payload, signature = excluded.signature,
                 updated_at = excluded.updated_at""",
            (payload, signature, _now_ms()),
        )
        self.conn.commit()
        logger.info("Saved %d storylines to cache", len(storylines))
        return True

    def load_storylines(self) -> list[Storyline]:
        """Cached storylines, or an empty list when none are stored or the payload is unreadable."""
        row = self.conn.execute(
            "SELECT payload FROM storylines_cache WHERE id = 1"
        ).fetchone()
        if not row or not row["payload"]:
            return []
        try:
            return _STORYLINE_LIST.validate_json(row["payload"])
        except ValidationError as e:
            logger.warning("Ignoring unreadable storyline cache: %s", e)
            return []
