"""Anecdote ingestion — loads JSON/YAML anecdote files into the database."""

import hashlib
import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from storylines.db import StorylineDB
from storylines.models import Anecdote

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = {".json", ".yaml", ".yml"}


class IngestionResult:
    """Summary of an ingestion run."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.loaded = 0
        self.new = 0
        self.updated = 0
        self.rejected = 0

    def __repr__(self) -> str:
        return (
            f"IngestionResult({self.source}: {self.loaded} loaded "
            f"[new={self.new}, updated={self.updated}, rejected={self.rejected}])"
        )


def anecdote_id_for(record: dict[str, Any]) -> str:
    """Deterministic id from date + title, so re-ingesting a file is idempotent."""
    key = f"{record.get('date', '')}|{record.get('title', '')}"
    return hashlib.sha1(key.encode()).hexdigest()[:12]


def _read_records(path: Path) -> list[Any]:
    if not path.exists():
        raise FileNotFoundError(f"Anecdote file not found: {path}")
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported anecdote file type: {suffix}")

    text = path.read_text()
    raw = json.loads(text) if suffix == ".json" else yaml.safe_load(text)
    if isinstance(raw, dict) and "anecdotes" in raw:
        raw = raw["anecdotes"]
    if not isinstance(raw, list):
        raise ValueError(f"Expected a list of anecdotes in {path}")
    return raw


def parse_anecdotes(records: list[Any], result: IngestionResult | None = None) -> list[Anecdote]:
    """Validate raw records, skipping (and counting) the ones that don't fit."""
    anecdotes: list[Anecdote] = []
    for i, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning("Rejecting record %d: not a mapping", i)
            if result:
                result.rejected += 1
            continue
        # YAML loads bare dates as date objects
        if isinstance(record.get("date"), (date, datetime)):
            record = {**record, "date": record["date"].isoformat()}
        if not record.get("id"):
            record = {**record, "id": anecdote_id_for(record)}
        try:
            anecdotes.append(Anecdote(**record))
        except ValidationError as e:
            logger.warning("Rejecting record %d (%s): %s", i, record.get("id"), e)
            if result:
                result.rejected += 1
    return anecdotes


def load_anecdote_file(path: Path) -> list[Anecdote]:
    """Read a JSON or YAML list of anecdote records."""
    return parse_anecdotes(_read_records(path))


def ingest_file(path: Path, db: StorylineDB) -> IngestionResult:
    """Upsert every valid anecdote in path into the database."""
    result = IngestionResult(path.name)
    logger.info("Starting ingestion from %s", path)

    anecdotes = parse_anecdotes(_read_records(path), result)
    result.loaded = len(anecdotes)
    for anecdote in anecdotes:
        if db.upsert_anecdote(anecdote):
            result.new += 1
        else:
            result.updated += 1

    logger.info("Ingestion complete: %s", result)
    return result
