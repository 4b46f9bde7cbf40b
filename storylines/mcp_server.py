#!/usr/bin/env python3
"""Storylines MCP Server — generate and inspect anecdote storylines."""

import json
import logging
import sys
from typing import Optional

from mcp.server.fastmcp import FastMCP
from pydantic import TypeAdapter

from storylines.config import Config, load_config
from storylines.db import StorylineDB
from storylines.models import Storyline
from storylines.output import query_engine as qe

mcp = FastMCP("storylines")
logger = logging.getLogger(__name__)

# Redirect all logging to stderr so stdout stays clean for MCP stdio transport
logging.basicConfig(
    stream=sys.stderr,
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

_STORYLINES = TypeAdapter(list[Storyline])

_db: StorylineDB | None = None
_config: Config | None = None


def _get_config() -> Config:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def _get_db() -> StorylineDB:
    global _db
    if _db is None:
        _db = StorylineDB(_get_config())
        _db.init_db()
    return _db


@mcp.tool()
def generate_storylines(save: bool = True) -> str:
    """Generate storylines from every stored anecdote. Updates the cache unless save is false."""
    storylines = qe.refresh_storylines(_get_db(), _get_config(), save=save)
    return _STORYLINES.dump_json(storylines).decode()


@mcp.tool()
def get_cached_storylines() -> str:
    """Return the last saved storylines without regenerating."""
    return _STORYLINES.dump_json(_get_db().load_storylines()).decode()


@mcp.tool()
def get_storyline(storyline_id: str) -> str:
    """Get one storyline by id (chronicle, nightlife, breakthrough, cinematic, core)."""
    try:
        result = qe.get_storyline(storyline_id, _get_db(), _get_config())
        return result.model_dump_json()
    except ValueError as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def explain_beat(storyline_id: str, beat_id: str) -> str:
    """Explain why a beat follows the previous one: connection plus score breakdown."""
    try:
        result = qe.explain_beat(storyline_id, beat_id, _get_db(), _get_config())
        return json.dumps(result, default=str)
    except ValueError as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def list_anecdotes(year: Optional[int] = None) -> str:
    """List stored anecdotes, optionally for a single year."""
    result = qe.list_anecdotes(_get_db(), year=year)
    return json.dumps(result, default=str)


@mcp.tool()
def ingest_file(path: str) -> str:
    """Ingest anecdotes from a JSON or YAML file."""
    try:
        result = qe.ingest_anecdotes_from_path(path, _get_db())
        return json.dumps(result)
    except (ValueError, FileNotFoundError) as e:
        return json.dumps({"error": str(e)})


if __name__ == "__main__":
    mcp.run()
