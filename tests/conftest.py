"""Shared test fixtures for storyline tests."""

import pytest

from storylines.config import Config, EngineConfig
from storylines.db import StorylineDB
from storylines.models import Anecdote

from helpers import make_anecdote


@pytest.fixture()
def scene_anecdotes() -> list[Anecdote]:
    """Five anecdotes 2001-2019, distinct storytellers and locations.

    Only a3 carries impact vocabulary (radio, award); a1/a2 are the dj items,
    a1/a4 the club items.
    """
    return [
        make_anecdote(
            "a1", "2001-03-10", title="Basement DJ night",
            story="We carried crates down the stairs and played until sunrise.",
            storyteller="Ama", location="Baltic Room", tags=["dj", "club"],
        ),
        make_anecdote(
            "a2", "2005-06-01", title="Warehouse residency",
            story="Kofi spun every Friday for two years.",
            storyteller="Kofi", location="Neumos", tags=["dj"],
        ),
        make_anecdote(
            "a3", "2010-09-15", title="Radio award",
            story="The station gave the crew an award on air.",
            storyteller="Efua", location="KEXP", tags=["radio", "award"],
        ),
        make_anecdote(
            "a4", "2014-11-20", title="Chop Suey takeover",
            story="The room sang every chorus back to us.",
            storyteller="Yaw", location="Chop Suey", tags=["club"],
        ),
        make_anecdote(
            "a5", "2019-07-04", title="Sunday cookout",
            story="Three generations danced in the backyard.",
            storyteller="Abena", location="Columbia City", tags=["family"],
        ),
    ]


@pytest.fixture()
def tmp_config(tmp_path) -> Config:
    return Config(
        db_path=str(tmp_path / "test.db"),
        html_path=str(tmp_path / "storylines.html"),
        engine=EngineConfig(),
    )


@pytest.fixture()
def tmp_db(tmp_config):
    """Create a StorylineDB backed by a temp file."""
    db = StorylineDB(tmp_config)
    db.init_db()
    yield db
    db.close()


@pytest.fixture()
def populated_db(tmp_db, scene_anecdotes):
    """DB pre-loaded with the five scene anecdotes."""
    for a in scene_anecdotes:
        tmp_db.upsert_anecdote(a)
    return tmp_db
