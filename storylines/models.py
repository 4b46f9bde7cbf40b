"""Pydantic models for the storyline engine."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

_YEAR_RE = re.compile(r"^\s*(\d{4})")


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"


class SelectionMode(str, Enum):
    CHRONOLOGICAL = "chronological"
    TAG = "tag"
    IMPACT = "impact"
    COMMUNITY = "community"


class StorylineStyle(str, Enum):
    FIFTY_CENT = "50cent"
    JESSE = "jesse"
    COOGLER = "coogler"
    HYBRID = "hybrid"


class ConnectionType(str, Enum):
    TAG = "tag"
    STORYTELLER = "storyteller"
    LOCATION = "location"
    CHRONOLOGY = "chronology"


# --- Input records ---


class Media(BaseModel):
    id: str
    type: MediaType
    url: str
    caption: str | None = None


class Anecdote(BaseModel):
    """One dated personal story record."""
    id: str
    date: str
    year: int = 0
    title: str = ""
    story: str = ""
    notes: str = ""
    storyteller: str = ""
    location: str = ""
    tags: list[str] = Field(default_factory=list)
    media: list[Media] = Field(default_factory=list)
    created_at: int | None = None
    updated_at: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _derive_year(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("year"):
            return data
        match = _YEAR_RE.match(str(data.get("date") or ""))
        if match:
            data = {**data, "year": int(match.group(1))}
        return data


@dataclass(frozen=True)
class NormalizedItem:
    """An anecdote plus the fields the scorer reads."""

    anecdote: Anecdote
    timestamp: float  # seconds since epoch, nan when the date is unparsable
    text: str  # lower-cased search blob
    tags: tuple[str, ...]

    @property
    def id(self) -> str:
        return self.anecdote.id

    @property
    def year(self) -> int:
        return self.anecdote.year

    @property
    def storyteller(self) -> str:
        return self.anecdote.storyteller

    @property
    def location(self) -> str:
        return self.anecdote.location


# --- Engine configuration records ---


class Recipe(BaseModel):
    """A named cut: style + selection mode + thematic focus."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    style: StorylineStyle
    mode: SelectionMode
    focus_tags: list[str] = Field(default_factory=list)
    focus_keywords: list[str] = Field(default_factory=list)


# --- Output models ---


class ScoreBreakdown(BaseModel):
    """Why one candidate was accepted after another."""
    model_config = ConfigDict(frozen=True)

    total: float
    shared_tag_score: float
    storyteller_score: float
    location_score: float
    chronology_score: float
    recency_score: float
    theme_score: float
    usage_penalty: float
    mode_penalty: float
    storyteller_streak: int
    shared_tags: list[str]
    previous_anecdote_id: str
    candidate_anecdote_id: str


class StorylineConnection(BaseModel):
    type: ConnectionType
    label: str


class StorylineBeat(BaseModel):
    id: str
    anecdote: Anecdote
    summary: str
    voiceover: str
    connection: StorylineConnection | None = None
    intensity: int = Field(ge=1, le=5)
    debug: ScoreBreakdown | None = None


class Timeframe(BaseModel):
    start: str
    end: str
    years: list[int]


class Storyline(BaseModel):
    id: str
    title: str
    description: str
    style: StorylineStyle
    tone: str
    opening_line: str
    closing_line: str
    beats: list[StorylineBeat]
    tags: list[str]
    timeframe: Timeframe
