"""Configuration loading for the storyline engine."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class ScoringWeights(BaseModel):
    """Weights used by the pairwise scorer and start picker."""
    shared_tag: float = 2.4
    storyteller_base: float = 3.0
    storyteller_decay: float = 1.35
    storyteller_floor: float = 0.8
    storyteller_variety: float = 1.2
    variety_min_streak: int = 2
    location: float = 1.75
    chronology: float = 2.4
    recency_near: float = 1.25
    recency_near_years: float = 1.0
    recency_far: float = 0.4
    recency_far_years: float = 3.0
    focus_tag: float = 2.9
    focus_keyword: float = 1.6
    keyword_cap: int = 3
    impact: float = 1.2
    usage: float = 1.1
    backtrack: float = 4.5
    start_impact: float = 0.5
    start_usage: float = 1.4


class EngineConfig(BaseModel):
    length_ratio: float = 0.45
    min_length: int = 4
    max_length: int = 8
    min_beats: int = 3
    fallback_max_length: int = 6
    top_tag_limit: int = 6
    summary_chars: int = 140
    voiceover_summary_chars: int = 120
    include_community_cut: bool = False
    scoring: ScoringWeights = Field(default_factory=ScoringWeights)


class Config(BaseModel):
    db_path: str = "data/storylines.db"
    html_path: str = "data/storylines.html"
    engine: EngineConfig = Field(default_factory=EngineConfig)

    @property
    def resolved_db_path(self) -> Path:
        """Resolve db_path relative to project root."""
        p = Path(self.db_path)
        if p.is_absolute():
            return p
        return _project_root() / p

    @property
    def resolved_html_path(self) -> Path:
        p = Path(self.html_path).expanduser()
        if p.is_absolute():
            return p
        return _project_root() / p


def _project_root() -> Path:
    """Return the storylines project root directory."""
    return Path(__file__).parent.parent


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML file. Falls back to defaults if file missing."""
    if config_path is None:
        config_path = _project_root() / "config.yaml"

    if config_path.exists():
        raw: dict[str, Any] = yaml.safe_load(config_path.read_text()) or {}
        return Config(**raw)

    return Config()
