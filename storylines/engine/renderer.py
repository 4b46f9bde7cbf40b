"""Narrative rendering — turns a finished chain into a Storyline."""

from storylines.engine.chain_builder import round_half_up
from storylines.engine.recipes import STYLE_TONE
from storylines.engine.scoring import impact_score, shared_tags
from storylines.models import (
    ConnectionType,
    NormalizedItem,
    Recipe,
    ScoreBreakdown,
    Storyline,
    StorylineBeat,
    StorylineConnection,
    StorylineStyle,
    Timeframe,
)

SUMMARY_CHARS = 140
VOICEOVER_SUMMARY_CHARS = 120


def truncate(text: str, max_len: int) -> str:
    """Shorten text to max_len, preferring a word boundary past char 40."""
    if len(text) <= max_len:
        return text
    trimmed = text[: max_len - 3]
    last_space = trimmed.rfind(" ")
    cut = last_space if last_space > 40 else len(trimmed)
    return f"{trimmed[:cut]}..."


def _at(location: str) -> str:
    return f" at {location}" if location else ""


def build_connection(prev: NormalizedItem, nxt: NormalizedItem) -> StorylineConnection:
    shared = shared_tags(prev, nxt)
    if shared:
        return StorylineConnection(type=ConnectionType.TAG, label=f"#{shared[0]}")
    if prev.storyteller == nxt.storyteller:
        return StorylineConnection(type=ConnectionType.STORYTELLER, label=prev.storyteller)
    if prev.location and prev.location == nxt.location:
        return StorylineConnection(type=ConnectionType.LOCATION, label=prev.location)
    return StorylineConnection(type=ConnectionType.CHRONOLOGY, label=f"{prev.year} to {nxt.year}")


def build_voiceover(
    style: StorylineStyle,
    item: NormalizedItem,
    index: int,
    total: int,
    summary_chars: int = VOICEOVER_SUMMARY_CHARS,
) -> str:
    a = item.anecdote
    summary = truncate(a.story, summary_chars)
    location = _at(a.location)
    first, last = index == 0, index == total - 1

    if style is StorylineStyle.FIFTY_CENT:
        if first:
            return f"Back in {a.year}{location}, it started with {a.title.lower()}."
        if last:
            return f"By {a.year}, {a.title} was proof the city had changed."
        return f"{a.title}{location}. {summary}"

    if style is StorylineStyle.JESSE:
        if first:
            return f"In {a.year}{location}, a quiet shift started to feel inevitable."
        if last:
            return f"By {a.year}, the story is no longer about a moment but a movement."
        return f"{a.storyteller} remembers {a.title.lower()}. {summary}"

    if style is StorylineStyle.COOGLER:
        if first:
            return f"In {a.year}{location}, a spark caught—small, personal, and loud."
        if last:
            return f"By {a.year}, the whole city could feel the change."
        return f"{a.title} carries the momentum. {summary}"

    if first:
        return f"Seattle didn't plan for this. {a.title} lit the fuse in {a.year}."
    if last:
        return f"The story keeps evolving after {a.year}."
    return f"{a.title}. {summary}"


def build_opening_line(style: StorylineStyle, first: NormalizedItem) -> str:
    location = _at(first.location)
    if style is StorylineStyle.FIFTY_CENT:
        return f"This is how the city started moving in {first.year}{location}."
    if style is StorylineStyle.JESSE:
        return f"A sound crossed oceans and settled into Seattle by {first.year}."
    if style is StorylineStyle.COOGLER:
        return f"In {first.year}{location}, a new rhythm found its people."
    return f"In {first.year}{location}, the timeline sparks."


def build_closing_line(style: StorylineStyle, last: NormalizedItem) -> str:
    if style is StorylineStyle.FIFTY_CENT:
        return "Now the rhythm is part of the city's DNA."
    if style is StorylineStyle.JESSE:
        return "The movement keeps writing its next chapter."
    if style is StorylineStyle.COOGLER:
        return "The story lands, but the music keeps moving."
    return f"The beat keeps moving after {last.year}."


def beat_intensity(item: NormalizedItem) -> int:
    return min(5, max(1, round_half_up(1 + impact_score(item) / 2)))


def render_storyline(
    recipe: Recipe,
    chain: list[NormalizedItem],
    breakdowns: dict[str, ScoreBreakdown] | None = None,
    summary_chars: int = SUMMARY_CHARS,
    voiceover_summary_chars: int = VOICEOVER_SUMMARY_CHARS,
) -> Storyline:
    """Render a non-empty chain into a Storyline."""
    breakdowns = breakdowns or {}
    total = len(chain)
    beats: list[StorylineBeat] = []
    for index, item in enumerate(chain):
        prev = chain[index - 1] if index > 0 else None
        beats.append(StorylineBeat(
            id=f"{recipe.id}-{index + 1}",
            anecdote=item.anecdote,
            summary=truncate(item.anecdote.story, summary_chars),
            voiceover=build_voiceover(recipe.style, item, index, total, voiceover_summary_chars),
            connection=build_connection(prev, item) if prev else None,
            intensity=beat_intensity(item),
            debug=breakdowns.get(item.id) if prev else None,
        ))

    tags = list(dict.fromkeys(tag for item in chain for tag in item.tags))
    years = sorted({item.year for item in chain})

    return Storyline(
        id=recipe.id,
        title=recipe.title,
        description=recipe.description,
        style=recipe.style,
        tone=STYLE_TONE[recipe.style],
        opening_line=build_opening_line(recipe.style, chain[0]),
        closing_line=build_closing_line(recipe.style, chain[-1]),
        beats=beats,
        tags=tags,
        timeframe=Timeframe(
            start=chain[0].anecdote.date,
            end=chain[-1].anecdote.date,
            years=years,
        ),
    )
