"""Pairwise candidate scoring for chain building.

Every term is computed independently and kept in a ScoreBreakdown so the
UI can explain why a beat follows the one before it. Modes are a closed
set, so the mode-specific terms are plain branches on SelectionMode.
"""

import re
from collections import Counter
from functools import lru_cache

from storylines.config import ScoringWeights
from storylines.engine.recipes import IMPACT_KEYWORDS, IMPACT_TAGS
from storylines.engine.tag_weights import TagWeights, tag_weight
from storylines.models import NormalizedItem, Recipe, ScoreBreakdown, SelectionMode

YEAR_SECONDS = 60 * 60 * 24 * 365

DEFAULT_WEIGHTS = ScoringWeights()


@lru_cache(maxsize=512)
def _word_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(keyword)}\b")


def keyword_hits(text: str, keyword: str, cap: int) -> int:
    """Occurrences of keyword in text, capped.

    Single words match on word boundaries; multi-word phrases match as
    plain substrings.
    """
    keyword = keyword.lower().strip()
    if not keyword:
        return 0
    if " " in keyword:
        found = text.count(keyword)
    else:
        found = len(_word_pattern(keyword).findall(text))
    return min(found, cap)


def count_keyword_matches(text: str, keywords: list[str], cap: int) -> int:
    return sum(keyword_hits(text, kw, cap) for kw in keywords)


def shared_tags(a: NormalizedItem, b: NormalizedItem) -> list[str]:
    """Tags on both items, in a's tag order."""
    other = set(b.tags)
    return [tag for tag in a.tags if tag in other]


def impact_score(item: NormalizedItem) -> float:
    score = sum(1 for kw in IMPACT_KEYWORDS if keyword_hits(item.text, kw, 1))
    score += sum(2 for tag in IMPACT_TAGS if tag in item.tags)
    if "sold out" in item.text:
        score += 2
    return float(score)


def theme_score(
    item: NormalizedItem,
    recipe: Recipe,
    tag_weights: TagWeights,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> float:
    """Affinity of an item to a recipe's focus, independent of any predecessor."""
    item_tags = set(item.tags)
    focus_weight = sum(
        tag_weight(tag_weights, tag) for tag in dict.fromkeys(recipe.focus_tags) if tag in item_tags
    )
    score = focus_weight * weights.focus_tag
    score += count_keyword_matches(item.text, recipe.focus_keywords, weights.keyword_cap) * weights.focus_keyword
    if recipe.mode is SelectionMode.IMPACT:
        score += impact_score(item) * weights.impact
    return score


def start_score(
    item: NormalizedItem,
    recipe: Recipe,
    usage: Counter[str],
    tag_weights: TagWeights,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> float:
    """Standalone opening score used to pick the first beat of non-chronological cuts."""
    return (
        theme_score(item, recipe, tag_weights, weights)
        + impact_score(item) * weights.start_impact
        - usage[item.id] * weights.start_usage
    )


def _storyteller_score(
    prev: NormalizedItem, candidate: NormalizedItem, streak: int, weights: ScoringWeights,
) -> float:
    if prev.storyteller == candidate.storyteller:
        return max(weights.storyteller_floor, weights.storyteller_base - streak * weights.storyteller_decay)
    if streak >= weights.variety_min_streak:
        return weights.storyteller_variety
    return 0.0


def _recency_score(prev: NormalizedItem, candidate: NormalizedItem, weights: ScoringWeights) -> float:
    gap_years = abs(candidate.timestamp - prev.timestamp) / YEAR_SECONDS
    score = 0.0
    if gap_years <= weights.recency_near_years:
        score += weights.recency_near
    if gap_years <= weights.recency_far_years:
        score += weights.recency_far
    return score


def score_candidate(
    prev: NormalizedItem,
    candidate: NormalizedItem,
    recipe: Recipe,
    usage: Counter[str],
    tag_weights: TagWeights,
    storyteller_streak: int,
    weights: ScoringWeights | None = None,
) -> ScoreBreakdown:
    """Score candidate as the beat after prev."""
    w = weights or DEFAULT_WEIGHTS

    shared = shared_tags(prev, candidate)
    shared_score = len(shared) * w.shared_tag
    storyteller = _storyteller_score(prev, candidate, storyteller_streak, w)
    location = w.location if prev.location and prev.location == candidate.location else 0.0
    # nan timestamps fail every comparison below, so they score no chronology terms
    chronology = w.chronology if candidate.timestamp >= prev.timestamp else 0.0
    recency = _recency_score(prev, candidate, w)
    theme = theme_score(candidate, recipe, tag_weights, w)
    usage_penalty = usage[candidate.id] * w.usage

    mode_penalty = 0.0
    if recipe.mode is SelectionMode.CHRONOLOGICAL and candidate.timestamp < prev.timestamp:
        mode_penalty = w.backtrack

    total = (
        shared_score + storyteller + location + chronology + recency + theme
        - usage_penalty - mode_penalty
    )
    return ScoreBreakdown(
        total=total,
        shared_tag_score=shared_score,
        storyteller_score=storyteller,
        location_score=location,
        chronology_score=chronology,
        recency_score=recency,
        theme_score=theme,
        usage_penalty=usage_penalty,
        mode_penalty=mode_penalty,
        storyteller_streak=storyteller_streak,
        shared_tags=shared,
        previous_anecdote_id=prev.id,
        candidate_anecdote_id=candidate.id,
    )
