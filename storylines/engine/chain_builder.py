"""Greedy chain construction — one ordered chain of items per recipe."""

import logging
import math
from collections import Counter
from dataclasses import dataclass, field

from storylines.config import ScoringWeights
from storylines.engine.normalize import chronological_order
from storylines.engine.scoring import DEFAULT_WEIGHTS, score_candidate, start_score
from storylines.engine.tag_weights import TagWeights
from storylines.models import NormalizedItem, Recipe, ScoreBreakdown, SelectionMode

logger = logging.getLogger(__name__)


@dataclass
class ChainResult:
    """Items in chain order plus the breakdown that admitted each non-start item."""

    items: list[NormalizedItem] = field(default_factory=list)
    breakdowns: dict[str, ScoreBreakdown] = field(default_factory=dict)

    @property
    def ids(self) -> list[str]:
        return [item.id for item in self.items]

    @property
    def signature(self) -> str:
        return "-".join(self.ids)

    def __len__(self) -> int:
        return len(self.items)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def target_length_for(
    item_count: int, ratio: float = 0.45, minimum: int = 4, maximum: int = 8,
) -> int:
    """Chain length goal: a share of the corpus, clamped to [minimum, maximum]."""
    return min(maximum, max(minimum, round_half_up(item_count * ratio)))


def storyteller_streak(chain: list[NormalizedItem]) -> int:
    """Same-storyteller links ending at the last item: [A] -> 0, [A, A] -> 1."""
    if not chain:
        return 0
    teller = chain[-1].storyteller
    streak = 0
    for item in reversed(chain[:-1]):
        if item.storyteller != teller:
            break
        streak += 1
    return streak


def pick_start(
    ordered: list[NormalizedItem],
    recipe: Recipe,
    usage: Counter[str],
    tag_weights: TagWeights,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> NormalizedItem | None:
    if not ordered:
        return None
    if recipe.mode is SelectionMode.CHRONOLOGICAL:
        return ordered[0]

    best: NormalizedItem | None = None
    best_score = -math.inf
    for item in ordered:
        score = start_score(item, recipe, usage, tag_weights, weights)
        if score > best_score:
            best_score = score
            best = item
    return best or ordered[0]


def _fallback_pick(
    ordered: list[NormalizedItem], used: set[str], current: NormalizedItem,
) -> NormalizedItem | None:
    unused = [item for item in ordered if item.id not in used]
    for item in unused:
        if item.timestamp >= current.timestamp:
            return item
    return unused[0] if unused else None


def build_chain(
    items: list[NormalizedItem],
    recipe: Recipe,
    target_length: int,
    usage: Counter[str],
    tag_weights: TagWeights,
    weights: ScoringWeights | None = None,
) -> ChainResult:
    """Grow a chain greedily from the recipe's start item.

    Each step takes the highest-scoring unused candidate (first one wins a
    tie). When nothing scores at least zero, the next unused item in time
    is taken instead. usage is read, never written.
    """
    w = weights or DEFAULT_WEIGHTS
    result = ChainResult()
    ordered = chronological_order(items)

    current = pick_start(ordered, recipe, usage, tag_weights, w)
    if current is None:
        return result

    result.items.append(current)
    used = {current.id}

    while len(result.items) < target_length and len(used) < len(ordered):
        streak = storyteller_streak(result.items)
        best: NormalizedItem | None = None
        best_breakdown: ScoreBreakdown | None = None

        for candidate in ordered:
            if candidate.id in used:
                continue
            breakdown = score_candidate(current, candidate, recipe, usage, tag_weights, streak, w)
            if best_breakdown is None or breakdown.total > best_breakdown.total:
                best = candidate
                best_breakdown = breakdown

        if best is None or best_breakdown is None or best_breakdown.total < 0:
            fallback = _fallback_pick(ordered, used, current)
            if fallback is None:
                break
            logger.debug(
                "%s: no non-negative candidate after %s, falling back to %s",
                recipe.id, current.id, fallback.id,
            )
            best = fallback
            best_breakdown = score_candidate(current, best, recipe, usage, tag_weights, streak, w)

        result.items.append(best)
        result.breakdowns[best.id] = best_breakdown
        used.add(best.id)
        current = best

    return result
