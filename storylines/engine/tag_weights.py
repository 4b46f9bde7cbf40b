"""Inverse-document-frequency weights for anecdote tags."""

import math
from collections import Counter

from storylines.models import NormalizedItem

TagWeights = dict[str, float]


def compute_tag_weights(items: list[NormalizedItem]) -> TagWeights:
    """Weight each tag by ln((N+1)/(df+1)) + 1, rounded to 3 decimals.

    A tag present on every item gets exactly 1.0; rarer tags get more.
    """
    total = len(items)
    doc_freq: Counter[str] = Counter()
    for item in items:
        doc_freq.update(set(item.tags))

    return {
        tag: round(math.log((total + 1) / (df + 1)) + 1, 3)
        for tag, df in doc_freq.items()
    }


def tag_weight(weights: TagWeights, tag: str) -> float:
    return weights.get(tag, 1.0)


def top_tags(items: list[NormalizedItem], limit: int = 6) -> list[str]:
    """Most frequent tags, ties kept in first-seen order."""
    counts: dict[str, int] = {}
    for item in items:
        for tag in item.tags:
            counts[tag] = counts.get(tag, 0) + 1
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    return [tag for tag, _ in ranked[:limit]]
