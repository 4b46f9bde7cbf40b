"""Storyline assembly — runs the recipe catalog over one anecdote set."""

import logging
from collections import Counter
from collections.abc import Iterable

from storylines.config import EngineConfig
from storylines.engine.chain_builder import build_chain, target_length_for
from storylines.engine.normalize import normalize_anecdotes
from storylines.engine.recipes import build_recipe_catalog, fallback_recipe
from storylines.engine.renderer import render_storyline
from storylines.engine.tag_weights import compute_tag_weights, top_tags
from storylines.models import Anecdote, Storyline

logger = logging.getLogger(__name__)


def generate_storylines(
    anecdotes: Iterable[Anecdote],
    config: EngineConfig | None = None,
) -> list[Storyline]:
    """Build every distinct storyline the catalog yields for these anecdotes.

    Recipes run in catalog order against one shared usage counter, so items
    used by earlier storylines are penalized in later ones. Chains shorter
    than config.min_beats and chains identical to an earlier one are dropped.
    If nothing survives, a single generic chronological storyline is
    emitted instead. Empty input gives an empty list.
    """
    config = config or EngineConfig()
    items = normalize_anecdotes(anecdotes)
    if not items:
        return []

    weights = config.scoring
    tag_weights = compute_tag_weights(items)
    focus = top_tags(items, config.top_tag_limit)
    recipes = build_recipe_catalog(focus, include_community=config.include_community_cut)
    target = target_length_for(len(items), config.length_ratio, config.min_length, config.max_length)

    usage: Counter[str] = Counter()
    signatures: set[str] = set()
    storylines: list[Storyline] = []

    for recipe in recipes:
        chain = build_chain(items, recipe, target, usage, tag_weights, weights)
        if len(chain) < config.min_beats:
            logger.debug("Discarding %s: chain of %d below minimum %d", recipe.id, len(chain), config.min_beats)
            continue
        if chain.signature in signatures:
            logger.debug("Skipping %s: duplicate chain %s", recipe.id, chain.signature)
            continue

        storylines.append(render_storyline(
            recipe, chain.items, chain.breakdowns,
            config.summary_chars, config.voiceover_summary_chars,
        ))
        signatures.add(chain.signature)
        usage.update(chain.ids)
        logger.debug("Built %s: %s", recipe.id, chain.signature)

    if not storylines:
        recipe = fallback_recipe(focus)
        chain = build_chain(
            items, recipe, min(config.fallback_max_length, len(items)), usage, tag_weights, weights,
        )
        if chain.items:
            logger.debug("No catalog storyline survived, using fallback %s", recipe.id)
            storylines.append(render_storyline(
                recipe, chain.items, chain.breakdowns,
                config.summary_chars, config.voiceover_summary_chars,
            ))

    logger.info("Generated %d storylines from %d anecdotes", len(storylines), len(items))
    return storylines


def storylines_signature(storylines: list[Storyline]) -> str:
    """Change signature over the displayed content of a storyline list."""
    parts: list[str] = []
    for line in storylines:
        beats = ",".join(
            "~".join([
                beat.id,
                beat.anecdote.id,
                beat.summary,
                beat.voiceover,
                str(beat.intensity),
                beat.connection.type.value if beat.connection else "",
                beat.connection.label if beat.connection else "",
            ])
            for beat in line.beats
        )
        parts.append(":".join([line.id, line.title, line.opening_line, line.closing_line, beats]))
    return "|".join(parts)
