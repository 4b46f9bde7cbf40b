"""Fixed catalog of storyline cuts and their vocabularies."""

from storylines.models import Recipe, SelectionMode, StorylineStyle

NIGHTLIFE_TAGS = ["dj", "dance", "club", "night", "party", "show", "venue", "live"]
NIGHTLIFE_KEYWORDS = [
    "dj", "dance", "club", "night", "party", "show", "stage", "crowd", "set",
    "bass", "dancefloor", "venue", "afterparty",
]
IMPACT_KEYWORDS = [
    "first", "sold out", "breakthrough", "headline", "festival", "tour", "radio",
    "award", "viral", "mainstream", "debut", "record", "packed", "historic",
]
COMMUNITY_KEYWORDS = [
    "community", "diaspora", "collective", "organizer", "student", "campus",
    "family", "roots", "culture", "heritage", "immigrant", "neighbors",
]

# Tags that mark an anecdote as a high-impact moment on their own.
IMPACT_TAGS = ["milestone", "concert", "festival"]

STYLE_TONE: dict[StorylineStyle, str] = {
    StorylineStyle.FIFTY_CENT: "Gritty, first-person energy with swagger",
    StorylineStyle.JESSE: "Measured, human-centered reporting with reflective edges (Jesse Washington cut)",
    StorylineStyle.COOGLER: "Cinematic, character-driven with emotional build and hope",
    StorylineStyle.HYBRID: "Cinematic with journalistic edge",
}


def _union(*groups: list[str]) -> list[str]:
    return list(dict.fromkeys(tag for group in groups for tag in group))


def build_recipe_catalog(top_tags: list[str], include_community: bool = False) -> list[Recipe]:
    """Build the ordered recipe list for one run.

    Order matters: usage penalties accumulate across recipes, so later cuts
    lean toward material the earlier ones did not use.
    """
    recipes = [
        Recipe(
            id="chronicle",
            title="Origins to Spotlight",
            description="A straight-line rise from the first rooms to the biggest stages.",
            style=StorylineStyle.JESSE,
            mode=SelectionMode.CHRONOLOGICAL,
            focus_tags=list(top_tags),
            focus_keywords=[],
        ),
        Recipe(
            id="nightlife",
            title="Nightlife Pulse",
            description="The late-night circuit that kept the rhythm alive.",
            style=StorylineStyle.FIFTY_CENT,
            mode=SelectionMode.TAG,
            focus_tags=_union(NIGHTLIFE_TAGS, top_tags),
            focus_keywords=list(NIGHTLIFE_KEYWORDS),
        ),
        Recipe(
            id="breakthrough",
            title="Breakthrough Moments",
            description="When the scene broke past its borders and stayed there.",
            style=StorylineStyle.HYBRID,
            mode=SelectionMode.IMPACT,
            focus_tags=list(top_tags),
            focus_keywords=list(IMPACT_KEYWORDS),
        ),
    ]
    if include_community:
        recipes.append(Recipe(
            id="community",
            title="Community Roots",
            description="The people, spaces, and diaspora that nurtured the sound.",
            style=StorylineStyle.JESSE,
            mode=SelectionMode.COMMUNITY,
            focus_tags=list(top_tags),
            focus_keywords=list(COMMUNITY_KEYWORDS),
        ))
    recipes.append(Recipe(
        id="cinematic",
        title="Heat & Hope",
        description="A cinematic rise shaped by grit, joy, and the people who held it together.",
        style=StorylineStyle.COOGLER,
        mode=SelectionMode.IMPACT,
        focus_tags=list(top_tags),
        focus_keywords=_union(IMPACT_KEYWORDS, COMMUNITY_KEYWORDS),
    ))
    return recipes


def fallback_recipe(top_tags: list[str]) -> Recipe:
    """Generic chronological cut used when no catalog recipe yields a storyline."""
    return Recipe(
        id="core",
        title="The Core Story",
        description="A quick-cut run through the key memories so far.",
        style=StorylineStyle.HYBRID,
        mode=SelectionMode.CHRONOLOGICAL,
        focus_tags=list(top_tags),
        focus_keywords=[],
    )
