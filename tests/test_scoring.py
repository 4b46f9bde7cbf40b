"""Tests for the pairwise scorer and its building blocks."""

from collections import Counter

import pytest

from storylines.config import ScoringWeights
from storylines.engine.scoring import (
    impact_score,
    keyword_hits,
    score_candidate,
    shared_tags,
    start_score,
    theme_score,
)
from storylines.models import Recipe, SelectionMode, StorylineStyle

from helpers import make_item


def _recipe(mode=SelectionMode.TAG, focus_tags=None, focus_keywords=None) -> Recipe:
    return Recipe(
        id="test",
        title="Test",
        description="",
        style=StorylineStyle.HYBRID,
        mode=mode,
        focus_tags=focus_tags or [],
        focus_keywords=focus_keywords or [],
    )


class TestMatchingPair:
    """Two anecdotes with identical tags, same storyteller, one day apart."""

    @pytest.fixture()
    def pair(self):
        prev = make_item("p", "2010-05-01", storyteller="Ama", location="Neumos", tags=["dj", "club"])
        cand = make_item("c", "2010-05-02", storyteller="Ama", location="Neumos", tags=["dj", "club"])
        return prev, cand

    def test_components(self, pair):
        prev, cand = pair
        b = score_candidate(prev, cand, _recipe(), Counter(), {}, 0)
        assert b.shared_tag_score == pytest.approx(2.4 * 2)
        assert b.storyteller_score == pytest.approx(3.0)
        assert b.location_score == pytest.approx(1.75)
        assert b.chronology_score == pytest.approx(2.4)
        assert b.recency_score == pytest.approx(1.65)
        assert b.theme_score == 0
        assert b.usage_penalty == 0
        assert b.mode_penalty == 0
        assert b.total == pytest.approx(4.8 + 3.0 + 1.75 + 2.4 + 1.65)

    def test_identity_fields(self, pair):
        prev, cand = pair
        b = score_candidate(prev, cand, _recipe(), Counter(), {}, 0)
        assert b.previous_anecdote_id == "p"
        assert b.candidate_anecdote_id == "c"
        assert b.shared_tags == ["dj", "club"]
        assert b.storyteller_streak == 0

    def test_location_mismatch(self):
        prev = make_item("p", "2010-05-01", location="Neumos")
        cand = make_item("c", "2010-05-02", location="Chop Suey")
        assert score_candidate(prev, cand, _recipe(), Counter(), {}, 0).location_score == 0

    def test_empty_locations_do_not_match(self):
        prev = make_item("p", "2010-05-01", location="")
        cand = make_item("c", "2010-05-02", location="")
        assert score_candidate(prev, cand, _recipe(), Counter(), {}, 0).location_score == 0


class TestStorytellerContinuity:
    def test_same_teller_decays_with_streak(self):
        prev = make_item("p", "2010-01-01", storyteller="Ama")
        cand = make_item("c", "2010-01-02", storyteller="Ama")
        assert score_candidate(prev, cand, _recipe(), Counter(), {}, 1).storyteller_score == pytest.approx(1.65)

    def test_same_teller_floor(self):
        prev = make_item("p", "2010-01-01", storyteller="Ama")
        cand = make_item("c", "2010-01-02", storyteller="Ama")
        assert score_candidate(prev, cand, _recipe(), Counter(), {}, 2).storyteller_score == pytest.approx(0.8)
        assert score_candidate(prev, cand, _recipe(), Counter(), {}, 5).storyteller_score == pytest.approx(0.8)

    def test_breaking_a_run_earns_variety_bonus(self):
        prev = make_item("p", "2010-01-01", storyteller="Ama")
        cand = make_item("c", "2010-01-02", storyteller="Kofi")
        assert score_candidate(prev, cand, _recipe(), Counter(), {}, 2).storyteller_score == pytest.approx(1.2)

    def test_short_run_no_bonus(self):
        prev = make_item("p", "2010-01-01", storyteller="Ama")
        cand = make_item("c", "2010-01-02", storyteller="Kofi")
        assert score_candidate(prev, cand, _recipe(), Counter(), {}, 1).storyteller_score == 0


class TestChronology:
    def test_backtrack_penalized_in_chronological_mode(self):
        prev = make_item("p", "2012-01-01")
        cand = make_item("c", "2008-01-01")
        b = score_candidate(prev, cand, _recipe(SelectionMode.CHRONOLOGICAL), Counter(), {}, 0)
        assert b.chronology_score == 0
        assert b.mode_penalty == pytest.approx(4.5)

    @pytest.mark.parametrize("mode", [SelectionMode.TAG, SelectionMode.IMPACT, SelectionMode.COMMUNITY])
    def test_backtrack_not_penalized_in_other_modes(self, mode):
        prev = make_item("p", "2012-01-01")
        cand = make_item("c", "2008-01-01")
        b = score_candidate(prev, cand, _recipe(mode), Counter(), {}, 0)
        assert b.chronology_score == 0
        assert b.mode_penalty == 0

    @pytest.mark.parametrize("mode", list(SelectionMode))
    def test_forward_rewarded_in_every_mode(self, mode):
        prev = make_item("p", "2008-01-01")
        cand = make_item("c", "2012-01-01")
        assert score_candidate(prev, cand, _recipe(mode), Counter(), {}, 0).chronology_score == pytest.approx(2.4)

    def test_same_timestamp_counts_as_forward(self):
        prev = make_item("p", "2008-01-01")
        cand = make_item("c", "2008-01-01")
        assert score_candidate(prev, cand, _recipe(), Counter(), {}, 0).chronology_score == pytest.approx(2.4)

    def test_recency_within_three_years(self):
        prev = make_item("p", "2010-01-01")
        cand = make_item("c", "2012-01-01")
        assert score_candidate(prev, cand, _recipe(), Counter(), {}, 0).recency_score == pytest.approx(0.4)

    def test_recency_far_apart(self):
        prev = make_item("p", "2010-01-01")
        cand = make_item("c", "2016-01-01")
        assert score_candidate(prev, cand, _recipe(), Counter(), {}, 0).recency_score == 0

    def test_recency_is_symmetric(self):
        prev = make_item("p", "2012-01-01")
        cand = make_item("c", "2011-06-01")
        assert score_candidate(prev, cand, _recipe(), Counter(), {}, 0).recency_score == pytest.approx(1.65)

    def test_unparsable_date_loses_chronology_terms(self):
        prev = make_item("p", "2010-01-01")
        cand = make_item("c", "whenever")
        b = score_candidate(prev, cand, _recipe(SelectionMode.CHRONOLOGICAL), Counter(), {}, 0)
        assert b.chronology_score == 0
        assert b.recency_score == 0
        assert b.mode_penalty == 0


class TestPenalties:
    def test_usage_penalty(self):
        prev = make_item("p", "2010-01-01")
        cand = make_item("c", "2010-01-02")
        b = score_candidate(prev, cand, _recipe(), Counter({"c": 2}), {}, 0)
        assert b.usage_penalty == pytest.approx(2.2)

    def test_total_subtracts_penalties(self):
        prev = make_item("p", "2012-01-01")
        cand = make_item("c", "2000-01-01")
        b = score_candidate(prev, cand, _recipe(SelectionMode.CHRONOLOGICAL), Counter({"c": 1}), {}, 0)
        assert b.total == pytest.approx(-1.1 - 4.5)

    def test_custom_weights(self):
        prev = make_item("p", "2010-01-01", tags=["dj"])
        cand = make_item("c", "2010-01-02", tags=["dj"])
        weights = ScoringWeights(shared_tag=10.0)
        b = score_candidate(prev, cand, _recipe(), Counter(), {}, 0, weights)
        assert b.shared_tag_score == pytest.approx(10.0)


class TestKeywordHits:
    def test_whole_word_only(self):
        assert keyword_hits("the djs played a sunset set", "dj", 3) == 0
        assert keyword_hits("the djs played a sunset set", "set", 3) == 1

    def test_capped(self):
        assert keyword_hits("dj dj dj dj dj", "dj", 3) == 3

    def test_multi_word_substring(self):
        assert keyword_hits("it was sold out, sold out again", "sold out", 3) == 2

    def test_blank_keyword(self):
        assert keyword_hits("anything", "  ", 3) == 0


class TestThemeAndImpact:
    def test_shared_tags_in_prev_order(self):
        a = make_item("a", "2010-01-01", tags=["club", "dj", "radio"])
        b = make_item("b", "2010-01-01", tags=["radio", "club"])
        assert shared_tags(a, b) == ["club", "radio"]

    def test_focus_tags_weighted(self):
        item = make_item("x", "2010-01-01", tags=["radio", "award"])
        recipe = _recipe(focus_tags=["radio", "polka"])
        assert theme_score(item, recipe, {"radio": 2.099}) == pytest.approx(2.099 * 2.9)

    def test_focus_keywords_counted(self):
        item = make_item("x", "2010-01-01", title="DJ DJ DJ DJ", storyteller="Ama")
        recipe = _recipe(focus_keywords=["dj", "club"])
        assert theme_score(item, recipe, {}) == pytest.approx(3 * 1.6)

    def test_impact_vocabulary(self):
        item = make_item("x", "2010-01-01", title="Radio award", storyteller="Ama")
        assert impact_score(item) == 2

    def test_impact_tags_and_sold_out(self):
        item = make_item(
            "x", "2010-01-01", title="Sold out", storyteller="Ama", tags=["milestone", "concert"],
        )
        # "sold out" keyword (1) + milestone (2) + concert (2) + sold-out bonus (2)
        assert impact_score(item) == 7

    def test_impact_mode_adds_impact(self):
        item = make_item("x", "2010-01-01", title="Radio award", storyteller="Ama")
        assert theme_score(item, _recipe(SelectionMode.IMPACT), {}) == pytest.approx(2 * 1.2)
        assert theme_score(item, _recipe(SelectionMode.TAG), {}) == 0

    def test_start_score_penalizes_usage(self):
        item = make_item("x", "2010-01-01", title="Radio award", storyteller="Ama")
        recipe = _recipe(SelectionMode.IMPACT)
        fresh = start_score(item, recipe, Counter(), {})
        reused = start_score(item, recipe, Counter({"x": 1}), {})
        assert fresh == pytest.approx(2 * 1.2 + 2 * 0.5)
        assert fresh - reused == pytest.approx(1.4)
