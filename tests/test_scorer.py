"""
Quality Scorer Tests

Signal formulas, grade boundaries, the composite and its passing rule,
recommendations, interpretation and the optional thread-pool fan-out.
"""

from __future__ import annotations

import pytest

from querygate import scorer
from querygate.config import Settings
from querygate.gibberish import GibberishResult
from querygate.scorer import (
    GRADES,
    MAX_RECOMMENDATIONS,
    NEGATIVE_INDICATOR_PENALTY,
    PASSING_THRESHOLD,
    SCORE_WEIGHTS,
    complexity_signal,
    gibberish_signal,
    grade_for,
    interpret,
    keyword_signal,
    length_signal,
    score,
)
from querygate.keywords import match

GOOD_QUERY = (
    "Create a modern responsive dashboard with a sidebar navigation, "
    "user profile section, and data visualization charts"
)


# ============================================================
# SIGNALS
# ============================================================

class TestWeights:

    def test_sum_to_one(self):
        assert sum(SCORE_WEIGHTS.values()) == pytest.approx(1.0)

    def test_gibberish_weighted_heaviest(self):
        assert max(SCORE_WEIGHTS, key=SCORE_WEIGHTS.get) == "gibberish"


class TestGibberishSignal:

    def test_clean_scores_one(self):
        assert gibberish_signal(GibberishResult(False, 0.0, "valid")) == 1.0

    def test_inverted_confidence(self):
        assert gibberish_signal(GibberishResult(True, 0.9, "repeated_characters")) == pytest.approx(0.1)

    def test_empty_input_scores_zero(self):
        assert gibberish_signal(GibberishResult(True, 1.0, "empty_input")) == 0.0


class TestKeywordSignal:

    def test_diversity_bonus_is_capped(self):
        result = match(GOOD_QUERY)
        assert result.matched_categories == 5
        assert keyword_signal(result) == pytest.approx(min(result.relevance_score + 0.3, 1.0))

    def test_negative_penalty_floors_at_zero(self):
        assert keyword_signal(match("test test test debug broken")) == 0.0

    def test_nothing_matched(self):
        assert keyword_signal(match("hello there buddy")) == 0.0


class TestLengthSignal:

    @pytest.mark.parametrize("length,expected", [
        (0, 0.2), (9, 0.2), (10, 0.5), (19, 0.5), (20, 1.0), (200, 1.0),
        (201, 0.8), (500, 0.8), (501, 0.4),
    ])
    def test_bands(self, length, expected):
        assert length_signal("x" * length) == expected

    def test_uses_trimmed_length(self):
        assert length_signal("   " + "x" * 9 + "   ") == 0.2


class TestComplexitySignal:

    def test_empty(self):
        assert complexity_signal("") == 0.0

    def test_saturates(self):
        text = " ".join(["word"] * 20) + ", a, b."
        assert complexity_signal(text) == pytest.approx(1.0)

    def test_partial(self):
        # 5/20 words, 5/15 per sentence, no punctuation
        assert complexity_signal("one two three four five") == pytest.approx((0.25 + 1 / 3) / 3)


class TestGrades:

    @pytest.mark.parametrize("value,grade", [
        (1.0, "A+"), (0.9, "A+"), (0.8999, "A"), (0.8, "A"), (0.7, "B+"),
        (0.6, "B"), (0.5, "C+"), (0.4, "C"), (0.3999, "D+"), (0.2, "D"),
        (0.1999, "F"), (0.0, "F"),
    ])
    def test_boundaries(self, value, grade):
        assert grade_for(value) == grade

    def test_monotonic(self):
        ranks = {g: i for i, g in enumerate(GRADES)}
        values = [i / 100 for i in range(101)]
        observed = [ranks[grade_for(v)] for v in values]
        assert observed == sorted(observed, reverse=True)


# ============================================================
# COMPOSITE
# ============================================================

class TestScore:

    def test_good_query_passes(self):
        quality = score(GOOD_QUERY)
        assert quality.overall.is_passing is True
        assert quality.overall.score >= PASSING_THRESHOLD
        assert quality.overall.grade in ("B", "B+", "A", "A+")
        assert quality.overall.penalty == 0.0
        assert quality.details.patterns.structure.type == "imperative"

    @pytest.mark.parametrize("query", ["", "   "])
    def test_empty_query(self, query):
        quality = score(query)
        assert quality.overall.score == pytest.approx(0.02)
        assert quality.overall.grade == "F"
        assert quality.overall.is_passing is False

    def test_negative_vocabulary_fails(self):
        quality = score("test test test debug broken")
        assert quality.details.gibberish.is_gibberish is False
        assert quality.overall.penalty == NEGATIVE_INDICATOR_PENALTY
        assert quality.overall.score < PASSING_THRESHOLD
        assert quality.overall.is_passing is False

    def test_gibberish_never_passes(self):
        quality = score("asdfgh asdfgh asdfgh jkl")
        assert quality.details.gibberish.is_gibberish is True
        assert quality.overall.is_passing is False

    def test_composite_is_weighted_sum(self):
        quality = score(GOOD_QUERY)
        expected = sum(v * SCORE_WEIGHTS[k] for k, v in quality.breakdown.as_dict().items())
        assert quality.overall.score == pytest.approx(expected)

    def test_scores_in_range(self):
        for query in ["", "hi", GOOD_QUERY, "!!!!!!!!", "x" * 600]:
            quality = score(query)
            assert 0.0 <= quality.overall.score <= 1.0
            assert all(0.0 <= v <= 1.0 for v in quality.breakdown.as_dict().values())

    def test_deterministic(self):
        a, b = score(GOOD_QUERY), score(GOOD_QUERY)
        assert a.overall == b.overall
        assert a.breakdown == b.breakdown
        assert a.recommendations == b.recommendations

    def test_metadata(self):
        quality = score(GOOD_QUERY)
        assert quality.processing_time >= 0.0
        assert quality.timestamp.endswith("+00:00")

    def test_parallel_matches_sequential(self, monkeypatch):
        sequential = score(GOOD_QUERY)
        monkeypatch.setattr(scorer, "settings", Settings(PARALLEL_ANALYSIS=True))
        parallel = score(GOOD_QUERY)
        assert parallel.overall == sequential.overall
        assert parallel.breakdown == sequential.breakdown

    def test_to_dict(self):
        data = score(GOOD_QUERY).to_dict()
        assert set(data) == {
            "overall", "breakdown", "details", "recommendations", "processing_time", "timestamp",
        }
        assert set(data["breakdown"]) == set(SCORE_WEIGHTS)
        assert set(data["details"]) == {"gibberish", "keywords", "patterns"}


class TestRecommendations:

    def test_capped(self):
        for query in ["", "aaaaaaaaaa", "hi", "test test test debug broken"]:
            assert len(score(query).recommendations) <= MAX_RECOMMENDATIONS

    def test_repeated_characters_hint(self):
        recs = score("aaaaaaaaaa").recommendations
        assert recs[0] == "Please provide a meaningful query with clear intent"
        assert "Avoid repeating the same characters multiple times" in recs

    def test_keyboard_mashing_hint(self):
        recs = score("qwertyuiop").recommendations
        assert "Try typing a coherent sentence instead of random characters" in recs

    def test_short_query_asks_for_detail(self):
        recs = score("a page").recommendations
        assert any("UI/UX related terms" in r for r in recs)


# ============================================================
# INTERPRETATION
# ============================================================

class TestInterpret:

    def test_empty_query(self):
        reading = interpret(score(""))
        assert reading.summary == "Query appears to be invalid or nonsensical"
        assert "Input appears to be gibberish or nonsensical" in reading.weaknesses
        assert "Rewrite with clear, meaningful language" in reading.next_steps

    def test_passing_query(self):
        reading = interpret(score(GOOD_QUERY))
        assert "Clear, non-gibberish input" in reading.strengths
        assert "Appropriate query length" in reading.strengths
        assert reading.next_steps[0] == "Query is ready for processing"
        assert 0.0 <= reading.confidence <= 1.0

    def test_to_dict(self):
        data = interpret(score(GOOD_QUERY)).to_dict()
        assert set(data) == {"summary", "strengths", "weaknesses", "next_steps", "confidence"}
