"""
Quality Scorer — Composite Query Score

Runs the three leaf analyses and blends five signals into a single
0-1 quality score with a letter grade:

  gibberish   inverted gibberish confidence (1.0 when clean)     x 0.30
  keywords    relevance + category diversity - negative penalty   x 0.25
  patterns    pattern analyzer overall score                      x 0.25
  length      piecewise on trimmed character count                x 0.10
  complexity  word count / sentence length / punctuation density  x 0.10

Queries carrying anti-pattern vocabulary (test, debug, ...) are
additionally docked NEGATIVE_INDICATOR_PENALTY on the composite.

Separated from validator.py for single-responsibility: this module
scores, the validator decides.
"""

from __future__ import annotations

import logging
import math
import re
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone

from querygate import gibberish, keywords, patterns
from querygate.config import settings
from querygate.gibberish import GibberishResult
from querygate.keywords import KeywordMatchResult
from querygate.patterns import PatternAnalysisResult

logger = logging.getLogger(__name__)


# ============================================================
# WEIGHTS AND THRESHOLDS
# ============================================================

SCORE_WEIGHTS = {
    "gibberish": 0.3,
    "keywords": 0.25,
    "patterns": 0.25,
    "length": 0.1,
    "complexity": 0.1,
}

PASSING_THRESHOLD = 0.4
NEGATIVE_INDICATOR_PENALTY = 0.1

DIVERSITY_BONUS_PER_CATEGORY = 0.1
DIVERSITY_BONUS_CAP = 0.3
NEGATIVE_KEYWORD_PENALTY = 0.5

# (upper bound on trimmed length, inclusive?, score)
LENGTH_BANDS = (
    (10, False, 0.2),
    (20, False, 0.5),
    (200, True, 1.0),
    (500, True, 0.8),
)
LENGTH_OVERFLOW_SCORE = 0.4

TARGET_WORDS = 20
TARGET_WORDS_PER_SENTENCE = 15
TARGET_PUNCTUATION = 3

GRADE_THRESHOLDS = (
    (0.9, "A+"),
    (0.8, "A"),
    (0.7, "B+"),
    (0.6, "B"),
    (0.5, "C+"),
    (0.4, "C"),
    (0.3, "D+"),
    (0.2, "D"),
)
GRADES = tuple(g for _, g in GRADE_THRESHOLDS) + ("F",)

MAX_RECOMMENDATIONS = 5
POSITIVE_THRESHOLD = 0.8


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass
class OverallScore:
    score: float
    grade: str
    is_passing: bool
    penalty: float = 0.0


@dataclass
class ScoreBreakdown:
    gibberish: float
    keywords: float
    patterns: float
    length: float
    complexity: float

    def as_dict(self) -> dict[str, float]:
        return {
            "gibberish": self.gibberish,
            "keywords": self.keywords,
            "patterns": self.patterns,
            "length": self.length,
            "complexity": self.complexity,
        }


@dataclass
class ScoreDetails:
    gibberish: GibberishResult
    keywords: KeywordMatchResult
    patterns: PatternAnalysisResult


@dataclass
class QualityScore:
    """Full scoring output for one query."""
    overall: OverallScore
    breakdown: ScoreBreakdown
    details: ScoreDetails
    recommendations: list[str]
    processing_time: float       # milliseconds
    timestamp: str               # ISO-8601 UTC

    def to_dict(self) -> dict:
        return {
            "overall": {
                "score": self.overall.score,
                "grade": self.overall.grade,
                "is_passing": self.overall.is_passing,
                "penalty": self.overall.penalty,
            },
            "breakdown": self.breakdown.as_dict(),
            "details": {
                "gibberish": self.details.gibberish.to_dict(),
                "keywords": self.details.keywords.to_dict(),
                "patterns": self.details.patterns.to_dict(),
            },
            "recommendations": list(self.recommendations),
            "processing_time": self.processing_time,
            "timestamp": self.timestamp,
        }


@dataclass
class ScoreInterpretation:
    summary: str
    strengths: list[str] = field(default_factory=list)
    weaknesses: list[str] = field(default_factory=list)
    next_steps: list[str] = field(default_factory=list)
    confidence: float = 0.0

    def to_dict(self) -> dict:
        return {
            "summary": self.summary,
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "next_steps": list(self.next_steps),
            "confidence": self.confidence,
        }


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


# ============================================================
# SIGNALS
# ============================================================

def gibberish_signal(result: GibberishResult) -> float:
    """Inverted gibberish confidence: clean text scores 1.0."""
    if result.is_gibberish:
        return _clamp(1.0 - result.confidence)
    return 1.0


def keyword_signal(result: KeywordMatchResult) -> float:
    """Relevance plus a diversity bonus, minus a penalty for anti-pattern terms."""
    bonus = min(result.matched_categories * DIVERSITY_BONUS_PER_CATEGORY, DIVERSITY_BONUS_CAP)
    penalty = NEGATIVE_KEYWORD_PENALTY if result.has_negative_indicators else 0.0
    return _clamp(result.relevance_score + bonus - penalty)


def pattern_signal(result: PatternAnalysisResult) -> float:
    return _clamp(result.overall_score)


def length_signal(query: str) -> float:
    """Preferred range is 20-200 characters."""
    length = len(query.strip())
    for bound, inclusive, value in LENGTH_BANDS:
        if length < bound or (inclusive and length == bound):
            return value
    return LENGTH_OVERFLOW_SCORE


def complexity_signal(query: str) -> float:
    """Mean of word-count, sentence-length and punctuation sub-scores."""
    words = query.split()
    sentences = [s for s in re.split(r"[.!?]+", query) if s.strip()]

    word_score = min(len(words) / TARGET_WORDS, 1.0)
    avg_words = len(words) / len(sentences) if sentences else 0.0
    sentence_score = min(avg_words / TARGET_WORDS_PER_SENTENCE, 1.0)
    punctuation = len(re.findall(r"[.!?,;:]", query))
    punctuation_score = min(punctuation / TARGET_PUNCTUATION, 1.0)

    return (word_score + sentence_score + punctuation_score) / 3


def grade_for(score: float) -> str:
    """Letter grade for a composite score. Monotonic in ``score``."""
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return "F"


# ============================================================
# SCORING
# ============================================================

def _run_leaves(query: str) -> ScoreDetails:
    if settings.PARALLEL_ANALYSIS:
        with ThreadPoolExecutor(max_workers=3) as pool:
            g = pool.submit(gibberish.detect, query)
            k = pool.submit(keywords.match, query)
            p = pool.submit(patterns.analyze, query)
            return ScoreDetails(gibberish=g.result(), keywords=k.result(), patterns=p.result())
    return ScoreDetails(
        gibberish=gibberish.detect(query),
        keywords=keywords.match(query),
        patterns=patterns.analyze(query),
    )


def score(query: str) -> QualityScore:
    """
    Score a query.

    Returns:
        QualityScore with the composite, per-signal breakdown, raw leaf
        results and up to MAX_RECOMMENDATIONS recommendations.
    """
    start = time.perf_counter()

    details = _run_leaves(query)
    breakdown = ScoreBreakdown(
        gibberish=gibberish_signal(details.gibberish),
        keywords=keyword_signal(details.keywords),
        patterns=pattern_signal(details.patterns),
        length=length_signal(query),
        complexity=complexity_signal(query),
    )

    weighted = sum(
        value * SCORE_WEIGHTS[name] for name, value in breakdown.as_dict().items()
    )
    penalty = NEGATIVE_INDICATOR_PENALTY if details.keywords.has_negative_indicators else 0.0
    composite = _clamp(weighted - penalty)

    overall = OverallScore(
        score=composite,
        grade=grade_for(composite),
        is_passing=composite >= PASSING_THRESHOLD and not details.gibberish.is_gibberish,
        penalty=penalty,
    )

    recommendations = generate_recommendations(overall, breakdown, details)
    processing_time = (time.perf_counter() - start) * 1000

    logger.debug(
        "Scored query: %.3f (%s)", composite, overall.grade,
        extra={"quality_score": composite, "grade": overall.grade},
    )

    return QualityScore(
        overall=overall,
        breakdown=breakdown,
        details=details,
        recommendations=recommendations,
        processing_time=processing_time,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


def generate_recommendations(
    overall: OverallScore,
    breakdown: ScoreBreakdown,
    details: ScoreDetails,
) -> list[str]:
    """Recommendations for whichever signals were penalized."""
    recs: list[str] = []
    g = details.gibberish

    if g.is_gibberish:
        recs.append("Please provide a meaningful query with clear intent")
        if g.reason == "repeated_characters":
            recs.append("Avoid repeating the same characters multiple times")
        elif g.reason == "keyboard_mashing":
            recs.append("Try typing a coherent sentence instead of random characters")

    if breakdown.keywords < 0.3:
        recs.append(
            'Include UI/UX related terms like "button", "layout", "design", or "interface"'
        )
        if not details.keywords.matches["functionality"]:
            recs.append(
                'Specify the type of application: "web app", "dashboard", "mobile app"'
            )

    if breakdown.patterns < 0.4:
        recs.append('Structure your query with clear intent: "Create a..." or "Design a..."')
        recs.extend(details.patterns.recommendations[:2])

    if breakdown.length < 0.5:
        if breakdown.length < 0.3:
            recs.append("Provide more details about what you want to create")
        else:
            recs.append("Add specific requirements or features to your query")

    if breakdown.complexity < 0.3:
        recs.append("Consider adding more details about the design requirements")

    if overall.score >= POSITIVE_THRESHOLD:
        recs.append("Great query! You've provided clear requirements and context")

    return recs[:MAX_RECOMMENDATIONS]


# ============================================================
# INTERPRETATION
# ============================================================

def _summary(value: float) -> str:
    if value >= 0.9:
        return "Excellent query with clear intent and comprehensive requirements"
    if value >= 0.8:
        return "Very good query with strong relevance and structure"
    if value >= 0.7:
        return "Good query with minor areas for improvement"
    if value >= 0.6:
        return "Decent query but could benefit from more specificity"
    if value >= 0.4:
        return "Query needs significant improvement in clarity and relevance"
    return "Query appears to be invalid or nonsensical"


def _consistency(values: list[float]) -> float:
    """Mean minus standard deviation: high when signals agree and are strong."""
    mean = sum(values) / len(values)
    std = math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))
    return _clamp(mean - std)


def interpret(quality: QualityScore) -> ScoreInterpretation:
    """Human-readable reading of a QualityScore."""
    b = quality.breakdown

    strengths = []
    if b.gibberish >= 0.9:
        strengths.append("Clear, non-gibberish input")
    if b.keywords >= 0.7:
        strengths.append("Strong UI/UX domain relevance")
    if b.patterns >= 0.7:
        strengths.append("Well-structured query format")
    if b.length >= 0.8:
        strengths.append("Appropriate query length")
    if b.complexity >= 0.7:
        strengths.append("Good level of detail and complexity")

    weaknesses = []
    if b.gibberish < 0.5:
        weaknesses.append("Input appears to be gibberish or nonsensical")
    if b.keywords < 0.4:
        weaknesses.append("Lacks UI/UX domain-specific terminology")
    if b.patterns < 0.4:
        weaknesses.append("Poor query structure and format")
    if b.length < 0.4:
        weaknesses.append("Inappropriate query length")
    if b.complexity < 0.4:
        weaknesses.append("Insufficient detail or complexity")

    if quality.overall.is_passing:
        next_steps = [
            "Query is ready for processing",
            "Consider adding more specific design requirements",
        ]
    else:
        next_steps = []
        if b.gibberish < 0.5:
            next_steps.append("Rewrite with clear, meaningful language")
        if b.keywords < 0.4:
            next_steps.append("Include UI/UX related terms and context")
        if b.patterns < 0.4:
            next_steps.append("Restructure query with clear intent")

    return ScoreInterpretation(
        summary=_summary(quality.overall.score),
        strengths=strengths,
        weaknesses=weaknesses,
        next_steps=next_steps,
        confidence=_consistency(list(b.as_dict().values())),
    )
