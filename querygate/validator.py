"""
Query Validator — The Gate

Stable decision contract for callers that sit in front of an
expensive generation call:

  - validate:              full scoring path -> process / don't process
  - quick_validate:        cheap per-keystroke check
  - get_detailed_analysis: inspection path exposing every internal
  - gate_generation:       validate once, call the generator only on pass

validate() never raises. Internal failures become a grade-F result
with ``error`` populated. It is a coroutine only so callers can await
it alongside their (genuinely async) generation call; nothing inside
it suspends.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from querygate import gibberish, keywords, scorer
from querygate.config import settings
from querygate.gibberish import GibberishResult
from querygate.keywords import KeywordMatchResult
from querygate.patterns import PatternAnalysisResult
from querygate.scorer import QualityScore, ScoreInterpretation

logger = logging.getLogger(__name__)


FALLBACK_MESSAGE = (
    "I am unable to process this matter since it appears either senseless "
    "or is unprocessable completely, please try again with more valid query"
)

PROCESS_THRESHOLD = 0.4
QUICK_MIN_LENGTH = 3
QUICK_MIN_RELEVANCE = 0.1

QUICK_SUGGESTIONS = {
    "too_short": "Please provide a longer, more detailed query",
    "gibberish": "Please provide a meaningful query with clear intent",
    "not_relevant": 'Include UI/UX related terms like "design", "app", "interface", or "layout"',
    "valid": "Query looks good! You can proceed with processing.",
}


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass
class ValidationResult:
    """What the generation collaborator consumes."""
    is_valid: bool
    quality_score: float
    grade: str
    should_process: bool
    processing_time: float
    timestamp: str
    fallback_response: Optional[dict[str, str]] = None
    analysis: Optional[QualityScore] = None
    error: Optional[str] = None

    @property
    def fallback_text(self) -> Optional[str]:
        if self.fallback_response is None:
            return None
        return self.fallback_response["fallback_response"]

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "quality_score": self.quality_score,
            "grade": self.grade,
            "should_process": self.should_process,
            "fallback_response": self.fallback_response,
            "analysis": self.analysis.to_dict() if self.analysis else None,
            "error": self.error,
            "processing_time": self.processing_time,
            "timestamp": self.timestamp,
        }


@dataclass
class QuickValidationResult:
    is_valid: bool
    reason: str       # too_short | gibberish | not_relevant | valid
    suggestion: str

    def to_dict(self) -> dict:
        return {"is_valid": self.is_valid, "reason": self.reason, "suggestion": self.suggestion}


@dataclass
class DetailedAnalysis:
    query: str
    quality_score: QualityScore
    interpretation: ScoreInterpretation
    gibberish: GibberishResult
    keywords: KeywordMatchResult
    patterns: PatternAnalysisResult
    recommendations: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    processing_time: float = 0.0

    def to_dict(self) -> dict:
        return {
            "query": self.query,
            "quality_score": self.quality_score.to_dict(),
            "interpretation": self.interpretation.to_dict(),
            "breakdown": {
                "gibberish": self.gibberish.to_dict(),
                "keywords": self.keywords.to_dict(),
                "patterns": self.patterns.to_dict(),
            },
            "recommendations": list(self.recommendations),
            "suggestions": list(self.suggestions),
            "processing_time": self.processing_time,
        }


@dataclass
class GatedResponse:
    """Outcome of gate_generation: generated text or the fallback."""
    text: str
    generated: bool
    validation: ValidationResult


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_fallback(recommendations: Optional[list[str]] = None) -> dict[str, str]:
    """Fallback payload, optionally suffixed with the top recommendation."""
    message = FALLBACK_MESSAGE
    if settings.APPEND_RECOMMENDATION and recommendations:
        message = f"{message} {recommendations[0]}"
    return {"fallback_response": message}


# ============================================================
# ENTRY POINTS
# ============================================================

async def validate(query: str) -> ValidationResult:
    """
    Full validation. Never raises.

    Returns:
        ValidationResult. ``should_process`` is True only when the
        composite passes and no gibberish was detected.
    """
    start = time.perf_counter()

    try:
        quality = scorer.score(query)
        should_process = quality.overall.is_passing and quality.overall.score >= PROCESS_THRESHOLD

        result = ValidationResult(
            is_valid=should_process,
            quality_score=quality.overall.score,
            grade=quality.overall.grade,
            should_process=should_process,
            fallback_response=None if should_process else build_fallback(quality.recommendations),
            analysis=quality,
            processing_time=(time.perf_counter() - start) * 1000,
            timestamp=_now(),
        )
    except Exception as e:
        logger.error(
            "Query validation failed",
            extra={"error": str(e), "error_type": type(e).__name__},
            exc_info=True,
        )
        return ValidationResult(
            is_valid=False,
            quality_score=0.0,
            grade="F",
            should_process=False,
            fallback_response=build_fallback(),
            error=str(e) or type(e).__name__,
            processing_time=(time.perf_counter() - start) * 1000,
            timestamp=_now(),
        )

    logger.debug(
        "Query gated",
        extra={
            "grade": result.grade,
            "quality_score": round(result.quality_score, 3),
            "should_process": result.should_process,
            "reason": quality.details.gibberish.reason,
            "query_chars": len(query),
            "duration_ms": round(result.processing_time, 2),
        },
    )
    return result


def quick_validate(query: str) -> QuickValidationResult:
    """Cheap check for real-time feedback: length, gibberish, relevance floor."""
    if not query or len(query.strip()) < QUICK_MIN_LENGTH:
        reason = "too_short"
    elif gibberish.detect(query).is_gibberish:
        reason = "gibberish"
    elif keywords.match(query).relevance_score < QUICK_MIN_RELEVANCE:
        reason = "not_relevant"
    else:
        reason = "valid"

    return QuickValidationResult(
        is_valid=reason == "valid",
        reason=reason,
        suggestion=QUICK_SUGGESTIONS[reason],
    )


def get_detailed_analysis(query: str) -> DetailedAnalysis:
    """Everything the scorer knows about a query. Exceptions propagate."""
    quality = scorer.score(query)
    return DetailedAnalysis(
        query=query,
        quality_score=quality,
        interpretation=scorer.interpret(quality),
        gibberish=quality.details.gibberish,
        keywords=quality.details.keywords,
        patterns=quality.details.patterns,
        recommendations=list(quality.recommendations),
        suggestions=keywords.get_suggestions(quality.details.keywords),
        processing_time=quality.processing_time,
    )


async def gate_generation(
    query: str,
    generate: Callable[[str], Awaitable[str]],
) -> GatedResponse:
    """
    Validate once; await ``generate(query)`` only if the query should be
    processed. Otherwise the fallback text stands in for the answer.

    Errors raised by ``generate`` propagate to the caller.
    """
    validation = await validate(query)
    if not validation.should_process:
        return GatedResponse(
            text=validation.fallback_text or FALLBACK_MESSAGE,
            generated=False,
            validation=validation,
        )
    text = await generate(query)
    return GatedResponse(text=text, generated=True, validation=validation)
