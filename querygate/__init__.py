"""
QueryGate — Deterministic Query-Quality Gate

Decides, before an expensive generation call, whether a short free-text
design request is meaningful enough to process.

Public API:
  - validate:              Full gate decision (coroutine, never raises)
  - quick_validate:        Cheap per-keystroke check
  - get_detailed_analysis: Every internal signal, for inspection
  - gate_generation:       Validate once, call the generator only on pass
  - score:                 Composite quality score and grade
  - detect / match / analyze: The three leaf analyses

Usage:
    from querygate import validate, quick_validate
    result = await validate("Create a responsive pricing page")
    if result.should_process:
        ...
"""

__version__ = "1.0.0"

from querygate.gibberish import detect, GibberishCheck, GibberishResult
from querygate.keywords import match, KeywordMatchResult, KEYWORD_CATEGORIES
from querygate.patterns import analyze, PatternAnalysisResult
from querygate.scorer import score, interpret, grade_for, QualityScore, SCORE_WEIGHTS
from querygate.validator import (
    validate,
    quick_validate,
    get_detailed_analysis,
    gate_generation,
    ValidationResult,
    QuickValidationResult,
    FALLBACK_MESSAGE,
)

__all__ = [
    "detect",
    "GibberishCheck",
    "GibberishResult",
    "match",
    "KeywordMatchResult",
    "KEYWORD_CATEGORIES",
    "analyze",
    "PatternAnalysisResult",
    "score",
    "interpret",
    "grade_for",
    "QualityScore",
    "SCORE_WEIGHTS",
    "validate",
    "quick_validate",
    "get_detailed_analysis",
    "gate_generation",
    "ValidationResult",
    "QuickValidationResult",
    "FALLBACK_MESSAGE",
]
