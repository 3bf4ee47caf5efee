"""
Pattern Analyzer — Structural and Linguistic Well-Formedness

Five sub-analyses over the trimmed query:

  structure     intent pattern (imperative / descriptive / question / requirement)
  quality       specificity and completeness indicator words
  complexity    sentence length and clause-level structure counts
  coherence     logical connectors, topic repetition, grammatical shape
  completeness  subject, action, context and specificity presence

Blended into a single overall score with fixed weights. Everything is
regex / word-list based; no parsing, no models.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field


# ============================================================
# PATTERN TABLES
# ============================================================

# Priority order: first match wins.
STRUCTURE_PATTERNS: dict[str, re.Pattern] = {
    "imperative": re.compile(
        r"^(?:create|build|make|design|develop|generate)\s+", re.IGNORECASE,
    ),
    "descriptive": re.compile(
        r"^(?:a|an|the)\s+\w+\s+(?:that|which|with)\b", re.IGNORECASE,
    ),
    "question": re.compile(
        r"^(?:what|how|where|when|why|can|could|would|should|is|are|do|does|will)\b",
        re.IGNORECASE,
    ),
    "requirement": re.compile(
        r"^(?:need|want|require|looking\s+for|seeking)\s+", re.IGNORECASE,
    ),
}

STRUCTURE_MATCH_CONFIDENCE = 0.8
LOOSE_IMPERATIVE_CONFIDENCE = 0.6
LOOSE_IMPERATIVE_WINDOW = 3   # action verb within the first N tokens

ACTION_WORDS = (
    "create", "build", "make", "design", "develop", "generate", "show", "display",
)

QUALITY_INDICATORS: dict[str, dict[str, tuple[str, ...]]] = {
    "specificity": {
        "high": ("specific", "detailed", "exact", "precise", "particular", "custom", "unique"),
        "medium": ("some", "few", "several", "various", "different", "multiple"),
        "low": ("any", "all", "every", "generic", "basic", "simple"),
    },
    "completeness": {
        "high": ("complete", "full", "comprehensive", "detailed", "thorough"),
        "medium": ("partial", "basic", "simple", "minimal"),
        "low": ("incomplete", "unfinished", "draft", "rough"),
    },
}

TIER_SCORES = {"high": 0.9, "medium": 0.6, "low": 0.3}

COMPLEX_STRUCTURES: dict[str, re.Pattern] = {
    "conjunctions": re.compile(
        r"\b(?:and|or|but|however|although|because|since|while|whereas)\b",
        re.IGNORECASE,
    ),
    "relative_clauses": re.compile(
        r"\b(?:that|which|who|whom|whose|where|when)\b", re.IGNORECASE,
    ),
    "conditionals": re.compile(
        r"\b(?:if|unless|provided|assuming|supposing)\b", re.IGNORECASE,
    ),
    "prepositions": re.compile(
        r"\b(?:in|on|at|by|for|with|from|to|of|about|under|over|through|during)\b",
        re.IGNORECASE,
    ),
}

# Per-occurrence contribution to the complexity score. Prepositions are
# counted for reporting only.
COMPLEXITY_WEIGHTS = {
    "conjunctions": 0.1,
    "relative_clauses": 0.2,
    "conditionals": 0.3,
}
LONG_SENTENCE_WORDS = 10      # avg words per sentence, strictly greater than
LONG_SENTENCE_BONUS = 0.2

LOGICAL_CONNECTORS = (
    "because", "therefore", "however", "moreover", "furthermore",
    "additionally", "also",
)
TOPIC_WORD_MIN_LENGTH = 4
COHERENCE_WEIGHTS = {"connectors": 0.3, "topic": 0.4, "grammar": 0.3}

_AUXILIARY_RE = re.compile(
    r"\b(?:is|are|was|were|have|has|had|do|does|did|will|would|can|could|should|must)\b",
    re.IGNORECASE,
)

COMPLETENESS_ELEMENTS: dict[str, tuple[str, ...]] = {
    "has_subject": ("app", "website", "page", "interface", "dashboard", "system", "platform"),
    "has_action": ACTION_WORDS,
    "has_context": ("for", "with", "using", "that", "which", "where", "when"),
    "has_specificity": ("modern", "responsive", "mobile", "desktop", "specific", "detailed"),
}
COMPLETENESS_ELEMENT_SCORE = 0.25

OVERALL_WEIGHTS = {
    "structure": 0.2,
    "quality": 0.3,
    "complexity": 0.2,
    "coherence": 0.2,
    "completeness": 0.1,
}
VALID_OVERALL_THRESHOLD = 0.4     # strictly greater than
VALID_COHERENCE_THRESHOLD = 0.3   # strictly greater than


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass
class StructureAnalysis:
    type: str
    confidence: float
    is_well_formed: bool
    characteristics: list[str] = field(default_factory=list)


@dataclass
class QualityIndicator:
    score: float
    level: str
    indicators: list[str] = field(default_factory=list)


@dataclass
class QualityAnalysis:
    specificity: QualityIndicator
    completeness: QualityIndicator
    overall: float


@dataclass
class ComplexityAnalysis:
    score: float
    level: str
    characteristics: dict


@dataclass
class CoherenceAnalysis:
    score: float
    level: str
    characteristics: dict


@dataclass
class CompletenessAnalysis:
    score: float
    level: str
    elements: dict[str, bool]
    missing_elements: list[str] = field(default_factory=list)


@dataclass
class PatternAnalysisResult:
    structure: StructureAnalysis
    quality: QualityAnalysis
    complexity: ComplexityAnalysis
    coherence: CoherenceAnalysis
    completeness: CompletenessAnalysis
    overall_score: float
    recommendations: list[str]
    is_valid: bool

    def to_dict(self) -> dict:
        return asdict(self)


# ============================================================
# HELPERS
# ============================================================

def score_level(score: float) -> str:
    if score >= 0.7:
        return "high"
    if score >= 0.4:
        return "medium"
    return "low"


def _words(query: str) -> list[str]:
    return re.findall(r"[a-z0-9']+", query.lower())


def _sentences(query: str) -> list[str]:
    return [s for s in re.split(r"[.!?]+", query) if s.strip()]


def _contains_word(query: str, vocabulary: tuple[str, ...]) -> bool:
    pattern = r"\b(?:%s)s?\b" % "|".join(re.escape(w) for w in vocabulary)
    return re.search(pattern, query, re.IGNORECASE) is not None


# ============================================================
# SUB-ANALYSES
# ============================================================

def analyze_structure(query: str) -> StructureAnalysis:
    matched = None
    confidence = 0.0

    for name, regex in STRUCTURE_PATTERNS.items():
        if regex.search(query):
            matched = name
            confidence = STRUCTURE_MATCH_CONFIDENCE
            break

    if matched is None:
        first_words = _words(query)[:LOOSE_IMPERATIVE_WINDOW]
        if any(action in first_words for action in ACTION_WORDS):
            matched = "imperative"
            confidence = LOOSE_IMPERATIVE_CONFIDENCE

    characteristics = []
    if query.endswith("?"):
        characteristics.append("question")
    if query.endswith("!"):
        characteristics.append("exclamation")
    if "," in query:
        characteristics.append("comma_separated")
    if re.search(r"\d", query):
        characteristics.append("contains_numbers")
    if re.search(r"[A-Z]", query):
        characteristics.append("contains_capitals")

    return StructureAnalysis(
        type=matched or "unstructured",
        confidence=confidence,
        is_well_formed=matched is not None,
        characteristics=characteristics,
    )


def _indicator(words: list[str], tiers: dict[str, tuple[str, ...]]) -> QualityIndicator:
    """Score the highest tier with any indicator word present."""
    score = 0.0
    for tier in ("high", "medium", "low"):
        if any(w in words for w in tiers[tier]):
            score = TIER_SCORES[tier]
            break
    found = [w for tier_words in tiers.values() for w in tier_words if w in words]
    return QualityIndicator(score=score, level=score_level(score), indicators=found)


def analyze_quality(query: str) -> QualityAnalysis:
    words = _words(query)
    specificity = _indicator(words, QUALITY_INDICATORS["specificity"])
    completeness = _indicator(words, QUALITY_INDICATORS["completeness"])
    return QualityAnalysis(
        specificity=specificity,
        completeness=completeness,
        overall=(specificity.score + completeness.score) / 2,
    )


def analyze_complexity(query: str) -> ComplexityAnalysis:
    total_words = len(query.split())
    sentence_count = len(_sentences(query))
    avg_words = total_words / sentence_count if sentence_count else 0.0

    counts = {name: len(regex.findall(query)) for name, regex in COMPLEX_STRUCTURES.items()}

    raw = sum(counts[name] * weight for name, weight in COMPLEXITY_WEIGHTS.items())
    if avg_words > LONG_SENTENCE_WORDS:
        raw += LONG_SENTENCE_BONUS
    score = min(raw, 1.0)

    return ComplexityAnalysis(
        score=score,
        level=score_level(score),
        characteristics={
            "avg_words_per_sentence": avg_words,
            "total_words": total_words,
            "sentence_count": sentence_count,
            "complex_structures": counts,
        },
    )


def topic_consistency(words: list[str]) -> float:
    """Fraction of content words (> 3 chars) whose word occurs more than once."""
    meaningful = [w for w in words if len(w) >= TOPIC_WORD_MIN_LENGTH]
    if not meaningful:
        return 0.0
    frequency: dict[str, int] = {}
    for w in meaningful:
        frequency[w] = frequency.get(w, 0) + 1
    repeated = sum(1 for count in frequency.values() if count > 1)
    return min(repeated / len(meaningful), 1.0)


def grammatical_score(query: str) -> float:
    """Capital start, terminal punctuation, auxiliary/modal verb: 1/3 each."""
    checks = (
        bool(re.match(r"[A-Z]", query)),
        bool(re.search(r"[.!?]$", query)),
        bool(_AUXILIARY_RE.search(query)),
    )
    return sum(checks) / len(checks)


def analyze_coherence(query: str) -> CoherenceAnalysis:
    words = _words(query)
    connector_count = sum(1 for c in LOGICAL_CONNECTORS if c in words)
    topic = topic_consistency(words)
    grammar = grammatical_score(query)

    raw = (
        connector_count * COHERENCE_WEIGHTS["connectors"]
        + topic * COHERENCE_WEIGHTS["topic"]
        + grammar * COHERENCE_WEIGHTS["grammar"]
    )
    score = min(raw, 1.0)

    return CoherenceAnalysis(
        score=score,
        level=score_level(score),
        characteristics={
            "connector_count": connector_count,
            "topic_consistency": topic,
            "grammatical_score": grammar,
            "has_logical_flow": connector_count > 0 or topic > 0.5,
        },
    )


def analyze_completeness(query: str) -> CompletenessAnalysis:
    elements = {
        name: _contains_word(query, vocabulary)
        for name, vocabulary in COMPLETENESS_ELEMENTS.items()
    }
    score = sum(COMPLETENESS_ELEMENT_SCORE for present in elements.values() if present)
    return CompletenessAnalysis(
        score=score,
        level=score_level(score),
        elements=elements,
        missing_elements=[name for name, present in elements.items() if not present],
    )


def _recommendations(
    structure: StructureAnalysis,
    quality: QualityAnalysis,
    coherence: CoherenceAnalysis,
    completeness: CompletenessAnalysis,
) -> list[str]:
    recs = []
    if structure.confidence < 0.5:
        recs.append('Start with an action verb like "create", "build", or "design"')
    if completeness.score < 0.5:
        recs.append("Be more specific about what you want to create")
        if not completeness.elements["has_context"]:
            recs.append("Add context about the purpose or target audience")
    if quality.specificity.score < 0.5:
        recs.append("Include specific design requirements or features")
    if coherence.score < 0.4:
        recs.append("Structure your query more clearly with logical flow")
    return recs


# ============================================================
# ENTRY POINT
# ============================================================

def analyze(query: str) -> PatternAnalysisResult:
    """Run all five sub-analyses and blend them into an overall score."""
    text = query.strip()

    structure = analyze_structure(text)
    quality = analyze_quality(text)
    complexity = analyze_complexity(text)
    coherence = analyze_coherence(text)
    completeness = analyze_completeness(text)

    overall = (
        structure.confidence * OVERALL_WEIGHTS["structure"]
        + quality.overall * OVERALL_WEIGHTS["quality"]
        + complexity.score * OVERALL_WEIGHTS["complexity"]
        + coherence.score * OVERALL_WEIGHTS["coherence"]
        + completeness.score * OVERALL_WEIGHTS["completeness"]
    )
    overall = max(0.0, min(overall, 1.0))

    return PatternAnalysisResult(
        structure=structure,
        quality=quality,
        complexity=complexity,
        coherence=coherence,
        completeness=completeness,
        overall_score=overall,
        recommendations=_recommendations(structure, quality, coherence, completeness),
        is_valid=(
            overall > VALID_OVERALL_THRESHOLD
            and coherence.score > VALID_COHERENCE_THRESHOLD
        ),
    )
