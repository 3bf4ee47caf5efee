"""
Gibberish Detector — Noise Checks for Free-Text Queries

Seven independent heuristic checks for nonsensical input:
  1. Repeated characters       ("aaaaaa", "!!!!!")
  2. Symbol ratio              ("#$%^&*")
  3. Pattern repetition        ("abcabcabc", "hahaha")
  4. Randomness / entropy      ("xq7#kp2!zr9w@m")
  5. Keyboard-row mashing      ("asdfgh", "qwertyuiop")
  6. Pure number sequences     ("12345 67890")
  7. Single-character tokens   ("a b c d")

Every check runs on every query (no short-circuit). The aggregate
verdict is "gibberish" when ANY check fires. All thresholds are
module-level constants so they can be tested at their boundaries.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Callable, Optional


# ============================================================
# THRESHOLDS
# ============================================================

REPEATED_CHAR_THRESHOLD = 5          # same character N times in a row
SYMBOL_RATIO_THRESHOLD = 0.7         # strictly greater than
PATTERN_MIN_LENGTH = 2
PATTERN_MAX_LENGTH = 4
PATTERN_REPETITION_THRESHOLD = 3     # chunk repeated N times back to back
ENTROPY_THRESHOLD = 4.5              # bits, strictly greater than
ENTROPY_MIN_CHARS = 10               # non-space chars, strictly greater than
KEYBOARD_RUN_THRESHOLD = 5
NUMBER_SEQUENCE_MIN_DIGITS = 5       # strictly greater than
SINGLE_CHAR_TOKEN_COUNT = 3

CONFIDENCE = {
    "repeated_characters": 0.9,
    "excessive_symbols": 0.8,
    "pattern_repetition": 0.7,
    "high_randomness": 0.6,
    "keyboard_mashing": 0.9,
    "number_sequence": 0.8,
    "single_character_sequence": 0.7,
}

# Physical keyboard rows (QWERTY). A run of KEYBOARD_RUN_THRESHOLD
# letters drawn from a single row is treated as mashing.
KEYBOARD_ROWS = {
    "top": "qwertyuiop",
    "home": "asdfghjkl",
    "bottom": "zxcvbnm",
}

# Real words that happen to be typeable on a single row. These are
# never counted as mashing.
SINGLE_ROW_WORDS = frozenset({
    # top row
    "pretty", "property", "prototype", "prototypes", "require", "required",
    "requires", "requirement", "power", "powered", "tower", "towers",
    "quiet", "quite", "quote", "quotes", "query", "queries", "queue",
    "retro", "retry", "report", "reports", "reporter", "repository",
    "territory", "equity", "equip", "output", "outputs", "poetry", "puppet",
    "pepper", "route", "router", "routes", "write", "writer", "wrote",
    "twitter", "typewriter", "pottery", "potter", "error", "errors",
    "terror", "upper", "utter", "outer", "tutor", "trout", "tripe",
    "pewter", "proper", "repeat", "reptile", "priority",
    "tiptop", "teeter", "toiletry", "etiquette",
    # home row
    "flash", "flask", "glass", "salad", "shall", "hassle", "alaska",
    "dallas", "falls", "galas", "halls",
})

# Endings and prefixes that turn an allowlisted word into another real
# word ("reporting", "powerful", "requirements", "rewrite").
SINGLE_ROW_SUFFIXES = (
    "s", "es", "ed", "er", "ers", "ing", "ings", "ful", "ly", "ment", "ments",
)
SINGLE_ROW_PREFIXES = ("re", "pre", "un")


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass
class GibberishCheck:
    """Verdict of a single heuristic check."""
    is_gibberish: bool
    confidence: float
    reason: str
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class GibberishResult:
    """Aggregate verdict over every check that fired."""
    is_gibberish: bool
    confidence: float
    reason: str
    details: list[GibberishCheck] = field(default_factory=list)

    @property
    def strongest_reason(self) -> str:
        """Reason of the highest-confidence fired check (ties keep check order)."""
        if not self.details:
            return self.reason
        return max(self.details, key=lambda c: c.confidence).reason

    def to_dict(self) -> dict:
        return {
            "is_gibberish": self.is_gibberish,
            "confidence": self.confidence,
            "reason": self.reason,
            "details": [c.to_dict() for c in self.details],
        }


_VALID = "valid"


def _clean() -> GibberishCheck:
    return GibberishCheck(is_gibberish=False, confidence=0.0, reason=_VALID)


def _fired(reason: str, description: str) -> GibberishCheck:
    return GibberishCheck(
        is_gibberish=True,
        confidence=CONFIDENCE[reason],
        reason=reason,
        description=description,
    )


# ============================================================
# CHECKS
# ============================================================

_REPEATED_CHAR_RE = re.compile(
    r"(.)\1{%d,}" % (REPEATED_CHAR_THRESHOLD - 1), re.DOTALL,
)
_SYMBOL_RE = re.compile(r"[^a-zA-Z0-9\s]")
_PATTERN_REPETITION_RE = re.compile(
    r"(.{%d,%d})\1{%d,}" % (
        PATTERN_MIN_LENGTH, PATTERN_MAX_LENGTH, PATTERN_REPETITION_THRESHOLD - 1,
    ),
    re.DOTALL,
)
_KEYBOARD_ROW_RES = {
    row: re.compile(r"[%s]{%d,}" % (keys, KEYBOARD_RUN_THRESHOLD))
    for row, keys in KEYBOARD_ROWS.items()
}
_NUMBERS_ONLY_RE = re.compile(r"^[\d\s]+$")
_SINGLE_CHAR_RE = re.compile(
    r"^[a-z]" + r"\s[a-z]" * (SINGLE_CHAR_TOKEN_COUNT - 1) + r"(?:\s|$)"
)


def check_repeated_characters(query: str) -> GibberishCheck:
    """Any character repeated REPEATED_CHAR_THRESHOLD+ times consecutively."""
    runs = [m.group(0) for m in _REPEATED_CHAR_RE.finditer(query)]
    if runs:
        return _fired(
            "repeated_characters",
            f"Found repeated character patterns: {', '.join(runs)}",
        )
    return _clean()


def check_symbol_ratio(query: str) -> GibberishCheck:
    """Share of non-alphanumeric, non-space characters."""
    if not query:
        return _clean()
    symbol_ratio = len(_SYMBOL_RE.findall(query)) / len(query)
    if symbol_ratio > SYMBOL_RATIO_THRESHOLD:
        return _fired(
            "excessive_symbols",
            f"{round(symbol_ratio * 100)}% of characters are symbols",
        )
    return _clean()


def check_pattern_repetition(query: str) -> GibberishCheck:
    """A 2-4 character chunk repeated back to back ("abcabcabc")."""
    m = _PATTERN_REPETITION_RE.search(query)
    if m:
        pattern = m.group(1)
        repetitions = len(m.group(0)) // len(pattern)
        return _fired(
            "pattern_repetition",
            f'Pattern "{pattern}" repeated {repetitions} times',
        )
    return _clean()


def shannon_entropy(text: str) -> float:
    """Shannon entropy in bits of the character distribution, spaces excluded."""
    counts = Counter(ch for ch in text if ch != " ")
    total = sum(counts.values())
    if total == 0:
        return 0.0
    entropy = 0.0
    for count in counts.values():
        p = count / total
        entropy -= p * math.log2(p)
    return entropy


def check_randomness(query: str) -> GibberishCheck:
    """High character entropy on a query long enough to measure."""
    non_space = sum(1 for ch in query if ch != " ")
    entropy = shannon_entropy(query)
    if entropy > ENTROPY_THRESHOLD and non_space > ENTROPY_MIN_CHARS:
        return _fired(
            "high_randomness",
            f"High entropy detected: {entropy:.2f}",
        )
    return _clean()


def _stem_is_single_row_word(stem: str) -> bool:
    if stem in SINGLE_ROW_WORDS:
        return True
    for suffix in SINGLE_ROW_SUFFIXES:
        if not stem.endswith(suffix):
            continue
        base = stem[: -len(suffix)]
        # "writer" -> "write", "reporter" -> "report"
        if base in SINGLE_ROW_WORDS or base + "e" in SINGLE_ROW_WORDS:
            return True
    # "properties" -> "property"
    return stem.endswith("ies") and stem[:-3] + "y" in SINGLE_ROW_WORDS


def is_single_row_word(token: str) -> bool:
    """Allowlisted word, or one built from it with a common prefix/ending."""
    if _stem_is_single_row_word(token):
        return True
    return any(
        token.startswith(prefix) and _stem_is_single_row_word(token[len(prefix):])
        for prefix in SINGLE_ROW_PREFIXES
    )


def check_keyboard_mashing(query: str) -> GibberishCheck:
    """KEYBOARD_RUN_THRESHOLD+ consecutive letters from one keyboard row."""
    for token in re.findall(r"[a-z]+", query):
        if is_single_row_word(token):
            continue
        for row, row_re in _KEYBOARD_ROW_RES.items():
            m = row_re.search(token)
            if m:
                return _fired(
                    "keyboard_mashing",
                    f'Detected keyboard mashing pattern "{m.group(0)}" ({row} row)',
                )
    return _clean()


def check_number_sequence(query: str) -> GibberishCheck:
    """Digits and whitespace only, with more than NUMBER_SEQUENCE_MIN_DIGITS digits."""
    if _NUMBERS_ONLY_RE.match(query):
        digits = sum(1 for ch in query if ch.isdigit())
        if digits > NUMBER_SEQUENCE_MIN_DIGITS:
            return _fired(
                "number_sequence",
                "Query contains only numbers and spaces",
            )
    return _clean()


def check_single_character_sequence(query: str) -> GibberishCheck:
    """The first tokens are each a single letter ("a b c ...")."""
    if _SINGLE_CHAR_RE.match(query):
        return _fired(
            "single_character_sequence",
            "Query contains only single characters separated by spaces",
        )
    return _clean()


# Declaration order matters: the aggregate reason is the first fired check.
CHECKS: tuple[Callable[[str], GibberishCheck], ...] = (
    check_repeated_characters,
    check_symbol_ratio,
    check_pattern_repetition,
    check_randomness,
    check_keyboard_mashing,
    check_number_sequence,
    check_single_character_sequence,
)


# ============================================================
# ENTRY POINT
# ============================================================

def detect(query: str) -> GibberishResult:
    """
    Run every check against the normalized (trimmed, lower-cased) query.

    Returns:
        GibberishResult. ``confidence`` is the mean confidence of the
        fired checks; ``reason`` is the first fired check in CHECKS order.
    """
    if not query or not query.strip():
        return GibberishResult(is_gibberish=True, confidence=1.0, reason="empty_input")

    normalized = query.strip().lower()
    fired = [check for check in (fn(normalized) for fn in CHECKS) if check.is_gibberish]

    if not fired:
        return GibberishResult(is_gibberish=False, confidence=0.0, reason=_VALID)

    return GibberishResult(
        is_gibberish=True,
        confidence=sum(c.confidence for c in fired) / len(fired),
        reason=fired[0].reason,
        details=fired,
    )
