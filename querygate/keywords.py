"""
Keyword Matcher — UI/UX Domain Relevance

Scores how strongly a query's vocabulary matches the target domain
(UI components, design elements, application functionality, business
context, visual style) and flags anti-pattern vocabulary
(testing / debugging / nonsense terms).

Each category is defined once in KEYWORD_CATEGORIES together with its
weight; the relevance score is the weighted sum of per-category match
density (matches / token count).
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field


# ============================================================
# VOCABULARY
# ============================================================

@dataclass(frozen=True)
class CategoryDefinition:
    """Vocabulary and relevance weight for one keyword category."""
    terms: tuple[str, ...]
    weight: float


KEYWORD_CATEGORIES: dict[str, CategoryDefinition] = {
    "ui_components": CategoryDefinition(
        terms=(
            "button", "input", "form", "modal", "dialog", "dropdown", "select",
            "checkbox", "radio", "switch", "toggle", "slider", "progress",
            "spinner", "loader", "card", "accordion", "tab", "menu",
            "navigation", "navbar", "sidebar", "header", "footer", "table",
            "list", "grid", "carousel", "pagination", "breadcrumb", "tooltip",
            "popover",
        ),
        weight=0.4,
    ),
    "design_elements": CategoryDefinition(
        terms=(
            "layout", "design", "ui", "ux", "interface", "theme", "color",
            "typography", "font", "spacing", "margin", "padding", "border",
            "shadow", "gradient", "animation", "transition", "responsive",
            "mobile", "desktop", "tablet", "breakpoint",
        ),
        weight=0.3,
    ),
    "functionality": CategoryDefinition(
        terms=(
            "app", "application", "website", "webapp", "dashboard", "admin",
            "login", "signup", "register", "authentication", "profile",
            "settings", "search", "filter", "sort", "upload", "download",
            "export", "import", "api", "database", "backend", "frontend",
        ),
        weight=0.2,
    ),
    "business_context": CategoryDefinition(
        terms=(
            "ecommerce", "shop", "store", "product", "cart", "checkout",
            "payment", "order", "inventory", "customer", "user", "account",
            "subscription", "billing", "analytics", "report", "statistics",
            "metrics", "dashboard", "crm", "cms", "blog", "news",
        ),
        weight=0.05,
    ),
    "visual_style": CategoryDefinition(
        terms=(
            "modern", "minimal", "clean", "professional", "corporate",
            "creative", "artistic", "bold", "elegant", "sophisticated",
            "playful", "friendly", "warm", "cool", "dark", "light",
            "colorful", "monochrome", "vintage", "retro", "futuristic", "tech",
        ),
        weight=0.05,
    ),
}

CATEGORY_NAMES: tuple[str, ...] = tuple(KEYWORD_CATEGORIES)

NEGATIVE_KEYWORDS: tuple[str, ...] = (
    "test", "testing", "debug", "error", "broken", "fix", "bug", "hack",
    "random", "gibberish", "nonsense", "meaningless", "invalid", "wrong",
    "stupid", "dumb",
)

MIN_TOKEN_LENGTH = 3          # tokens of length <= 2 are discarded
PARTIAL_MATCH_MIN_LENGTH = 4  # contained side must be longer than 3
RELEVANCE_THRESHOLD = 0.3     # strictly greater than


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass
class CategoryInfo:
    count: int
    percentage: float
    keywords: list[str]


@dataclass
class KeywordMatchResult:
    """Relevance of a query to the UI/UX domain."""
    matches: dict[str, list[str]]
    negative_matches: list[str]
    relevance_score: float
    has_negative_indicators: bool
    total_matches: int
    is_relevant: bool
    category_breakdown: dict[str, CategoryInfo] = field(default_factory=dict)

    @property
    def matched_categories(self) -> int:
        """Number of categories with at least one match."""
        return sum(1 for terms in self.matches.values() if terms)

    def to_dict(self) -> dict:
        return asdict(self)


# ============================================================
# MATCHING
# ============================================================

_NON_WORD_RE = re.compile(r"[^\w\s]")


def extract_words(query: str) -> list[str]:
    """Lower-case, strip punctuation, drop tokens shorter than MIN_TOKEN_LENGTH."""
    cleaned = _NON_WORD_RE.sub(" ", query.lower())
    return [w for w in cleaned.split() if len(w) >= MIN_TOKEN_LENGTH]


def _term_matches(word: str, term: str) -> bool:
    if word == term:
        return True
    # Partial match tolerates plurals and declensions ("cards" -> "card")
    if len(word) >= PARTIAL_MATCH_MIN_LENGTH and word in term:
        return True
    return len(term) >= PARTIAL_MATCH_MIN_LENGTH and term in word


def find_matches(words: list[str], terms: tuple[str, ...]) -> list[str]:
    """Vocabulary terms matched by any word, deduplicated in first-seen order."""
    matches: list[str] = []
    for word in words:
        for term in terms:
            if term not in matches and _term_matches(word, term):
                matches.append(term)
    return matches


def calculate_relevance_score(matches: dict[str, list[str]], total_words: int) -> float:
    """Weighted match density across categories, clamped to [0, 1]."""
    if total_words == 0:
        return 0.0
    score = 0.0
    for category, terms in matches.items():
        weight = KEYWORD_CATEGORIES[category].weight
        score += min(len(terms) / total_words, 1.0) * weight
    return max(0.0, min(score, 1.0))


def category_breakdown(matches: dict[str, list[str]]) -> dict[str, CategoryInfo]:
    """Per-category counts and percentage share of all matches."""
    total = sum(len(terms) for terms in matches.values())
    return {
        category: CategoryInfo(
            count=len(terms),
            percentage=(len(terms) / total * 100) if total else 0.0,
            keywords=list(terms),
        )
        for category, terms in matches.items()
    }


def match(query: str) -> KeywordMatchResult:
    """Match a query against every category and the negative vocabulary."""
    words = extract_words(query)

    matches = {
        category: find_matches(words, definition.terms)
        for category, definition in KEYWORD_CATEGORIES.items()
    }
    negative_matches = find_matches(words, NEGATIVE_KEYWORDS)

    relevance_score = calculate_relevance_score(matches, len(words))
    has_negative = len(negative_matches) > 0

    return KeywordMatchResult(
        matches=matches,
        negative_matches=negative_matches,
        relevance_score=relevance_score,
        has_negative_indicators=has_negative,
        total_matches=sum(len(terms) for terms in matches.values()),
        is_relevant=relevance_score > RELEVANCE_THRESHOLD and not has_negative,
        category_breakdown=category_breakdown(matches),
    )


def get_suggestions(result: KeywordMatchResult) -> list[str]:
    """Suggestions for making a query more relevant to the domain."""
    suggestions: list[str] = []

    if result.relevance_score < 0.2:
        suggestions.append(
            "Consider adding UI component keywords like 'button', 'form', or 'layout'"
        )
    if not result.matches["design_elements"]:
        suggestions.append(
            "Include design-related terms like 'modern', 'responsive', or 'color scheme'"
        )
    if not result.matches["functionality"]:
        suggestions.append(
            "Specify the type of application: 'web app', 'dashboard', 'ecommerce site'"
        )
    if result.has_negative_indicators:
        suggestions.append("Avoid testing or debug-related terms in your query")

    return suggestions
