"""
API Schemas — Request and Response Models

Pydantic models for the QueryGate API.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field

from querygate.config import settings


# ============================================================
# VALIDATE
# ============================================================

class QueryRequest(BaseModel):
    """Body for POST /validate, /validate/quick and /analysis."""
    query: str = Field(..., max_length=settings.MAX_QUERY_CHARS,
                       description="The free-text request to gate. Empty input is allowed and rejected by the gate.")

    model_config = {"json_schema_extra": {"examples": [
        {"query": "Create a modern responsive dashboard with a sidebar navigation"},
    ]}}


class QueryBatchRequest(BaseModel):
    """POST /validate/batch request body."""
    items: list[QueryRequest] = Field(..., min_length=1, max_length=100)


class FallbackResponse(BaseModel):
    fallback_response: str


class ValidationResponse(BaseModel):
    """POST /validate response body."""
    is_valid: bool
    quality_score: float
    grade: str
    should_process: bool
    fallback_response: Optional[FallbackResponse] = None
    analysis: Optional[dict] = None
    error: Optional[str] = None
    processing_time: float
    timestamp: str


class QuickValidationResponse(BaseModel):
    """POST /validate/quick response body."""
    is_valid: bool
    reason: str = Field(..., pattern="^(too_short|gibberish|not_relevant|valid)$")
    suggestion: str


class ValidationBatchResponse(BaseModel):
    """POST /validate/batch response body."""
    results: list[ValidationResponse]
    total: int
    passed: int


# ============================================================
# META
# ============================================================

class CategoryVocabulary(BaseModel):
    weight: float
    terms: list[str]


class VocabularyResponse(BaseModel):
    categories: dict[str, CategoryVocabulary]
    negative_keywords: list[str]


class HealthResponse(BaseModel):
    status: str
    version: str
    score_weights: dict[str, float]
    passing_threshold: float
    parallel_analysis: bool
