"""
QueryGate API — Main Application

POST /validate        — Full gate decision for one query
POST /validate/quick  — Cheap real-time check
POST /validate/batch  — Gate up to 100 queries
POST /analysis        — Every internal signal (debug / inspection)
GET  /vocabulary      — Keyword categories, weights and negative terms
GET  /health          — Health check
"""

from __future__ import annotations

import asyncio
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.requests import Request

from querygate.config import settings
from querygate.keywords import KEYWORD_CATEGORIES, NEGATIVE_KEYWORDS
from querygate.logging import setup_logging, get_logger
from querygate.scorer import PASSING_THRESHOLD, SCORE_WEIGHTS
from querygate.validator import validate, quick_validate, get_detailed_analysis
from querygate.schemas.validation import (
    QueryRequest,
    QueryBatchRequest,
    ValidationResponse,
    QuickValidationResponse,
    ValidationBatchResponse,
    VocabularyResponse,
    HealthResponse,
)

logger = get_logger("api")


# ============================================================
# STARTUP / SHUTDOWN
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("QueryGate API starting")
    yield
    logger.info("QueryGate API shutting down")


app = FastAPI(
    title="QueryGate API",
    description="Deterministic query-quality gate for generation requests",
    version=settings.VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    allow_credentials=False,
)


# ============================================================
# GLOBAL ERROR HANDLER
# ============================================================

@app.exception_handler(Exception)
async def global_error_handler(request: Request, exc: Exception):
    """Catch unhandled exceptions — return structured error, don't leak internals."""
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra={"error": str(exc), "path": request.url.path, "method": request.method},
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error. The query could not be analyzed."},
    )


# ============================================================
# ROUTES
# ============================================================

@app.get("/", include_in_schema=False)
async def root():
    return {"name": "QueryGate API", "version": settings.VERSION, "docs": "/docs"}


@app.post("/validate", response_model=ValidationResponse)
async def validate_query(request: QueryRequest):
    """Gate a single query."""
    result = await validate(request.query)
    logger.info(
        f"Validated: grade={result.grade} process={result.should_process}",
        extra={
            "grade": result.grade,
            "quality_score": round(result.quality_score, 3),
            "should_process": result.should_process,
            "query_chars": len(request.query),
        },
    )
    return result.to_dict()


@app.post("/validate/quick", response_model=QuickValidationResponse)
async def quick_validate_query(request: QueryRequest):
    """Cheap check for per-keystroke feedback."""
    return quick_validate(request.query).to_dict()


@app.post("/validate/batch", response_model=ValidationBatchResponse)
async def validate_batch(request: QueryBatchRequest):
    """Gate multiple queries."""
    results = await asyncio.gather(*[validate(item.query) for item in request.items])
    passed = sum(1 for r in results if r.should_process)

    logger.info(
        f"Batch complete: {passed}/{len(results)} passed",
        extra={"batch_size": len(results)},
    )

    return {
        "results": [r.to_dict() for r in results],
        "total": len(results),
        "passed": passed,
    }


@app.post("/analysis")
async def analyze_query(request: QueryRequest):
    """Full internal analysis. Intended for debugging and tuning."""
    return get_detailed_analysis(request.query).to_dict()


@app.get("/vocabulary", response_model=VocabularyResponse)
async def vocabulary():
    """Expose the keyword vocabulary the relevance score is computed against."""
    return {
        "categories": {
            name: {"weight": d.weight, "terms": list(d.terms)}
            for name, d in KEYWORD_CATEGORIES.items()
        },
        "negative_keywords": list(NEGATIVE_KEYWORDS),
    }


@app.get("/health", response_model=HealthResponse)
async def health():
    return {
        "status": "operational",
        "version": settings.VERSION,
        "score_weights": dict(SCORE_WEIGHTS),
        "passing_threshold": PASSING_THRESHOLD,
        "parallel_analysis": settings.PARALLEL_ANALYSIS,
    }


# --- Version Header Middleware ---
@app.middleware("http")
async def add_version_header(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-QueryGate-Version"] = settings.VERSION
    response.headers["X-Content-Type-Options"] = "nosniff"
    return response


# --- Request Logging Middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with method, path, status, duration."""
    path = request.url.path
    if path == "/health":
        return await call_next(request)

    start = time.time()
    response = await call_next(request)
    duration_ms = round((time.time() - start) * 1000, 1)

    logger.info(
        f"{request.method} {path} → {response.status_code} ({duration_ms}ms)",
        extra={
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=settings.HOST, port=settings.PORT)
