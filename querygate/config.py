"""
QueryGate Configuration

Central settings loaded from environment variables.

Scoring thresholds and weights are NOT configured here: they are
module constants in the analyzers so a given query always produces
the same verdict.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    # --- Versioning ---
    VERSION: str = "1.0.0"

    # --- Scoring pipeline ---
    # Fan the three leaf analyses out to a thread pool. Results are
    # identical either way.
    PARALLEL_ANALYSIS: bool = _env_flag("QUERYGATE_PARALLEL_ANALYSIS", "false")

    # --- Validator ---
    # Suffix the fallback message with the scorer's top recommendation.
    APPEND_RECOMMENDATION: bool = _env_flag("QUERYGATE_APPEND_RECOMMENDATION", "true")

    # --- Server ---
    HOST: str = os.getenv("QUERYGATE_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("QUERYGATE_PORT", "8000"))
    MAX_QUERY_CHARS: int = int(os.getenv("QUERYGATE_MAX_QUERY_CHARS", "5000"))

    # --- CORS ---
    CORS_ORIGINS: str = os.getenv("QUERYGATE_CORS_ORIGINS", "*")


settings = Settings()
