"""Centralised configuration for signal_story.

Environment variables are loaded once and all related constants are
grouped by service for easier maintenance. Job code never reads these
directly; the job registry passes them to the pipeline at construction.
"""

from __future__ import annotations

import os
from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Load environment variables from `.env` (if present)
# ---------------------------------------------------------------------------
load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Core credentials (from environment)
# ---------------------------------------------------------------------------
MONGODB_URI: str | None = os.getenv("MONGODB_URI")
OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY")
SOCRATA_APP_TOKEN: str | None = os.getenv("SOCRATA_APP_TOKEN")
CRON_SECRET: str | None = os.getenv("CRON_SECRET")

# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------
MONGODB_DATABASE: str = os.getenv("MONGODB_DATABASE", "signal_story")
PUBLICATIONS_COLLECTION: str = "articles"
TARGETS_COLLECTION: str = "neighborhoods"
RUN_LOG_COLLECTION: str = "cron_executions"

# ---------------------------------------------------------------------------
# Narrative generation
# ---------------------------------------------------------------------------
NARRATIVE_MODEL: str = os.getenv("NARRATIVE_MODEL", "gpt-4.1-mini")
NARRATIVE_TEMPERATURE: float = _env_float("NARRATIVE_TEMPERATURE", 0.6)

# ---------------------------------------------------------------------------
# Batch discipline
# 270s leaves a 30s margin under a 300s host execution limit
# ---------------------------------------------------------------------------
RUN_TIME_BUDGET_SECONDS: float = _env_float("RUN_TIME_BUDGET_SECONDS", 270.0)
BATCH_CONCURRENCY: int = _env_int("BATCH_CONCURRENCY", 3)
BATCH_DELAY_SECONDS: float = _env_float("BATCH_DELAY_SECONDS", 0.5)
INGEST_LIMIT: int = _env_int("INGEST_LIMIT", 2000)
INGEST_TIMEOUT_SECONDS: float = _env_float("INGEST_TIMEOUT_SECONDS", 30.0)
DEFAULT_WINDOW_DAYS: int = _env_int("DEFAULT_WINDOW_DAYS", 7)
BASELINE_WINDOWS: int = _env_int("BASELINE_WINDOWS", 4)

# ---------------------------------------------------------------------------
# Miscellaneous
# ---------------------------------------------------------------------------
DEVELOPMENT_MODE: bool = os.getenv("APP_ENV", "").lower() == "development"
# Only safe behind a platform that strips the header from outside requests
TRUST_SCHEDULER_HEADER: bool = os.getenv("TRUST_SCHEDULER_HEADER", "").lower() in ("1", "true", "yes")

# ---------------------------------------------------------------------------
# Re-exported names
# ---------------------------------------------------------------------------
__all__ = [
    # credentials
    "MONGODB_URI",
    "OPENAI_API_KEY",
    "SOCRATA_APP_TOKEN",
    "CRON_SECRET",
    # storage
    "MONGODB_DATABASE",
    "PUBLICATIONS_COLLECTION",
    "TARGETS_COLLECTION",
    "RUN_LOG_COLLECTION",
    # narrative
    "NARRATIVE_MODEL",
    "NARRATIVE_TEMPERATURE",
    # batch
    "RUN_TIME_BUDGET_SECONDS",
    "BATCH_CONCURRENCY",
    "BATCH_DELAY_SECONDS",
    "INGEST_LIMIT",
    "INGEST_TIMEOUT_SECONDS",
    "DEFAULT_WINDOW_DAYS",
    "BASELINE_WINDOWS",
    # misc
    "DEVELOPMENT_MODE",
    "TRUST_SCHEDULER_HEADER",
]
