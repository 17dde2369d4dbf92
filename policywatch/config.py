"""Centralised settings for the Policy Watch service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # HTTP ingress
    # ------------------------------------------------------------------
    host: str = field(
        default_factory=lambda: os.environ.get("POLICYWATCH_HOST", "127.0.0.1")
    )
    port: int = field(
        default_factory=lambda: int(os.environ.get("POLICYWATCH_PORT", "8080"))
    )

    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    max_crawl_depth: int = field(
        default_factory=lambda: int(os.environ.get("MAX_CRAWL_DEPTH", "2"))
    )

    # ------------------------------------------------------------------
    # Orchestrator
    # ------------------------------------------------------------------
    max_concurrent_fetches: int = field(
        default_factory=lambda: int(os.environ.get("MAX_CONCURRENT_FETCHES", "4"))
    )
    pass_deadline: float = field(
        default_factory=lambda: float(os.environ.get("PASS_DEADLINE", "120.0"))
    )

    # ------------------------------------------------------------------
    # Relevance filter
    # ------------------------------------------------------------------
    min_fragment_length: int = field(
        default_factory=lambda: int(os.environ.get("MIN_FRAGMENT_LENGTH", "20"))
    )

    # ------------------------------------------------------------------
    # Console output
    # ------------------------------------------------------------------
    verbose_store_dump: bool = field(
        default_factory=lambda: _env_flag("VERBOSE_STORE_DUMP", "true")
    )


# Module-level singleton — import this everywhere:
#   from policywatch.config import settings
settings = Settings()
