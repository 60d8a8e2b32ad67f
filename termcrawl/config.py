"""Centralised settings for termcrawl.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).  Command-line options
take precedence over anything set here.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_flag(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Run parameters
    # ------------------------------------------------------------------
    default_infile: str = field(
        default_factory=lambda: os.environ.get("TERMCRAWL_INFILE", "urls.txt")
    )
    default_outfile: str = field(
        default_factory=lambda: os.environ.get("TERMCRAWL_OUTFILE", "results.txt")
    )

    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "USER_AGENT", "Mozilla/5.0 (compatible; termcrawl/0.1)"
        )
    )
    fetch_workers: int = field(
        default_factory=lambda: int(os.environ.get("FETCH_WORKERS", "1"))
    )

    # ------------------------------------------------------------------
    # Pipeline channels
    # ------------------------------------------------------------------
    # Capacity of the page channel between the fetcher and the matcher.
    buffer_size: int = field(
        default_factory=lambda: int(os.environ.get("BUFFER_SIZE", "20"))
    )
    # URLs allowed to wait ahead of the fetcher; 0 means unbounded.
    url_queue_size: int = field(
        default_factory=lambda: int(os.environ.get("URL_QUEUE_SIZE", "0"))
    )

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    debug: bool = field(default_factory=lambda: _env_flag("TERMCRAWL_DEBUG"))


# Module-level singleton — import this everywhere:
#   from termcrawl.config import settings
settings = Settings()
