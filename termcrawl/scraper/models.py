"""Data models for the fetch side of the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Page:
    """The outcome of fetching a single URL.

    When ``failed`` is true, ``body`` holds the error message rather than any
    response content and ``status_code`` is ``None``.
    """

    url: str
    body: str
    failed: bool = False
    status_code: Optional[int] = None
