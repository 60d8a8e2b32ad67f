"""Matcher stage: tests fetched bodies for the search term."""

from __future__ import annotations

import logging
import queue
import re
import threading
from typing import Optional, TextIO

from termcrawl.scraper.models import Page


def compile_term(term: Optional[str], regex: bool = False) -> "re.Pattern[str]":
    """Compile *term* into a case-insensitive pattern.

    By default the term is escaped and matched literally; pass ``regex=True``
    to use it as a regular expression as given.

    Raises:
        ValueError: If *term* is missing or empty, or is not a valid pattern.
    """
    if not term:
        raise ValueError("No search term specified")
    source = term if regex else re.escape(term)
    try:
        return re.compile(source, re.IGNORECASE)
    except re.error as exc:
        raise ValueError(f"Invalid search pattern {term!r}: {exc}") from exc


def has_term(pattern: "re.Pattern[str]", body: str, logger: logging.Logger) -> bool:
    """Return ``True`` if *pattern* occurs anywhere in *body*.

    An error while evaluating the pattern is logged and counts as no match.
    """
    try:
        return pattern.search(body) is not None
    except Exception as exc:  # noqa: BLE001
        logger.error("Error in term match: %s", exc)
        return False


def format_result(url: str) -> str:
    """Return the result-file line for a matching *url*."""
    return f"{url} has term\n"


class MatchCounter:
    """Holds the completion count produced by :func:`match_pages`."""

    def __init__(self) -> None:
        self.matches = 0
        self.pages_seen = 0
        self.pages_failed = 0


def match_pages(
    pages: "queue.Queue[Optional[Page]]",
    pattern: "re.Pattern[str]",
    sink: TextIO,
    logger: logging.Logger,
    done: threading.Event,
    counter: Optional[MatchCounter] = None,
) -> MatchCounter:
    """Consume *pages* until the ``None`` sentinel, writing matches to *sink*.

    Failed pages are skipped without a match attempt.  Each match is written
    and flushed immediately.  *done* is set exactly once when the stage
    finishes, including when it stops on an error.
    """
    counter = counter or MatchCounter()
    try:
        while True:
            page = pages.get()
            if page is None:
                break
            counter.pages_seen += 1
            if page.failed:
                counter.pages_failed += 1
                logger.debug("%s skipped, fetch failed", page.url)
                continue
            if has_term(pattern, page.body, logger):
                counter.matches += 1
                sink.write(format_result(page.url))
                sink.flush()
                logger.debug("%s has term", page.url)
            else:
                logger.debug("%s doesn't have term", page.url)

        logger.info("Found %d pages with term %s", counter.matches, pattern.pattern)
    finally:
        done.set()

    return counter
