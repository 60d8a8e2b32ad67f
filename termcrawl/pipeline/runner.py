"""Pipeline wiring and run lifecycle.

A :class:`Crawl` connects the three stages with two channels and runs each
on its own thread::

    URL file ──► produce_urls ──[urls]──► fetch_pages ──[pages]──► match_pages ──► sink

The URL channel is unbounded unless ``url_queue_size`` is set; the page
channel holds at most ``buffer_size`` pages, so a slow matcher pushes back on
the fetcher.  The caller blocks on the completion event that the matcher
sets once it has drained every page.
"""

from __future__ import annotations

import enum
import logging
import queue
import re
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, TextIO, Union

import httpx

from termcrawl.config import settings
from termcrawl.logs import get_logger
from termcrawl.pipeline.matcher import MatchCounter, compile_term, match_pages
from termcrawl.pipeline.source import NO_LIMIT, produce_urls
from termcrawl.scraper.fetcher import fetch_pages


class RunState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    DRAINING = "draining"
    DONE = "done"


_ORDER = [RunState.IDLE, RunState.RUNNING, RunState.DRAINING, RunState.DONE]


class SinkOpenError(OSError):
    """The result file could not be opened, so nothing was crawled."""


@dataclass
class CrawlSummary:
    """Totals reported once a crawl has finished."""

    matches: int
    urls_read: int
    pages_fetched: int
    pages_failed: int


class Crawl:
    """A single run of the URL → page → match pipeline."""

    def __init__(
        self,
        infile: Union[str, Path],
        pattern: "re.Pattern[str]",
        sink: TextIO,
        limit: int = NO_LIMIT,
        workers: Optional[int] = None,
        buffer_size: Optional[int] = None,
        url_queue_size: Optional[int] = None,
        client: Optional[httpx.Client] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.infile = infile
        self.pattern = pattern
        self.sink = sink
        self.limit = limit
        self.workers = workers if workers is not None else settings.fetch_workers
        self.client = client
        self.logger = logger or get_logger("runner")

        qsize = settings.url_queue_size if url_queue_size is None else url_queue_size
        bsize = settings.buffer_size if buffer_size is None else buffer_size
        self.urls: "queue.Queue[Optional[str]]" = queue.Queue(maxsize=max(0, qsize))
        self.pages: queue.Queue = queue.Queue(maxsize=max(1, bsize))
        self.done = threading.Event()

        self._state = RunState.IDLE
        self._state_lock = threading.Lock()
        self._threads: List[threading.Thread] = []
        self._errors: List[BaseException] = []
        self._urls_read = 0
        self._pages_fetched = 0
        self._counter = MatchCounter()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> RunState:
        return self._state

    def _advance(self, target: RunState) -> None:
        # Transitions only move forward.
        with self._state_lock:
            if _ORDER.index(target) > _ORDER.index(self._state):
                self.logger.debug("state %s -> %s", self._state.value, target.value)
                self._state = target

    # ------------------------------------------------------------------
    # Stage bodies
    # ------------------------------------------------------------------

    def _run_source(self) -> None:
        self._urls_read = produce_urls(
            self.infile, self.urls, get_logger("source"), limit=self.limit
        )
        self._advance(RunState.DRAINING)

    def _run_fetcher(self) -> None:
        self._pages_fetched = fetch_pages(
            self.urls,
            self.pages,
            get_logger("fetcher"),
            workers=self.workers,
            client=self.client,
        )

    def _run_matcher(self) -> None:
        match_pages(
            self.pages,
            self.pattern,
            self.sink,
            get_logger("matcher"),
            self.done,
            counter=self._counter,
        )

    def _guard(self, name: str, target: Callable[[], None]) -> Callable[[], None]:
        def wrapper() -> None:
            try:
                target()
            except Exception as exc:  # noqa: BLE001
                self.logger.exception("%s stage failed", name)
                self._errors.append(exc)
        return wrapper

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Launch all three stages.  May only be called once."""
        if self._state is not RunState.IDLE:
            raise RuntimeError(f"Crawl already started (state={self._state.value})")
        self._advance(RunState.RUNNING)
        for name, target in (
            ("source", self._run_source),
            ("fetcher", self._run_fetcher),
            ("matcher", self._run_matcher),
        ):
            thread = threading.Thread(
                target=self._guard(name, target), name=f"termcrawl-{name}"
            )
            self._threads.append(thread)
            thread.start()

    def wait(self) -> CrawlSummary:
        """Block until the matcher signals completion and return the totals.

        Raises:
            RuntimeError: If the crawl was never started.
            Exception: The first error raised inside any stage.
        """
        if self._state is RunState.IDLE:
            raise RuntimeError("Crawl has not been started")
        self.done.wait()
        if self._errors:
            self._unblock_producers()
        for thread in self._threads:
            thread.join()
        self._advance(RunState.DONE)
        if self._errors:
            raise self._errors[0]
        return CrawlSummary(
            matches=self._counter.matches,
            urls_read=self._urls_read,
            pages_fetched=self._pages_fetched,
            pages_failed=self._counter.pages_failed,
        )

    def _unblock_producers(self) -> None:
        # A failed consumer leaves its producer stuck on a full channel;
        # discard queued items until the upstream threads have exited.
        source, fetcher = self._threads[0], self._threads[1]
        for producer, channel in ((fetcher, self.pages), (source, self.urls)):
            while producer.is_alive():
                try:
                    channel.get(timeout=0.05)
                except queue.Empty:
                    pass

    def run(self) -> CrawlSummary:
        self.start()
        return self.wait()


def run_crawl(
    infile: Union[str, Path],
    term: Optional[str],
    outfile: Union[str, Path],
    limit: int = NO_LIMIT,
    regex: bool = False,
    workers: Optional[int] = None,
    buffer_size: Optional[int] = None,
    url_queue_size: Optional[int] = None,
    client: Optional[httpx.Client] = None,
) -> CrawlSummary:
    """Crawl *infile* for *term* and write matching URLs to *outfile*.

    The term is compiled and the result file opened before anything is
    read, so a missing term, a bad pattern or an unwritable result file
    aborts the run with nothing fetched.

    Raises:
        ValueError: If *term* is missing or is not a valid pattern.
        SinkOpenError: If *outfile* cannot be opened for writing.
        OSError: If writing to *outfile* fails once the crawl is running.
    """
    logger = get_logger("runner")
    pattern = compile_term(term, regex=regex)

    try:
        sink = open(outfile, "w", encoding="utf-8")
    except OSError as exc:
        raise SinkOpenError(exc.errno, exc.strerror, str(outfile)) from exc

    with sink:
        logger.debug("starting crawl of %s for %s", infile, pattern.pattern)
        crawl = Crawl(
            infile,
            pattern,
            sink,
            limit=limit,
            workers=workers,
            buffer_size=buffer_size,
            url_queue_size=url_queue_size,
            client=client,
            logger=logger,
        )
        summary = crawl.run()

    logger.info(
        "crawl finished: %d url(s), %d failed, %d match(es)",
        summary.urls_read,
        summary.pages_failed,
        summary.matches,
    )
    return summary
