"""HTTP fetcher stage: URLs in, :class:`Page` results out."""

from __future__ import annotations

import logging
import queue
import re
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Deque, Optional

import httpx

from termcrawl.config import settings
from termcrawl.scraper.models import Page

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def normalize_url(url: str) -> str:
    """Prepend ``http://`` to *url* unless it already carries an http(s) scheme."""
    url = url.strip()
    if _SCHEME_RE.match(url):
        return url
    return "http://" + url


def make_client() -> httpx.Client:
    """Return an ``httpx.Client`` configured from ``settings``."""
    return httpx.Client(
        headers={"User-Agent": settings.user_agent},
        timeout=settings.request_timeout,
        follow_redirects=True,
    )


def fetch_page(client: httpx.Client, url: str, logger: logging.Logger) -> Page:
    """Fetch *url* once and wrap the outcome in a :class:`Page`.

    Failures never raise; they come back as a failed page whose body is the
    error text.  That covers transport errors as well as URLs httpx rejects
    while parsing (bad IDNA labels, empty hosts).  Any HTTP status counts as
    a fetched page.
    """
    url = normalize_url(url)
    logger.debug("reading url %s", url)
    try:
        response = client.get(url)
        body = response.text
    except Exception as exc:  # noqa: BLE001
        message = str(exc) or exc.__class__.__name__
        logger.warning("fetch failed for %s: %s", url, message)
        return Page(url=url, body=message, failed=True)

    return Page(url=url, body=body, failed=False, status_code=response.status_code)

    return Page(url=url, body=body, failed=False, status_code=response.status_code)


def fetch_pages(
    urls: "queue.Queue[Optional[str]]",
    pages: "queue.Queue[Optional[Page]]",
    logger: logging.Logger,
    workers: int = 1,
    client: Optional[httpx.Client] = None,
) -> int:
    """Consume *urls* until the ``None`` sentinel and emit one page per URL.

    With ``workers > 1`` up to that many fetches run at once on a
    ``ThreadPoolExecutor``.  Futures are drained oldest-first, so pages leave
    in the order their URLs arrived regardless of which fetch finishes
    first.  ``pages.put`` blocks while the bounded page channel is full.

    The page channel is closed with ``None`` exactly once, even if this
    stage fails.  Returns the number of pages emitted.
    """
    workers = max(1, workers)
    own_client = client is None
    if client is None:
        client = make_client()

    emitted = 0
    logger.debug("crawling urls with %d worker(s)", workers)
    try:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fetch") as pool:
            in_flight: Deque["Future[Page]"] = deque()
            while True:
                url = urls.get()
                if url is None:
                    break
                in_flight.append(pool.submit(fetch_page, client, url, logger))
                if len(in_flight) >= workers:
                    pages.put(in_flight.popleft().result())
                    emitted += 1
            while in_flight:
                pages.put(in_flight.popleft().result())
                emitted += 1
    finally:
        if own_client:
            client.close()
        pages.put(None)  # sentinel

    logger.debug("fetched %d page(s)", emitted)
    return emitted
