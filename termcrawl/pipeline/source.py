"""URL source stage: reads the URL file and feeds the URL channel."""

from __future__ import annotations

import csv
import logging
import queue
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

# No limit on the number of URLs crawled.
NO_LIMIT = -1

# Header label in the URL column; rows carrying it are skipped.
URL_FIELD_NAME = "URL"

# Zero-based column holding the URL in each record.
_URL_COLUMN = 1


def read_url_file(path: Union[str, Path]) -> List[List[str]]:
    """Load every CSV record from *path*.

    The whole file is parsed up front so an unreadable or malformed file
    fails before a single URL is emitted.

    Raises:
        OSError: If the file cannot be opened.
        csv.Error: If the CSV cannot be parsed.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    with open(path, newline="", encoding="utf-8") as fh:
        return list(csv.reader(fh))


def iter_urls(
    records: Iterable[List[str]],
    limit: int = NO_LIMIT,
    logger: Optional[logging.Logger] = None,
) -> Iterator[str]:
    """Yield the URL field of each record, in order, stopping after *limit*.

    Header rows and records without a usable URL column are skipped.  Any
    negative *limit* behaves like ``NO_LIMIT``.
    """
    log = logger or logging.getLogger(__name__)
    emitted = 0
    for line_no, record in enumerate(records, 1):
        if limit >= 0 and emitted >= limit:
            log.debug("breaking because hit limit of %d", limit)
            return
        if len(record) <= _URL_COLUMN:
            log.debug("skipping malformed record at line %d: %r", line_no, record)
            continue
        url = record[_URL_COLUMN].strip()
        if not url or url == URL_FIELD_NAME:
            log.debug("skipping header/empty record at line %d", line_no)
            continue
        log.debug("found url %s", url)
        yield url
        emitted += 1


def produce_urls(
    path: Union[str, Path],
    urls: "queue.Queue[Optional[str]]",
    logger: logging.Logger,
    limit: int = NO_LIMIT,
) -> int:
    """Push URLs from *path* onto *urls*, then close it with ``None``.

    A provider failure is reported once and treated as an empty source, so
    the downstream stages still drain and finish.  Returns the number of URLs
    emitted.
    """
    logger.info("Reading urls file: %s", path)
    count = 0
    try:
        try:
            records = read_url_file(path)
        except (OSError, csv.Error, UnicodeDecodeError) as exc:
            logger.error("Url file could not be loaded: %s", exc)
            return 0

        for url in iter_urls(records, limit, logger):
            urls.put(url)
            count += 1
    finally:
        urls.put(None)  # sentinel
        logger.debug("done reading, %d url(s) queued", count)

    return count
