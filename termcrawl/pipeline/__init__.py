"""Pipeline package — URL source, matcher stage and run orchestration.

Public re-exports so callers can write::

    from termcrawl.pipeline import run_crawl, NO_LIMIT
"""

from termcrawl.pipeline.matcher import compile_term, has_term, match_pages
from termcrawl.pipeline.runner import Crawl, CrawlSummary, RunState, SinkOpenError, run_crawl
from termcrawl.pipeline.source import NO_LIMIT, iter_urls, produce_urls, read_url_file

__all__ = [
    "NO_LIMIT",
    "Crawl",
    "CrawlSummary",
    "RunState",
    "SinkOpenError",
    "compile_term",
    "has_term",
    "iter_urls",
    "match_pages",
    "produce_urls",
    "read_url_file",
    "run_crawl",
]
