"""Scraper package — URL normalisation and page fetching."""

from termcrawl.scraper.fetcher import fetch_page, fetch_pages, make_client, normalize_url
from termcrawl.scraper.models import Page

__all__ = ["fetch_page", "fetch_pages", "make_client", "normalize_url", "Page"]
