"""termcrawl — crawl a list of URLs and report which pages contain a term."""

__version__ = "0.1.0"
